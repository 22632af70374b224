"""
Orchestration module for Synapse
Cross-framework momentum analysis and terminal rendering of pipeline results
"""

from .progress_orchestrator import (
    ProgressOrchestrator,
    OrchestrationResult,
    CrossProjectRelation,
    RippleEffect,
    MotivationAmplifiers,
    TaskRef,
)
from .formatter import BrainDumpFormatter

__all__ = [
    'ProgressOrchestrator',
    'OrchestrationResult',
    'CrossProjectRelation',
    'RippleEffect',
    'MotivationAmplifiers',
    'TaskRef',
    'BrainDumpFormatter',
]
