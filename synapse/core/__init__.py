"""
Core module for Synapse
Contains configuration, value objects, the error taxonomy and the embedding collaborators
"""

from .config import Config
from .errors import (
    SynapseError,
    ValidationError,
    DegradedDependencyError,
    AgentExecutionError,
    ConfigurationError,
)
from .models import (
    EnergyState,
    CognitiveType,
    UserTier,
    ParsedUnit,
    ParsedInput,
    SimilarTask,
    UserHistory,
    ProductivityPatterns,
    UserContext,
    FrameworkResponses,
)

__all__ = [
    'Config',
    'SynapseError', 'ValidationError', 'DegradedDependencyError',
    'AgentExecutionError', 'ConfigurationError',
    'EnergyState', 'CognitiveType', 'UserTier',
    'ParsedUnit', 'ParsedInput', 'SimilarTask', 'UserHistory',
    'ProductivityPatterns', 'UserContext', 'FrameworkResponses',
]
