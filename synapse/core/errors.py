"""
Error taxonomy for the Synapse brain-dump pipeline.

Four kinds of failure are distinguished:
- ValidationError: caller-facing, raised before the pipeline runs
- DegradedDependencyError: embedding/similarity backend unavailable, absorbed locally
- AgentExecutionError: one framework agent failed, isolated from its siblings
- ConfigurationError: startup-time misconfiguration (credentials, libraries, context wiring)
"""

from typing import Optional


class SynapseError(Exception):
    """Base class for all errors raised by the pipeline."""


class ValidationError(SynapseError, ValueError):
    """
    Raised when a request violates an input constraint.

    Attributes:
        field: Name of the offending field (e.g. "input", "energyState")
        message: Human-readable description of the violated constraint
    """

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field
        self.message = message

    def to_dict(self):
        return {"detail": self.message, "field": self.field, "code": "validation_error"}


class DegradedDependencyError(SynapseError):
    """Raised by embedding collaborators when their backend cannot be reached."""


class AgentExecutionError(SynapseError):
    """Wraps an exception raised inside a single framework agent."""

    def __init__(self, agent_name: str, cause: BaseException):
        super().__init__(f"{agent_name} agent failed: {cause}")
        self.agent_name = agent_name
        self.cause = cause


class ConfigurationError(SynapseError):
    """Raised for wiring problems that should stop the process at startup."""
