"""
Base Agent for Synapse
Defines the abstract base class and common interfaces for all framework agents.

The Agent Layer follows a fan-out architecture where:
- Each agent restructures the same parsed brain dump into one methodology
- Agents share a single process(parsed_input, user_context) interface
- Agents are side-effect free; they never mutate their inputs or each other
- All agents maintain consistent logging
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional
from datetime import datetime, timezone
import logging
import json

from ..core.errors import ConfigurationError
from ..core.models import EnergyState, ParsedInput, UserContext


@dataclass
class AgentResult:
    """
    Outcome of one agent slot in the factory's fan-out.

    Attributes:
        framework: Framework name ("Agile", "Kanban", ...)
        success: Whether the agent produced a response
        response: The framework response object when successful
        error: Description of the failure when unsuccessful
        duration_ms: Wall-clock time spent in the agent
    """
    framework: str
    success: bool
    response: Any = None
    error: Optional[str] = None
    duration_ms: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary for serialization."""
        return {
            "framework": self.framework,
            "success": self.success,
            "response": self.response.to_dict() if self.response is not None else None,
            "error": self.error,
            "durationMs": self.duration_ms,
        }

    @classmethod
    def ok(cls, framework: str, response: Any, duration_ms: int = 0) -> 'AgentResult':
        """Factory method for a successful slot."""
        return cls(framework=framework, success=True, response=response, duration_ms=duration_ms)

    @classmethod
    def failed(cls, framework: str, error: str, duration_ms: int = 0) -> 'AgentResult':
        """Factory method for a failed slot."""
        return cls(framework=framework, success=False, error=error, duration_ms=duration_ms)


class FrameworkAgent(ABC):
    """
    Abstract base class for all framework agents.

    Provides common functionality for:
    - Configuration access
    - Logging
    - Energy-state validation

    Subclasses must implement:
    - process(): Restructure the parsed input into a framework response

    Design Pattern: Strategy
    - The factory holds a dispatch table of agents keyed by framework name
    - Each agent is a stateless strategy over the same inputs
    """

    #: Framework name used in recommendations, tier tables and metadata
    framework: str = ""

    def __init__(self, config=None, name: Optional[str] = None):
        """
        Initialize the base agent.

        Args:
            config: Optional Config instance for settings
            name: Unique identifier for this agent (e.g., "agile", "kanban")
        """
        self.config = config
        self.name = name or self.framework.lower()
        self.logger = logging.getLogger(f"agent.{self.name}")

    @abstractmethod
    def process(self, parsed_input: ParsedInput, user_context: UserContext) -> Any:
        """
        Restructure the parsed brain dump into this agent's framework.

        Args:
            parsed_input: Output of InputParser.analyze
            user_context: Read-only caller context

        Returns:
            The framework's response object
        """
        pass

    def energy_of(self, user_context: UserContext) -> EnergyState:
        """
        Return the context's energy state, failing fast when it is malformed.

        Every heuristic branches on the energy state, so a context that
        bypassed UserContext construction is a wiring error.
        """
        energy = getattr(user_context, "energy_state", None)
        if not isinstance(energy, EnergyState):
            raise ConfigurationError(
                f"{self.name} agent received an invalid energy state: {energy!r}"
            )
        return energy

    def log_action(self, action: str, details: Optional[Dict[str, Any]] = None) -> None:
        """
        Log an action taken by this agent.

        Args:
            action: Description of the action taken
            details: Optional additional details as key-value pairs
        """
        log_entry = {
            "agent": self.name,
            "action": action,
            "timestamp": datetime.now(timezone.utc).isoformat()
        }
        if details:
            log_entry["details"] = details

        self.logger.info(json.dumps(log_entry, default=str))

    def get_config_value(self, key: str, section: str = "settings",
                         default: Any = None) -> Any:
        """
        Get a configuration value with fallback to default.

        Args:
            key: Configuration key to retrieve
            section: Configuration section (settings, tiers, preferences)
            default: Default value if key not found or no config was given

        Returns:
            Configuration value or default
        """
        if self.config is None:
            return default
        return self.config.get(key, section=section, default=default)
