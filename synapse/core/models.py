"""
Data models for Synapse
Defines the request-scoped value objects shared by the parser, the framework
agents, the orchestrator and the factory.

Inputs (ParsedInput, UserContext) are frozen; agent responses are plain
dataclasses that serialize to the camelCase JSON contract via to_dict().
"""

from dataclasses import dataclass, fields, is_dataclass
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .errors import ValidationError


# =============================================================================
# Serialization
# =============================================================================

def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def to_jsonable(value: Any) -> Any:
    """Recursively convert dataclasses, enums and datetimes to JSON types."""
    if is_dataclass(value) and not isinstance(value, type):
        return {_camel(f.name): to_jsonable(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {k: to_jsonable(v) for k, v in value.items()}
    return value


class Serializable:
    """Mixin giving dataclasses a camelCase to_dict()."""

    def to_dict(self) -> Dict[str, Any]:
        return to_jsonable(self)


# =============================================================================
# Enums
# =============================================================================

class EnergyState(str, Enum):
    """User-declared energy mode; parameterizes every agent heuristic."""
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
    HYPERFOCUS = "Hyperfocus"
    SCATTERED = "Scattered"

    @classmethod
    def parse(cls, value: Any) -> 'EnergyState':
        """Parse an energy state case-insensitively ("medium" -> MEDIUM)."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.strip().lower():
                    return member
        allowed = ", ".join(m.value for m in cls)
        raise ValidationError(
            f"Invalid energyState {value!r}; expected one of: {allowed}",
            field="energyState",
        )


class CognitiveType(str, Enum):
    """Optional cognitive profile used by Kanban and GTD."""
    ADHD = "ADHD"
    ASD = "ASD"
    MIXED = "MIXED"
    NEUROTYPICAL = "NEUROTYPICAL"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Any) -> 'CognitiveType':
        if value is None:
            return cls.UNKNOWN
        if isinstance(value, cls):
            return value
        aliases = {"autism": cls.ASD, "combined": cls.MIXED}
        if isinstance(value, str):
            key = value.strip().lower()
            if key in aliases:
                return aliases[key]
            for member in cls:
                if member.value.lower() == key:
                    return member
        raise ValidationError(f"Invalid cognitiveType {value!r}", field="cognitiveType")


class UserTier(str, Enum):
    """Billing tier; decides which framework agents a caller may run."""
    FREE = "free"
    PRO = "pro"
    ENTERPRISE = "enterprise"

    @classmethod
    def parse(cls, value: Any) -> 'UserTier':
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for member in cls:
                if member.value == value.strip().lower():
                    return member
        raise ValidationError(f"Invalid userTier {value!r}", field="userTier")


# Framework names as used in recommendations, tier tables and metadata
AGILE = "Agile"
KANBAN = "Kanban"
GTD = "GTD"
PARA = "PARA"
CUSTOM = "Custom"
SEMANTIC = "Semantic"

FRAMEWORK_AGENTS = [AGILE, KANBAN, GTD, PARA, CUSTOM]

# Framework entitlements per tier, used when no Config is supplied
DEFAULT_TIER_FRAMEWORKS = {
    "free": [SEMANTIC, CUSTOM],
    "pro": [SEMANTIC] + FRAMEWORK_AGENTS,
    "enterprise": [SEMANTIC] + FRAMEWORK_AGENTS,
}


# =============================================================================
# Parser output
# =============================================================================

@dataclass(frozen=True)
class ParsedUnit(Serializable):
    """One classified sentence fragment (task, idea, concern or project)."""
    content: str


@dataclass(frozen=True)
class ParsedInput(Serializable):
    """Typed semantic units extracted from a brain dump, in sentence order."""
    tasks: Tuple[ParsedUnit, ...] = ()
    ideas: Tuple[ParsedUnit, ...] = ()
    concerns: Tuple[ParsedUnit, ...] = ()
    projects: Tuple[ParsedUnit, ...] = ()
    complexity: str = "low"  # 'low', 'medium', 'high'
    emotional_tone: str = "neutral"  # 'positive', 'negative', 'neutral'
    urgency_level: str = "low"  # 'low', 'medium', 'high', 'critical'

    @property
    def total_units(self) -> int:
        return len(self.tasks) + len(self.ideas) + len(self.concerns) + len(self.projects)


# =============================================================================
# User context
# =============================================================================

@dataclass(frozen=True)
class SimilarTask(Serializable):
    """A historical brain dump returned by similarity search."""
    content: str
    similarity_score: float
    created_at: Optional[datetime] = None
    id: Optional[str] = None


@dataclass(frozen=True)
class UserHistory(Serializable):
    """Aggregate velocity stats supplied by the persistence layer."""
    completed_story_points: float = 0
    sprints_completed: int = 0


@dataclass(frozen=True)
class ProductivityPatterns(Serializable):
    """Optional self-reported working patterns."""
    peak_energy_times: Tuple[str, ...] = ()
    hyperfocus_triggers: Tuple[str, ...] = ()
    context_switch_tolerance: Optional[str] = None  # 'low', 'medium', 'high'
    preferred_frameworks: Tuple[str, ...] = ()


@dataclass(frozen=True)
class UserContext(Serializable):
    """
    Caller-supplied context, read-only for every agent.

    Attributes:
        energy_state: Current energy mode (required)
        cognitive_type: Optional cognitive profile
        user_id: Caller identity, scopes similarity search and storage
        user_tier: Entitlement tier resolved before the factory runs
        history: Aggregate sprint history, if the storage layer has one
        historical_context: Similar past tasks injected by the SemanticAgent
        productivity_patterns: Optional working patterns (hyperfocus triggers, ...)
        current_time: Reference time for date-stamped output (sprints)
    """
    energy_state: EnergyState
    cognitive_type: CognitiveType = CognitiveType.UNKNOWN
    user_id: str = "demo-user"
    user_tier: UserTier = UserTier.FREE
    history: Optional[UserHistory] = None
    historical_context: Tuple[SimilarTask, ...] = ()
    productivity_patterns: Optional[ProductivityPatterns] = None
    current_time: Optional[datetime] = None

    def __post_init__(self):
        object.__setattr__(self, "energy_state", EnergyState.parse(self.energy_state))
        object.__setattr__(self, "cognitive_type", CognitiveType.parse(self.cognitive_type))
        object.__setattr__(self, "user_tier", UserTier.parse(self.user_tier))
        object.__setattr__(self, "historical_context", tuple(self.historical_context))
        if self.current_time is None:
            object.__setattr__(self, "current_time", datetime.now(timezone.utc))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'UserContext':
        """Create a UserContext from a camelCase or snake_case request dictionary."""
        def pick(*keys, default=None):
            for key in keys:
                if data.get(key) is not None:
                    return data[key]
            return default

        history = pick("history")
        if isinstance(history, dict):
            history = UserHistory(
                completed_story_points=history.get("completedStoryPoints",
                                                   history.get("completed_story_points", 0)),
                sprints_completed=history.get("sprintsCompleted",
                                              history.get("sprints_completed", 0)),
            )

        patterns = pick("productivityPatterns", "productivity_patterns")
        if isinstance(patterns, dict):
            patterns = ProductivityPatterns(
                peak_energy_times=tuple(patterns.get("peakEnergyTimes", ())),
                hyperfocus_triggers=tuple(patterns.get("hyperfocusTriggers", ())),
                context_switch_tolerance=patterns.get("contextSwitchTolerance"),
                preferred_frameworks=tuple(patterns.get("preferredFrameworks", ())),
            )

        return cls(
            energy_state=pick("energyState", "energy_state"),
            cognitive_type=pick("cognitiveType", "cognitive_type"),
            user_id=pick("userId", "user_id", default="demo-user"),
            user_tier=pick("userTier", "user_tier", default=UserTier.FREE),
            history=history,
            productivity_patterns=patterns,
        )


@dataclass
class FrameworkResponses:
    """Whichever framework responses ran; absent frameworks stay None."""
    agile: Any = None
    kanban: Any = None
    gtd: Any = None
    para: Any = None
    custom: Any = None

    def present(self) -> List[str]:
        return [f.name for f in fields(self) if getattr(self, f.name) is not None]
