"""
Custom Agent for Synapse
Energy-state-driven strategy advice plus a lightweight keyword categorisation.

Everything here is a table lookup keyed by energy state; the user's own
hyperfocus triggers, when known, are put ahead of the stock triggers.
"""

from dataclasses import dataclass
from typing import List, Optional

from .base_agent import FrameworkAgent
from ..core.models import CUSTOM, EnergyState, ParsedInput, Serializable, UserContext


RECOMMENDED_TIME = {
    EnergyState.HYPERFOCUS: "Next 2-4 hours (ride the wave)",
    EnergyState.HIGH: "Next 1-2 hours (capture the energy)",
    EnergyState.MEDIUM: "Today or tomorrow",
    EnergyState.LOW: "When energy naturally rises",
    EnergyState.SCATTERED: "Multiple short bursts throughout the day",
}

BREAKDOWN_STRATEGY = {
    EnergyState.HYPERFOCUS: "focused-blocks",
    EnergyState.HIGH: "focused-blocks",
    EnergyState.MEDIUM: "parallel-processing",
    EnergyState.LOW: "gentle-steps",
    EnergyState.SCATTERED: "micro-tasks",
}

COGNITIVE_LOAD = {
    EnergyState.HYPERFOCUS: "high",
    EnergyState.HIGH: "moderate",
    EnergyState.MEDIUM: "moderate",
    EnergyState.LOW: "minimal",
    EnergyState.SCATTERED: "minimal",
}

BASE_TIPS = [
    "Work with your brain, not against it",
    "Progress over perfection",
    "Use visual progress indicators",
]

ENERGY_TIPS = {
    EnergyState.HYPERFOCUS: [
        "Set a gentle timer to check in every 90 minutes",
        "Keep water and snacks nearby",
        "Document your progress for later review",
    ],
    EnergyState.HIGH: [
        "Channel energy into your most important tasks",
        "Use the Pomodoro technique with longer blocks",
        "Capture ideas in a parking lot for later",
    ],
    EnergyState.MEDIUM: [
        "Balance challenging and routine tasks",
        "Use time-boxing for focused work",
        "Schedule breaks proactively",
    ],
    EnergyState.LOW: [
        "Start with the smallest possible step",
        "Use gentle accountability systems",
        "Celebrate micro-wins",
    ],
    EnergyState.SCATTERED: [
        "Use brain dumps to clear mental clutter",
        "Set up visible progress tracking",
        "Allow for flexible task switching",
    ],
}

ENERGY_TRIGGERS = {
    EnergyState.HYPERFOCUS: ["Deep work music", "Clear workspace", "Interesting problem"],
    EnergyState.HIGH: ["Upbeat music", "Movement break", "Collaborative energy"],
    EnergyState.MEDIUM: ["Consistent routine", "Clear priorities", "Balanced workload"],
    EnergyState.LOW: ["Gentle encouragement", "Easy wins", "Minimal decisions"],
    EnergyState.SCATTERED: ["Brain dump session", "Visual organization", "Choice menus"],
}

# Keyword categories; order breaks ties
CATEGORY_KEYWORDS = [
    ("Urgent", ["urgent", "asap", "immediately", "critical", "blocker"]),
    ("Personal", ["personal", "family", "home", "health", "self"]),
    ("Work", ["work", "team", "project", "client", "meeting"]),
    ("Follow-up", ["follow-up", "check in", "ping", "remind"]),
    ("Later", ["later", "someday", "maybe", "eventually"]),
]


@dataclass
class EnergyOptimization(Serializable):
    recommended_time: str
    breakdown_strategy: str  # 'focused-blocks', 'parallel-processing', 'gentle-steps', 'micro-tasks'
    cognitive_load: str  # 'minimal', 'moderate', 'high'
    tips: List[str]
    momentum_triggers: List[str]


@dataclass
class ContextSwitchHelpers(Serializable):
    resumption_cues: List[str]
    progress_markers: List[str]
    transition_helpers: List[str]


@dataclass
class CustomItem(Serializable):
    title: str
    category: str
    confidence: float


@dataclass
class CustomResponse(Serializable):
    energy_optimized: EnergyOptimization
    context_switch_friendly: ContextSwitchHelpers
    items: List[CustomItem]


class CustomAgent(FrameworkAgent):
    """Specialized agent for energy-aware, user-tailored advice."""

    framework = CUSTOM

    def __init__(self, config=None):
        super().__init__(config, "custom")

    def process(self, parsed_input: ParsedInput, user_context: UserContext) -> CustomResponse:
        energy = self.energy_of(user_context)

        personal_triggers: List[str] = []
        if user_context.productivity_patterns is not None:
            personal_triggers = list(user_context.productivity_patterns.hyperfocus_triggers)

        energy_optimized = EnergyOptimization(
            recommended_time=RECOMMENDED_TIME[energy],
            breakdown_strategy=BREAKDOWN_STRATEGY[energy],
            cognitive_load=COGNITIVE_LOAD[energy],
            tips=BASE_TIPS + ENERGY_TIPS[energy],
            momentum_triggers=personal_triggers + ENERGY_TRIGGERS[energy],
        )

        items = []
        for unit in list(parsed_input.tasks) + list(parsed_input.ideas) + list(parsed_input.concerns):
            categorized = self.categorize(unit.content)
            if categorized is not None:
                items.append(categorized)

        self.log_action("processed", {"strategy": energy_optimized.breakdown_strategy,
                                      "items": len(items)})

        return CustomResponse(
            energy_optimized=energy_optimized,
            context_switch_friendly=self.context_switch_helpers(energy),
            items=items,
        )

    @staticmethod
    def categorize(content: str) -> Optional[CustomItem]:
        """Best keyword category; confidence saturates at three keyword hits."""
        lowered = content.lower()
        best_category, best_score = None, 0
        for category, keywords in CATEGORY_KEYWORDS:
            score = sum(1 for keyword in keywords if keyword in lowered)
            if score > best_score:
                best_category, best_score = category, score

        if best_category is None:
            return None
        return CustomItem(title=content, category=best_category,
                          confidence=round(min(1.0, best_score / 3), 2))

    @staticmethod
    def context_switch_helpers(energy: EnergyState) -> ContextSwitchHelpers:
        markers = ["Initial thoughts captured", "Framework structure created"]
        helpers = ["Take 3 deep breaths", "Note current context", "Set clear intention for next activity"]

        if energy == EnergyState.SCATTERED:
            markers += ["Small wins celebrated", "Next micro-step identified"]
            helpers += ["Use transition ritual", "Clear mental workspace"]
        elif energy == EnergyState.HYPERFOCUS:
            markers += ["Deep work session completed", "Comprehensive review done"]
            helpers += ["Gentle timer reminder", "Gradual attention shift"]
        markers.append("Ready for next phase")

        return ContextSwitchHelpers(
            resumption_cues=[
                "Review brain dump context",
                "Check energy state and adjust approach",
                "Scan progress markers from last session",
                "Set intention for current work session",
            ],
            progress_markers=markers,
            transition_helpers=helpers,
        )
