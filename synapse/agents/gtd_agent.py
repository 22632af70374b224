"""
GTD Agent for Synapse
Runs the parsed brain dump through the Getting-Things-Done workflow.

Phases:
    Capture  -> every parsed unit becomes an unprocessed inbox item
    Clarify  -> waiting-for? actionable? single step or a project?
    Organize -> next actions, projects, waiting-for, someday/maybe
    Reflect  -> contexts and weekly-review prompts
Engage is left to the user.

When similar past tasks are available, a user whose history leans towards
deferral ("later", "someday", ...) has vague items filed as Someday/Maybe
instead of Next Actions.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence
import re

from .base_agent import FrameworkAgent
from ..core.models import (
    GTD, CognitiveType, EnergyState, ParsedInput, Serializable, SimilarTask, UserContext,
)


NON_ACTIONABLE_KEYWORDS = ["idea", "concern", "maybe", "think about", "someday"]
DEFERRAL_KEYWORDS = ["later", "eventually", "maybe", "one day", "someday"]
VAGUE_MARKERS = ["something", "stuff", "things", "somehow", "look into", "figure out", "at some point"]
WAITING_FOR_PATTERN = re.compile(
    r"\b(?:waiting (?:for|on)|blocked by|depends on|pending)\b\s*(.*)", re.IGNORECASE
)

# Above this share of deferral-flavored history, vague items go to Someday/Maybe
SOMEDAY_AFFINITY_THRESHOLD = 0.3

MULTI_STEP_CONTENT_LENGTH = 100


@dataclass
class CapturedItem(Serializable):
    id: str
    source: str  # 'task', 'idea', 'concern', 'project'
    content: str
    processed: bool = False


@dataclass
class NextAction(Serializable):
    id: str
    title: str
    context: str
    is_single_step: bool
    time_estimate: str
    project_id: Optional[str] = None


@dataclass
class ClarifiedItem:
    item: CapturedItem
    is_actionable: bool
    outcome_desired: Optional[str] = None
    next_action: Optional[NextAction] = None
    project_id: Optional[str] = None
    waiting_for: Optional[str] = None


@dataclass
class GTDProject(Serializable):
    id: str
    name: str
    outcome: str
    next_actions: List[NextAction] = field(default_factory=list)


@dataclass
class WaitingForItem(Serializable):
    id: str
    title: str
    waiting_for: str


@dataclass
class SomedayMaybeItem(Serializable):
    id: str
    title: str


@dataclass
class GTDContext(Serializable):
    name: str
    energy_required: str  # 'high', 'medium', 'low', 'variable', 'any'
    description: str


@dataclass
class WeeklyReviewItem(Serializable):
    id: str
    prompt: str
    is_completed: bool = False


@dataclass
class GTDResponse(Serializable):
    inbox: List[CapturedItem]
    next_actions: List[NextAction]
    projects: List[GTDProject]
    waiting_for: List[WaitingForItem]
    someday_maybe: List[SomedayMaybeItem]
    contexts: List[GTDContext]
    weekly_review: List[WeeklyReviewItem]


def someday_maybe_affinity(history: Sequence[SimilarTask]) -> float:
    """Fraction of similar past tasks that contain a deferral keyword."""
    if not history:
        return 0.0
    deferred = sum(
        1 for task in history
        if any(keyword in task.content.lower() for keyword in DEFERRAL_KEYWORDS)
    )
    return deferred / len(history)


def is_vague(content: str) -> bool:
    """Deferral-flavored or non-specific wording."""
    lowered = content.lower()
    return any(marker in lowered for marker in DEFERRAL_KEYWORDS + VAGUE_MARKERS)


class GTDAgent(FrameworkAgent):
    """
    Specialized agent for the GTD view.

    Ideas and concerns are never actionable; explicit projects and long
    tasks spawn a project with a first next action.
    """

    framework = GTD

    ENERGY_CONTEXTS = {
        EnergyState.HYPERFOCUS: "@deep-work",
        EnergyState.HIGH: "@computer",
        EnergyState.MEDIUM: "@anywhere",
        EnergyState.LOW: "@easy-tasks",
        EnergyState.SCATTERED: "@quick-capture",
    }

    # Checked in order; the first keyword present decides the context
    KEYWORD_CONTEXTS = [
        (("call", "phone"), "@phone"),
        (("meeting", "discuss"), "@meeting"),
        (("buy", "store"), "@errands"),
        (("email", "message"), "@computer"),
    ]

    TIME_MULTIPLIERS = {
        EnergyState.HYPERFOCUS: 2.5,
        EnergyState.HIGH: 1.2,
        EnergyState.MEDIUM: 1.0,
        EnergyState.LOW: 0.8,
        EnergyState.SCATTERED: 0.6,
    }

    def __init__(self, config=None):
        super().__init__(config, "gtd")

    def process(self, parsed_input: ParsedInput, user_context: UserContext) -> GTDResponse:
        energy = self.energy_of(user_context)

        captured = self.capture(parsed_input)
        clarified = self.clarify(captured, user_context)
        organized = self.organize(clarified)
        inbox = [item for item in captured if not item.processed]

        self.log_action("processed", {
            "captured": len(captured),
            "next_actions": len(organized["next_actions"]),
            "inbox": len(inbox),
        })

        return GTDResponse(
            inbox=inbox,
            next_actions=organized["next_actions"],
            projects=organized["projects"],
            waiting_for=organized["waiting_for"],
            someday_maybe=organized["someday_maybe"],
            contexts=self.generate_contexts(user_context.cognitive_type),
            weekly_review=self.generate_review_items(organized, len(inbox)),
        )

    # =========================================================================
    # Capture
    # =========================================================================

    @staticmethod
    def capture(parsed_input: ParsedInput) -> List[CapturedItem]:
        sources = [
            ("task", parsed_input.tasks),
            ("idea", parsed_input.ideas),
            ("concern", parsed_input.concerns),
            ("project", parsed_input.projects),
        ]
        captured = []
        for source, units in sources:
            for unit in units:
                captured.append(CapturedItem(
                    id=f"CAP-{len(captured)}", source=source, content=unit.content
                ))
        return captured

    # =========================================================================
    # Clarify
    # =========================================================================

    def clarify(self, items: List[CapturedItem], user_context: UserContext) -> List[ClarifiedItem]:
        """
        Decide what each captured item is.

        Items with no content cannot be clarified and stay unprocessed, so
        they are reported back in the inbox.
        """
        affinity = someday_maybe_affinity(user_context.historical_context)
        energy = user_context.energy_state
        clarified = []
        project_count = 0

        for item in items:
            if not item.content.strip():
                continue

            item.processed = True

            waiting = WAITING_FOR_PATTERN.search(item.content)
            if waiting:
                clarified.append(ClarifiedItem(
                    item=item,
                    is_actionable=False,
                    waiting_for=waiting.group(1).strip() or "someone else",
                ))
                continue

            actionable = self.is_actionable(item)
            if actionable and affinity > SOMEDAY_AFFINITY_THRESHOLD and is_vague(item.content):
                actionable = False

            if not actionable:
                clarified.append(ClarifiedItem(item=item, is_actionable=False))
                continue

            project_id = None
            if self.is_multi_step(item):
                project_count += 1
                project_id = f"PROJ-{project_count}"
                next_action = NextAction(
                    id=f"NA-{item.id}",
                    title=f"First step for: {item.content[:30]}...",
                    context=self.determine_context(item.content, energy),
                    is_single_step=False,
                    time_estimate=self.estimate_time(item.content, energy),
                    project_id=project_id,
                )
            else:
                next_action = NextAction(
                    id=f"NA-{item.id}",
                    title=item.content,
                    context=self.determine_context(item.content, energy),
                    is_single_step=True,
                    time_estimate=self.estimate_time(item.content, energy),
                )

            clarified.append(ClarifiedItem(
                item=item,
                is_actionable=True,
                outcome_desired=f"Successfully complete: {item.content[:50]}...",
                next_action=next_action,
                project_id=project_id,
            ))

        return clarified

    @staticmethod
    def is_actionable(item: CapturedItem) -> bool:
        if item.source in ("idea", "concern"):
            return False
        lowered = item.content.lower()
        return not any(keyword in lowered for keyword in NON_ACTIONABLE_KEYWORDS)

    @staticmethod
    def is_multi_step(item: CapturedItem) -> bool:
        return item.source == "project" or len(item.content) > MULTI_STEP_CONTENT_LENGTH

    def determine_context(self, content: str, energy: EnergyState) -> str:
        lowered = content.lower()
        for keywords, context in self.KEYWORD_CONTEXTS:
            if any(keyword in lowered for keyword in keywords):
                return context
        return self.ENERGY_CONTEXTS.get(energy, "@computer")

    def estimate_time(self, content: str, energy: EnergyState) -> str:
        if len(content) > 100:
            base = 60
        elif len(content) > 50:
            base = 30
        else:
            base = 15

        adjusted = base * self.TIME_MULTIPLIERS.get(energy, 1.0)

        if adjusted <= 15:
            return "15 min"
        if adjusted <= 30:
            return "30 min"
        if adjusted <= 60:
            return "1 hour"
        if adjusted <= 120:
            return "2 hours"
        return "2+ hours"

    # =========================================================================
    # Organize
    # =========================================================================

    @staticmethod
    def organize(clarified: List[ClarifiedItem]) -> Dict[str, list]:
        next_actions: List[NextAction] = []
        projects: Dict[str, GTDProject] = {}
        waiting_for: List[WaitingForItem] = []
        someday_maybe: List[SomedayMaybeItem] = []

        for entry in clarified:
            item = entry.item
            if entry.next_action:
                next_actions.append(entry.next_action)

            if entry.project_id:
                if entry.project_id not in projects:
                    projects[entry.project_id] = GTDProject(
                        id=entry.project_id,
                        name=f"Project: {item.content[:40]}...",
                        outcome=entry.outcome_desired or "Achieve defined goals",
                    )
                if entry.next_action:
                    projects[entry.project_id].next_actions.append(entry.next_action)
            elif entry.waiting_for is not None:
                waiting_for.append(WaitingForItem(
                    id=f"WF-{item.id}", title=item.content, waiting_for=entry.waiting_for
                ))
            elif not entry.is_actionable:
                someday_maybe.append(SomedayMaybeItem(id=f"SM-{item.id}", title=item.content))

        return {
            "next_actions": next_actions,
            "projects": list(projects.values()),
            "waiting_for": waiting_for,
            "someday_maybe": someday_maybe,
        }

    # =========================================================================
    # Reflect
    # =========================================================================

    @staticmethod
    def generate_contexts(cognitive_type: CognitiveType) -> List[GTDContext]:
        contexts = [
            GTDContext("@computer", "medium", "Tasks requiring computer"),
            GTDContext("@phone", "medium", "Calls and conversations"),
            GTDContext("@errands", "low", "Out and about tasks"),
            GTDContext("@home", "variable", "Home-based activities"),
        ]
        if cognitive_type == CognitiveType.ADHD:
            contexts.append(GTDContext("@hyperfocus", "high", "Deep work requiring intense focus"))
            contexts.append(GTDContext("@dopamine", "any", "Quick wins for motivation"))
        return contexts

    @staticmethod
    def generate_review_items(organized: Dict[str, list], inbox_count: int) -> List[WeeklyReviewItem]:
        prompts = [
            f"Review all {inbox_count} outstanding inbox items.",
            f"Review your {len(organized['projects'])} active projects.",
            f"Review your {len(organized['next_actions'])} next actions.",
            f"Review your {len(organized['waiting_for'])} 'Waiting For' items.",
            f"Review your {len(organized['someday_maybe'])} 'Someday/Maybe' items.",
            "Get creative, courageous, and clear-minded.",
        ]
        return [
            WeeklyReviewItem(id=f"review-{index}", prompt=prompt)
            for index, prompt in enumerate(prompts, start=1)
        ]
