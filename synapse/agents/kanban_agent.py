"""
Kanban Agent for Synapse
Builds an energy- and cognition-aware board, places cards, and reports flow.

WIP limit for "In Progress":
    base by cognitive type (ADHD 2, ASD 1, MIXED 2, NEUROTYPICAL 3, unknown 2)
    Scattered or Hyperfocus -> 1, High -> +1, clamped to [1, 5]
"""

from dataclasses import dataclass
from typing import List, Optional

from .base_agent import FrameworkAgent
from ..core.models import (
    KANBAN, CognitiveType, EnergyState, ParsedInput, Serializable, UserContext,
)


BRAIN_DUMP = "Brain Dump"
READY_HIGH = "Ready (High Energy)"
READY_LOW = "Ready (Low Energy)"
IN_PROGRESS = "In Progress"
BLOCKED = "Blocked"
DONE_TODAY = "Done Today"
HYPERFOCUS_QUEUE = "Hyperfocus Queue"
ROUTINE_TASKS = "Routine Tasks"

# Cards with longer content are treated as large/complex
COMPLEX_CONTENT_LENGTH = 80


@dataclass
class KanbanColumn(Serializable):
    name: str
    wip_limit: Optional[int]
    purpose: str


@dataclass
class KanbanCard(Serializable):
    id: str
    content: str
    column: str
    tags: List[str]
    estimated_size: str  # 'small', 'large'
    blocked_reason: Optional[str] = None


@dataclass
class KanbanBoard(Serializable):
    columns: List[KanbanColumn]
    cards: List[KanbanCard]


@dataclass
class FlowMetrics(Serializable):
    cycle_time: str
    lead_time: str
    wip_count: int
    throughput: str


@dataclass
class FlowRecommendation(Serializable):
    recommendation: str
    rationale: str


@dataclass
class KanbanResponse(Serializable):
    board: KanbanBoard
    flow_metrics: FlowMetrics
    recommendations: List[FlowRecommendation]


def calculate_wip_limit(energy: EnergyState, cognitive_type: CognitiveType) -> int:
    """In-progress WIP limit for a cognitive type and energy state, in [1, 5]."""
    limit = KanbanAgent.BASE_WIP_LIMITS.get(cognitive_type, 2)

    if energy in (EnergyState.SCATTERED, EnergyState.HYPERFOCUS):
        limit = 1
    if energy == EnergyState.HIGH:
        limit += 1

    return max(1, min(limit, 5))


class KanbanAgent(FrameworkAgent):
    """
    Specialized agent for the Kanban view.

    Cards are created for tasks and ideas, in that order.
    """

    framework = KANBAN

    BASE_WIP_LIMITS = {
        CognitiveType.ADHD: 2,
        CognitiveType.ASD: 1,
        CognitiveType.MIXED: 2,
        CognitiveType.NEUROTYPICAL: 3,
        CognitiveType.UNKNOWN: 2,
    }

    def __init__(self, config=None):
        super().__init__(config, "kanban")

    def process(self, parsed_input: ParsedInput, user_context: UserContext) -> KanbanResponse:
        energy = self.energy_of(user_context)
        wip_limit = calculate_wip_limit(energy, user_context.cognitive_type)

        columns = self.create_adaptive_columns(user_context.cognitive_type, wip_limit)
        cards = self.create_cards(parsed_input, energy)
        flow = self.analyze_flow(cards)

        self.log_action("processed", {"cards": len(cards), "wip_limit": wip_limit})

        return KanbanResponse(
            board=KanbanBoard(columns=columns, cards=cards),
            flow_metrics=flow,
            recommendations=self.generate_flow_recommendations(flow, energy, wip_limit),
        )

    @staticmethod
    def create_adaptive_columns(cognitive_type: CognitiveType, wip_limit: int) -> List[KanbanColumn]:
        columns = [
            KanbanColumn(BRAIN_DUMP, None, "Capture without judgment"),
            KanbanColumn(READY_HIGH, 2, "Complex tasks requiring focus"),
            KanbanColumn(READY_LOW, 5, "Simple tasks for scattered days"),
            KanbanColumn(IN_PROGRESS, wip_limit, "Active work"),
            KanbanColumn(BLOCKED, None, "Waiting for dependencies"),
            KanbanColumn(DONE_TODAY, None, "Celebrate progress"),
        ]

        # Neurodivergent adaptations
        if cognitive_type == CognitiveType.ADHD:
            columns.append(KanbanColumn(HYPERFOCUS_QUEUE, 1, "For deep work sessions"))
        if cognitive_type == CognitiveType.ASD:
            columns.append(KanbanColumn(ROUTINE_TASKS, 3, "Predictable, structured work"))

        return columns

    @staticmethod
    def choose_column(energy: EnergyState, is_complex: bool, index: int) -> str:
        """Initial column for a card; later rules override earlier ones."""
        column = BRAIN_DUMP
        if energy == EnergyState.HIGH and not is_complex:
            column = READY_HIGH
        if energy == EnergyState.LOW:
            column = READY_LOW
        if energy == EnergyState.HYPERFOCUS and index == 0:
            column = HYPERFOCUS_QUEUE
        return column

    def create_cards(self, parsed_input: ParsedInput, energy: EnergyState) -> List[KanbanCard]:
        items = list(parsed_input.tasks) + list(parsed_input.ideas)
        cards = []
        for index, item in enumerate(items):
            is_complex = len(item.content) > COMPLEX_CONTENT_LENGTH
            cards.append(KanbanCard(
                id=f"CARD-{index}",
                content=item.content,
                column=self.choose_column(energy, is_complex, index),
                tags=[energy.value.lower()],
                estimated_size="large" if is_complex else "small",
            ))
        return cards

    @staticmethod
    def analyze_flow(cards: List[KanbanCard]) -> FlowMetrics:
        # Cycle/lead time and throughput need completion history; placeholders until then
        return FlowMetrics(
            cycle_time="1.5 days (avg)",
            lead_time="3 days (avg)",
            wip_count=sum(1 for c in cards if c.column == IN_PROGRESS),
            throughput="4 cards/week (avg)",
        )

    @staticmethod
    def generate_flow_recommendations(flow: FlowMetrics, energy: EnergyState,
                                      wip_limit: int) -> List[FlowRecommendation]:
        recommendations = []

        if flow.wip_count > wip_limit + 1:
            recommendations.append(FlowRecommendation(
                recommendation="WIP limit exceeded",
                rationale=(
                    f"You have {flow.wip_count} items in progress. Consider moving one back "
                    f"to 'Ready' to improve focus, especially in a {energy.value} state."
                ),
            ))

        if energy == EnergyState.SCATTERED and flow.wip_count > 1:
            recommendations.append(FlowRecommendation(
                recommendation="Focus on a single task",
                rationale=(
                    "Your energy is scattered. Focusing on one 'In Progress' item can help "
                    "build momentum without feeling overwhelmed."
                ),
            ))

        recommendations.append(FlowRecommendation(
            recommendation="Review your 'Done Today' column",
            rationale=(
                "At the end of the day, look at what you accomplished. This is a great way "
                "to acknowledge your progress and build motivation."
            ),
        ))

        return recommendations
