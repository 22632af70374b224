"""
Progress orchestration for Synapse.

Looks across whichever framework responses were produced, finds tasks that
share a skill keyword, and turns those links into momentum metrics, ripple
effects and motivational copy.

Scoring:
    strength          = high if size > 3, medium if size > 1, else low
    momentumPotential = min(1, size / 5)
    progressGain      = min((size - 1) * 15 * multiplier, 100)
                        multiplier: low 0.5, medium 1.0, high 1.5
    momentumScore     = round(mean(momentumPotential) * 100), 0 without relations
"""

from dataclasses import dataclass
from typing import Dict, List, Optional
import logging
import math

from ..core.models import (
    AGILE, GTD, KANBAN, EnergyState, FrameworkResponses, Serializable, UserContext,
)


SKILL_VOCABULARY = ["api", "ui", "database", "testing", "security", "auth", "docs"]

STRENGTH_MULTIPLIERS = {"low": 0.5, "medium": 1.0, "high": 1.5}

RIPPLE_MODES = ("first_relation", "all_relations")

TARGET_PROJECTS = {
    AGILE: "Agile Backlog",
    KANBAN: "Kanban Board",
    GTD: "GTD Next Actions",
}

ENERGY_SUGGESTIONS = {
    EnergyState.HYPERFOCUS: "Ride the hyperfocus: batch every linked '{skill}' task into one deep-work block.",
    EnergyState.HIGH: "Your energy is high; tackle the linked '{skill}' work now while it compounds.",
    EnergyState.MEDIUM: "Schedule the linked '{skill}' tasks back to back to keep context warm.",
    EnergyState.LOW: "Start with the smallest linked '{skill}' task; its progress still ripples outward.",
    EnergyState.SCATTERED: "Take only the first step on the linked '{skill}' task; one connected win is enough.",
}


@dataclass
class TaskRef(Serializable):
    """A task-like item from one framework's response."""
    framework: str
    id: str
    title: str


@dataclass
class CrossProjectRelation(Serializable):
    type: str  # 'shared_skill', 'dependency', 'sequential_task'
    strength: str  # 'low', 'medium', 'high'
    tasks: List[TaskRef]
    momentum_potential: float
    progress_gain: float
    skill: Optional[str] = None


@dataclass
class RippleEffect(Serializable):
    source_task: str
    target_project: str
    impact_description: str
    tasks_unblocked: int
    progress_gain: float = 0.0
    relation_skill: Optional[str] = None


@dataclass
class ProgressMetrics(Serializable):
    projects_advanced: int
    tasks_unblocked: int
    momentum_multiplier: str
    efficiency_gain: str


@dataclass
class MotivationAmplifiers(Serializable):
    achievement_summary: str
    progress_metrics: ProgressMetrics
    celebration_message: str


@dataclass
class OrchestrationResult(Serializable):
    cross_project_impacts: List[CrossProjectRelation]
    momentum_score: int
    ripple_effects: List[RippleEffect]
    recommendations: List[str]
    motivation_amplifiers: MotivationAmplifiers


# =============================================================================
# Scoring helpers
# =============================================================================

def calculate_relation_strength(group_size: int) -> str:
    if group_size > 3:
        return "high"
    if group_size > 1:
        return "medium"
    return "low"


def calculate_momentum_potential(group_size: int) -> float:
    return min(1.0, group_size / 5.0)


def calculate_progress_gain(group_size: int, strength: str) -> float:
    gain = (group_size - 1) * 15 * STRENGTH_MULTIPLIERS[strength]
    return round(min(max(gain, 0.0), 100.0), 1)


def calculate_momentum_score(relations: List[CrossProjectRelation]) -> int:
    """Mean momentum potential as a 0-100 percentage (half rounds up)."""
    if not relations:
        return 0
    mean = sum(r.momentum_potential for r in relations) / len(relations)
    return int(math.floor(mean * 100 + 0.5))


def collect_tasks(responses: FrameworkResponses) -> List[TaskRef]:
    """Task-like items from whichever of Agile, Kanban and GTD ran."""
    tasks: List[TaskRef] = []
    if responses.agile is not None:
        tasks += [TaskRef(AGILE, s.id, s.title) for s in responses.agile.user_stories]
    if responses.kanban is not None:
        tasks += [TaskRef(KANBAN, c.id, c.content) for c in responses.kanban.board.cards]
    if responses.gtd is not None:
        tasks += [TaskRef(GTD, a.id, a.title) for a in responses.gtd.next_actions]
    return tasks


def group_by_shared_skills(tasks: List[TaskRef]) -> Dict[str, List[TaskRef]]:
    """
    Group tasks by skill keyword (case-insensitive substring).

    A task can join several groups. Groups appear in the order their skill
    was first seen.
    """
    groups: Dict[str, List[TaskRef]] = {}
    for task in tasks:
        title = task.title.lower()
        for skill in SKILL_VOCABULARY:
            if skill in title:
                groups.setdefault(skill, []).append(task)
    return groups


class ProgressOrchestrator:
    """
    Cross-framework momentum analysis.

    Attributes:
        ripple_mode: "first_relation" emits at most one ripple, from the first
            relation's first task to its second. "all_relations" walks every
            relation and emits one ripple per distinct (source, target board).
    """

    def __init__(self, ripple_mode: str = "first_relation"):
        if ripple_mode not in RIPPLE_MODES:
            raise ValueError(f"Unknown ripple_mode: {ripple_mode!r}")
        self.ripple_mode = ripple_mode
        self.logger = logging.getLogger("agent.orchestrator")

    def analyze(self, responses: FrameworkResponses, user_context: UserContext) -> OrchestrationResult:
        relations = self.detect_cross_project_relations(responses)

        if self.ripple_mode == "all_relations":
            ripples = self.simulate_all_ripple_effects(relations)
        else:
            ripples = self.simulate_ripple_effects(relations)

        result = OrchestrationResult(
            cross_project_impacts=relations,
            momentum_score=calculate_momentum_score(relations),
            ripple_effects=ripples,
            recommendations=self.generate_recommendations(ripples, user_context.energy_state),
            motivation_amplifiers=self.create_motivation_amplifiers(ripples),
        )

        self.logger.info("Found %d relations, %d ripples, momentum %d",
                         len(relations), len(ripples), result.momentum_score)
        return result

    def detect_cross_project_relations(self, responses: FrameworkResponses) -> List[CrossProjectRelation]:
        relations = []
        for skill, group in group_by_shared_skills(collect_tasks(responses)).items():
            if len(group) < 2:
                continue
            strength = calculate_relation_strength(len(group))
            relations.append(CrossProjectRelation(
                type="shared_skill",
                strength=strength,
                tasks=group,
                skill=skill,
                momentum_potential=calculate_momentum_potential(len(group)),
                progress_gain=calculate_progress_gain(len(group), strength),
            ))
        return relations

    # =========================================================================
    # Ripple simulation
    # =========================================================================

    @staticmethod
    def _ripple(source: TaskRef, target_project: str, unblocked: int,
                relation: CrossProjectRelation, target: TaskRef) -> RippleEffect:
        return RippleEffect(
            source_task=source.id,
            target_project=target_project,
            impact_description=(
                f"Completing '{source.title}' ({source.framework}) also progresses "
                f"'{target.title}' on your {target_project}."
            ),
            tasks_unblocked=unblocked,
            progress_gain=relation.progress_gain,
            relation_skill=relation.skill,
        )

    def simulate_ripple_effects(self, relations: List[CrossProjectRelation]) -> List[RippleEffect]:
        """Single ripple from the first relation's first task to its second."""
        if not relations or len(relations[0].tasks) < 2:
            return []
        relation = relations[0]
        source, target = relation.tasks[0], relation.tasks[1]
        return [self._ripple(source, TARGET_PROJECTS[target.framework], 1, relation, target)]

    def simulate_all_ripple_effects(self, relations: List[CrossProjectRelation]) -> List[RippleEffect]:
        """One ripple per distinct (source task, target board) across every relation."""
        ripples = []
        seen = set()
        for relation in relations:
            if len(relation.tasks) < 2:
                continue
            source = relation.tasks[0]
            by_target: Dict[str, List[TaskRef]] = {}
            for task in relation.tasks[1:]:
                by_target.setdefault(TARGET_PROJECTS[task.framework], []).append(task)

            for target_project, targets in by_target.items():
                key = (source.id, target_project)
                if key in seen:
                    continue
                seen.add(key)
                ripples.append(self._ripple(source, target_project, len(targets), relation, targets[0]))
        return ripples

    # =========================================================================
    # User-facing output
    # =========================================================================

    @staticmethod
    def generate_recommendations(ripples: List[RippleEffect], energy: EnergyState) -> List[str]:
        if not ripples:
            return ["No specific momentum opportunities found, just focus on your next single task."]
        effect = ripples[0]
        suggestion = ENERGY_SUGGESTIONS[energy].format(skill=effect.relation_skill or "related")
        return [f"Momentum Alert: {effect.impact_description}", suggestion]

    @staticmethod
    def create_motivation_amplifiers(ripples: List[RippleEffect]) -> MotivationAmplifiers:
        projects = len({r.target_project for r in ripples})
        unblocked = sum(r.tasks_unblocked for r in ripples)

        if projects > 1:
            celebration = f"Amazing work! You've made progress across {projects} different areas at once!"
        elif unblocked > 1:
            celebration = f"Great job! You've unblocked {unblocked} other tasks. Keep the momentum going!"
        else:
            celebration = "Task complete! Every step forward is a victory."

        return MotivationAmplifiers(
            achievement_summary=(
                f"Working on this could advance {projects} projects and unblock {unblocked} tasks!"
            ),
            progress_metrics=ProgressMetrics(
                projects_advanced=projects,
                tasks_unblocked=unblocked,
                momentum_multiplier=f"{1 + len(ripples) * 0.1:.1f}x",
                efficiency_gain=f"~{len(ripples) * 5}%",
            ),
            celebration_message=celebration,
        )
