"""
Agile Agent for Synapse
Turns parsed tasks into user stories, epics, a sprint plan and a velocity forecast.

Story points follow a keyword heuristic adjusted for energy state and are
snapped onto the planning-poker scale {1, 2, 3, 5, 8, 13}.
"""

from dataclasses import dataclass, field
from datetime import timedelta
from typing import List, Optional
import math
import re

from .base_agent import FrameworkAgent
from ..core.models import (
    AGILE, EnergyState, ParsedInput, ParsedUnit, Serializable, UserContext, UserHistory,
)


STORY_POINT_SCALE = [1, 2, 3, 5, 8, 13]

PRIORITY_ORDER = {"critical": 4, "high": 3, "medium": 2, "low": 1}


@dataclass
class UserStory(Serializable):
    id: str
    title: str
    description: str
    acceptance_criteria: List[str]
    story_points: int
    priority: str  # 'low', 'medium', 'high', 'critical'
    tags: List[str]
    epic: Optional[str] = None
    sprint: Optional[str] = None


@dataclass
class Epic(Serializable):
    id: str
    name: str
    story_ids: List[str] = field(default_factory=list)


@dataclass
class Sprint(Serializable):
    id: str
    name: str
    story_ids: List[str]
    start_date: str
    end_date: str


@dataclass
class AgileResponse(Serializable):
    user_stories: List[UserStory]
    epics: List[Epic]
    sprints: List[Sprint]
    backlog: List[UserStory]
    velocity_prediction: str


@dataclass
class ExtractedTask:
    """Internal, richer view of a parsed task."""
    content: str
    action: str
    benefit: str
    category: str  # 'technical', 'feature', 'bug', 'improvement'
    keywords: List[str]


def snap_story_points(points: int) -> int:
    """Nearest value on the story-point scale; ties go to the smaller value."""
    return min(STORY_POINT_SCALE, key=lambda candidate: abs(candidate - points))


class AgileAgent(FrameworkAgent):
    """
    Specialized agent for the Agile/Scrum view.

    One user story per parsed task. Epics are only formed with at least three
    stories and one explicit project.
    """

    framework = AGILE

    BUG_WORDS = {"fix", "bug", "issue"}
    IMPROVEMENT_WORDS = {"improve", "refactor", "update"}
    TECHNICAL_WORDS = {"database", "api", "backend"}

    INTEGRATION_WORDS = {"database", "api", "integration"}
    NEW_WORK_WORDS = {"new", "create", "build"}
    COMPLEX_WORDS = {"complex", "advanced", "system"}
    URGENT_WORDS = {"urgent", "critical", "asap"}

    SPRINT_CAPACITY = {EnergyState.LOW: 5, EnergyState.SCATTERED: 8}
    DEFAULT_SPRINT_CAPACITY = 13

    DESCRIPTION_TEMPLATES = {
        "technical": "As a developer, I want to {action} so that {benefit}",
        "feature": "As a user, I want to {action} so that {benefit}",
        "bug": "As a user, I want {action} fixed so that {benefit}",
        "improvement": "As a user, I want {action} improved so that {benefit}",
    }

    def __init__(self, config=None):
        super().__init__(config, "agile")

    def process(self, parsed_input: ParsedInput, user_context: UserContext) -> AgileResponse:
        energy = self.energy_of(user_context)

        extracted = [self.extract_task_details(task) for task in parsed_input.tasks]
        stories = [
            self.create_user_story(task, energy, index)
            for index, task in enumerate(extracted, start=1)
        ]
        backlog = self.prioritize_backlog(stories)

        response = AgileResponse(
            user_stories=stories,
            epics=self.group_into_epics(stories, parsed_input.projects),
            sprints=self.plan_sprints(backlog, user_context),
            backlog=backlog,
            velocity_prediction=self.predict_velocity(stories, user_context.history),
        )

        self.log_action("processed", {"stories": len(stories), "epics": len(response.epics)})
        return response

    # =========================================================================
    # Story construction
    # =========================================================================

    def extract_task_details(self, task: ParsedUnit) -> ExtractedTask:
        content = task.content
        keywords = re.findall(r"[\w'-]+", content.lower())

        if self.BUG_WORDS.intersection(keywords):
            category = "bug"
        elif self.IMPROVEMENT_WORDS.intersection(keywords):
            category = "improvement"
        elif self.TECHNICAL_WORDS.intersection(keywords):
            category = "technical"
        else:
            category = "feature"

        return ExtractedTask(
            content=content,
            action=content[:50],
            benefit="to improve the system",
            category=category,
            keywords=keywords,
        )

    def create_user_story(self, task: ExtractedTask, energy: EnergyState, index: int) -> UserStory:
        priority = self.calculate_priority(task, energy)
        return UserStory(
            id=f"US-{index}",
            title=self.generate_story_title(task),
            description=self.DESCRIPTION_TEMPLATES[task.category].format(
                action=task.action, benefit=task.benefit
            ),
            acceptance_criteria=self.generate_acceptance_criteria(task, energy),
            story_points=self.estimate_story_points(task, energy),
            priority=priority,
            tags=self.assign_tags(task, energy),
            epic=self.assign_to_epic(task),
            sprint="Sprint-1" if priority in ("critical", "high") else None,
        )

    def estimate_story_points(self, task: ExtractedTask, energy: EnergyState) -> int:
        points = 1
        if self.INTEGRATION_WORDS.intersection(task.keywords):
            points += 2
        if self.NEW_WORK_WORDS.intersection(task.keywords):
            points += 2
        if self.COMPLEX_WORDS.intersection(task.keywords):
            points += 3

        if energy == EnergyState.LOW:
            points = min(points, 3)
        if energy == EnergyState.HYPERFOCUS:
            points += 1

        return snap_story_points(points)

    def calculate_priority(self, task: ExtractedTask, energy: EnergyState) -> str:
        if self.URGENT_WORDS.intersection(task.keywords):
            return "critical"
        if task.category == "bug":
            return "high"
        if energy == EnergyState.HYPERFOCUS:
            return "high"
        if energy == EnergyState.LOW:
            return "low"
        return "medium"

    @staticmethod
    def generate_story_title(task: ExtractedTask) -> str:
        suffix = "..." if len(task.content) > 40 else ""
        return f"{task.category.capitalize()}: {task.content[:40]}{suffix}"

    @staticmethod
    def generate_acceptance_criteria(task: ExtractedTask, energy: EnergyState) -> List[str]:
        criteria = ["Task is clearly defined and actionable"]
        if energy == EnergyState.HYPERFOCUS:
            criteria.append("Deep work session is optimized")
        elif energy == EnergyState.SCATTERED:
            criteria.append("Task is broken into micro-steps")
        if task.category == "bug":
            criteria.append("A regression test is implemented to prevent reoccurrence.")
        criteria.append("Completion criteria are measurable")
        return criteria

    @staticmethod
    def assign_tags(task: ExtractedTask, energy: EnergyState) -> List[str]:
        tags = [energy.value.lower(), task.category]
        if {"ui", "frontend", "css"}.intersection(task.keywords):
            tags.append("frontend")
        if {"db", "database", "backend"}.intersection(task.keywords):
            tags.append("backend")
        # Unique, first occurrence wins
        return list(dict.fromkeys(tags))

    @staticmethod
    def assign_to_epic(task: ExtractedTask) -> Optional[str]:
        if "project" in task.keywords:
            return f"EPIC-{task.content[:10].upper()}"
        return None

    # =========================================================================
    # Planning
    # =========================================================================

    @staticmethod
    def group_into_epics(stories: List[UserStory], projects) -> List[Epic]:
        """
        One epic per explicit project, once there are at least three stories.

        Every story is attached to the first epic only; later epics start
        empty. This mirrors the current placeholder grouping and is kept as a
        known limitation rather than guessed at.
        """
        if not projects or len(stories) < 3:
            return []

        return [
            Epic(
                id=f"EPIC-{index}",
                name=f"Epic: {project.content}",
                story_ids=[s.id for s in stories] if index == 1 else [],
            )
            for index, project in enumerate(projects, start=1)
        ]

    @staticmethod
    def prioritize_backlog(stories: List[UserStory]) -> List[UserStory]:
        """Priority descending, then story points descending (stable)."""
        return sorted(
            stories,
            key=lambda s: (-PRIORITY_ORDER[s.priority], -s.story_points),
        )

    def plan_sprints(self, backlog: List[UserStory], user_context: UserContext) -> List[Sprint]:
        """Greedily pack the prioritized backlog into a single capacity-bound sprint."""
        if not backlog:
            return []

        energy = user_context.energy_state
        capacity = self.SPRINT_CAPACITY.get(energy, self.DEFAULT_SPRINT_CAPACITY)

        committed = []
        points = 0
        for story in backlog:
            if points + story.story_points <= capacity:
                committed.append(story)
                points += story.story_points

        start = user_context.current_time
        end = start + timedelta(days=7)

        return [Sprint(
            id="Sprint-1",
            name=f"Sprint 1 ({energy.value} Energy)",
            story_ids=[s.id for s in committed],
            start_date=start.date().isoformat(),
            end_date=end.date().isoformat(),
        )]

    @staticmethod
    def predict_velocity(stories: List[UserStory], history: Optional[UserHistory]) -> str:
        if history is not None and history.sprints_completed > 0:
            average = history.completed_story_points / history.sprints_completed
            return f"{average:.1f} points/sprint (historical)"

        total = sum(s.story_points for s in stories)
        sprints = max(1, math.ceil(total / 13))
        return f"{total / sprints:.1f} points/sprint (estimated)"
