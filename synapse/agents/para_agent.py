"""
PARA Agent for Synapse
Sorts parsed units into Projects, Areas, Resources and Archives.

- Projects: explicit projects, and tasks that open with a goal verb
- Areas: other tasks, and concerns (responsibilities to maintain)
- Resources: ideas (topics of interest)
- Archives: need completion history, so nothing is archived here
"""

from dataclasses import dataclass
from typing import Dict, List

from .base_agent import FrameworkAgent
from ..core.models import PARA, ParsedInput, Serializable, UserContext


PARA_CATEGORIES = ("Project", "Area", "Resource", "Archive")

GOAL_VERBS = ("build", "create", "implement", "design", "develop", "launch", "release", "fix")


@dataclass
class PARAItem(Serializable):
    title: str
    category: str  # 'Project', 'Area', 'Resource', 'Archive'


@dataclass
class PARAResponse(Serializable):
    classification: str
    items: List[PARAItem]


class PARAAgent(FrameworkAgent):
    """Specialized agent for the PARA method."""

    framework = PARA

    def __init__(self, config=None):
        super().__init__(config, "para")

    def process(self, parsed_input: ParsedInput, user_context: UserContext) -> PARAResponse:
        self.energy_of(user_context)

        items = [PARAItem(project.content, "Project") for project in parsed_input.projects]
        items += [
            PARAItem(task.content, "Project" if self.is_goal_oriented(task.content) else "Area")
            for task in parsed_input.tasks
        ]
        items += [PARAItem(idea.content, "Resource") for idea in parsed_input.ideas]
        items += [PARAItem(concern.content, "Area") for concern in parsed_input.concerns]

        classification = self.determine_overall_classification(items)
        self.log_action("processed", {"items": len(items), "classification": classification})

        return PARAResponse(classification=classification, items=items)

    @staticmethod
    def is_goal_oriented(content: str) -> bool:
        return content.lower().startswith(GOAL_VERBS)

    @staticmethod
    def determine_overall_classification(items: List[PARAItem]) -> str:
        counts: Dict[str, int] = {category: 0 for category in PARA_CATEGORIES}
        for item in items:
            counts[item.category] += 1

        if counts["Project"] > counts["Area"] + counts["Resource"]:
            return "Project-Focused"
        if counts["Area"] > counts["Project"]:
            return "Area of Responsibility"
        if counts["Resource"] > 0:
            return "Resource Collection"
        return "General"
