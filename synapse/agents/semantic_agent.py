"""
Semantic Agent for Synapse

Embeds the raw brain dump, retrieves the user's most similar past brain
dumps, and recommends which framework agents are worth running.

Recommendation heuristic (keyword counts over the similar tasks):
    "sprint" / "story"       -> Agile
    "board" / "column"       -> Kanban
    "inbox" / "next action"  -> GTD
The top count wins when it is above zero. With no history at all the
default is GTD + Kanban; with history but no signal, GTD alone.

An unavailable embedding backend is not an error for the caller: the agent
answers with the no-history default.
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple
import logging

from ..core.errors import DegradedDependencyError
from ..core.models import AGILE, GTD, KANBAN, PARA, SEMANTIC, Serializable, SimilarTask, UserContext


FRAMEWORK_SIGNALS = [
    (AGILE, ("sprint", "story")),
    (KANBAN, ("board", "column")),
    (GTD, ("inbox", "next action")),
]

NO_HISTORY_REASONING = (
    "No similar tasks found in your history. Starting with a basic GTD or Kanban "
    "setup is a good general approach."
)
NO_SIGNAL_REASONING = (
    "Your past similar tasks didn't strongly indicate a specific framework. "
    "GTD is a solid choice for clarification."
)


@dataclass
class SemanticResponse(Serializable):
    similar_past_tasks: List[SimilarTask]
    recommended_frameworks: List[str]
    recommendation_reasoning: str


def recommend_frameworks(similar_tasks: List[SimilarTask]) -> Tuple[List[str], str]:
    """
    Recommend frameworks from the wording of similar past tasks.

    Returns:
        (recommended framework names, human-readable reasoning)
    """
    if not similar_tasks:
        return [GTD, KANBAN], NO_HISTORY_REASONING

    # PARA has no keyword signal yet but keeps its place in the ranking
    mentions: Dict[str, int] = {AGILE: 0, KANBAN: 0, GTD: 0, PARA: 0}
    for task in similar_tasks:
        content = task.content.lower()
        for framework, keywords in FRAMEWORK_SIGNALS:
            if any(keyword in content for keyword in keywords):
                mentions[framework] += 1

    # max() keeps the first framework on ties
    top_framework = max(mentions, key=lambda name: mentions[name])
    if mentions[top_framework] > 0:
        return [top_framework], (
            f"Based on similar past tasks, the {top_framework} framework seems to be "
            f"a good fit for this type of work."
        )
    return [GTD], NO_SIGNAL_REASONING


class SemanticAgent:
    """
    History-aware recommender.

    Unlike the framework agents it reads the raw input and performs I/O
    through the injected embedding service.

    Attributes:
        embedding_service: Object with embed() and similarity_search(), or None
        limit: Number of similar tasks to retrieve
    """

    framework = SEMANTIC

    def __init__(self, embedding_service=None, limit: int = 5):
        self.embedding_service = embedding_service
        self.limit = limit
        self.name = "semantic"
        self.logger = logging.getLogger("agent.semantic")

    def process(self, raw_input: str, user_context: UserContext) -> SemanticResponse:
        """
        Find similar past tasks and recommend frameworks.

        Args:
            raw_input: The raw brain-dump text
            user_context: Caller context; user_id scopes the search

        Returns:
            SemanticResponse (defaults when the backend is unavailable)
        """
        similar = self.find_similar_tasks(raw_input, user_context.user_id)
        frameworks, reasoning = recommend_frameworks(similar)

        self.logger.info("Recommended %s from %d similar tasks", frameworks, len(similar))
        return SemanticResponse(
            similar_past_tasks=similar,
            recommended_frameworks=frameworks,
            recommendation_reasoning=reasoning,
        )

    def find_similar_tasks(self, raw_input: str, user_id: str) -> List[SimilarTask]:
        if self.embedding_service is None:
            return []

        try:
            vector = self.embedding_service.embed(raw_input)
            return list(self.embedding_service.similarity_search(vector, user_id, self.limit))
        except DegradedDependencyError as e:
            self.logger.warning("Similarity lookup degraded, using defaults: %s", e)
            return []

    @staticmethod
    def default_response() -> SemanticResponse:
        """Response used when the semantic step could not run at all."""
        frameworks, reasoning = recommend_frameworks([])
        return SemanticResponse(
            similar_past_tasks=[],
            recommended_frameworks=frameworks,
            recommendation_reasoning=reasoning,
        )
