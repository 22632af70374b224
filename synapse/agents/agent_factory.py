"""
Agent Factory for Synapse

The AgentFactory is the root of the brain-dump pipeline. For one request it:
1. Validates the input
2. Starts a fire-and-forget embed-and-store of the raw text
3. Runs the SemanticAgent for recommendations and historical context
4. Enriches the UserContext with that history
5. Parses the input once for every framework agent
6. Intersects the recommended frameworks with the caller's tier
7. Runs the selected framework agents concurrently (settle-all)
8. Runs the ProgressOrchestrator when at least one agent produced a response
9. Computes response metadata

Design Pattern: Dispatcher
- Framework agents live in a dispatch table keyed by framework name
- Only the factory does timing and tier gating
- One failing agent fails its own slot, never its siblings
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional
import asyncio
import logging
import time

from .base_agent import AgentResult, FrameworkAgent
from .input_parser import InputParser
from .agile_agent import AgileAgent
from .kanban_agent import KanbanAgent
from .gtd_agent import GTDAgent
from .para_agent import PARAAgent
from .custom_agent import CustomAgent
from .semantic_agent import SemanticAgent, SemanticResponse
from ..core.errors import AgentExecutionError, ValidationError
from ..core.models import (
    AGILE, CUSTOM, DEFAULT_TIER_FRAMEWORKS, FRAMEWORK_AGENTS, GTD, KANBAN, PARA, SEMANTIC,
    FrameworkResponses, ParsedInput, Serializable, UserContext,
)
from ..orchestration.progress_orchestrator import OrchestrationResult, ProgressOrchestrator


DEFAULT_SEMANTIC_TIMEOUT = 5.0
DEFAULT_AGENT_TIMEOUT = 10.0

# Embedding write states reported in metadata
STORE_SKIPPED = "skipped"
STORE_PENDING = "pending"
STORE_STORED = "stored"
STORE_FAILED = "failed"


@dataclass
class ResponseMetadata(Serializable):
    """
    Per-request bookkeeping.

    embedding_stored is best-effort: the write runs in the background and is
    only reported as stored if it finished before metadata was built.
    embedding_store_status carries the detail.
    """
    processing_time_ms: int
    input_complexity: str
    confidence_score: float
    embedding_stored: bool
    embedding_store_status: str
    agents_executed: List[str]
    failed_agents: List[str]
    recommended_frameworks: List[str]


@dataclass
class MultiFrameworkResponse(Serializable):
    """
    Aggregate response for one brain dump.

    Attributes:
        frameworks: Responses keyed by lowercase framework name; only agents
            that produced a response appear
        semantic: SemanticAgent output (defaults when it could not run)
        orchestration: Cross-framework analysis, None when no agent ran
        metadata: Timing, confidence and execution details
    """
    frameworks: Dict[str, Any]
    semantic: SemanticResponse
    orchestration: Optional[OrchestrationResult]
    metadata: ResponseMetadata


def calculate_confidence(parsed: ParsedInput) -> float:
    """
    Confidence drops with input size and complexity, floored at 0.5.

    Projects are not counted towards size.
    """
    units = len(parsed.tasks) + len(parsed.ideas) + len(parsed.concerns)
    penalty = 0.2 if parsed.complexity == "high" else 0.0
    score = max(0.5, 1 - units / 10 - penalty)
    return round(min(1.0, score), 2)


class AgentFactory:
    """
    Coordinates the full brain-dump pipeline.

    The factory holds no per-request state; the only thing it tracks across
    requests is the set of background embedding writes, so they can be
    awaited on shutdown with drain().

    Attributes:
        config: Optional Config instance
        embedding_service: Embedding collaborator, or None to run without history
        agents: Dispatch table of framework name -> FrameworkAgent
        semantic_agent: History-aware recommender
        orchestrator: Cross-framework momentum analysis
    """

    def __init__(self, config=None, embedding_service=None,
                 agents: Optional[Dict[str, FrameworkAgent]] = None):
        self.config = config
        self.embedding_service = embedding_service
        self.parser = InputParser()

        self.agents: Dict[str, FrameworkAgent] = agents if agents is not None else {
            AGILE: AgileAgent(config),
            KANBAN: KanbanAgent(config),
            GTD: GTDAgent(config),
            PARA: PARAAgent(config),
            CUSTOM: CustomAgent(config),
        }
        self.semantic_agent = SemanticAgent(
            embedding_service, limit=self._setting("similarity_limit", 5)
        )
        self.orchestrator = ProgressOrchestrator(
            ripple_mode=self._setting("ripple_mode", "first_relation")
        )

        self.semantic_timeout = float(self._setting("semantic_timeout_seconds", DEFAULT_SEMANTIC_TIMEOUT))
        self.agent_timeout = float(self._setting("agent_timeout_seconds", DEFAULT_AGENT_TIMEOUT))

        self._background_tasks = set()
        self.logger = logging.getLogger("agent.factory")

    def _setting(self, key: str, default: Any) -> Any:
        if self.config is None:
            return default
        return self.config.get(key, default=default)

    # =========================================================================
    # Entry point
    # =========================================================================

    async def process_input(self, text: str, user_context: UserContext) -> MultiFrameworkResponse:
        """
        Run the pipeline for one brain dump.

        Args:
            text: Raw brain-dump text
            user_context: Caller context with tier already resolved

        Returns:
            MultiFrameworkResponse

        Raises:
            ValidationError: If the input is empty or the context is malformed
        """
        self.validate_request(text, user_context)
        started = time.perf_counter()

        store_task = self._start_embedding_write(text, user_context.user_id)

        allowed = self.allowed_frameworks(user_context.user_tier)
        if SEMANTIC in allowed:
            semantic = await self._run_semantic(text, user_context)
        else:
            semantic = SemanticAgent.default_response()

        enriched = replace(user_context, historical_context=tuple(semantic.similar_past_tasks))
        parsed = self.parser.analyze(text)

        selected = self.select_frameworks(semantic.recommended_frameworks, user_context.user_tier)
        results = await self._run_agents(selected, parsed, enriched)

        succeeded = [r for r in results if r.success]
        orchestration = None
        if succeeded:
            responses = FrameworkResponses(**{r.framework.lower(): r.response for r in succeeded})
            orchestration = self.orchestrator.analyze(responses, enriched)

        store_status = self._store_status(store_task)
        metadata = ResponseMetadata(
            processing_time_ms=int((time.perf_counter() - started) * 1000),
            input_complexity=parsed.complexity,
            confidence_score=calculate_confidence(parsed),
            embedding_stored=store_status == STORE_STORED,
            embedding_store_status=store_status,
            agents_executed=[r.framework for r in succeeded],
            failed_agents=[r.framework for r in results if not r.success],
            recommended_frameworks=list(semantic.recommended_frameworks),
        )

        self.logger.info(
            "Processed brain dump for %s: ran %s, failed %s in %dms",
            user_context.user_id, metadata.agents_executed, metadata.failed_agents,
            metadata.processing_time_ms,
        )

        return MultiFrameworkResponse(
            frameworks={r.framework.lower(): r.response for r in succeeded},
            semantic=semantic,
            orchestration=orchestration,
            metadata=metadata,
        )

    def validate_request(self, text: Any, user_context: Any) -> None:
        """Reject requests before any side effect happens."""
        if not isinstance(text, str) or not text.strip():
            raise ValidationError("Input text must not be empty", field="input")
        if not isinstance(user_context, UserContext):
            raise ValidationError("A UserContext is required", field="userContext")

    # =========================================================================
    # Tier gating
    # =========================================================================

    def allowed_frameworks(self, tier) -> List[str]:
        if self.config is not None:
            return self.config.get_tier_frameworks(tier)
        return list(DEFAULT_TIER_FRAMEWORKS.get(getattr(tier, "value", tier), []))

    def select_frameworks(self, recommended: List[str], tier) -> List[str]:
        """
        Framework agents to run: (recommended + pinned) intersected with the tier.

        Returned in canonical framework order.
        """
        wanted = set(recommended) | set(self._setting("pinned_frameworks", []))
        allowed = set(self.allowed_frameworks(tier))
        return [name for name in FRAMEWORK_AGENTS
                if name in wanted and name in allowed and name in self.agents]

    # =========================================================================
    # Background embedding write
    # =========================================================================

    def _start_embedding_write(self, text: str, user_id: str) -> Optional[asyncio.Task]:
        if self.embedding_service is None:
            return None

        task = asyncio.create_task(asyncio.to_thread(self._embed_and_store, text, user_id))
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)
        return task

    def _embed_and_store(self, text: str, user_id: str) -> bool:
        try:
            vector = self.embedding_service.embed(text)
            self.embedding_service.store(user_id, text, vector)
        except Exception:
            self.logger.warning("Embedding write failed for %s", user_id, exc_info=True)
            return False
        return True

    @staticmethod
    def _store_status(task: Optional[asyncio.Task]) -> str:
        if task is None:
            return STORE_SKIPPED
        if not task.done():
            return STORE_PENDING
        if task.cancelled() or task.exception() is not None or not task.result():
            return STORE_FAILED
        return STORE_STORED

    async def drain(self) -> None:
        """Wait for outstanding background embedding writes."""
        if self._background_tasks:
            await asyncio.gather(*list(self._background_tasks), return_exceptions=True)

    # =========================================================================
    # Semantic step and agent fan-out
    # =========================================================================

    async def _run_semantic(self, text: str, user_context: UserContext) -> SemanticResponse:
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self.semantic_agent.process, text, user_context),
                timeout=self.semantic_timeout,
            )
        except asyncio.TimeoutError:
            self.logger.warning("Semantic step timed out after %.1fs, using defaults",
                                self.semantic_timeout)
        except Exception:
            self.logger.warning("Semantic step failed, using defaults", exc_info=True)
        return SemanticAgent.default_response()

    async def _run_agent(self, framework: str, parsed: ParsedInput,
                         user_context: UserContext) -> AgentResult:
        agent = self.agents[framework]
        started = time.perf_counter()
        try:
            response = await asyncio.to_thread(agent.process, parsed, user_context)
        except Exception as e:
            error = AgentExecutionError(framework, e)
            self.logger.error(str(error), exc_info=True)
            return AgentResult.failed(framework, str(error),
                                      int((time.perf_counter() - started) * 1000))
        return AgentResult.ok(framework, response, int((time.perf_counter() - started) * 1000))

    async def _run_agents(self, frameworks: List[str], parsed: ParsedInput,
                          user_context: UserContext) -> List[AgentResult]:
        """Run agents concurrently; slots that miss the timeout are reported as failed."""
        if not frameworks:
            return []

        tasks = {
            name: asyncio.create_task(self._run_agent(name, parsed, user_context))
            for name in frameworks
        }
        done, pending = await asyncio.wait(tasks.values(), timeout=self.agent_timeout)
        for task in pending:
            task.cancel()

        results = []
        for name, task in tasks.items():
            if task in done:
                results.append(task.result())
            else:
                self.logger.error("%s agent timed out after %.1fs", name, self.agent_timeout)
                results.append(AgentResult.failed(name, f"{name} agent timed out"))
        return results
