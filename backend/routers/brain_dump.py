"""
Brain-dump API endpoints.

POST /api/brain-dump runs the full pipeline: semantic recommendation, tier
gating, the selected framework agents and cross-framework orchestration.

Errors are mapped in backend.main:
- schema violations -> 422
- ValidationError (e.g. blank input, unknown energyState) -> 400
- anything else -> 500
"""

from typing import Callable

from fastapi import APIRouter, Depends

from backend.dependencies import get_agent_factory, get_config, get_tier_resolver
from backend.schemas import BrainDumpRequest, BrainDumpResponse, TierResponse
from synapse.agents import AgentFactory
from synapse.core import Config, ProductivityPatterns, UserContext, UserTier

router = APIRouter(prefix="/api", tags=["brain-dump"])


def build_user_context(request: BrainDumpRequest, config: Config,
                       resolve_tier: Callable[[str], str]) -> UserContext:
    """
    Build the pipeline's UserContext, filling gaps from preferences.

    The tier always comes from resolve_tier(user_id),
    never from the request body.
    """
    patterns = None
    if request.productivity_patterns is not None:
        p = request.productivity_patterns
        patterns = ProductivityPatterns(
            peak_energy_times=tuple(p.peak_energy_times),
            hyperfocus_triggers=tuple(p.hyperfocus_triggers),
            context_switch_tolerance=p.context_switch_tolerance,
            preferred_frameworks=tuple(p.preferred_frameworks),
        )

    return UserContext(
        energy_state=request.energy_state,
        cognitive_type=request.cognitive_type or config.get(
            "default_cognitive_type", section="preferences", default="unknown"
        ),
        user_id=request.user_id,
        user_tier=resolve_tier(request.user_id),
        productivity_patterns=patterns,
    )


@router.post("/brain-dump", response_model=BrainDumpResponse)
async def process_brain_dump(
    request: BrainDumpRequest,
    factory: AgentFactory = Depends(get_agent_factory),
    config: Config = Depends(get_config),
    resolve_tier: Callable[[str], str] = Depends(get_tier_resolver),
):
    """
    Turn a brain dump into several framework views at once.

    Example body:
        {"input": "I need to fix the login bug. What if we added dark mode?",
         "energyState": "medium", "userId": "u-1"}

    Only frameworks recommended for this input and allowed by the tier appear
    under `frameworks`; `orchestration` is null when none ran.
    """
    user_context = build_user_context(request, config, resolve_tier)
    response = await factory.process_input(request.input, user_context)
    return response.to_dict()


@router.get("/tiers/{tier}", response_model=TierResponse)
async def get_tier_frameworks(tier: str, config: Config = Depends(get_config)):
    """List the frameworks a tier may run."""
    parsed = UserTier.parse(tier)
    return TierResponse(tier=parsed.value, frameworks=config.get_tier_frameworks(parsed))
