"""
Dependency injection for FastAPI endpoints.

Provides singleton instances of Config, the embedding service and the
AgentFactory to be used across all API routes.

The factory is a singleton because it tracks background embedding writes,
which the app drains on shutdown.
"""

from functools import lru_cache
from typing import Callable, Optional
import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from synapse.core.config import Config
from synapse.core.embeddings import EmbeddingService, build_embedding_service
from synapse.agents import AgentFactory


@lru_cache()
def get_config() -> Config:
    """
    Get cached Config instance.

    lru_cache ensures we only create one Config instance
    for the lifetime of the application (singleton pattern).
    """
    return Config()


@lru_cache()
def get_embedding_service() -> Optional[EmbeddingService]:
    """
    Get cached embedding service, or None when embeddings are disabled.

    Raises:
        ConfigurationError: If the configured backend lacks credentials or libraries
    """
    return build_embedding_service(get_config())


@lru_cache()
def get_agent_factory() -> AgentFactory:
    """Get the shared AgentFactory."""
    return AgentFactory(get_config(), get_embedding_service())


def get_tier_resolver() -> Callable[[str], str]:
    """
    Get the entitlement lookup that maps a user id to its tier.

    Backed by the `user_tiers` preference; override this dependency to plug
    in a real billing or auth service.
    """
    return get_config().resolve_user_tier
