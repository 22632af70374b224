"""
API routers for the Synapse backend.

- brain_dump: Brain-dump pipeline and tier lookup
"""

from .brain_dump import router as brain_dump_router

__all__ = [
    'brain_dump_router',
]
