"""
Synapse FastAPI Backend

Main entry point for the API server that exposes the brain-dump pipeline.

Architecture:
- FastAPI handles HTTP routing and request/response validation
- Pydantic schemas ensure type safety
- AgentFactory handles all pipeline logic
- The embedding service (optional) provides similarity search and storage

Run with:
    uvicorn backend.main:app --reload --port 8000

Or:
    python -m backend.main
"""

import logging
import sys
from pathlib import Path
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Add project root to path for imports
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from backend.routers import brain_dump_router
from backend.dependencies import get_agent_factory, get_config
from synapse.core.errors import ValidationError

logger = logging.getLogger("backend")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    - Startup: Load config and build the embedding service. A misconfigured
      backend (missing key or library) raises ConfigurationError here.
    - Shutdown: Wait for outstanding background embedding writes
    """
    config = get_config()
    factory = get_agent_factory()
    backend = config.get("embedding_backend", default="disabled")
    print(f"Config loaded from: {config.config_dir}")
    print(f"Embedding backend: {backend}")

    yield

    print("Shutting down...")
    await factory.drain()


# Create FastAPI app
app = FastAPI(
    title="Synapse API",
    description="""
    Brain-dump organisation across productivity frameworks.

    ## Features

    - **Brain dump**: Parse free text into tasks, ideas, concerns and projects
    - **Frameworks**: Agile, Kanban, GTD, PARA and energy-aware custom views
    - **Semantic**: Recommendations from similar past brain dumps
    - **Momentum**: Cross-framework relations, ripple effects and momentum score

    ## Example

        POST /api/brain-dump
        {"input": "I need to fix the login bug. What if we added dark mode?",
         "energyState": "medium", "userId": "u-1"}
    """,
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS for frontend access
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",  # Vite dev server
        "http://localhost:3000",
        "http://127.0.0.1:5173",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(brain_dump_router)


# ============================================================
# ERROR HANDLERS
# ============================================================

@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content=exc.to_dict())


@app.exception_handler(Exception)
async def pipeline_error_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s", request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"detail": f"Failed to process request: {exc}", "code": "pipeline_error"},
    )


@app.get("/")
async def root():
    """API root - returns basic info and available endpoints."""
    return {
        "name": "Synapse API",
        "version": "1.0.0",
        "docs": "/docs",
        "endpoints": {
            "brain_dump": "/api/brain-dump",
            "tiers": "/api/tiers/{tier}",
        }
    }


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    config = get_config()
    return {
        "status": "healthy",
        "embedding_backend": config.get("embedding_backend", default="disabled"),
    }


# Allow running directly with: python -m backend.main
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "backend.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
