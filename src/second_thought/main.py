"""Main module for the Second Thought purchase reflection service."""
import logging
import os
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from second_thought.container import Container, init_container
from second_thought.db import init_db
from second_thought.routers import (analyze_router, cooldowns_router,
                                    extract_router, profiles_router,
                                    track_router)

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI):
    """Create tables at startup; drain evaluations and close the inference and tracing clients on shutdown."""
    container: Container = fastapi_app.state.container
    init_db(container.engine())

    yield

    await container.analysis_service().drain()
    for resource in (container.inference_provider(), container.trace_client()):
        try:
            await resource.close()
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning("Error closing %s: %s", type(resource).__name__, exc)


def create_app(container: Container | None = None) -> FastAPI:
    """Build the application around a wired container (tests pass their own)."""
    fastapi_app = FastAPI(
        title="Second Thought",
        description="Purchase reflection: pricing checks, opportunity cost and cool-down periods",
        version="0.1.0",
        lifespan=lifespan,
    )
    fastapi_app.state.container = container if container is not None else init_container()

    fastapi_app.include_router(analyze_router)
    fastapi_app.include_router(extract_router)
    fastapi_app.include_router(cooldowns_router)
    fastapi_app.include_router(profiles_router)
    fastapi_app.include_router(track_router)

    @fastapi_app.get("/")
    def health():
        """Return health check status."""
        return {"status": "ok"}

    return fastapi_app


app = create_app()


def _configure_logging() -> None:
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format=LOG_FORMAT,
    )


def run():
    """Run the server (uvicorn). Use for `poetry run start`."""
    _configure_logging()
    uvicorn.run("second_thought.main:app", host="127.0.0.1", port=8001)


def run_dev():
    """Run the development server with auto-reload."""
    _configure_logging()
    uvicorn.run("second_thought.main:app", host="0.0.0.0", port=8000, reload=True)
