"""Main FastAPI application."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .api import create_api_router
from .config import Settings, get_settings
from .container import ServiceContainer, build_container

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    app.state.started_at = datetime.now(timezone.utc)
    container: ServiceContainer = app.state.container
    await container.start()
    logger.info("Sports aggregator started")

    yield

    await container.close()
    logger.info("Sports aggregator stopped")


def create_app(
    settings: Optional[Settings] = None,
    container: Optional[ServiceContainer] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Explicit settings; read from the environment when omitted
        container: Prebuilt services (tests pass fakes here)
    """
    settings = settings or (container.settings if container else get_settings())
    container = container or build_container(settings)

    app = FastAPI(
        title="Sports Aggregator",
        description="Deduplicated sports news and live scores from multiple providers",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.container = container

    origins = settings.get_allowed_origins_list()
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
        )

    app.include_router(create_api_router(), prefix="/api")

    @app.get("/health")
    async def health_check():
        """Liveness with version and uptime."""
        started_at = getattr(app.state, "started_at", None)
        uptime_seconds = (
            (datetime.now(timezone.utc) - started_at).total_seconds() if started_at else None
        )
        return {
            "status": "healthy",
            "version": app.version,
            "started_at": started_at.isoformat() if started_at else None,
            "uptime_seconds": uptime_seconds,
        }

    return app


def run(host: Optional[str] = None, port: Optional[int] = None, reload: bool = False) -> None:
    """Run the web server."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "sports_aggregator.main:create_app",
        factory=True,
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


if __name__ == "__main__":
    from .utils.logging_config import setup_logging

    setup_logging()
    run()
