"""FastAPI application factory and entry point."""

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from viewerwatch import __version__
from viewerwatch.config import get_settings
from viewerwatch.db.engine import dispose_engine, get_session_factory, init_db
from viewerwatch.routers import channels, charts, export, groups, health, producers, samples, stats
from viewerwatch.services.producers import build_producers
from viewerwatch.services.scheduler import poll_forever

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application startup and shutdown."""
    # Startup
    settings = get_settings()
    logging.basicConfig(
        level=logging.DEBUG if settings.environment == "development" else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting viewerwatch v%s in %s mode", __version__, settings.environment)

    settings.validate_production()

    # Create tables (for SQLite dev mode; production uses Alembic migrations)
    if settings.environment == "development":
        await init_db()
        logger.info("Database tables created/verified")

    app.state.producers = build_producers(settings)
    if not app.state.producers:
        logger.warning("No platform credentials configured, only pushed samples will be recorded")

    poll_task = None
    if settings.polling_enabled and app.state.producers:
        poll_task = asyncio.create_task(
            poll_forever(
                app.state.producers,
                get_session_factory(),
                settings.poll_interval_seconds,
            )
        )

    yield

    # Shutdown
    if poll_task is not None:
        poll_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await poll_task
    for producer in app.state.producers.values():
        await producer.close()
    await dispose_engine()
    logger.info("viewerwatch shut down")


SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    # Stats and charts are live data
    "Cache-Control": "no-store",
}

ROUTERS = (
    health.router,
    groups.router,
    channels.router,
    samples.router,
    stats.router,
    charts.router,
    export.router,
    producers.router,
)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    dev = settings.environment == "development"

    app = FastAPI(
        title="viewerwatch",
        description="Livestream viewer-count monitoring",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if dev else None,
        redoc_url="/redoc" if dev else None,
        openapi_url="/openapi.json" if dev else None,
    )

    # Dashboards poll from other origins without cookies
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.cors_origins.split(",")],
        allow_credentials=False,
        allow_methods=["GET", "POST", "PATCH", "DELETE"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers.update(SECURITY_HEADERS)
        return response

    for router in ROUTERS:
        app.include_router(router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "viewerwatch.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=(settings.environment == "development"),
    )
