"""FastAPI application entrypoint."""
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI

from repurposer import __version__
from repurposer.config import get_settings
from repurposer.logging_config import configure_logging, get_logger
from repurposer.middleware.correlation_id import CorrelationIdMiddleware
from repurposer.routers import content_router, health_router, projects_router, user_router

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown: logging, storage directory."""
    configure_logging()
    settings = get_settings()
    Path(settings.storage_dir, settings.storage_bucket).mkdir(parents=True, exist_ok=True)
    logger.info(
        "app_started",
        version=__version__,
        env=settings.app_env,
        ai_configured=bool(settings.openai_api_key),
    )
    yield
    logger.info("app_shutdown")


app = FastAPI(
    title="Content Repurposer",
    version=__version__,
    lifespan=lifespan,
)
app.add_middleware(CorrelationIdMiddleware)

app.include_router(health_router)
app.include_router(projects_router)
app.include_router(content_router)
app.include_router(user_router)


@app.get("/")
def root() -> dict[str, str]:
    """Root endpoint: app name and version."""
    return {"name": "content_repurposer", "version": __version__}
