"""FastAPI application factory."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .. import __version__
from ..core.config.settings import get_config
from ..core.service import ReviewerService
from ..core.storage.database import init_db
from .errors import register_exception_handlers
from .routes import pull_requests, stats, teams, users

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the store and build the service for the app's lifetime."""
    config = get_config()
    db = init_db(
        config.get_database_url(),
        pool_size=config.pool_size,
        max_overflow=config.max_overflow,
        pool_timeout=config.pool_timeout,
        echo=config.echo_sql,
    )
    await db.create_tables()

    app.state.db = db
    app.state.config = config
    app.state.service = ReviewerService.from_config(db, config)
    logger.info(f"prreviewer API ready on {config.api_host}:{config.api_port} ({db.dialect_name})")

    try:
        yield
    finally:
        await db.close()
        logger.info("prreviewer API shut down")


def create_app() -> FastAPI:
    """Build the application with routes and error handlers attached.

    The service lives on app.state and is created in lifespan; tests may
    set app.state.service directly instead.
    """
    app = FastAPI(
        title="prreviewer API",
        description="Reviewer assignment service for pull requests",
        version=__version__,
        lifespan=lifespan,
    )
    register_exception_handlers(app)

    for module, tag in (
        (teams, "teams"),
        (users, "users"),
        (pull_requests, "pull requests"),
        (stats, "stats"),
    ):
        app.include_router(module.router, tags=[tag])

    @app.get("/health")
    async def health():
        return {"status": "healthy", "service": "prreviewer"}

    return app


app = create_app()
