"""
FastAPI Application Entry Point

This module builds the FastAPI application and configures:
- API routes
- Middleware (logging, CORS)
- Error handlers
- The database and link store shared by all requests

Design Decisions:
- App factory: settings and database are passed in, never read from
  module globals, so tests can build an app around their own database
- Clean separation: routes, middleware, presenters and app config live in
  separate modules
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shortener import __version__
from shortener.api import endpoints, presenters
from shortener.api.errors import add_exception_handlers
from shortener.api.schemas import HealthResponse, ReadinessResponse
from shortener.core.setting import Settings, get_settings
from shortener.db.session import Database
from shortener.middleware.logging import add_logging_middleware
from shortener.services.link_store import LinkStore

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup, release the connection pool on shutdown."""
    settings: Settings = app.state.settings
    database: Database = app.state.database

    if settings.AUTO_CREATE_TABLES:
        try:
            await database.create_tables()
            logger.info("Database tables ready")
        except Exception as e:
            # Keep serving: /health stays up and /health/ready reports the failure
            logger.error(f"Failed to create tables: {e}", exc_info=True)

    yield

    logger.info("Shutting down, disposing database engine")
    await database.dispose()


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Configuration; loaded from the environment when omitted
        database: Database to use; built from settings when omitted
    """
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)
    database = database or Database.from_settings(settings)

    app = FastAPI(
        title="URL Shortener Service",
        description="Short links with optional password protection",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.database = database
    app.state.link_store = LinkStore(database)

    add_logging_middleware(app)
    add_exception_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    # Defined before the router so they match before the /{code} catch-all
    @app.get("/", tags=["Pages"], include_in_schema=False)
    async def index(request: Request):
        """HTML form for creating a short link."""
        return presenters.render_index(request)

    @app.get("/health", tags=["Health"], response_model=HealthResponse)
    async def health_check():
        """Liveness: always ok, whatever the state of the database."""
        return HealthResponse(ok=True)

    @app.get("/health/ready", tags=["Health"], response_model=ReadinessResponse)
    async def readiness_check(request: Request):
        """Readiness: ok only if the database answers."""
        store: LinkStore = request.app.state.link_store
        database_ok = await store.ping()
        body = ReadinessResponse(ok=database_ok, database=database_ok)
        if not database_ok:
            return JSONResponse(body.model_dump(), status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
        return body

    app.include_router(endpoints.router, tags=["URL Shortener"])

    return app


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "shortener.main:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
    )


if __name__ == "__main__":
    run()
