"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError

from timeloop.api import router
from timeloop.api.limiter import limiter
from timeloop.config import configure_logging, get_settings
from timeloop.database import Database

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    database: Database = app.state.database

    # Startup
    await database.open()
    await database.create_all()
    logger.info("Serving store at %s", database.url)

    yield

    # Shutdown
    await database.close()


async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Answer store failures with a generic message."""
    logger.exception("Store error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Unable to perform action"},
    )


def create_app(database: Database | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    The app owns ``database`` for its lifetime; one is built from settings
    when none is given.
    """
    settings = get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        description="Log time against activities and see where it went",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.database = database or Database(settings.database_url, echo=settings.debug)

    # Rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)

    # Include API routes
    app.include_router(router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


def run_server(host: str | None = None, port: int | None = None):
    """Run the API server."""
    settings = get_settings()
    uvicorn.run(
        "timeloop.main:create_app",
        factory=True,
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run_server()
