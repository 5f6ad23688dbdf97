"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from payday import __version__
from payday.api.routes import health_router, leaves_router, salary_runs_router
from payday.config import configure_logging, get_settings
from payday.database import create_schema, dispose_db, init_db
from payday.errors import (
    ConfigurationError,
    ConfirmationRequired,
    PersistenceError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def create_app(
    session_factory: async_sessionmaker[AsyncSession] | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Without a session factory, the global engine from `DATABASE_URL` is
    initialized at startup and disposed at shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        settings = get_settings()
        configure_logging(settings)
        if session_factory is None:
            engine, app.state.session_factory = init_db()
            if settings.debug:
                await create_schema(engine)
        yield
        if session_factory is None:
            await dispose_db()

    app = FastAPI(
        title="Payday Engine API",
        description="Leave deductions and monthly bank salary disbursement",
        version=__version__,
        lifespan=lifespan,
    )
    if session_factory is not None:
        app.state.session_factory = session_factory

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(ValidationError)
    async def validation_error_handler(
        request: Request, exc: ValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": str(exc), "code": "VALIDATION_ERROR"},
        )

    @app.exception_handler(ConfirmationRequired)
    async def confirmation_required_handler(
        request: Request, exc: ConfirmationRequired
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={
                "detail": str(exc),
                "code": "CONFIRMATION_REQUIRED",
                "employee_count": exc.employee_count,
                "total": str(exc.total),
            },
        )

    @app.exception_handler(PersistenceError)
    async def persistence_error_handler(
        request: Request, exc: PersistenceError
    ) -> JSONResponse:
        logger.error("Store failure on %s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": str(exc), "code": "PERSISTENCE_ERROR"},
        )

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(
        request: Request, exc: ConfigurationError
    ) -> JSONResponse:
        logger.error("Configuration error on %s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": str(exc), "code": "CONFIGURATION_ERROR"},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s", request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            },
        )

    # Include routers
    app.include_router(health_router)
    app.include_router(leaves_router, prefix="/api/v1")
    app.include_router(salary_runs_router, prefix="/api/v1")

    return app


# Default app instance for uvicorn
app = create_app()
