"""FastAPI application factory."""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from backend.app.api.activities import router as activities_router
from backend.app.api.currency import router as currency_router
from backend.app.api.exports import router as exports_router
from backend.app.api.health import get_health
from backend.app.api.imports import router as imports_router
from backend.app.api.places import router as places_router
from backend.app.api.trips import router as trips_router
from backend.app.config import get_settings
from backend.app.db import Base, get_engine
from backend.app.db import models as _models  # noqa: F401  registers tables
from backend.app.security.middleware import SecurityHeadersMiddleware

logger = logging.getLogger(__name__)

# Validation error types that mean "a required field was not supplied"
MISSING_ERROR_TYPES = {"missing", "string_too_short"}


def configure_logging(level: str) -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Missing required body fields are a 400; other validation errors stay 422."""
    missing = [
        ".".join(str(part) for part in error["loc"][1:])
        for error in exc.errors()
        if error.get("type") in MISSING_ERROR_TYPES and error["loc"][:1] == ("body",)
    ]
    if missing:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": "Missing required fields", "fields": missing},
        )
    return await request_validation_exception_handler(request, exc)


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception(
        "database error", extra={"path": request.url.path, "method": request.method}
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title=f"{settings.app_name} API",
        description="Trip planning backend: trips, days, activities, budgets, exports and imports",
        version="0.1.0",
    )

    # Security middleware (before CORS)
    app.add_middleware(SecurityHeadersMiddleware)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.ui_origin],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        # Download names for exports
        expose_headers=["Content-Disposition"],
    )

    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)

    # Health check endpoint
    @app.get("/healthz")
    def healthz() -> dict[str, Any]:
        """Health check endpoint."""
        return get_health().model_dump()

    # Include routers
    app.include_router(trips_router)
    app.include_router(imports_router)
    app.include_router(exports_router)
    app.include_router(activities_router)
    app.include_router(currency_router)
    app.include_router(places_router)

    # Startup event: create tables for local SQLite databases
    @app.on_event("startup")
    def startup_event() -> None:
        """Run startup tasks."""
        logger.info("Application starting up", extra={"app_name": settings.app_name})
        if settings.database_url.startswith("sqlite"):
            Base.metadata.create_all(bind=get_engine())

    return app


# Create app instance for uvicorn
app = create_app()
