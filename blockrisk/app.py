"""
blockrisk Application
FastAPI application exposing the Monte Carlo risk simulator.
"""

import logging
import sys
from typing import Optional

import structlog
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from .config.settings import ApplicationSettings, get_settings
from .quant.monte_carlo.errors import MonteCarloError
from .routers import risk_simulator_router


def setup_logging(settings: Optional[ApplicationSettings] = None) -> None:
    """Configure standard logging and structlog for the application."""
    settings = settings or get_settings()
    logging.basicConfig(
        format=settings.logging.format,
        level=getattr(logging, settings.logging.level.upper()),
        stream=sys.stdout,
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if settings.logging.json_format else structlog.dev.ConsoleRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


logger = structlog.get_logger("blockrisk.app")


async def monte_carlo_exception_handler(request: Request, exc: MonteCarloError) -> JSONResponse:
    """Handle simulation validation and cancellation failures."""
    logger.warning(
        "Simulation failed",
        path=request.url.path,
        kind=exc.kind,
        detail=str(exc),
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": exc.kind,
            "detail": str(exc),
        },
    )


def create_app(settings: Optional[ApplicationSettings] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        settings: Application settings, cached environment settings if None

    Returns:
        Configured FastAPI app
    """
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
    )
    app.dependency_overrides[get_settings] = lambda: settings
    app.add_exception_handler(MonteCarloError, monte_carlo_exception_handler)
    app.include_router(risk_simulator_router)

    @app.get("/health", tags=["Health"])
    async def health_check():
        return {
            "status": "healthy",
            "app": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment,
        }

    logger.info(
        "blockrisk app created",
        version=settings.app_version,
        environment=settings.environment,
    )
    return app
