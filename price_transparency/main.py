"""
FastAPI application entry point for the Healthcare Price Transparency API.

This module builds the application: it configures logging and CORS, wires the
HealthcareDataAggregator (and its data sources) onto app.state, registers the
API routers and the request-validation handler, and starts the ASGI server.

Design:
- create_app is a factory so tests can inject their own settings or a
  pre-built aggregator (with fake sources and a controllable cache clock)
- The aggregator is owned by the app and its sources are closed on shutdown
- Every error, including FastAPI's own parameter coercion failures, is
  answered with the APIResponse envelope
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from price_transparency.api import api_router
from price_transparency.api.responses import request_validation_exception_handler
from price_transparency.core.config import Settings, get_settings
from price_transparency.services.aggregator import HealthcareDataAggregator
from price_transparency.sources import build_data_sources


logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def create_app(
    settings: Optional[Settings] = None,
    aggregator: Optional[HealthcareDataAggregator] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Application settings; defaults to get_settings().
        aggregator: Pre-built aggregator; defaults to one over
            build_data_sources(settings).

    Returns:
        The configured FastAPI application.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    if aggregator is None:
        aggregator = HealthcareDataAggregator(build_data_sources(settings), settings=settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """
        On startup: log the data source mode.
        On shutdown: close upstream HTTP clients owned by the data sources.
        """
        logger.info(f"{settings.app_name} starting ({settings.data_source_mode} data sources)")

        yield

        logger.info(f"{settings.app_name} shutting down")
        try:
            await app.state.aggregator.aclose()
            logger.info("Data sources closed")
        except Exception as e:
            logger.error(f"Error closing data sources: {e}")

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description=(
            "Aggregates healthcare pricing, provider, drug, emergency, clinical trial, "
            "telemedicine, insurance and medical tourism data behind one response envelope."
        ),
        lifespan=lifespan,
    )
    app.state.aggregator = aggregator
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.include_router(api_router)

    @app.get("/health")
    async def health_check():
        """Liveness probe; does not touch the data sources."""
        return {"status": "healthy"}

    @app.get("/")
    async def root():
        """Service name, version and where to find the OpenAPI docs."""
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "docs": "/docs",
            "openapi": "/openapi.json",
        }

    return app


app = create_app()


# Development server with auto-reload
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "price_transparency.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
