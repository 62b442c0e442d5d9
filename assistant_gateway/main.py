"""
Assistant Gateway - Main Application Entry Point

This module provides the FastAPI application serving the kiosk event
system's conversational assistant.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from assistant_gateway.api.deps import set_assistant_gateway
from assistant_gateway.api.middleware.logging import RequestLoggingMiddleware
from assistant_gateway.api.routes.assistant import router as assistant_router
from assistant_gateway.api.routes.health import router as health_router
from assistant_gateway.core.config import get_settings
from assistant_gateway.observability.logging import configure_logging, get_logger
from assistant_gateway.services.assistant import create_assistant_gateway

# Application metadata
APP_NAME = "Assistant Gateway"
APP_VERSION = "1.0.0"
APP_DESCRIPTION = "Conversational assistant for the kiosk event management system"

logger = get_logger(__name__)


# =============================================================================
# Lifespan Context Manager
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan: configure logging and own the gateway's HTTP clients.

    A missing credential is not a startup failure; requests report it.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, service=settings.service_name)
    logger.info(
        "startup",
        service=settings.service_name,
        version=APP_VERSION,
        environment=settings.environment,
    )

    gateway = create_assistant_gateway(settings)
    set_assistant_gateway(gateway)
    app.state.initialized = True
    app.state.environment = settings.environment

    yield

    logger.info("shutdown", service=settings.service_name)
    await gateway.aclose()
    set_assistant_gateway(None)
    app.state.initialized = False


def create_app() -> FastAPI:
    """
    Build the FastAPI application.

    Returns:
        FastAPI: Configured application with routers and middleware.
    """
    settings = get_settings()
    is_production = settings.environment == "production"

    application = FastAPI(
        title=APP_NAME,
        description=APP_DESCRIPTION,
        version=APP_VERSION,
        docs_url=None if is_production else "/docs",
        redoc_url=None if is_production else "/redoc",
        lifespan=lifespan,
    )

    application.add_middleware(RequestLoggingMiddleware)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(health_router)
    application.include_router(assistant_router)

    @application.get("/", tags=["Info"])
    async def root() -> dict[str, Any]:
        """Root endpoint returning basic service information."""
        return {
            "service": APP_NAME,
            "version": APP_VERSION,
            "docs": "disabled" if is_production else "/docs",
        }

    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=get_settings().port)
