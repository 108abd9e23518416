"""FastAPI application entry point: one REST router per registered model."""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from resource_api.api.router import create_resource_router
from resource_api.dependencies import get_container, get_model_registry, get_settings
from resource_api.health import SERVICE_NAME, SERVICE_VERSION
from resource_api.health import router as health_router
from resource_api.logging_config import get_logger, setup_logging

setup_logging(
    json_logs=os.getenv("JSON_LOGS", "false").lower() == "true",
    log_level=os.getenv("LOG_LEVEL", "INFO"),
)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle for the FastAPI application."""
    logger.info("application_startup", version=SERVICE_VERSION)
    container = get_container()
    container.init_resources()
    logger.info("database_initialized")
    yield
    container.shutdown_resources()
    logger.info("application_shutdown")


def create_app() -> FastAPI:
    settings = get_settings()
    registry = get_model_registry()

    application = FastAPI(
        title="Resource API",
        description=(
            "Generic REST endpoints for registered data models: list, count, "
            "create, get, update, delete and remove-by-filter."
        ),
        version=SERVICE_VERSION,
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
    )

    application.include_router(health_router, tags=["health"])

    for name in registry.names():
        application.include_router(
            create_resource_router(name),
            prefix=f"{settings.api_prefix}/{name}",
            tags=[name],
        )
        logger.debug("resource_router_mounted", resource=name)

    @application.get("/")
    def root():
        """API information and mounted resources."""
        return {
            "service": SERVICE_NAME,
            "version": SERVICE_VERSION,
            "status": "running",
            "docs": "/docs",
            "health": "/health",
            "resources": {name: f"{settings.api_prefix}/{name}" for name in registry.names()},
        }

    return application


app = create_app()
