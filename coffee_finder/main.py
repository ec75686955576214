"""
FastAPI application setup with dependency injection.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
from contextlib import asynccontextmanager
from typing import Optional

from coffee_finder.config import get_settings
from coffee_finder.core.dependencies import ServiceContainer
from coffee_finder.core.error_handlers import setup_error_handlers
from coffee_finder.core.logging import configure_logging
from coffee_finder.middleware import RequestContextMiddleware

settings = get_settings()

configure_logging(settings.log_level.value, settings.log_file, settings.log_format)

logger = logging.getLogger(__name__)


def create_app(container: Optional[ServiceContainer] = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        container: Service container to use; a production one is built if omitted

    Returns:
        FastAPI: Configured application instance
    """
    service_container = container or ServiceContainer()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting {settings.app_name} v{settings.app_version}")
        try:
            await service_container.initialize_services()
            app.state.service_container = service_container
            logger.info("Application startup complete")
            yield
        finally:
            logger.info("Shutting down application")
            await service_container.cleanup_services()
            logger.info("Application shutdown complete")

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        docs_url=None if settings.is_production() else "/docs",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        **settings.get_cors_config()
    )
    app.add_middleware(RequestContextMiddleware)

    setup_error_handlers(app)

    from coffee_finder.api import health_router, location_router, search_router
    app.include_router(health_router)
    app.include_router(search_router)
    app.include_router(location_router)

    @app.get("/")
    async def root():
        return {
            "message": f"{settings.app_name} is running",
            "version": settings.app_version,
            "status": "running",
        }

    return app


# Create application instance
app = create_app()
