"""
Dependency injection setup for FastAPI.
Provides dependency providers for the search services with lifecycle management.
"""

from fastapi import Request
from typing import Optional
import logging
import asyncio

from coffee_finder.services import (
    GeocodingBackend,
    LocationService,
    NavigationLauncher,
    PlacesBackend,
    PushLocationService,
    SearchOrchestrator,
    create_search_orchestrator,
)


logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Container for the application's single orchestrator and its location feed.

    Backends default to the production implementations; tests pass fakes.
    """

    def __init__(
        self,
        geocoding_backend: Optional[GeocodingBackend] = None,
        places_backend: Optional[PlacesBackend] = None,
        location_service: Optional[LocationService] = None,
        launcher: Optional[NavigationLauncher] = None,
    ):
        self._geocoding_backend = geocoding_backend
        self._places_backend = places_backend
        self._location_service = location_service
        self._launcher = launcher
        self._orchestrator: Optional[SearchOrchestrator] = None
        self._initialized = False
        self._initialization_lock = asyncio.Lock()

    async def initialize_services(self) -> None:
        async with self._initialization_lock:
            if self._initialized:
                return

            logger.info("Initializing service container")
            if self._location_service is None:
                self._location_service = PushLocationService()

            self._orchestrator = create_search_orchestrator(
                geocoding_backend=self._geocoding_backend,
                places_backend=self._places_backend,
                location_service=self._location_service,
                launcher=self._launcher,
            )
            self._orchestrator.location_provider.request_permission()
            self._initialized = True
            logger.info("Service container initialized")

    async def cleanup_services(self) -> None:
        async with self._initialization_lock:
            if self._orchestrator is not None:
                self._orchestrator.close()
            self._orchestrator = None
            self._initialized = False
            logger.info("Service container cleaned up")

    @property
    def orchestrator(self) -> SearchOrchestrator:
        if self._orchestrator is None:
            raise RuntimeError("Service container is not initialized")
        return self._orchestrator

    @property
    def location_service(self) -> LocationService:
        if self._location_service is None:
            raise RuntimeError("Service container is not initialized")
        return self._location_service


def get_service_container(request: Request) -> ServiceContainer:
    return request.app.state.service_container


def get_orchestrator(request: Request) -> SearchOrchestrator:
    return get_service_container(request).orchestrator
