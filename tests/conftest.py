"""
Shared fixtures for the search pipeline tests.
"""
import pytest

from coffee_finder.config.settings import SearchSettings
from coffee_finder.models.search import AuthorizationState
from coffee_finder.services import (
    Geocoder,
    LocationProvider,
    MapsUrlNavigationLauncher,
    PlacesSearchClient,
    PushLocationService,
    SearchOrchestrator,
)
from tests.helpers import NYC, SF, FakeGeocodingBackend, FakePlacesBackend, venue_at


@pytest.fixture
def search_settings():
    return SearchSettings(location_fix_timeout_seconds=0.05)


@pytest.fixture
def geocoding_backend():
    return FakeGeocodingBackend({"10001": NYC, "94103": SF})


@pytest.fixture
def places_backend():
    return FakePlacesBackend([
        venue_at(NYC, 2.0, "Blue Bottle", road="Bowery", city="New York"),
        venue_at(NYC, 0.5, "Joe Coffee"),
        venue_at(NYC, 12.0, "Far Roaster"),
    ])


@pytest.fixture
def location_service():
    return PushLocationService(AuthorizationState.NOT_DETERMINED)


@pytest.fixture
def launcher():
    return MapsUrlNavigationLauncher()


@pytest.fixture
def orchestrator(geocoding_backend, places_backend, location_service, launcher, search_settings):
    orch = SearchOrchestrator(
        geocoder=Geocoder(geocoding_backend),
        location_provider=LocationProvider(location_service),
        places_client=PlacesSearchClient(places_backend),
        launcher=launcher,
        config=search_settings,
    )
    yield orch
    orch.close()
