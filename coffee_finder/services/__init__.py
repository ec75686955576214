# Business logic services

from .geocoder import Geocoder, GeocodingBackend, NominatimGeocodingBackend, Placemark
from .location_provider import (
    AuthorizationChanged,
    FixFailed,
    FixReceived,
    LocationEvent,
    LocationProvider,
    LocationService,
    PushLocationService,
)
from .places_client import NominatimPlacesBackend, PlacesBackend, PlacesSearchClient, Venue
from .ranking import distance_miles, haversine_meters, rank
from .navigation_launcher import MapsUrlNavigationLauncher, NavigationLauncher, directions_url
from .search_orchestrator import SearchOrchestrator


def create_search_orchestrator(
    geocoding_backend: GeocodingBackend | None = None,
    places_backend: PlacesBackend | None = None,
    location_service: LocationService | None = None,
    launcher: NavigationLauncher | None = None,
) -> SearchOrchestrator:
    """
    Factory function to wire a SearchOrchestrator with its collaborators.

    Any backend left as None gets the production default.
    """
    return SearchOrchestrator(
        geocoder=Geocoder(geocoding_backend),
        location_provider=LocationProvider(location_service),
        places_client=PlacesSearchClient(places_backend),
        launcher=launcher,
    )


__all__ = [
    'Geocoder',
    'GeocodingBackend',
    'NominatimGeocodingBackend',
    'Placemark',
    'AuthorizationChanged',
    'FixFailed',
    'FixReceived',
    'LocationEvent',
    'LocationProvider',
    'LocationService',
    'PushLocationService',
    'NominatimPlacesBackend',
    'PlacesBackend',
    'PlacesSearchClient',
    'Venue',
    'distance_miles',
    'haversine_meters',
    'rank',
    'MapsUrlNavigationLauncher',
    'NavigationLauncher',
    'directions_url',
    'SearchOrchestrator',
    'create_search_orchestrator',
]
