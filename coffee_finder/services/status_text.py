"""User-facing status narrative for each pipeline state."""
from typing import Optional

from coffee_finder.models.search import AuthorizationState, FailureReason, SearchStatus, StatusKind

GETTING_LOCATION = "Getting your location…"
WAITING_FOR_LOCATION = "No location yet — trying to fetch your location…"
LOCATION_UPDATED = "Location updated."
NO_ORIGIN = "Enter a ZIP code or allow location access."

NO_ORIGIN_ALERT = "Enter a ZIP code, or allow location access to search near you."
FIX_FAILED_ALERT = "Couldn’t get your location. Enter a ZIP code or enable location permissions."

_AUTHORIZATION_ADVISORIES = {
    AuthorizationState.AUTHORIZED: "Location enabled. Tap 'Use My Location' or search.",
    AuthorizationState.DENIED: "Location disabled. You can still search by ZIP.",
    AuthorizationState.RESTRICTED: "Location disabled. You can still search by ZIP.",
    AuthorizationState.NOT_DETERMINED: "Please allow location to search near you (or use ZIP).",
}


def authorization_advisory(state: AuthorizationState) -> str:
    return _AUTHORIZATION_ADVISORIES.get(state, "Unknown location status.")


def _miles(radius_miles: float) -> str:
    return f"{radius_miles:g}"


def describe(status: SearchStatus, radius_miles: float = 10.0) -> Optional[str]:
    """Status line for ``status``; None when there is nothing to say."""
    if status.kind == StatusKind.IDLE:
        return None
    if status.kind == StatusKind.RESOLVING_ORIGIN:
        if status.postal_code:
            return f"Geocoding ZIP {status.postal_code}…"
        return WAITING_FOR_LOCATION
    if status.kind == StatusKind.SEARCHING:
        return f"Searching coffee places within {_miles(radius_miles)} miles…"
    if status.kind == StatusKind.SUCCESS:
        noun = "place" if status.count == 1 else "places"
        return f"Found {status.count} {noun}."
    if status.kind == StatusKind.EMPTY:
        return f"No coffee places found within {_miles(radius_miles)} miles. Try another ZIP."
    if status.reason == FailureReason.NO_ORIGIN:
        return NO_ORIGIN
    return f"Search failed: {status.message or 'unknown error'}"
