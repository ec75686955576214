"""
Points-of-interest search client.

Given a center and radius, asks the places backend for venues matching the
category inside a square window of side 2 x radius. Ordering from the
backend is not trusted; the ranking engine re-sorts everything.
"""

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, List, Optional

import httpx

from coffee_finder.config.settings import METERS_PER_MILE, PlacesSettings, get_settings
from coffee_finder.core.exceptions import SearchError
from coffee_finder.core.validation import ValidationError, validate_radius
from coffee_finder.models.search import Candidate, Coordinate

logger = logging.getLogger(__name__)

METERS_PER_DEGREE_LAT = 111320.0


@dataclass
class Venue:
    """A places backend hit with its placemark data."""
    name: Optional[str]
    coordinate: Optional[Coordinate]
    address: dict[str, str] = field(default_factory=dict)
    raw: dict[str, Any] = field(default_factory=dict)


class PlacesBackend(ABC):
    @abstractmethod
    async def search_nearby(self, query: str, center: Coordinate, span_meters: float) -> List[Venue]:
        """Return venues matching ``query`` inside the window around ``center``."""
        ...


def viewbox_for(center: Coordinate, span_meters: float) -> tuple[float, float, float, float]:
    """
    (west, north, east, south) bounds of a square window centered on ``center``.
    """
    half = span_meters / 2
    dlat = half / METERS_PER_DEGREE_LAT
    cos_lat = max(math.cos(math.radians(center.latitude)), 1e-6)
    dlon = min(half / (METERS_PER_DEGREE_LAT * cos_lat), 180.0)
    west = max(center.longitude - dlon, -180.0)
    east = min(center.longitude + dlon, 180.0)
    north = min(center.latitude + dlat, 90.0)
    south = max(center.latitude - dlat, -90.0)
    return west, north, east, south


class NominatimPlacesBackend(PlacesBackend):
    """Free-text search bounded to a viewbox on a Nominatim instance."""

    def __init__(
        self,
        config: Optional[PlacesSettings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.config = config or get_settings().places
        self.base_url = self.config.base_url.rstrip("/")
        self._client = client

    def _get_headers(self) -> dict:
        return {
            "User-Agent": self.config.user_agent,
            "Accept": "application/json",
            "Accept-Language": "en",
        }

    async def search_nearby(self, query: str, center: Coordinate, span_meters: float) -> List[Venue]:
        west, north, east, south = viewbox_for(center, span_meters)
        params = {
            "format": "jsonv2",
            "q": query,
            "viewbox": f"{west:.6f},{north:.6f},{east:.6f},{south:.6f}",
            "bounded": 1,
            "limit": self.config.max_results,
            "addressdetails": 1,
        }

        url = f"{self.base_url}/search"
        if self._client is not None:
            response = await self._client.get(url, params=params, headers=self._get_headers())
        else:
            async with httpx.AsyncClient(
                headers=self._get_headers(),
                timeout=self.config.timeout_seconds,
            ) as client:
                response = await client.get(url, params=params)

        response.raise_for_status()
        data = response.json()
        if not isinstance(data, list):
            raise SearchError("Unexpected places response", details={"type": type(data).__name__})
        return [self._to_venue(item) for item in data if isinstance(item, dict)]

    @staticmethod
    def _to_venue(item: dict) -> Venue:
        coordinate = None
        try:
            coordinate = Coordinate(float(item["lat"]), float(item["lon"]))
        except (KeyError, TypeError, ValueError):
            pass

        address = item.get("address") or {}
        city = (
            address.get("city")
            or address.get("town")
            or address.get("village")
            or address.get("hamlet")
        )
        components = {
            "house_number": address.get("house_number"),
            "road": address.get("road"),
            "city": city,
            "state": address.get("state"),
            "postcode": address.get("postcode"),
        }
        return Venue(
            name=item.get("name") or None,
            coordinate=coordinate,
            address={k: v for k, v in components.items() if v},
            raw=item,
        )


class PlacesSearchClient:
    """Fetches category candidates around a center."""

    def __init__(self, backend: Optional[PlacesBackend] = None):
        self.backend = backend or NominatimPlacesBackend()

    async def search(self, category: str, center: Coordinate, radius_miles: float) -> List[Candidate]:
        """
        Search for ``category`` venues in the window around ``center``.

        Args:
            category: Search term sent to the backend
            center: Window center
            radius_miles: Half the window side

        Returns:
            Candidates in backend order

        Raises:
            SearchError: On transport or provider failure
        """
        try:
            validate_radius(radius_miles)
        except ValidationError as e:
            raise SearchError(str(e), details={"radius_miles": radius_miles}) from e

        span_meters = radius_miles * METERS_PER_MILE * 2

        try:
            venues = await self.backend.search_nearby(category, center, span_meters)
        except SearchError:
            raise
        except httpx.TimeoutException as e:
            logger.warning(f"Places search timed out for '{category}'")
            raise SearchError("Places search timed out") from e
        except httpx.HTTPStatusError as e:
            logger.warning(f"Places backend returned {e.response.status_code} for '{category}'")
            raise SearchError(
                f"Places backend returned {e.response.status_code}",
                details={"status_code": e.response.status_code},
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Places search failed: {e}")
            raise SearchError(f"Places search failed: {e}") from e
        except Exception as e:
            logger.error(f"Places backend error: {type(e).__name__}: {e}", exc_info=True)
            raise SearchError("Places search failed: unexpected backend error") from e

        logger.debug(
            "PlacesSearchClient.search: query=%s lat=%.6f lon=%.6f span_m=%.1f got %d venues",
            category,
            center.latitude,
            center.longitude,
            span_meters,
            len(venues),
        )
        return [Candidate(name=v.name, coordinate=v.coordinate, address=dict(v.address)) for v in venues]
