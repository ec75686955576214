"""
Postal code geocoding.

The Geocoder owns input cleanup and the "first placemark wins" rule; the
backend only performs the lookup. The production backend talks to
OpenStreetMap Nominatim over httpx.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, List, Optional

import httpx

from coffee_finder.config.settings import GeocoderSettings, get_settings
from coffee_finder.core.exceptions import GeocodeError
from coffee_finder.core.validation import ValidationError, normalize_postal_code
from coffee_finder.models.search import Coordinate

logger = logging.getLogger(__name__)


@dataclass
class Placemark:
    """A geocoding hit. ``coordinate`` may be missing on sparse records."""
    coordinate: Optional[Coordinate]
    label: Optional[str] = None
    raw: dict[str, Any] = field(default_factory=dict)


class GeocodingBackend(ABC):
    @abstractmethod
    async def lookup(self, address_text: str) -> List[Placemark]:
        """Return matching placemarks, best first. May be empty."""
        ...


class NominatimGeocodingBackend(GeocodingBackend):
    """Structured postal code search against a Nominatim instance."""

    def __init__(
        self,
        config: Optional[GeocoderSettings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.config = config or get_settings().geocoder
        self.base_url = self.config.base_url.rstrip("/")
        self._client = client

    def _get_headers(self) -> dict:
        return {
            "User-Agent": self.config.user_agent,
            "Accept": "application/json",
            "Accept-Language": "en",
        }

    async def lookup(self, address_text: str) -> List[Placemark]:
        params = {
            "format": "jsonv2",
            "postalcode": address_text,
            "limit": 1,
            "addressdetails": 1,
        }
        if self.config.country_codes:
            params["countrycodes"] = self.config.country_codes

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
        # an HTML throttle page still comes back as 200; .json() raises ValueError
        data = response.json()
        if not isinstance(data, list):
            raise ValueError(f"Unexpected geocoder response: {type(data).__name__}")
        return [self._to_placemark(item) for item in data]

    @staticmethod
    def _to_placemark(item: Any) -> Placemark:
        if not isinstance(item, dict):
            return Placemark(coordinate=None)
        coordinate = None
        try:
            coordinate = Coordinate(float(item["lat"]), float(item["lon"]))
        except (KeyError, TypeError, ValueError):
            logger.debug("Placemark without usable coordinate: %s", item.get("place_id"))
        return Placemark(coordinate=coordinate, label=item.get("display_name"), raw=item)


class Geocoder:
    """Converts a postal code into a coordinate."""

    def __init__(self, backend: Optional[GeocodingBackend] = None):
        self.backend = backend or NominatimGeocodingBackend()

    async def resolve(self, postal_code: str) -> Coordinate:
        """
        Resolve a postal code to the coordinate of its first placemark.

        Args:
            postal_code: Raw user input; surrounding whitespace is ignored

        Returns:
            Coordinate of the best match

        Raises:
            GeocodeError: If the input is empty or malformed, the lookup
                fails, or no placemark carries a coordinate
        """
        try:
            cleaned = normalize_postal_code(postal_code)
        except ValidationError as e:
            raise GeocodeError(str(e), postal_code=postal_code) from e

        try:
            placemarks = await self.backend.lookup(cleaned)
        except GeocodeError:
            raise
        except httpx.HTTPError as e:
            logger.warning(f"Geocoding lookup failed for '{cleaned}': {e}")
            raise GeocodeError(f"Geocoding lookup failed: {e}", postal_code=cleaned) from e
        except Exception as e:
            logger.error(f"Geocoding backend error for '{cleaned}': {type(e).__name__}: {e}", exc_info=True)
            raise GeocodeError("Geocoding lookup failed: unexpected response", postal_code=cleaned) from e

        if not placemarks or placemarks[0].coordinate is None:
            logger.info(f"No placemark for postal code '{cleaned}'")
            raise GeocodeError("Invalid ZIP code", postal_code=cleaned)

        coordinate = placemarks[0].coordinate
        logger.debug(
            f"Geocoded '{cleaned}' to {coordinate.latitude:.5f},{coordinate.longitude:.5f}"
        )
        return coordinate
