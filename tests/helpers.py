"""
In-memory backends and geometry helpers for the search pipeline tests.
"""
import asyncio
import math
from typing import Dict, List, Optional

from coffee_finder.config.settings import METERS_PER_MILE
from coffee_finder.models.search import Candidate, Coordinate
from coffee_finder.services import (
    GeocodingBackend,
    PlacesBackend,
    Placemark,
    Venue,
)
from coffee_finder.services.ranking import EARTH_RADIUS_M, distance_miles

NYC = Coordinate(40.7128, -74.0060)
SF = Coordinate(37.7749, -122.4194)


def point_at_miles(origin: Coordinate, miles: float) -> Coordinate:
    """
    Point due north of ``origin`` whose computed distance is ``miles``,
    never rounding past it.
    """
    dlat = math.degrees(miles * METERS_PER_MILE / EARTH_RADIUS_M)
    lat = origin.latitude + dlat
    point = Coordinate(lat, origin.longitude)
    while distance_miles(origin, point) > miles:
        lat = math.nextafter(lat, origin.latitude)
        point = Coordinate(lat, origin.longitude)
    return point


def candidate_at(origin: Coordinate, miles: float, name: Optional[str] = None, **address) -> Candidate:
    return Candidate(name=name, coordinate=point_at_miles(origin, miles), address=address)


def venue_at(origin: Coordinate, miles: float, name: Optional[str] = None, **address) -> Venue:
    return Venue(name=name, coordinate=point_at_miles(origin, miles), address=address)


class FakeGeocodingBackend(GeocodingBackend):
    def __init__(self, known: Optional[Dict[str, Coordinate]] = None, error: Optional[Exception] = None):
        self.known = known or {}
        self.error = error
        self.calls: List[str] = []
        self.gates: List[Optional[asyncio.Event]] = []

    async def lookup(self, address_text: str) -> List[Placemark]:
        self.calls.append(address_text)
        if self.gates:
            gate = self.gates.pop(0)
            if gate is not None:
                await gate.wait()
        if self.error is not None:
            raise self.error
        coordinate = self.known.get(address_text)
        if coordinate is None:
            return []
        return [Placemark(coordinate=coordinate, label=address_text)]


class FakePlacesBackend(PlacesBackend):
    """
    Serves venues per query center. ``gates`` holds one optional event per
    call; a call with a gate blocks until the event is set.
    """

    def __init__(self, venues: Optional[List[Venue]] = None, error: Optional[Exception] = None):
        self.venues = venues or []
        self.by_center: Dict[Coordinate, List[Venue]] = {}
        self.error = error
        self.calls: List[tuple] = []
        self.gates: List[Optional[asyncio.Event]] = []
        self.called = asyncio.Event()

    async def search_nearby(self, query: str, center: Coordinate, span_meters: float) -> List[Venue]:
        self.calls.append((query, center, span_meters))
        self.called.set()
        if self.gates:
            gate = self.gates.pop(0)
            if gate is not None:
                await gate.wait()
        if self.error is not None:
            raise self.error
        return list(self.by_center.get(center, self.venues))


