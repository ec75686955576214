"""Distance and ranking engine."""
import math
import uuid
from typing import Callable, Iterable, List

from coffee_finder.config.settings import METERS_PER_MILE
from coffee_finder.models.search import Candidate, Coordinate, RankedPlace

EARTH_RADIUS_M = 6371000


def haversine_meters(a: Coordinate, b: Coordinate) -> float:
    phi1, phi2 = math.radians(a.latitude), math.radians(b.latitude)
    dphi = math.radians(b.latitude - a.latitude)
    dlam = math.radians(b.longitude - a.longitude)
    h = math.sin(dphi/2)**2 + math.cos(phi1)*math.cos(phi2)*math.sin(dlam/2)**2
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(h), math.sqrt(1-h))


def distance_miles(a: Coordinate, b: Coordinate) -> float:
    return haversine_meters(a, b) / METERS_PER_MILE


def _new_place_id() -> str:
    return uuid.uuid4().hex


def rank(
    candidates: Iterable[Candidate],
    reference: Coordinate,
    max_radius_miles: float,
    default_name: str = "Coffee Place",
    id_factory: Callable[[], str] = _new_place_id,
) -> List[RankedPlace]:
    """
    Turn raw candidates into places ordered by distance from ``reference``.

    Candidates without a coordinate are dropped, as is anything farther than
    ``max_radius_miles`` (a place exactly on the radius is kept). Ties keep
    the backend's order. Ids are only meaningful within one result set.
    """
    measured = []
    for candidate in candidates:
        if candidate.coordinate is None:
            continue
        dist = distance_miles(reference, candidate.coordinate)
        if dist > max_radius_miles:
            continue
        measured.append((dist, candidate))

    measured.sort(key=lambda item: item[0])

    return [
        RankedPlace(
            id=id_factory(),
            name=candidate.display_name(default_name),
            coordinate=candidate.coordinate,
            distance_miles=dist,
            address_line=candidate.address_line,
        )
        for dist, candidate in measured
    ]
