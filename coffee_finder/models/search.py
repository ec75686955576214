"""
Domain models for the ranked coffee search pipeline.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from coffee_finder.core.validation import validate_latitude, validate_longitude


ADDRESS_LINE_KEYS = ("house_number", "road", "city", "state", "postcode")


@dataclass(frozen=True)
class Coordinate:
    """A point in decimal degrees."""
    latitude: float
    longitude: float

    def __post_init__(self):
        validate_latitude(self.latitude)
        validate_longitude(self.longitude)

    def to_dict(self) -> dict[str, float]:
        return {"latitude": self.latitude, "longitude": self.longitude}


class OriginSource(str, Enum):
    """Where a search origin came from."""
    POSTAL_CODE = "postal_code"
    DEVICE_LOCATION = "device_location"


@dataclass(frozen=True)
class SearchOrigin:
    coordinate: Coordinate
    source: OriginSource
    postal_code: Optional[str] = None


def format_address_line(address: dict[str, Any]) -> Optional[str]:
    """Join the street-level address components into one line, or None."""
    parts = []
    for key in ADDRESS_LINE_KEYS:
        value = address.get(key)
        if value is None:
            continue
        value = str(value).strip()
        if value:
            parts.append(value)
    return ", ".join(parts) if parts else None


@dataclass
class Candidate:
    """Unranked venue as returned by the places backend."""
    name: Optional[str]
    coordinate: Optional[Coordinate]
    address: dict[str, str] = field(default_factory=dict)

    def display_name(self, default: str = "Coffee Place") -> str:
        if self.name and self.name.strip():
            return self.name.strip()
        return default

    @property
    def address_line(self) -> Optional[str]:
        return format_address_line(self.address)


@dataclass(frozen=True)
class RankedPlace:
    """A candidate after distance computation, filtering and ordering."""
    id: str
    name: str
    coordinate: Coordinate
    distance_miles: float
    address_line: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "latitude": self.coordinate.latitude,
            "longitude": self.coordinate.longitude,
            "address_line": self.address_line,
            "distance_miles": self.distance_miles,
        }


class StatusKind(str, Enum):
    IDLE = "idle"
    RESOLVING_ORIGIN = "resolving_origin"
    SEARCHING = "searching"
    SUCCESS = "success"
    EMPTY = "empty"
    FAILED = "failed"


class FailureReason(str, Enum):
    NO_ORIGIN = "no_origin"
    GEOCODE = "geocode"
    SEARCH = "search"


@dataclass(frozen=True)
class SearchStatus:
    """Pipeline status; drives the user-facing text."""
    kind: StatusKind
    count: Optional[int] = None
    reason: Optional[FailureReason] = None
    message: Optional[str] = None
    postal_code: Optional[str] = None

    @classmethod
    def idle(cls) -> "SearchStatus":
        return cls(StatusKind.IDLE)

    @classmethod
    def resolving_origin(cls, postal_code: Optional[str] = None) -> "SearchStatus":
        return cls(StatusKind.RESOLVING_ORIGIN, postal_code=postal_code)

    @classmethod
    def searching(cls) -> "SearchStatus":
        return cls(StatusKind.SEARCHING)

    @classmethod
    def success(cls, count: int) -> "SearchStatus":
        return cls(StatusKind.SUCCESS, count=count)

    @classmethod
    def empty(cls) -> "SearchStatus":
        return cls(StatusKind.EMPTY, count=0)

    @classmethod
    def failed(cls, reason: FailureReason, message: str) -> "SearchStatus":
        return cls(StatusKind.FAILED, reason=reason, message=message)

    @property
    def is_terminal(self) -> bool:
        return self.kind in (StatusKind.SUCCESS, StatusKind.EMPTY, StatusKind.FAILED)


class AuthorizationState(str, Enum):
    NOT_DETERMINED = "not_determined"
    AUTHORIZED = "authorized"
    DENIED = "denied"
    RESTRICTED = "restricted"


@dataclass(frozen=True)
class MapRegion:
    """Recenter signal: a square window around a center."""
    center: Coordinate
    span_meters: float

    def to_dict(self) -> dict[str, Any]:
        return {**self.center.to_dict(), "span_meters": self.span_meters}


@dataclass
class SearchRun:
    """One end-to-end invocation of the pipeline."""
    generation: int
    postal_code: Optional[str] = None
    origin: Optional[SearchOrigin] = None
    candidates: list[Candidate] = field(default_factory=list)
    places: list[RankedPlace] = field(default_factory=list)
    status: SearchStatus = field(default_factory=SearchStatus.idle)
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class SearchState:
    """Read-only snapshot published to the presentation layer."""
    status: SearchStatus
    status_text: Optional[str]
    places: tuple[RankedPlace, ...] = ()
    focused_place: Optional[RankedPlace] = None
    region: Optional[MapRegion] = None
    alert_message: Optional[str] = None
    is_searching: bool = False
    generation: int = 0
