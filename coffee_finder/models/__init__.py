"""Domain models for the coffee finder backend."""

from .search import (
    AuthorizationState,
    Candidate,
    Coordinate,
    FailureReason,
    MapRegion,
    OriginSource,
    RankedPlace,
    SearchOrigin,
    SearchRun,
    SearchState,
    SearchStatus,
    StatusKind,
    format_address_line,
)

__all__ = [
    "AuthorizationState",
    "Candidate",
    "Coordinate",
    "FailureReason",
    "MapRegion",
    "OriginSource",
    "RankedPlace",
    "SearchOrigin",
    "SearchRun",
    "SearchState",
    "SearchStatus",
    "StatusKind",
    "format_address_line",
]
