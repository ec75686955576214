"""
Custom exceptions for the coffee finder backend.

Every failure of the search pipeline is one of these. The orchestrator
catches them at its boundary and turns them into a status; only the HTTP
layer ever renders them directly.
"""

from typing import Optional, Dict, Any
from enum import Enum


class ErrorCode(str, Enum):
    """Standardized error codes for the application."""

    # Origin resolution errors
    GEOCODE_FAILED = "GEOCODE_FAILED"
    LOCATION_UNAVAILABLE = "LOCATION_UNAVAILABLE"

    # Search errors
    SEARCH_FAILED = "SEARCH_FAILED"
    EMPTY_RESULT = "EMPTY_RESULT"

    # Selection errors
    PLACE_NOT_FOUND = "PLACE_NOT_FOUND"

    # Generic errors
    NOT_FOUND = "NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


class CoffeeFinderException(Exception):
    """Base exception for the coffee finder backend."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code


class GeocodeError(CoffeeFinderException):
    """Raised when a postal code is empty, malformed or has no match."""

    def __init__(self, message: str = "Invalid ZIP code", postal_code: Optional[str] = None):
        super().__init__(
            message=message,
            error_code=ErrorCode.GEOCODE_FAILED,
            details={"postal_code": postal_code} if postal_code is not None else None,
            status_code=422
        )
        self.postal_code = postal_code


class LocationUnavailableError(CoffeeFinderException):
    """Raised when no device fix arrives in time or location access is denied."""

    def __init__(self, message: str = "No device location available", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code=ErrorCode.LOCATION_UNAVAILABLE,
            details=details,
            status_code=409
        )


class SearchError(CoffeeFinderException):
    """Raised on places backend transport or provider failure."""

    def __init__(self, message: str = "Places search failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code=ErrorCode.SEARCH_FAILED,
            details=details,
            status_code=502
        )


class EmptyResultNotice(CoffeeFinderException):
    """
    Not a failure: the search succeeded but nothing survived the radius filter.
    """

    def __init__(self, radius_miles: float):
        super().__init__(
            message=f"No places found within {radius_miles:g} miles",
            error_code=ErrorCode.EMPTY_RESULT,
            details={"radius_miles": radius_miles},
            status_code=200
        )
        self.radius_miles = radius_miles


class PlaceNotFoundError(CoffeeFinderException):
    """Raised when a place id is not part of the current result set."""

    def __init__(self, place_id: str):
        super().__init__(
            message=f"Place '{place_id}' is not in the current results",
            error_code=ErrorCode.PLACE_NOT_FOUND,
            details={"place_id": place_id},
            status_code=404
        )
