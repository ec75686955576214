"""
Core plumbing for the coffee finder backend: exceptions, logging, validation,
metrics and FastAPI wiring.
"""

from .exceptions import (
    CoffeeFinderException,
    EmptyResultNotice,
    ErrorCode,
    GeocodeError,
    LocationUnavailableError,
    PlaceNotFoundError,
    SearchError,
)
