"""
Input validation utilities for coordinates and postal codes
"""
import re


class ValidationError(ValueError):
    """Custom validation error"""
    pass


_POSTAL_CODE_PATTERN = re.compile(r'^[A-Za-z0-9][A-Za-z0-9 \-]{0,11}$')


def validate_latitude(lat: float) -> float:
    """
    Validate latitude coordinate

    Args:
        lat: Latitude value

    Returns:
        Validated latitude

    Raises:
        ValidationError: If latitude is out of range
    """
    if not -90.0 <= lat <= 90.0:
        raise ValidationError(f"Latitude {lat} out of range (must be -90 to 90)")

    return lat


def validate_longitude(lon: float) -> float:
    """
    Validate longitude coordinate

    Args:
        lon: Longitude value

    Returns:
        Validated longitude

    Raises:
        ValidationError: If longitude is out of range
    """
    if not -180.0 <= lon <= 180.0:
        raise ValidationError(f"Longitude {lon} out of range (must be -180 to 180)")

    return lon


def validate_radius(radius_miles: float, max_radius_miles: float = 100.0) -> float:
    """
    Validate search radius (in miles)

    Raises:
        ValidationError: If radius is not positive or exceeds the maximum
    """
    if radius_miles <= 0:
        raise ValidationError("Radius must be positive")

    if radius_miles > max_radius_miles:
        raise ValidationError(f"Radius {radius_miles} miles exceeds maximum {max_radius_miles} miles")

    return radius_miles


def normalize_postal_code(postal_code: str) -> str:
    """
    Trim a postal code and check that it looks like one.

    Letters, digits, spaces and hyphens only, at most 12 characters.

    Raises:
        ValidationError: If the code is empty or malformed
    """
    cleaned = (postal_code or "").strip()
    if not cleaned:
        raise ValidationError("Postal code is empty")

    if not _POSTAL_CODE_PATTERN.match(cleaned):
        raise ValidationError(f"Postal code '{cleaned}' is malformed")

    return cleaned
