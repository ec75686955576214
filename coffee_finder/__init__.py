"""Coffee Finder: ranked nearby coffee search around a postal code or device fix."""

__version__ = "1.0.0"
