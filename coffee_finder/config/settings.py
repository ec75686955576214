"""
Settings for the coffee finder backend, read from the environment and .env
files with pydantic-settings. Each backend group has its own env prefix.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
from typing import Optional, Dict, Any, List
from enum import Enum


METERS_PER_MILE = 1609.344

# Groups read the same .env as Settings; keys for other groups are ignored.
_GROUP_ENV_FILE = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


class Environment(str, Enum):
    """Supported deployment environments"""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(str, Enum):
    """Supported log levels"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class SearchSettings(BaseSettings):
    """Ranked search pipeline configuration"""

    category: str = Field(default="coffee", description="Fixed search term sent to the places backend")
    radius_miles: float = Field(default=10.0, gt=0.0, le=100.0)
    location_fix_timeout_seconds: float = Field(default=0.5, ge=0.0, le=30.0)
    prefer_device_reference: bool = Field(
        default=True,
        description="Measure distances from the device fix when one exists, even for postal-code searches"
    )
    default_place_name: str = Field(default="Coffee Place")

    @property
    def radius_meters(self) -> float:
        """Search radius converted to meters"""
        return self.radius_miles * METERS_PER_MILE

    @property
    def span_meters(self) -> float:
        """Side length of the square search window"""
        return self.radius_meters * 2

    model_config = {"env_prefix": "SEARCH_", **_GROUP_ENV_FILE}


class GeocoderSettings(BaseSettings):
    """Postal code geocoding backend configuration"""

    base_url: str = Field(default="https://nominatim.openstreetmap.org")
    user_agent: str = Field(default="coffee-finder/1.0 (contact: ops@example.com)")
    timeout_seconds: float = Field(default=5.0, ge=0.5, le=60.0)
    country_codes: Optional[str] = Field(
        default=None,
        description="Comma separated ISO country codes used to narrow postal code lookups"
    )

    model_config = {"env_prefix": "GEOCODER_", **_GROUP_ENV_FILE}


class PlacesSettings(BaseSettings):
    """Places search backend configuration"""

    base_url: str = Field(default="https://nominatim.openstreetmap.org")
    user_agent: str = Field(default="coffee-finder/1.0 (contact: ops@example.com)")
    timeout_seconds: float = Field(default=10.0, ge=0.5, le=60.0)
    max_results: int = Field(default=50, ge=1, le=50)

    model_config = {"env_prefix": "PLACES_", **_GROUP_ENV_FILE}


class SecuritySettings(BaseSettings):
    """CORS configuration"""

    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    cors_allow_credentials: bool = Field(default=True)
    cors_allow_methods: List[str] = Field(
        default_factory=lambda: ["GET", "POST"]
    )
    cors_allow_headers: List[str] = Field(default_factory=lambda: ["*"])

    @field_validator('cors_origins', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from environment variable or list"""
        if isinstance(v, str):
            origin_list = v.split(",")
            return [origin.strip() for origin in origin_list if origin.strip()]
        return v or ["*"]

    model_config = {"env_prefix": "SECURITY_", **_GROUP_ENV_FILE}


class Settings(BaseSettings):
    """Application settings; the search and backend groups nest under it"""

    # Application
    app_name: str = Field(default="Coffee Finder")
    app_version: str = Field(default="1.0.0")
    environment: Environment = Field(default=Environment.DEVELOPMENT)
    debug: bool = Field(default=False)

    # Server (run.py always starts one worker: search state lives in process)
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000, ge=1, le=65535)
    reload: bool = Field(default=False)

    # Logging
    log_level: LogLevel = Field(default=LogLevel.INFO)
    log_format: str = Field(default="json", pattern="^(json|plain)$")
    log_file: Optional[str] = Field(default=None)

    search: SearchSettings = Field(default_factory=SearchSettings)
    geocoder: GeocoderSettings = Field(default_factory=GeocoderSettings)
    places: PlacesSettings = Field(default_factory=PlacesSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)

    @field_validator('environment', mode='before')
    @classmethod
    def validate_environment(cls, v):
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION

    def get_cors_config(self) -> Dict[str, Any]:
        """Keyword arguments for CORSMiddleware"""
        return {
            "allow_origins": self.security.cors_origins,
            "allow_credentials": self.security.cors_allow_credentials,
            "allow_methods": self.security.cors_allow_methods,
            "allow_headers": self.security.cors_allow_headers,
        }

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get application settings instance"""
    return settings


def reload_settings() -> Settings:
    """Reload settings from environment and files"""
    global settings
    settings = Settings()
    return settings
