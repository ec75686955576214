"""
Configuration loader utility for environment-specific settings.
"""

import os
import logging
from pathlib import Path
from typing import Optional
from .settings import (
    Environment,
    GeocoderSettings,
    PlacesSettings,
    SearchSettings,
    SecuritySettings,
    Settings,
)

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Utility class for loading environment-specific configurations"""

    @staticmethod
    def load_environment_config(environment: Optional[str] = None) -> Settings:
        """
        Load configuration for the specified environment.

        Args:
            environment: Target environment (development, staging, production, testing)
                        If None, uses ENVIRONMENT env var or defaults to development

        Returns:
            Settings instance with environment-specific configuration
        """
        if environment is None:
            environment = os.getenv("ENVIRONMENT", "development")

        env = Environment(environment.lower())
        env_file_path = Path(f".env.{env.value}")

        if env_file_path.exists():
            return ConfigLoader.settings_from_file(str(env_file_path), environment=env)

        logger.warning(f"Environment file {env_file_path} not found, using default settings")
        return Settings(environment=env)

    @staticmethod
    def settings_from_file(env_file: str, **overrides) -> Settings:
        """
        Build Settings from ``env_file``, nested groups included.

        Each group is its own BaseSettings with its own prefix, so the file
        has to be handed to every one of them.
        """
        return Settings(
            _env_file=env_file,
            search=SearchSettings(_env_file=env_file),
            geocoder=GeocoderSettings(_env_file=env_file),
            places=PlacesSettings(_env_file=env_file),
            security=SecuritySettings(_env_file=env_file),
            **overrides,
        )

    @staticmethod
    def get_available_environments() -> list[str]:
        """Get list of available environment configurations"""
        env_files = []
        for env_file in Path(".").glob(".env.*"):
            env_name = env_file.name.replace(".env.", "")
            if env_name in {e.value for e in Environment}:
                env_files.append(env_name)
        return sorted(env_files)

    @staticmethod
    def create_sample_env_file(environment: str, output_path: Optional[str] = None) -> str:
        """
        Create a sample .env file for the specified environment.

        Args:
            environment: Target environment
            output_path: Optional custom output path

        Returns:
            Path to the created sample file
        """
        env = Environment(environment.lower())

        if output_path is None:
            output_path = f".env.{env.value}.sample"

        defaults = Settings()

        sample_content = f"""# Sample configuration for {env.value} environment
# Copy this file to .env.{env.value} and modify as needed

# Application Configuration
APP_NAME={defaults.app_name}
ENVIRONMENT={env.value}
DEBUG={'true' if env == Environment.DEVELOPMENT else 'false'}

# Server Configuration
HOST={defaults.host}
PORT={defaults.port}

# Logging Configuration
LOG_LEVEL={defaults.log_level.value}
LOG_FORMAT=json

# Search Configuration
SEARCH_CATEGORY={defaults.search.category}
SEARCH_RADIUS_MILES={defaults.search.radius_miles}
SEARCH_LOCATION_FIX_TIMEOUT_SECONDS={defaults.search.location_fix_timeout_seconds}
SEARCH_PREFER_DEVICE_REFERENCE={'true' if defaults.search.prefer_device_reference else 'false'}

# Geocoder Configuration
GEOCODER_BASE_URL={defaults.geocoder.base_url}
GEOCODER_USER_AGENT={defaults.geocoder.user_agent}
GEOCODER_TIMEOUT_SECONDS={defaults.geocoder.timeout_seconds}

# Places Configuration
PLACES_BASE_URL={defaults.places.base_url}
PLACES_USER_AGENT={defaults.places.user_agent}
PLACES_MAX_RESULTS={defaults.places.max_results}
"""

        with open(output_path, "w") as f:
            f.write(sample_content)

        return output_path


def load_config_for_environment(environment: Optional[str] = None) -> Settings:
    """Convenience function to load configuration for an environment"""
    return ConfigLoader.load_environment_config(environment)
