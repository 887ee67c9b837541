"""
Configuration loader utility for environment-specific settings.
"""

import logging
import os
from pathlib import Path
from typing import Optional
from .settings import Settings, Environment

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
        env_file = Path(f".env.{env.value}")

        if env_file.exists():
            return Settings(_env_file=str(env_file))

        logger.warning(f"Environment file {env_file} not found, using default settings")
        return Settings(environment=env)

    @staticmethod
    def get_available_environments() -> list[str]:
        """Get list of available environment configurations"""
        env_files = []
        for env_file in Path(".").glob(".env.*"):
            if env_file.name.endswith(".sample"):
                continue
            env_files.append(env_file.name.replace(".env.", ""))
        return sorted(env_files)

    @staticmethod
    def validate_environment_config(environment: str) -> bool:
        """
        Validate that an environment configuration exists and is valid.

        Args:
            environment: Environment name to validate

        Returns:
            True if configuration is valid, False otherwise
        """
        try:
            env = Environment(environment.lower())
            if not Path(f".env.{env.value}").exists():
                return False

            settings = ConfigLoader.load_environment_config(environment)

            if settings.is_production() and not settings.directions.access_token:
                logger.error("Production configuration is missing DIRECTIONS_ACCESS_TOKEN")
                return False

            required_settings = [
                settings.app_name,
                settings.environment,
                settings.host,
                settings.port,
                settings.database.url,
            ]
            return all(setting is not None for setting in required_settings)

        except ValueError:
            return False

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
APP_VERSION={defaults.app_version}
ENVIRONMENT={env.value}
DEBUG={'true' if env == Environment.DEVELOPMENT else 'false'}

# Server Configuration
HOST={defaults.host}
PORT={defaults.port}
RELOAD={'true' if env == Environment.DEVELOPMENT else 'false'}
WORKERS={1 if env == Environment.DEVELOPMENT else 4}

# Logging Configuration
LOG_LEVEL={defaults.log_level.value}
LOG_FORMAT=json

# Database Configuration
DATABASE_URL={defaults.database.url}

# Nearby Query Configuration
PROXIMITY_CACHE_TTL_SECONDS={defaults.proximity.cache_ttl_seconds}
PROXIMITY_CACHE_MAX_ENTRIES={defaults.proximity.cache_max_entries}
PROXIMITY_MAX_RADIUS_KM={defaults.proximity.max_radius_km}

# Directions Configuration
DIRECTIONS_ACCESS_TOKEN=your-mapbox-token
DIRECTIONS_LANGUAGE={defaults.directions.language}
DIRECTIONS_TIMEOUT_SECONDS={defaults.directions.timeout_seconds}
DIRECTIONS_ROUTE_TTL_SECONDS={defaults.directions.route_ttl_seconds}

# Navigation Configuration
NAVIGATION_ADVANCE_THRESHOLD_M={defaults.navigation.advance_threshold_m}

# Places Import Configuration
PLACES_API_KEY=your-google-places-key

# Security Configuration
SECURITY_ADMIN_TOKEN=change-me
SECURITY_CORS_ORIGINS=*
"""

        with open(output_path, "w") as f:
            f.write(sample_content)

        return output_path


def load_config_for_environment(environment: Optional[str] = None) -> Settings:
    """Convenience function to load configuration for an environment"""
    return ConfigLoader.load_environment_config(environment)
