"""
Centralized configuration management with validation and type conversion.

All settings come from environment variables (a local `.env` file is loaded
first when present). Provider credentials are optional: a missing key simply
disables the matching enrichment.
"""

import os
import logging
from typing import Optional, List
from dataclasses import dataclass, field
from enum import Enum

from dotenv import load_dotenv

load_dotenv()

DEFAULT_WANTED_SECTIONS = ["Get in", "See", "Do", "Eat", "Respect", "Stay safe"]


class Environment(Enum):
    """Application environment types."""
    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


@dataclass
class ApiKeys:
    """Credentials for the optional upstream providers."""
    opentripmap: Optional[str] = None
    openweathermap: Optional[str] = None
    unsplash: Optional[str] = None


@dataclass
class TimeoutConfig:
    """Per-provider request timeouts in seconds."""
    places: float = 10.0
    detail: float = 8.0
    guide: float = 10.0
    encyclopedia: float = 8.0
    geocode: float = 8.0
    forecast: float = 10.0
    photos: float = 10.0

    def get(self, operation: str) -> float:
        """Get timeout for a specific operation.

        Args:
            operation: Operation name

        Returns:
            Timeout value in seconds
        """
        return getattr(self, operation, self.places)


@dataclass
class GuideConfig:
    """Guide section retrieval and sanitization settings."""
    wanted_sections: List[str] = field(default_factory=lambda: list(DEFAULT_WANTED_SECTIONS))
    cache_failures: bool = True
    unavailable_text: str = "Section unavailable."
    max_images: int = 6
    max_list_items: int = 10
    home: str = "https://en.wikivoyage.org"


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: Optional[str] = None
    max_bytes: int = 10485760  # 10MB
    backup_count: int = 5


class Config:
    """Centralized configuration with validation and type conversion."""

    def __init__(self):
        """Initialize configuration from environment variables."""
        self.environment = self._get_environment()
        self.debug = self._get_bool("DEBUG", False)
        self.user_agent = self._get_str(
            "USER_AGENT", "TravelExplorer/1.0 (https://github.com/travel-explorer)"
        )
        self.cors_origin = self._get_str("CORS_ORIGIN", "*")
        self.port = self._get_int("PORT", 5010)

        self.api_keys = ApiKeys(
            opentripmap=self._get_optional("OPENTRIPMAP_API_KEY") or self._get_optional("OPENTRIPMAP_KEY"),
            openweathermap=self._get_optional("OWM_KEY") or self._get_optional("OPENWEATHER_API_KEY"),
            unsplash=self._get_optional("UNSPLASH_KEY") or self._get_optional("UNSPLASH_ACCESS_KEY"),
        )

        self.timeout_config = TimeoutConfig(
            places=self._get_float("TIMEOUT_PLACES", 10.0),
            detail=self._get_float("TIMEOUT_DETAIL", 8.0),
            guide=self._get_float("TIMEOUT_GUIDE", 10.0),
            encyclopedia=self._get_float("TIMEOUT_ENCYCLOPEDIA", 8.0),
            geocode=self._get_float("TIMEOUT_GEOCODE", 8.0),
            forecast=self._get_float("TIMEOUT_FORECAST", 10.0),
            photos=self._get_float("TIMEOUT_PHOTOS", 10.0),
        )

        self.guide_config = GuideConfig(
            wanted_sections=self._get_list("GUIDE_SECTIONS", list(DEFAULT_WANTED_SECTIONS)),
            cache_failures=self._get_bool("GUIDE_CACHE_FAILURES", True),
            unavailable_text=self._get_str("GUIDE_UNAVAILABLE_TEXT", "Section unavailable."),
            max_images=self._get_int("GUIDE_MAX_IMAGES", 6),
            max_list_items=self._get_int("GUIDE_MAX_LIST_ITEMS", 10),
            home=self._get_str("GUIDE_HOME", "https://en.wikivoyage.org").rstrip("/"),
        )

        self.logging_config = LoggingConfig(
            level=self._get_str("LOG_LEVEL", "INFO"),
            format=self._get_str("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
            file=self._get_optional("LOG_FILE"),
            max_bytes=self._get_int("LOG_MAX_BYTES", 10485760),
            backup_count=self._get_int("LOG_BACKUP_COUNT", 5),
        )

        self._validate()

    def _get_environment(self) -> Environment:
        """Get application environment."""
        env_str = self._get_str("ENVIRONMENT", "development").lower()
        try:
            return Environment(env_str)
        except ValueError:
            raise ValueError(f"Invalid environment: {env_str}")

    def _get_optional(self, key: str, default: Optional[str] = None) -> Optional[str]:
        value = os.getenv(key, default)
        # blank values in .env files count as unset
        if value is not None and not value.strip():
            return default
        return value

    def _get_str(self, key: str, default: str) -> str:
        return os.getenv(key, default)

    def _get_int(self, key: str, default: int) -> int:
        """Get integer environment variable with default.

        Raises:
            ValueError: If value cannot be converted to int
        """
        value = os.getenv(key)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            raise ValueError(f"Invalid integer for {key}: {value}")

    def _get_float(self, key: str, default: float) -> float:
        """Get float environment variable with default.

        Raises:
            ValueError: If value cannot be converted to float
        """
        value = os.getenv(key)
        if value is None:
            return default
        try:
            return float(value)
        except ValueError:
            raise ValueError(f"Invalid float for {key}: {value}")

    def _get_bool(self, key: str, default: bool) -> bool:
        value = os.getenv(key)
        if value is None:
            return default
        return value.lower() in ('1', 'true', 'yes', 'on')

    def _get_list(self, key: str, default: list) -> list:
        value = os.getenv(key)
        if value is None:
            return default
        return [item.strip() for item in value.split(',') if item.strip()]

    def _validate(self):
        """Validate configuration values."""
        for attr_name in ['places', 'detail', 'guide', 'encyclopedia', 'geocode', 'forecast', 'photos']:
            timeout = getattr(self.timeout_config, attr_name)
            if timeout <= 0:
                raise ValueError(f"Invalid timeout for {attr_name}: {timeout}")

        if self.guide_config.max_images < 0 or self.guide_config.max_list_items < 0:
            raise ValueError("Guide limits must not be negative")

        if not self.guide_config.home.startswith(("http://", "https://")):
            raise ValueError(f"Invalid guide home: {self.guide_config.home}")

        # Optional API key warnings (don't crash)
        log = logging.getLogger(__name__)
        if not self.api_keys.opentripmap:
            log.warning("OPENTRIPMAP_API_KEY not set - nearby attractions will be empty")
        if not self.api_keys.openweathermap:
            log.warning("OWM_KEY not set - weather and climate will be unavailable")
        if not self.api_keys.unsplash:
            log.warning("UNSPLASH_KEY not set - photos will be empty")

    def get_timeout(self, operation: str) -> float:
        return self.timeout_config.get(operation)

    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION

    def is_testing(self) -> bool:
        return self.environment == Environment.TESTING


_config: Optional[Config] = None


def get_config() -> Config:
    """Get the process configuration, building it on first use.

    Returns:
        Configuration instance
    """
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config() -> None:
    """Drop the cached configuration so the next `get_config` re-reads the env."""
    global _config
    _config = None


def setup_logging():
    """Set up logging based on configuration."""
    from logging.handlers import RotatingFileHandler

    config = get_config()

    logging.basicConfig(
        level=getattr(logging, config.logging_config.level.upper(), logging.INFO),
        format=config.logging_config.format,
    )

    if config.logging_config.file:
        file_handler = RotatingFileHandler(
            config.logging_config.file,
            maxBytes=config.logging_config.max_bytes,
            backupCount=config.logging_config.backup_count,
        )
        file_handler.setFormatter(logging.Formatter(config.logging_config.format))
        logging.getLogger().addHandler(file_handler)

    logging.getLogger('aiohttp').setLevel(logging.WARNING)
    logging.getLogger('asyncio').setLevel(logging.WARNING)

    if config.debug:
        logging.getLogger().setLevel(logging.DEBUG)
    elif config.is_production():
        logging.getLogger().setLevel(logging.INFO)
