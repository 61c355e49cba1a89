# ABOUTME: Runtime settings for the weather search screen, read from the environment.
# ABOUTME: Loads .env via python-dotenv and configures console logging.

import logging
import os

from dotenv import load_dotenv
from pydantic import BaseModel

GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/search"
FORECAST_URL = "https://api.open-meteo.com/v1/forecast"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


class Settings(BaseModel):
    """Endpoints and fixed parameters for the geocoding and forecast lookups."""

    geocoding_url: str = GEOCODING_URL
    forecast_url: str = FORECAST_URL
    timezone: str = "Europe/Oslo"
    default_location: str = "Oslo"
    min_query_length: int = 3
    geocoding_count: int = 10
    geocoding_language: str = "en"
    http_timeout: float | None = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables, falling back to the defaults."""
        load_dotenv()
        env = {
            "geocoding_url": os.environ.get("GEOCODING_URL"),
            "forecast_url": os.environ.get("FORECAST_URL"),
            "timezone": os.environ.get("WEATHER_TIMEZONE"),
            "default_location": os.environ.get("DEFAULT_LOCATION"),
            "min_query_length": os.environ.get("MIN_QUERY_LENGTH"),
            "geocoding_count": os.environ.get("GEOCODING_COUNT"),
            "geocoding_language": os.environ.get("GEOCODING_LANGUAGE"),
            "http_timeout": os.environ.get("HTTP_TIMEOUT"),
            "log_level": os.environ.get("LOG_LEVEL"),
        }
        return cls(**{k: v for k, v in env.items() if v})


def configure_logging(level: str = "INFO") -> None:
    """Send log records to the console and keep httpx request logs quiet."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        root.addHandler(handler)
    logging.getLogger("httpx").setLevel(logging.WARNING)
