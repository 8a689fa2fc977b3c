"""Configuration settings for the SkyView live feed engine."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import logging
import os

import boto3
from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger("skyview.config")


def _get_bool(env_var: str, default: bool = False) -> bool:
    """Parse an environment variable into a boolean with a default."""

    value = os.getenv(env_var)
    if value is None:
        return default

    return value.lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class OpenSkyCredentials:
    """Basic-auth credentials for the OpenSky REST API."""

    username: str
    password: str


@lru_cache(maxsize=1)
def _ssm_client():
    return boto3.client(
        "ssm",
        region_name=os.getenv("AWS_REGION") or os.getenv("AWS_DEFAULT_REGION") or "us-east-1",
    )


def _read_ssm_parameter(name: str) -> str | None:
    try:
        response = _ssm_client().get_parameter(Name=name, WithDecryption=True)
    except (ClientError, BotoCoreError) as exc:  # pragma: no cover - AWS error passthrough
        logger.warning("Failed to load %s from SSM: %s", name, exc)
        return None
    return response.get("Parameter", {}).get("Value") or None


@lru_cache(maxsize=1)
def get_opensky_credentials() -> OpenSkyCredentials | None:
    """Resolve OpenSky credentials from the environment or AWS SSM.

    Environment variables win. When they are absent and an SSM prefix is
    configured, ``<prefix>/username`` and ``<prefix>/password`` are read from
    Parameter Store. ``None`` means the client runs anonymously.
    """

    username = os.getenv("SKYVIEW_OPENSKY_USERNAME")
    password = os.getenv("SKYVIEW_OPENSKY_PASSWORD")
    if username and password:
        return OpenSkyCredentials(username=username, password=password)

    prefix = os.getenv("SKYVIEW_OPENSKY_SSM_PREFIX")
    if not prefix:
        logger.info("No OpenSky credentials configured; using anonymous access")
        return None

    prefix = prefix.rstrip("/")
    username = _read_ssm_parameter(f"{prefix}/username")
    password = _read_ssm_parameter(f"{prefix}/password")
    if not username or not password:
        logger.warning("OpenSky credentials incomplete in SSM under %s", prefix)
        return None

    return OpenSkyCredentials(username=username, password=password)


@dataclass
class Settings:
    """Application configuration loaded from environment variables."""

    skyview_env: str = os.getenv("SKYVIEW_ENV", "local")
    log_level: str = os.getenv("SKYVIEW_LOG_LEVEL", "INFO")

    # Upstream endpoints
    opensky_base_url: str = os.getenv(
        "SKYVIEW_OPENSKY_BASE_URL", "https://opensky-network.org/api"
    )
    fr24_feed_url: str = os.getenv(
        "SKYVIEW_FR24_FEED_URL",
        "https://data-cloud.flightradar24.com/zones/fcgi/feed.js",
    )
    cors_relay_url: str = os.getenv(
        "SKYVIEW_CORS_RELAY_URL", "https://api.allorigins.win/get"
    )
    adsbdb_base_url: str = os.getenv(
        "SKYVIEW_ADSBDB_BASE_URL", "https://api.adsbdb.com/v0"
    )
    http_timeout: float = float(os.getenv("SKYVIEW_HTTP_TIMEOUT", "10.0"))

    # Polling
    poller_enabled: bool = _get_bool("SKYVIEW_POLLER_ENABLED", default=True)
    refresh_interval_seconds: float = float(
        os.getenv("SKYVIEW_REFRESH_INTERVAL_SECONDS", "30")
    )
    min_fetch_interval_seconds: float = float(
        os.getenv("SKYVIEW_MIN_FETCH_INTERVAL_SECONDS", "15")
    )
    min_zoom: float = float(os.getenv("SKYVIEW_MIN_ZOOM", "5"))

    # Display and hard filters
    display_cap: int = int(os.getenv("SKYVIEW_DISPLAY_CAP", "200"))
    min_altitude_ft: float = float(os.getenv("SKYVIEW_MIN_ALTITUDE_FT", "0"))
    max_altitude_ft: float = float(os.getenv("SKYVIEW_MAX_ALTITUDE_FT", "60000"))
    show_ground: bool = _get_bool("SKYVIEW_SHOW_GROUND", default=False)

    # Airport activity and enrichment windows
    activity_window_hours: float = float(
        os.getenv("SKYVIEW_ACTIVITY_WINDOW_HOURS", "2")
    )
    enrichment_radius_nm: float = float(
        os.getenv("SKYVIEW_ENRICHMENT_RADIUS_NM", "50")
    )
    flight_log_lookback_hours: float = float(
        os.getenv("SKYVIEW_FLIGHT_LOG_LOOKBACK_HOURS", "24")
    )
    flight_log_lookahead_hours: float = float(
        os.getenv("SKYVIEW_FLIGHT_LOG_LOOKAHEAD_HOURS", "2")
    )


settings = Settings()

__all__ = ["OpenSkyCredentials", "Settings", "get_opensky_credentials", "settings"]
