"""Application configuration pulled from environment variables via pydantic."""
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="config")


class Settings(BaseSettings):
    """Environment-driven configuration for the flood-risk service."""
    model_config = SettingsConfigDict(env_prefix="FLOOD_", extra="ignore")

    # elevation sources, tried in the order usgs, open_elevation, google, mapbox
    enable_usgs: bool = True
    enable_open_elevation: bool = True
    enable_google: bool = False  # requires google_maps_api_key
    enable_mapbox: bool = False  # requires mapbox_api_key
    google_maps_api_key: str | None = None
    mapbox_api_key: str | None = None

    elevation_cache_ttl_seconds: float = 3600
    elevation_timeout_seconds: float = 10
    elevation_max_retries: int = 2
    retry_backoff_seconds: float = 0.5

    weather_timeout_seconds: float = 10
    weather_max_retries: int = 2
    forecast_cache_seconds: int = 900

    geocode_timeout_seconds: float = 10
    geocode_cache_seconds: int = 86400
    geocode_min_interval_seconds: float = 1.0
    user_agent: str = "floodrisk-planner/0.1 (flood risk assessment)"

    nws_base_url: str = "https://api.weather.gov"
    nominatim_base_url: str = "https://nominatim.openstreetmap.org"

    water_search_radius_deg: float = 0.145  # ~10 miles
    safer_search_check_water: bool = False

    log_level: str = "INFO"

    @field_validator("nws_base_url", "nominatim_base_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize base URLs to avoid double slashes."""
        return str(v).rstrip("/")

    @field_validator("google_maps_api_key", "mapbox_api_key", mode="after")
    @classmethod
    def blank_key_is_missing(cls, v: str | None) -> str | None:
        """Treat empty or placeholder keys as absent."""
        if v is None:
            return None
        v = v.strip()
        if not v or v.upper().startswith("YOUR_"):
            return None
        return v


settings = Settings()


if __name__ == "__main__":
    logger.logger.setLevel("DEBUG")
    logger.debug(
        "Loaded settings: %s",
        settings.model_dump_json(indent=4, exclude={"google_maps_api_key", "mapbox_api_key"}),
    )
