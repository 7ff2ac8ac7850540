"""Application configuration pulled from environment variables via pydantic."""
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="config")


class Settings(BaseSettings):
    """Environment-driven configuration for the dashboard feed endpoints."""
    model_config = SettingsConfigDict(env_prefix="DASH_", extra="ignore")

    ttc_alerts_url: str = "https://bustime.ttc.ca/gtfsrt/alerts"
    ttc_source_name: str = "bustime.ttc.ca"
    ttc_user_agent: str = "GeoffDash/1.0 (ttc-alerts)"
    envcan_url_template: str = "https://weather.gc.ca/rss/battleboard/{region}_e.xml"
    envcan_default_region: str = "on61"  # City of Toronto
    envcan_user_agent: str = "GeoffDash/1.0 (envcan-alerts)"
    fetch_timeout_seconds: float = 10.0
    log_level: str = "INFO"

    @field_validator("envcan_url_template", mode="after")
    @classmethod
    def require_region_placeholder(cls, v: str) -> str:
        """The weather feed URL is built per request from the region code."""
        if "{region}" not in v:
            raise ValueError("envcan_url_template must contain a '{region}' placeholder")
        return v

    @field_validator("fetch_timeout_seconds", mode="after")
    @classmethod
    def positive_timeout(cls, v: float) -> float:
        """Reject timeouts that would disable or break the outbound fetch."""
        if v <= 0:
            raise ValueError("fetch_timeout_seconds must be positive")
        return v


settings = Settings()


if __name__ == "__main__":
    logger.setLevel("DEBUG")
    logger.debug(f"Loaded settings: {settings.model_dump_json(indent=4)}")
