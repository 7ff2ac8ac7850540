"""Request handlers that turn upstream feeds into the dashboard's JSON contract.

Each service runs one fetch -> decode/parse -> map pipeline per request and
never raises: failures come back as a 500 response carrying ``{"error": ...}``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import requests

from app import config
from app.data_sources import envcan_client, ttc_client
from app.errors import FeedError, error_message
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="app/feed_service")

CORS_HEADER = "Access-Control-Allow-Origin"


@dataclass
class FeedResponse:
    """Status, JSON body and headers for one handled request."""
    status_code: int
    body: Dict[str, Any]
    headers: Dict[str, str] = field(default_factory=dict)


def cache_control(max_age: int, stale_while_revalidate: int) -> str:
    """Shared-cache hint: fresh for `max_age` seconds, then servable stale while revalidating."""
    return f"s-maxage={max_age}, stale-while-revalidate={stale_while_revalidate}"


def _ok(body: Dict[str, Any], cache_hint: str) -> FeedResponse:
    return FeedResponse(200, body, {"Cache-Control": cache_hint, CORS_HEADER: "*"})


def _failed(exc: Exception, feed: str) -> FeedResponse:
    message = error_message(exc)
    if isinstance(exc, FeedError):
        logger.error(f"{feed} request failed: {message}")
    else:
        logger.error(f"{feed} request failed unexpectedly: {message}", exc_info=True)
    return FeedResponse(500, {"error": message}, {CORS_HEADER: "*"})


@dataclass
class TransitFeedConfig:
    """Upstream settings for the transit alerts feed."""
    url: str
    source_name: str
    user_agent: str
    timeout: float = 10.0
    max_age: int = 60
    stale_while_revalidate: int = 300


@dataclass
class WeatherFeedConfig:
    """Upstream settings for the regional weather alerts feed."""
    url_template: str
    default_region: str
    user_agent: str
    timeout: float = 10.0
    max_age: int = 120
    stale_while_revalidate: int = 600


class TransitAlertsService:
    """Serve the GTFS-realtime alerts feed as ``{source, count, alerts}``."""

    def __init__(self, feed_config: TransitFeedConfig, http: requests.Session | None = None):
        self.config = feed_config
        self.http = http

    def handle(self) -> FeedResponse:
        try:
            alerts = ttc_client.fetch_alerts(
                self.config.url,
                user_agent=self.config.user_agent,
                timeout=self.config.timeout,
                http=self.http,
            )
        except Exception as exc:
            return _failed(exc, ttc_client.FEED_LABEL)

        logger.info(f"Serving {len(alerts)} transit alerts")
        body = {
            "source": self.config.source_name,
            "count": len(alerts),
            "alerts": [alert.to_dict() for alert in alerts],
        }
        return _ok(body, cache_control(self.config.max_age, self.config.stale_while_revalidate))


class WeatherAlertsService:
    """Serve a regional Atom alerts feed as ``{region, entries}``."""

    def __init__(self, feed_config: WeatherFeedConfig, http: requests.Session | None = None):
        self.config = feed_config
        self.http = http

    def resolve_region(self, region: Optional[str]) -> str:
        """Use the requested region code, or the default when it is missing or blank."""
        return region or self.config.default_region

    def handle(self, region: Optional[str] = None) -> FeedResponse:
        try:
            region = self.resolve_region(region)
            url = envcan_client.feed_url(self.config.url_template, region)
            entries = envcan_client.fetch_entries(
                url,
                user_agent=self.config.user_agent,
                timeout=self.config.timeout,
                http=self.http,
            )
        except Exception as exc:
            return _failed(exc, envcan_client.FEED_LABEL)

        logger.info(f"Serving {len(entries)} weather entries for region {region}")
        body = {"region": region, "entries": [entry.to_dict() for entry in entries]}
        return _ok(body, cache_control(self.config.max_age, self.config.stale_while_revalidate))


def build_transit_service(settings: config.Settings | None = None,
                          http: requests.Session | None = None) -> TransitAlertsService:
    """Build the transit alerts service from process settings."""
    settings = settings or config.settings
    return TransitAlertsService(
        TransitFeedConfig(
            url=settings.ttc_alerts_url,
            source_name=settings.ttc_source_name,
            user_agent=settings.ttc_user_agent,
            timeout=settings.fetch_timeout_seconds,
        ),
        http=http,
    )


def build_weather_service(settings: config.Settings | None = None,
                          http: requests.Session | None = None) -> WeatherAlertsService:
    """Build the weather alerts service from process settings."""
    settings = settings or config.settings
    return WeatherAlertsService(
        WeatherFeedConfig(
            url_template=settings.envcan_url_template,
            default_region=settings.envcan_default_region,
            user_agent=settings.envcan_user_agent,
            timeout=settings.fetch_timeout_seconds,
        ),
        http=http,
    )
