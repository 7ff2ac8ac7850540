"""Upstream feed clients for the dashboard endpoints."""

from .envcan_client import WeatherEntry, fetch_entries, map_entries
from .http_fetch import fetch
from .ttc_client import ActivePeriod, InformedEntity, TransitAlert, fetch_alerts, map_alerts

__all__ = [
    "ActivePeriod",
    "InformedEntity",
    "TransitAlert",
    "WeatherEntry",
    "fetch",
    "fetch_alerts",
    "fetch_entries",
    "map_alerts",
    "map_entries",
]
