"""Fetch and normalize the TTC GTFS-realtime service alerts feed."""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests
from google.protobuf.message import DecodeError
from google.transit import gtfs_realtime_pb2

from app.data_sources.http_fetch import fetch
from app.errors import FeedDecodeError
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="data_sources/ttc_client")

FEED_LABEL = "TTC alerts"


@dataclass
class ActivePeriod:
    """Interval during which an alert applies; either bound may be open."""
    start: Optional[str]
    end: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return {"start": self.start, "end": self.end}


@dataclass
class InformedEntity:
    """Route, stop or trip an alert concerns."""
    route_id: Optional[str]
    stop_id: Optional[str]
    trip_id: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return {"routeId": self.route_id, "stopId": self.stop_id, "tripId": self.trip_id}


@dataclass
class TransitAlert:
    """Normalized service alert. Optional fields serialize as explicit nulls."""
    id: str
    header: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    cause: Optional[int] = None
    effect: Optional[int] = None
    severity: Optional[int] = None
    active_periods: List[ActivePeriod] = field(default_factory=list)
    informed: List[InformedEntity] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Return the JSON shape served to the dashboard."""
        return {
            "id": self.id,
            "header": self.header,
            "description": self.description,
            "url": self.url,
            "cause": self.cause,
            "effect": self.effect,
            "severity": self.severity,
            "activePeriods": [p.to_dict() for p in self.active_periods],
            "informed": [ie.to_dict() for ie in self.informed],
        }


def epoch_to_iso(seconds: int | None) -> Optional[str]:
    """Render epoch seconds as a UTC instant with millisecond precision, e.g. 2024-01-01T12:00:00.000Z.

    Zero and None mean "not provided" and map to None. Values outside the
    representable datetime range are logged and also map to None, leaving
    that bound open instead of failing the whole feed.
    """
    if not seconds:
        return None
    try:
        instant = dt.datetime.fromtimestamp(int(seconds), tz=dt.timezone.utc)
    except (OverflowError, OSError, ValueError):
        logger.warning("Dropping out-of-range alert timestamp", extra={"epoch_seconds": seconds})
        return None
    return instant.strftime("%Y-%m-%dT%H:%M:%S.") + f"{instant.microsecond // 1000:03d}Z"


def first_translation(msg: Any, field_name: str) -> Optional[str]:
    """Text of the first translation of a TranslatedString field, or None."""
    if not msg.HasField(field_name):
        return None
    translations = getattr(msg, field_name).translation
    if not translations:
        return None
    text = translations[0].text
    return str(text) if text else None


def _optional(msg: Any, field_name: str) -> Any:
    return getattr(msg, field_name) if msg.HasField(field_name) else None


def _map_period(period: Any) -> ActivePeriod:
    return ActivePeriod(
        start=epoch_to_iso(_optional(period, "start")),
        end=epoch_to_iso(_optional(period, "end")),
    )


def _map_informed(selector: Any) -> InformedEntity:
    trip_id = None
    if selector.HasField("trip") and selector.trip.HasField("trip_id"):
        trip_id = selector.trip.trip_id
    return InformedEntity(
        route_id=_optional(selector, "route_id"),
        stop_id=_optional(selector, "stop_id"),
        trip_id=trip_id,
    )


def map_alert(entity: Any) -> TransitAlert:
    """Map one FeedEntity that carries an alert."""
    alert = entity.alert
    return TransitAlert(
        id=entity.id,
        header=first_translation(alert, "header_text"),
        description=first_translation(alert, "description_text"),
        url=first_translation(alert, "url"),
        cause=_optional(alert, "cause"),
        effect=_optional(alert, "effect"),
        severity=_optional(alert, "severity_level"),
        active_periods=[_map_period(p) for p in alert.active_period],
        informed=[_map_informed(ie) for ie in alert.informed_entity],
    )


def decode_feed(payload: bytes) -> gtfs_realtime_pb2.FeedMessage:
    """Decode a serialized GTFS-realtime FeedMessage."""
    feed = gtfs_realtime_pb2.FeedMessage()
    try:
        feed.ParseFromString(payload)
    except DecodeError as exc:
        logger.warning("Failed to decode GTFS-realtime payload", extra={"bytes": len(payload)})
        raise FeedDecodeError(f"Failed to decode GTFS-realtime feed: {exc}") from exc
    return feed


def map_alerts(feed: gtfs_realtime_pb2.FeedMessage) -> List[TransitAlert]:
    """Return one TransitAlert per entity carrying an alert; other entities are skipped."""
    return [map_alert(entity) for entity in feed.entity if entity.HasField("alert")]


def fetch_alerts(
    url: str,
    *,
    user_agent: str,
    timeout: float,
    http: requests.Session | None = None,
) -> List[TransitAlert]:
    """Fetch, decode and normalize the alerts feed at `url`."""
    resp = fetch(url, label=FEED_LABEL, user_agent=user_agent, timeout=timeout, http=http)
    feed = decode_feed(resp.content)
    alerts = map_alerts(feed)
    logger.debug(f"Decoded {len(feed.entity)} entities, {len(alerts)} with alerts")
    return alerts
