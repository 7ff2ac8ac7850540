"""Fetch and normalize Environment Canada weather alert (Atom) feeds."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

from app.data_sources.http_fetch import fetch
from app.data_sources.xml_tree import as_list, node_text, parse_xml
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="data_sources/envcan_client")

FEED_LABEL = "EnvCan"


@dataclass
class WeatherEntry:
    """Normalized Atom entry from a regional alerts feed."""
    id: Optional[str]
    title: str
    updated_iso: Optional[str]
    summary: str
    link: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        """Return the JSON shape served to the dashboard."""
        return {
            "id": self.id,
            "title": self.title,
            "updatedISO": self.updated_iso,
            "summary": self.summary,
            "link": self.link,
        }


def feed_url(template: str, region: str) -> str:
    """Interpolate a region code into the feed URL template."""
    return template.format(region=region)


def _first_non_empty(*values: Optional[str]) -> Optional[str]:
    for value in values:
        if value:
            return value
    return None


def _link_href(link: Any) -> Optional[str]:
    """href of an entry's link, preferring rel="alternate" when several are present."""
    candidates = [node for node in as_list(link) if isinstance(node, dict) and node.get("href")]
    if not candidates:
        return None
    for node in candidates:
        if node.get("rel", "alternate") == "alternate":
            return node["href"]
    return candidates[0]["href"]


def _trimmed(value: Any) -> str:
    text = node_text(value)
    return text.strip() if text else ""


def map_entry(raw: Any) -> WeatherEntry:
    """Map one raw Atom entry node."""
    if not isinstance(raw, dict):
        # <entry/> or an entry holding only text
        raw = {}
    link = _link_href(raw.get("link"))
    updated = node_text(raw.get("updated"))
    published = node_text(raw.get("published"))
    return WeatherEntry(
        id=_first_non_empty(node_text(raw.get("id")), link, updated),
        title=_trimmed(raw.get("title")),
        updated_iso=_first_non_empty(updated, published),
        summary=_trimmed(raw.get("summary")),
        link=link,
    )


def map_entries(tree: Dict[str, Any]) -> List[WeatherEntry]:
    """Map the entries of a parsed feed, whether it holds zero, one or many."""
    feed = tree.get("feed")
    raw_entries = feed.get("entry") if isinstance(feed, dict) else None
    return [map_entry(raw) for raw in as_list(raw_entries)]


def fetch_entries(
    url: str,
    *,
    user_agent: str,
    timeout: float,
    http: requests.Session | None = None,
) -> List[WeatherEntry]:
    """Fetch, parse and normalize the Atom feed at `url`."""
    resp = fetch(url, label=FEED_LABEL, user_agent=user_agent, timeout=timeout, http=http)
    tree = parse_xml(resp.content)
    entries = map_entries(tree)
    logger.debug(f"Parsed {len(entries)} entries from {url}")
    return entries
