"""Single-shot HTTP GET shared by the feed clients."""
from __future__ import annotations

import requests

from app.errors import UpstreamFetchError
from utils.logging_utils import get_tagged_logger, redact_url

logger = get_tagged_logger(__name__, tag="data_sources/http_fetch")

session = requests.Session()


def fetch(
    url: str,
    *,
    label: str,
    user_agent: str,
    timeout: float,
    http: requests.Session | None = None,
) -> requests.Response:
    """GET `url` once and return the response if the status is 2xx.

    `label` prefixes error messages, e.g. "TTC alerts fetch failed: 503 Service Unavailable".
    No retries are attempted; callers decide what to do with a failure.
    """
    http = http or session
    logger.debug("Fetching upstream feed", extra={"feed": label, "url": redact_url(url)})
    try:
        resp = http.get(url, headers={"User-Agent": user_agent}, timeout=timeout)
    except requests.Timeout as exc:
        raise UpstreamFetchError(f"{label} fetch timed out after {timeout:g}s") from exc

    if not 200 <= resp.status_code < 300:
        logger.warning(
            "Upstream feed returned an error status",
            extra={"feed": label, "status": resp.status_code, "reason": resp.reason},
        )
        raise UpstreamFetchError(
            f"{label} fetch failed: {resp.status_code} {resp.reason or ''}".rstrip(),
            status_code=resp.status_code,
        )
    return resp
