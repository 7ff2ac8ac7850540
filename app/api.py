"""HTTP API for the dashboard's transit and weather alert feeds."""

from typing import Optional
from fastapi import APIRouter
from fastapi.responses import JSONResponse

from .config import settings
from .feed_service import FeedResponse, build_transit_service, build_weather_service
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="app/api")

router = APIRouter()


def _to_json_response(result: FeedResponse) -> JSONResponse:
    """Carry a service result over to FastAPI unchanged."""
    return JSONResponse(status_code=result.status_code, content=result.body, headers=result.headers)


@router.get("/ttc-alerts")
def ttc_alerts():
    """Current TTC service alerts."""
    return _to_json_response(build_transit_service(settings).handle())


@router.get("/envcan-alerts")
def envcan_alerts(region: Optional[str] = None):
    """Environment Canada alerts for `region` (defaults to the configured region)."""
    logger.debug(f"Weather alerts requested for region={region!r}")
    return _to_json_response(build_weather_service(settings).handle(region))
