"""API routes for the System properties resource."""

import time
from typing import Dict

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
import structlog

from libs.common.metrics import MetricsCollector
from ..properties import PropertyTable

logger = structlog.get_logger("system_service.api")

router = APIRouter(prefix="/properties")

VERSION_FIELD = "system.properties.version"
# Version reporting is not implemented; consumers expecting 1.1 will fail.
PROPERTIES_VERSION = ""


def get_property_table(request: Request) -> PropertyTable:
    """Get property table from application state."""
    return request.app.state.properties


def get_metrics(request: Request) -> MetricsCollector:
    """Get metrics collector from application state."""
    return request.app.state.metrics_collector


@router.get("")
async def get_properties(
    properties: PropertyTable = Depends(get_property_table),
    metrics_collector: MetricsCollector = Depends(get_metrics)
) -> Dict[str, str]:
    """Return every property as a JSON object."""
    start_time = time.time()
    payload = properties.as_dict()
    metrics_collector.record_properties_request(time.time() - start_time)
    logger.debug("Properties listed", count=len(payload))
    return payload


@router.get("/key/{key:path}")
async def get_property_by_key(
    key: str,
    properties: PropertyTable = Depends(get_property_table),
    metrics_collector: MetricsCollector = Depends(get_metrics)
) -> Response:
    """Return ``[{key: value}]`` for a known key, 404 with no body otherwise."""
    value = properties.lookup(key)
    metrics_collector.record_property_lookup(found=value is not None)

    if value is None:
        logger.info("Property not found", key=key)
        return Response(status_code=404, media_type="application/json")

    return JSONResponse(content=[{key: value}])


@router.get("/version")
async def get_version() -> Dict[str, str]:
    """Return the properties version field."""
    return {VERSION_FIELD: PROPERTIES_VERSION}
