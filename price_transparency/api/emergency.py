"""
FastAPI router module for emergency services.

GET /api/emergency?lat=&lng=[&type=er|urgent|all][&radius=25]

Returns emergency rooms (ordered by current wait) and/or urgent care
facilities near the point. lat and lng are required (400 MISSING_LOCATION).
"""

import logging
from typing import Optional

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from price_transparency.api.responses import error_response, handle_exception, success_response
from price_transparency.core.dependencies import AggregatorDep
from price_transparency.models.enums import DataSourceType, EmergencyServiceType


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/emergency", tags=["emergency"])

EMERGENCY_SOURCES = (
    ("Hospital Real-Time Data", DataSourceType.PARTNER, False),
)


@router.get("")
async def get_emergency_services(
    aggregator: AggregatorDep,
    lat: Optional[float] = Query(default=None, ge=-90.0, le=90.0),
    lng: Optional[float] = Query(default=None, ge=-180.0, le=180.0),
    type: EmergencyServiceType = Query(default=EmergencyServiceType.ALL),
    radius: float = Query(default=25.0, gt=0.0, description="Miles"),
) -> JSONResponse:
    if lat is None or lng is None:
        logger.warning("Emergency request rejected: missing lat/lng")
        return error_response(400, "MISSING_LOCATION", "lat and lng query parameters are required")

    try:
        services = await aggregator.fetch_emergency_services(lat, lng, radius, type)
        logger.info(
            f"Emergency lookup ({type.value}) at {lat},{lng}: "
            f"{len(services.emergencyRooms)} ERs, {len(services.urgentCare)} urgent care"
        )
        return success_response(services.model_dump(mode="json"), EMERGENCY_SOURCES)

    except Exception as e:
        return handle_exception(e, "EMERGENCY_FETCH_ERROR", "Failed to fetch emergency services data")
