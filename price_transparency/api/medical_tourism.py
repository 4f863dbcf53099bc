"""
FastAPI router module for medical tourism.

GET /api/medical-tourism[?procedure=...] lists accredited international
destinations, each refreshed with travel info and cost of living.

Cost sub-mode: when destinationId, calculateCosts=true, userLocation and a
non-zero stayDays are all present, the endpoint instead returns
{destination, travelCosts} for that destination. Any of them missing falls
back to the destination list. An unknown destinationId -> 404
DESTINATION_NOT_FOUND.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from price_transparency.api.responses import handle_exception, success_response
from price_transparency.core.dependencies import AggregatorDep
from price_transparency.models.enums import DataSourceType


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/medical-tourism", tags=["medical-tourism"])

DESTINATION_SOURCES = (
    ("Joint Commission International", DataSourceType.PARTNER, True),
    ("Medical Tourism Association", DataSourceType.PARTNER, True),
)

TRAVEL_COST_SOURCES = (
    ("Medical Tourism Association", DataSourceType.PARTNER, True),
    ("Skyscanner", DataSourceType.COMMERCIAL, True),
)


@router.get("")
async def get_medical_tourism(
    aggregator: AggregatorDep,
    procedure: Optional[str] = Query(default=None),
    destinationId: Optional[str] = Query(default=None),
    calculateCosts: Optional[str] = Query(default=None, description="'true' to price the trip"),
    userLocation: Optional[str] = Query(default=None, description="Departure city or airport"),
    stayDays: Optional[int] = Query(default=None, ge=0),
) -> JSONResponse:
    try:
        if destinationId and calculateCosts == "true" and userLocation and stayDays:
            result = await aggregator.calculate_destination_travel_cost(
                destinationId, userLocation, stayDays, procedure
            )
            logger.info(
                f"Priced {stayDays}-day trip from {userLocation} to {result.destination.city}: "
                f"{result.travelCosts.total.min:.0f}-{result.travelCosts.total.max:.0f}"
            )
            return success_response(result.model_dump(mode="json"), TRAVEL_COST_SOURCES)

        destinations = await aggregator.fetch_medical_tourism_destinations(procedure)
        return success_response(
            [destination.model_dump(mode="json") for destination in destinations],
            DESTINATION_SOURCES,
        )

    except Exception as e:
        return handle_exception(e, "TOURISM_FETCH_ERROR", "Failed to fetch medical tourism data")
