"""
FastAPI router module for procedure price comparison.

Implements GET /api/prices: merged cash/negotiated prices for one procedure
code across every price source, each record carrying the national average,
regional average and nearest-rank price range of the whole merged set.

procedureCode is required (400 MISSING_PROCEDURE_CODE otherwise).
"""

import logging
from typing import Optional

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from price_transparency.api.responses import error_response, handle_exception, success_response
from price_transparency.core.dependencies import AggregatorDep
from price_transparency.models.enums import DataSourceType, SortBy, SortOrder
from price_transparency.models.schemas import GeoLocation, PriceBounds, SearchFilters


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/prices", tags=["prices"])

PRICE_SOURCES = (
    ("CMS Price Transparency", DataSourceType.GOVERNMENT, False),
    ("FAIR Health", DataSourceType.COMMERCIAL, True),
)

MAX_PRICE = float(2**53 - 1)
DEFAULT_RADIUS_MILES = 50.0


@router.get("")
async def get_prices(
    aggregator: AggregatorDep,
    procedureCode: Optional[str] = Query(default=None, description="CPT/HCPCS code"),
    zipCode: Optional[str] = Query(default=None),
    state: Optional[str] = Query(default=None, description="Two-letter state code for the regional average"),
    sortBy: SortBy = Query(default=SortBy.PRICE),
    sortOrder: SortOrder = Query(default=SortOrder.ASC),
    page: int = Query(default=1),
    limit: int = Query(default=20),
    minPrice: float = Query(default=0.0),
    maxPrice: float = Query(default=MAX_PRICE),
    lat: Optional[float] = Query(default=None),
    lng: Optional[float] = Query(default=None),
    radius: float = Query(default=DEFAULT_RADIUS_MILES, description="Miles"),
) -> JSONResponse:
    """Compare prices for a procedure."""
    if not procedureCode:
        logger.warning("Price request rejected: missing procedureCode")
        return error_response(400, "MISSING_PROCEDURE_CODE", "procedureCode query parameter is required")

    try:
        location = None
        if lat is not None and lng is not None:
            location = GeoLocation(lat=lat, lng=lng, radius=radius)

        filters = SearchFilters(
            procedureCode=procedureCode,
            zipCode=zipCode,
            state=state,
            priceRange=PriceBounds(min=minPrice, max=maxPrice),
            sortBy=sortBy,
            sortOrder=sortOrder,
            page=page,
            limit=limit,
            location=location,
        )

        result = await aggregator.fetch_procedure_prices(procedureCode, filters)
        logger.info(f"Price search for {procedureCode} returned {result.total} records")
        return success_response(result.model_dump(mode="json"), PRICE_SOURCES)

    except Exception as e:
        return handle_exception(e, "PRICE_FETCH_ERROR", "Failed to fetch pricing data")
