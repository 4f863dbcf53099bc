"""
FastAPI router module for provider search.

Implements GET /api/providers (directory search enriched with quality ratings
and place listings) and GET /api/providers/{npi} (single provider lookup).

Query Parameters (GET /api/providers):
- query, procedureCode, zipCode, state: free-text and locality filters
- qualityRating: minimum overall rating (0-5)
- providerTypes, insurance, accreditations: comma-separated lists
- lat, lng, radius: distance filter in miles (radius defaults to 25)
- sortBy (default rating), sortOrder (default desc), page, limit

Response shape: APIResponse envelope whose data is a SearchResult[Provider].
"""

import logging
from typing import Optional

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from price_transparency.api.responses import (
    error_response,
    handle_exception,
    split_csv,
    success_response,
)
from price_transparency.core.dependencies import AggregatorDep
from price_transparency.models.enums import DataSourceType, SortBy, SortOrder
from price_transparency.models.schemas import GeoLocation, SearchFilters


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/providers", tags=["providers"])

PROVIDER_SOURCES = (
    ("NPI Registry", DataSourceType.GOVERNMENT, False),
    ("CMS Hospital Compare", DataSourceType.GOVERNMENT, False),
)

DEFAULT_RADIUS_MILES = 25.0


@router.get("")
async def search_providers(
    aggregator: AggregatorDep,
    query: Optional[str] = Query(default=None, description="Name or NPI"),
    procedureCode: Optional[str] = Query(default=None),
    zipCode: Optional[str] = Query(default=None),
    state: Optional[str] = Query(default=None, description="Two-letter state code"),
    qualityRating: Optional[float] = Query(default=None, description="Minimum overall rating"),
    providerTypes: Optional[str] = Query(default=None, description="Comma-separated provider types"),
    insurance: Optional[str] = Query(default=None, description="Comma-separated insurance plans"),
    accreditations: Optional[str] = Query(default=None, description="Comma-separated accrediting bodies"),
    sortBy: SortBy = Query(default=SortBy.RATING),
    sortOrder: SortOrder = Query(default=SortOrder.DESC),
    page: int = Query(default=1),
    limit: int = Query(default=20),
    lat: Optional[float] = Query(default=None),
    lng: Optional[float] = Query(default=None),
    radius: float = Query(default=DEFAULT_RADIUS_MILES, description="Miles"),
) -> JSONResponse:
    """
    Search healthcare providers.

    A location filter is applied only when both lat and lng are given.
    """
    try:
        location = None
        if lat is not None and lng is not None:
            location = GeoLocation(lat=lat, lng=lng, radius=radius)

        filters = SearchFilters(
            query=query,
            procedureCode=procedureCode,
            zipCode=zipCode,
            state=state,
            qualityRating=qualityRating,
            providerTypes=split_csv(providerTypes),
            insuranceAccepted=split_csv(insurance),
            accreditations=split_csv(accreditations),
            sortBy=sortBy,
            sortOrder=sortOrder,
            page=page,
            limit=limit,
            location=location,
        )

        result = await aggregator.fetch_providers(filters)
        logger.info(f"Provider search returned {len(result.data)} of {result.total} providers")
        return success_response(result.model_dump(mode="json"), PROVIDER_SOURCES)

    except Exception as e:
        return handle_exception(e, "PROVIDER_FETCH_ERROR", "Failed to fetch provider data")


@router.get("/{npi}")
async def get_provider(npi: str, aggregator: AggregatorDep) -> JSONResponse:
    """Look up one provider by NPI."""
    try:
        provider = await aggregator.fetch_provider_by_id(npi)
        if provider is None:
            logger.warning(f"Provider {npi} not found")
            return error_response(404, "PROVIDER_NOT_FOUND", "Provider not found", {"npi": npi})

        return success_response(provider.model_dump(mode="json"), PROVIDER_SOURCES)

    except Exception as e:
        return handle_exception(e, "PROVIDER_FETCH_ERROR", "Failed to fetch provider data")
