"""
FastAPI router module for telemedicine providers.

GET /api/telemedicine[?specialty=...][&state=XX]
"""

import logging
from typing import Optional

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from price_transparency.api.responses import handle_exception, success_response
from price_transparency.core.dependencies import AggregatorDep
from price_transparency.models.enums import DataSourceType


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/telemedicine", tags=["telemedicine"])

TELEMEDICINE_SOURCES = (
    ("Telemedicine Provider Directory", DataSourceType.PARTNER, False),
)


@router.get("")
async def get_telemedicine_providers(
    aggregator: AggregatorDep,
    specialty: Optional[str] = Query(default=None),
    state: Optional[str] = Query(default=None, description="State the provider must be licensed in"),
) -> JSONResponse:
    try:
        providers = await aggregator.fetch_telemedicine_providers(specialty, state)
        return success_response(
            [provider.model_dump(mode="json") for provider in providers],
            TELEMEDICINE_SOURCES,
        )

    except Exception as e:
        return handle_exception(e, "TELEMEDICINE_FETCH_ERROR", "Failed to fetch telemedicine provider data")
