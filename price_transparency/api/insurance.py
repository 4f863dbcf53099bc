"""
FastAPI router module for insurance plans.

GET /api/insurance?state=XX[&planType=HMO,PPO][&metalLevel=Silver,Gold][&maxPremium=500]

state is required (400 MISSING_STATE). Plan lists change slowly and are
cached for a day.
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
from price_transparency.models.enums import DataSourceType
from price_transparency.models.schemas import InsurancePlanFilters


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/insurance", tags=["insurance"])

INSURANCE_SOURCES = (
    ("Healthcare.gov Marketplace", DataSourceType.GOVERNMENT, False),
)


@router.get("")
async def get_insurance_plans(
    aggregator: AggregatorDep,
    state: Optional[str] = Query(default=None, description="Two-letter state code"),
    planType: Optional[str] = Query(default=None, description="Comma-separated plan types"),
    metalLevel: Optional[str] = Query(default=None, description="Comma-separated metal levels"),
    maxPremium: Optional[float] = Query(default=None, description="Maximum individual monthly premium"),
) -> JSONResponse:
    if not state:
        logger.warning("Insurance request rejected: missing state")
        return error_response(400, "MISSING_STATE", "state query parameter is required")

    try:
        filters = InsurancePlanFilters(
            planType=split_csv(planType),
            metalLevel=split_csv(metalLevel),
            maxPremium=maxPremium,
        )

        plans = await aggregator.fetch_insurance_plans(state, filters)
        logger.info(f"Insurance lookup for {state.upper()} returned {len(plans)} plans")
        return success_response([plan.model_dump(mode="json") for plan in plans], INSURANCE_SOURCES)

    except Exception as e:
        return handle_exception(e, "INSURANCE_FETCH_ERROR", "Failed to fetch insurance plan data")
