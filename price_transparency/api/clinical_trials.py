"""
FastAPI router module for clinical trial search.

GET /api/clinical-trials?condition=...[&status=a,b][&phase=a,b][&lat=&lng=&radius=100]

condition is required (400 MISSING_CONDITION). status and phase are
comma-separated; unknown values are rejected with 400 INVALID_PARAMETER.
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
from price_transparency.models.schemas import GeoLocation, TrialSearchFilters


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/clinical-trials", tags=["clinical-trials"])

TRIAL_SOURCES = (
    ("ClinicalTrials.gov", DataSourceType.GOVERNMENT, True),
)


@router.get("")
async def search_clinical_trials(
    aggregator: AggregatorDep,
    condition: Optional[str] = Query(default=None),
    status: Optional[str] = Query(default=None, description="Comma-separated recruitment statuses"),
    phase: Optional[str] = Query(default=None, description="Comma-separated trial phases"),
    lat: Optional[float] = Query(default=None),
    lng: Optional[float] = Query(default=None),
    radius: float = Query(default=100.0, description="Miles"),
) -> JSONResponse:
    if not condition:
        logger.warning("Clinical trial request rejected: missing condition")
        return error_response(400, "MISSING_CONDITION", "condition query parameter is required")

    try:
        location = None
        if lat is not None and lng is not None:
            location = GeoLocation(lat=lat, lng=lng, radius=radius)

        filters = TrialSearchFilters(
            status=split_csv(status),
            phase=split_csv(phase),
            location=location,
        )

        trials = await aggregator.fetch_clinical_trials(condition, filters)
        logger.info(f"Clinical trial search for '{condition}' returned {len(trials)} trials")
        return success_response([trial.model_dump(mode="json") for trial in trials], TRIAL_SOURCES)

    except Exception as e:
        return handle_exception(e, "TRIALS_FETCH_ERROR", "Failed to fetch clinical trials data")
