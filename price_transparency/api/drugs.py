"""
FastAPI router module for prescription drugs.

GET /api/drugs serves two modes on one endpoint:
- drugId + zipCode: pharmacy price quotes, cheapest effective price first
  (the coupon price when one exists, otherwise the list price)
- query: drug catalog search

Pricing mode takes precedence when both are supplied. Neither mode's
parameters present -> 400 MISSING_QUERY.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from price_transparency.api.responses import error_response, handle_exception, success_response
from price_transparency.core.dependencies import AggregatorDep
from price_transparency.models.enums import DataSourceType


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/drugs", tags=["drugs"])

DRUG_PRICE_SOURCES = (
    ("GoodRx", DataSourceType.COMMERCIAL, True),
    ("RxSaver", DataSourceType.COMMERCIAL, True),
)

DRUG_SEARCH_SOURCES = (
    ("FDA NDC Directory", DataSourceType.GOVERNMENT, False),
)


@router.get("")
async def get_drugs(
    aggregator: AggregatorDep,
    query: Optional[str] = Query(default=None, description="Brand or generic name"),
    drugId: Optional[str] = Query(default=None),
    zipCode: Optional[str] = Query(default=None),
) -> JSONResponse:
    try:
        if drugId and zipCode:
            quotes = await aggregator.fetch_drug_prices(drugId, zipCode)
            logger.info(f"Fetched {len(quotes)} pharmacy quotes for {drugId} near {zipCode}")
            return success_response(
                [quote.model_dump(mode="json") for quote in quotes],
                DRUG_PRICE_SOURCES,
            )

        if query:
            drugs = await aggregator.search_drugs(query)
            logger.info(f"Drug search '{query}' matched {len(drugs)} drugs")
            return success_response(
                [drug.model_dump(mode="json") for drug in drugs],
                DRUG_SEARCH_SOURCES,
            )

        logger.warning("Drug request rejected: neither query nor drugId+zipCode given")
        return error_response(
            400,
            "MISSING_QUERY",
            "Either 'query' parameter for search or 'drugId' and 'zipCode' for prices is required",
        )

    except Exception as e:
        return handle_exception(e, "DRUG_API_ERROR", "Failed to fetch drug data")
