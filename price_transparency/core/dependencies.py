"""
FastAPI dependency injection module for the price transparency backend.

The aggregator is constructed once per application by main.create_app and
stored on ``app.state``; route handlers receive it through AggregatorDep rather
than importing a module-level singleton. Tests either build an app around their
own aggregator or override get_aggregator:

    app.dependency_overrides[get_aggregator] = lambda: test_aggregator

Key Dependencies Provided:
- get_aggregator: The application's HealthcareDataAggregator
- AggregatorDep: Annotated alias for endpoint signatures

Usage Examples:
    @router.get("/prices")
    async def get_prices(aggregator: AggregatorDep, procedureCode: Optional[str] = None):
        result = await aggregator.fetch_procedure_prices(procedureCode, filters)
"""

from typing import Annotated

from fastapi import Depends, Request

from price_transparency.services.aggregator import HealthcareDataAggregator


# =============================================================================
# Aggregator Dependency
# =============================================================================

def get_aggregator(request: Request) -> HealthcareDataAggregator:
    """
    Return the aggregator owned by the running application.

    Raises:
        AttributeError: If the app was not built with create_app (no aggregator
            on app.state).
    """
    return request.app.state.aggregator


# =============================================================================
# Type Alias for Dependency Injection
# =============================================================================

# Usage: async def endpoint(aggregator: AggregatorDep)
AggregatorDep = Annotated[HealthcareDataAggregator, Depends(get_aggregator)]
