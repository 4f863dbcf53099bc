"""
Filter, sort and paginate helpers for search operations.

The aggregator runs these in a fixed order after merging: filter, then a stable
sort by the requested key and direction, then slice one page. total in the
assembled SearchResult is the filtered count before slicing.

Provider Filters:
- qualityRating: keep providers whose overall rating is at least the value
- accreditations: keep providers holding any listed accrediting organization
- providerTypes: keep providers whose type is listed
- insuranceAccepted: keep providers accepting any listed plan (case-insensitive)
- location: keep providers within radius miles; providers without coordinates drop out

Price Filters:
- priceRange: keep prices whose cash price lies within [min, max]

Insurance Plan Filters:
- planType, metalLevel: keep plans in the listed values
- maxPremium: keep plans whose individual premium is at most the value

Sort Keys:
- providers: rating (overall quality), distance (requires location)
- prices: price (cash price), rating (confidence score)
Without an explicit sortOrder, rating sorts descending and price or distance ascending.
Keys that do not apply to a record type leave the merged order untouched.
"""

import math
from typing import List, Optional, Sequence, TypeVar

from price_transparency.models.enums import SortBy, SortOrder, UpdateFrequency
from price_transparency.models.schemas import (
    Coordinates,
    DataFreshness,
    GeoLocation,
    InsurancePlan,
    InsurancePlanFilters,
    ProcedurePrice,
    Provider,
    SearchFilters,
    SearchResult,
)


T = TypeVar("T")

EARTH_RADIUS_MILES = 3958.8


def _descending(filters: SearchFilters) -> bool:
    if filters.sortOrder is None:
        return filters.sortBy == SortBy.RATING
    return filters.sortOrder == SortOrder.DESC


def haversine_miles(origin: GeoLocation, point: Coordinates) -> float:
    """Great-circle distance in miles between a search origin and a point."""
    lat1, lng1 = math.radians(origin.lat), math.radians(origin.lng)
    lat2, lng2 = math.radians(point.lat), math.radians(point.lng)
    a = (
        math.sin((lat2 - lat1) / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin((lng2 - lng1) / 2) ** 2
    )
    return 2 * EARTH_RADIUS_MILES * math.asin(math.sqrt(a))


# =============================================================================
# Providers
# =============================================================================


def filter_providers(providers: Sequence[Provider], filters: SearchFilters) -> List[Provider]:
    result = list(providers)

    if filters.qualityRating is not None:
        result = [p for p in result if p.qualityRatings.overall >= filters.qualityRating]

    if filters.accreditations:
        wanted = set(filters.accreditations)
        result = [
            p for p in result
            if any(acc.organization.value in wanted for acc in p.accreditations)
        ]

    if filters.providerTypes:
        types = set(filters.providerTypes)
        result = [p for p in result if p.type in types]

    if filters.insuranceAccepted:
        plans = {plan.lower() for plan in filters.insuranceAccepted}
        result = [
            p for p in result
            if any(accepted.lower() in plans for accepted in p.acceptedInsurance)
        ]

    if filters.location is not None:
        origin = filters.location
        result = [
            p for p in result
            if p.coordinates is not None
            and haversine_miles(origin, p.coordinates) <= origin.radius
        ]

    return result


def sort_providers(providers: Sequence[Provider], filters: SearchFilters) -> List[Provider]:
    reverse = _descending(filters)

    if filters.sortBy == SortBy.RATING:
        return sorted(providers, key=lambda p: p.qualityRatings.overall, reverse=reverse)

    if filters.sortBy == SortBy.DISTANCE and filters.location is not None:
        origin = filters.location

        def distance(provider: Provider) -> float:
            if provider.coordinates is None:
                return math.inf
            return haversine_miles(origin, provider.coordinates)

        return sorted(providers, key=distance, reverse=reverse)

    return list(providers)


# =============================================================================
# Prices
# =============================================================================


def filter_prices(prices: Sequence[ProcedurePrice], filters: SearchFilters) -> List[ProcedurePrice]:
    if filters.priceRange is None:
        return list(prices)
    low, high = filters.priceRange.min, filters.priceRange.max
    return [p for p in prices if low <= p.pricing.cashPrice <= high]


def sort_prices(prices: Sequence[ProcedurePrice], filters: SearchFilters) -> List[ProcedurePrice]:
    reverse = _descending(filters)

    if filters.sortBy == SortBy.PRICE:
        return sorted(prices, key=lambda p: p.pricing.cashPrice, reverse=reverse)
    if filters.sortBy == SortBy.RATING:
        return sorted(prices, key=lambda p: p.confidenceScore, reverse=reverse)

    return list(prices)


# =============================================================================
# Insurance Plans
# =============================================================================


def filter_insurance_plans(
    plans: Sequence[InsurancePlan],
    filters: Optional[InsurancePlanFilters],
) -> List[InsurancePlan]:
    """Keep plans matching the plan types, metal levels and individual premium cap."""
    if filters is None:
        return list(plans)

    result = list(plans)
    if filters.planType:
        result = [p for p in result if p.planType in filters.planType]
    if filters.metalLevel:
        result = [p for p in result if p.metalLevel in filters.metalLevel]
    if filters.maxPremium is not None:
        result = [p for p in result if p.premium.individual <= filters.maxPremium]
    return result


# =============================================================================
# Pagination
# =============================================================================


def paginate(items: Sequence[T], page: int, limit: int) -> List[T]:
    """Return items[(page-1)*limit : page*limit]."""
    offset = (page - 1) * limit
    return list(items[offset:offset + limit])


def build_search_result(
    items: Sequence[T],
    filters: SearchFilters,
    update_frequency: UpdateFrequency,
    failed_sources: Optional[List[str]] = None,
) -> SearchResult[T]:
    """
    Slice one page of already filtered and sorted items and wrap it.

    Args:
        items: Every record that passed the filters, in final order.
        filters: The request filters, echoed back in the result.
        update_frequency: How often the underlying upstream refreshes.
        failed_sources: Upstreams skipped under partial-result fan-out.
    """
    total = len(items)
    return SearchResult(
        data=paginate(items, filters.page, filters.limit),
        total=total,
        page=filters.page,
        limit=filters.limit,
        hasMore=total > filters.page * filters.limit,
        filters=filters,
        dataFreshness=DataFreshness(updateFrequency=update_frequency, isStale=False),
        failedSources=list(failed_sources or []),
    )
