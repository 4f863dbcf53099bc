"""
Test suite for search filtering, sorting and pagination.
"""

import pytest

from price_transparency.models.enums import (
    MetalLevel,
    PlanType,
    ProviderType,
    SortBy,
    SortOrder,
    UpdateFrequency,
)
from price_transparency.models.schemas import (
    Coordinates,
    GeoLocation,
    InsurancePlanFilters,
    PriceBounds,
    SearchFilters,
)
from price_transparency.services.filtering import (
    build_search_result,
    filter_insurance_plans,
    filter_prices,
    filter_providers,
    haversine_miles,
    paginate,
    sort_prices,
    sort_providers,
)
from price_transparency.sources.fixtures import mock_insurance_plans, mock_providers
from price_transparency.tests.conftest import make_price, make_provider


DOWNTOWN_LA = GeoLocation(lat=34.05, lng=-118.24, radius=5)


class TestHaversine:

    def test_zero_distance(self) -> None:
        assert haversine_miles(DOWNTOWN_LA, Coordinates(lat=34.05, lng=-118.24)) == pytest.approx(0)

    def test_one_degree_latitude(self) -> None:
        origin = GeoLocation(lat=0, lng=0, radius=1)
        assert haversine_miles(origin, Coordinates(lat=1, lng=0)) == pytest.approx(69.09, abs=0.1)


class TestFilterProviders:

    def test_quality_rating_minimum(self) -> None:
        filters = SearchFilters(qualityRating=4.5)
        result = filter_providers(mock_providers(), filters)
        assert [p.name for p in result] == [
            "Cedars-Sinai Medical Center", "UCLA Medical Center", "Providence Saint John's",
        ]

    def test_insurance_is_case_insensitive_any_match(self) -> None:
        filters = SearchFilters(insuranceAccepted=["medicare", "Nonexistent"])
        result = filter_providers(mock_providers(), filters)
        assert [p.name for p in result] == ["Kaiser Permanente"]

    def test_provider_types(self) -> None:
        providers = [
            make_provider("1", provider_type=ProviderType.HOSPITAL),
            make_provider("2", provider_type=ProviderType.CLINIC),
        ]
        result = filter_providers(providers, SearchFilters(providerTypes=[ProviderType.CLINIC]))
        assert [p.npi for p in result] == ["2"]

    def test_accreditations(self) -> None:
        assert len(filter_providers(mock_providers(), SearchFilters(accreditations=["Joint Commission"]))) == 5
        assert filter_providers(mock_providers(), SearchFilters(accreditations=["JCI"])) == []

    def test_location_radius_drops_far_and_ungeocoded(self) -> None:
        providers = [
            make_provider("near", coordinates=Coordinates(lat=34.06, lng=-118.25)),
            make_provider("far", coordinates=Coordinates(lat=37.77, lng=-122.42)),
            make_provider("none"),
        ]
        result = filter_providers(providers, SearchFilters(location=DOWNTOWN_LA))
        assert [p.npi for p in result] == ["near"]

    def test_no_filters_keeps_everything(self) -> None:
        assert len(filter_providers(mock_providers(), SearchFilters())) == 5


class TestSortProviders:

    def test_rating_descending(self) -> None:
        providers = [make_provider("a", 3.0), make_provider("b", 4.5), make_provider("c", 4.0)]
        filters = SearchFilters(sortBy=SortBy.RATING, sortOrder=SortOrder.DESC)
        assert [p.npi for p in sort_providers(providers, filters)] == ["b", "c", "a"]

    def test_distance_ascending(self) -> None:
        providers = [
            make_provider("far", coordinates=Coordinates(lat=34.20, lng=-118.24)),
            make_provider("near", coordinates=Coordinates(lat=34.06, lng=-118.24)),
        ]
        filters = SearchFilters(sortBy=SortBy.DISTANCE, sortOrder=SortOrder.ASC, location=DOWNTOWN_LA)
        assert [p.npi for p in sort_providers(providers, filters)] == ["near", "far"]

    def test_rating_defaults_to_descending(self) -> None:
        providers = [make_provider("a", 3.0), make_provider("b", 4.5), make_provider("c", 4.0)]
        assert [p.npi for p in sort_providers(providers, SearchFilters(sortBy=SortBy.RATING))] == ["b", "c", "a"]

    def test_distance_defaults_to_ascending(self) -> None:
        providers = [
            make_provider("far", coordinates=Coordinates(lat=34.20, lng=-118.24)),
            make_provider("near", coordinates=Coordinates(lat=34.06, lng=-118.24)),
        ]
        filters = SearchFilters(sortBy=SortBy.DISTANCE, location=DOWNTOWN_LA)
        assert [p.npi for p in sort_providers(providers, filters)] == ["near", "far"]

    def test_explicit_ascending_rating(self) -> None:
        providers = [make_provider("a", 4.5), make_provider("b", 3.0)]
        filters = SearchFilters(sortBy=SortBy.RATING, sortOrder=SortOrder.ASC)
        assert [p.npi for p in sort_providers(providers, filters)] == ["b", "a"]

    def test_inapplicable_key_keeps_order(self) -> None:
        providers = [make_provider("a", 3.0), make_provider("b", 4.5)]
        filters = SearchFilters(sortBy=SortBy.PRICE)
        assert [p.npi for p in sort_providers(providers, filters)] == ["a", "b"]


class TestPrices:

    def test_price_bounds_inclusive(self) -> None:
        prices = [make_price("1", 100), make_price("2", 200), make_price("3", 300)]
        filters = SearchFilters(priceRange=PriceBounds(min=100, max=200))
        assert [p.providerId for p in filter_prices(prices, filters)] == ["1", "2"]

    def test_sort_by_price_stable(self) -> None:
        prices = [make_price("1", 200), make_price("2", 100), make_price("3", 200)]
        filters = SearchFilters(sortBy=SortBy.PRICE, sortOrder=SortOrder.ASC)
        assert [p.providerId for p in sort_prices(prices, filters)] == ["2", "1", "3"]

    def test_default_directions(self) -> None:
        prices = [make_price("1", 200, confidence=70), make_price("2", 100, confidence=95)]
        assert [p.providerId for p in sort_prices(prices, SearchFilters(sortBy=SortBy.PRICE))] == ["2", "1"]
        assert [p.providerId for p in sort_prices(prices, SearchFilters(sortBy=SortBy.RATING))] == ["2", "1"]

    def test_sort_by_rating_uses_confidence(self) -> None:
        prices = [make_price("1", 100, confidence=70), make_price("2", 100, confidence=95)]
        filters = SearchFilters(sortBy=SortBy.RATING, sortOrder=SortOrder.DESC)
        assert [p.providerId for p in sort_prices(prices, filters)] == ["2", "1"]


class TestInsurancePlans:

    def test_no_filters(self) -> None:
        assert len(filter_insurance_plans(mock_insurance_plans("CA"), None)) == 3

    def test_max_premium(self) -> None:
        result = filter_insurance_plans(mock_insurance_plans("CA"), InsurancePlanFilters(maxPremium=500))
        assert [p.metalLevel for p in result] == [MetalLevel.BRONZE, MetalLevel.SILVER]

    def test_plan_type_and_metal_level(self) -> None:
        filters = InsurancePlanFilters(planType=[PlanType.PPO, PlanType.EPO], metalLevel=[MetalLevel.GOLD])
        result = filter_insurance_plans(mock_insurance_plans("CA"), filters)
        assert [p.planName for p in result] == ["Cigna Gold EPO"]


class TestPagination:

    def test_paginate_slices(self) -> None:
        items = list(range(10))
        assert paginate(items, 1, 4) == [0, 1, 2, 3]
        assert paginate(items, 3, 4) == [8, 9]
        assert paginate(items, 4, 4) == []

    @pytest.mark.parametrize("total,page,limit,has_more", [
        (10, 1, 4, True),
        (8, 2, 4, False),
        (9, 2, 4, True),
        (0, 1, 20, False),
    ])
    def test_has_more_iff_total_exceeds_page_times_limit(self, total, page, limit, has_more) -> None:
        items = [make_price(str(i), 100) for i in range(total)]
        result = build_search_result(items, SearchFilters(page=page, limit=limit), UpdateFrequency.WEEKLY)
        assert result.total == total
        assert result.hasMore is has_more
        assert len(result.data) <= limit

    def test_result_echoes_filters_and_freshness(self) -> None:
        filters = SearchFilters(procedureCode="27447", page=2, limit=1)
        result = build_search_result([make_price("1", 1), make_price("2", 2)], filters, UpdateFrequency.DAILY)
        assert result.filters == filters
        assert result.page == 2 and result.limit == 1
        assert [p.providerId for p in result.data] == ["2"]
        assert result.dataFreshness.updateFrequency == UpdateFrequency.DAILY
        assert result.failedSources == []
