"""
Test suite for the HealthcareDataAggregator.

The tests verify:
1. Cache hits never reach a data source; each operation keeps its own lifetime
2. Fail-fast fan-out names the failing source and chains the original error
3. Partial-result fan-out reports failedSources and does not cache the result
4. Price statistics describe the whole merged set, not the requested page
5. Emergency, tourism, insurance and wearable operations follow their contracts

Data sources are the deterministic mocks; individual source methods are replaced
by AsyncMock(side_effect=original) to count calls, or AsyncMock(side_effect=exc)
to inject failures.
"""

from unittest.mock import AsyncMock

import pytest

from price_transparency.core.errors import NotFoundError, UnsupportedDeviceError, UpstreamError
from price_transparency.models.enums import (
    DeviceType,
    EmergencyServiceType,
    MetalLevel,
    SortBy,
    SortOrder,
    TrialStatus,
)
from price_transparency.models.schemas import (
    InsurancePlanFilters,
    PriceBounds,
    SearchFilters,
    TrialSearchFilters,
)
from price_transparency.services.aggregator import HealthcareDataAggregator
from price_transparency.services.statistics import calculate_national_average, effective_drug_price


def count_calls(obj, method: str) -> AsyncMock:
    """Replace obj.method with an AsyncMock that delegates to the original."""
    mock = AsyncMock(side_effect=getattr(obj, method))
    setattr(obj, method, mock)
    return mock


def fail_calls(obj, method: str, error: Exception) -> AsyncMock:
    mock = AsyncMock(side_effect=error)
    setattr(obj, method, mock)
    return mock


LA_LAT, LA_LNG = 34.05, -118.24


# =============================================================================
# Caching
# =============================================================================


class TestCaching:

    @pytest.mark.asyncio
    async def test_second_identical_request_is_served_from_cache(
        self, aggregator: HealthcareDataAggregator, sources
    ) -> None:
        directory = count_calls(sources.provider_directory, "search_providers")
        filters = SearchFilters(state="CA")

        first = await aggregator.fetch_providers(filters)
        second = await aggregator.fetch_providers(SearchFilters(state="CA"))

        assert directory.await_count == 1
        assert second == first

    @pytest.mark.asyncio
    async def test_distinct_filters_are_distinct_entries(self, aggregator, sources) -> None:
        directory = count_calls(sources.provider_directory, "search_providers")
        await aggregator.fetch_providers(SearchFilters(page=1))
        await aggregator.fetch_providers(SearchFilters(page=2))
        assert directory.await_count == 2

    @pytest.mark.asyncio
    async def test_drug_prices_live_one_hour(self, aggregator, sources, clock) -> None:
        goodrx = count_calls(sources.pharmacy_sources[0], "fetch_drug_prices")

        await aggregator.fetch_drug_prices("drug-1", "10001")
        clock.advance(3599)
        await aggregator.fetch_drug_prices("drug-1", "10001")
        assert goodrx.await_count == 1

        clock.advance(2)
        await aggregator.fetch_drug_prices("drug-1", "10001")
        assert goodrx.await_count == 2

    @pytest.mark.asyncio
    async def test_er_wait_times_live_two_minutes(self, aggregator, sources, clock) -> None:
        er = count_calls(sources.emergency, "fetch_er_wait_times")
        urgent = count_calls(sources.emergency, "fetch_urgent_care")

        await aggregator.fetch_emergency_services(LA_LAT, LA_LNG)
        clock.advance(121)
        await aggregator.fetch_emergency_services(LA_LAT, LA_LNG)

        # Real-time entry expired, urgent care still within the default lifetime
        assert er.await_count == 2
        assert urgent.await_count == 1

    @pytest.mark.asyncio
    async def test_drug_search_key_ignores_case_and_whitespace(self, aggregator, sources) -> None:
        catalog = count_calls(sources.drug_catalog, "search_drugs")
        await aggregator.search_drugs("lipitor")
        await aggregator.search_drugs("  LIPITOR ")
        assert catalog.await_count == 1

    @pytest.mark.asyncio
    async def test_clear_cache_forces_refetch(self, aggregator, sources) -> None:
        directory = count_calls(sources.telemedicine, "fetch_providers")
        await aggregator.fetch_telemedicine_providers()
        aggregator.clear_cache()
        await aggregator.fetch_telemedicine_providers()
        assert directory.await_count == 2


# =============================================================================
# Fan-out policy
# =============================================================================


class TestFanOut:

    @pytest.mark.asyncio
    async def test_fail_fast_names_source_and_chains_cause(self, aggregator, sources) -> None:
        cause = RuntimeError("places quota exceeded")
        fail_calls(sources.places, "search_places", cause)

        with pytest.raises(UpstreamError) as exc_info:
            await aggregator.fetch_providers(SearchFilters())

        assert exc_info.value.source == "Google Places"
        assert exc_info.value.__cause__ is cause
        assert "places quota exceeded" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_fail_fast_for_any_price_source(self, aggregator, sources) -> None:
        fail_calls(sources.price_sources[1], "fetch_prices", ConnectionError("reset"))

        with pytest.raises(UpstreamError) as exc_info:
            await aggregator.fetch_procedure_prices("27447", SearchFilters())

        assert exc_info.value.source == "FAIR Health"

    @pytest.mark.asyncio
    async def test_failed_fetch_is_not_cached(self, aggregator, sources) -> None:
        search_trials = sources.trials.search_trials
        fail_calls(sources.trials, "search_trials", RuntimeError("down"))
        with pytest.raises(UpstreamError):
            await aggregator.fetch_clinical_trials("diabetes")

        sources.trials.search_trials = search_trials
        registry = count_calls(sources.trials, "search_trials")
        trials = await aggregator.fetch_clinical_trials("diabetes")
        assert len(trials) == 1
        assert registry.await_count == 1

    @pytest.mark.asyncio
    async def test_partial_mode_reports_failed_source(self, partial_aggregator, sources) -> None:
        fail_calls(sources.quality, "get_quality_ratings", RuntimeError("timeout"))

        result = await partial_aggregator.fetch_providers(SearchFilters())

        assert result.failedSources == ["CMS Hospital Compare"]
        assert result.total == 5

    @pytest.mark.asyncio
    async def test_directory_outage_fails_even_in_partial_mode(self, partial_aggregator, sources) -> None:
        fail_calls(sources.provider_directory, "search_providers", RuntimeError("registry down"))

        with pytest.raises(UpstreamError) as exc_info:
            await partial_aggregator.fetch_providers(SearchFilters())

        assert exc_info.value.source == "NPI Registry"

    @pytest.mark.asyncio
    async def test_expired_entries_purged_on_store(self, aggregator, clock) -> None:
        await aggregator.fetch_emergency_services(LA_LAT, LA_LNG)
        stored = len(aggregator.cache)
        clock.advance(86401)

        await aggregator.fetch_telemedicine_providers()

        assert stored > 0
        assert len(aggregator.cache) == 1

    @pytest.mark.asyncio
    async def test_partial_result_is_not_cached(self, partial_aggregator, sources) -> None:
        fail_calls(sources.price_sources[2], "fetch_prices", RuntimeError("timeout"))
        cms = count_calls(sources.price_sources[0], "fetch_prices")

        first = await partial_aggregator.fetch_procedure_prices("27447", SearchFilters())
        await partial_aggregator.fetch_procedure_prices("27447", SearchFilters())

        assert first.failedSources == ["User Reported"]
        assert cms.await_count == 2

    @pytest.mark.asyncio
    async def test_travel_pricing_always_fails_fast(self, partial_aggregator, sources) -> None:
        fail_calls(sources.travel, "get_flight_prices", RuntimeError("no fares"))

        with pytest.raises(UpstreamError) as exc_info:
            await partial_aggregator.calculate_destination_travel_cost("dest-1", "LAX", 10)

        assert exc_info.value.source == "Skyscanner"


# =============================================================================
# Providers
# =============================================================================


class TestProviders:

    @pytest.mark.asyncio
    async def test_search_merges_places_and_quality(self, aggregator) -> None:
        result = await aggregator.fetch_providers(
            SearchFilters(sortBy=SortBy.RATING, sortOrder=SortOrder.DESC)
        )

        assert [p.npi for p in result.data][:2] == ["1234567890", "2345678901"]
        cedars = result.data[0]
        assert cedars.qualityRatings.cmsStarRating == 5
        assert cedars.website == "https://www.cedarssinaimedicalcenter.org"

    @pytest.mark.asyncio
    async def test_rating_sort_without_order_ranks_best_first(self, aggregator) -> None:
        result = await aggregator.fetch_providers(SearchFilters(sortBy=SortBy.RATING))
        ratings = [p.qualityRatings.overall for p in result.data]
        assert ratings == sorted(ratings, reverse=True)

    @pytest.mark.asyncio
    async def test_provider_by_id(self, aggregator) -> None:
        provider = await aggregator.fetch_provider_by_id("3456789012")
        assert provider is not None
        assert provider.name == "Providence Saint John's"
        assert provider.qualityRatings.cmsStarRating == 4

    @pytest.mark.asyncio
    async def test_unknown_npi_returns_none_without_enrichment(self, aggregator, sources) -> None:
        places = count_calls(sources.places, "get_place")
        assert await aggregator.fetch_provider_by_id("0000000000") is None
        assert places.await_count == 0


# =============================================================================
# Prices & Drugs
# =============================================================================


class TestPrices:

    @pytest.mark.asyncio
    async def test_one_record_per_provider(self, aggregator) -> None:
        result = await aggregator.fetch_procedure_prices("27447", SearchFilters())
        assert result.total == 5
        assert len({p.providerId for p in result.data}) == 5

    @pytest.mark.asyncio
    async def test_higher_confidence_source_wins(self, aggregator) -> None:
        result = await aggregator.fetch_procedure_prices("27447", SearchFilters())
        kaiser = next(p for p in result.data if p.providerId == "5")
        # User Reported scores 40-69, CMS 85-99
        assert kaiser.dataSources[0].name == "CMS Price Transparency"

    @pytest.mark.asyncio
    async def test_statistics_cover_whole_merged_set(self, aggregator) -> None:
        full = await aggregator.fetch_procedure_prices("27447", SearchFilters(limit=20))
        page = await aggregator.fetch_procedure_prices(
            "27447", SearchFilters(limit=2, sortBy=SortBy.PRICE, sortOrder=SortOrder.ASC)
        )

        expected = calculate_national_average(full.data)
        assert len(page.data) == 2
        assert page.hasMore is True
        assert all(p.nationalAverage == expected for p in page.data)
        assert page.data[0].priceRange.min == min(p.pricing.cashPrice for p in full.data)
        assert page.data[0].pricing.cashPrice <= page.data[1].pricing.cashPrice

    @pytest.mark.asyncio
    async def test_regional_average_without_state_is_national(self, aggregator) -> None:
        result = await aggregator.fetch_procedure_prices("27447", SearchFilters())
        assert all(p.regionalAverage == p.nationalAverage for p in result.data)

    @pytest.mark.asyncio
    async def test_price_bounds_filter_after_stats(self, aggregator) -> None:
        result = await aggregator.fetch_procedure_prices(
            "27447", SearchFilters(priceRange=PriceBounds(min=0, max=1))
        )
        assert result.total == 0
        assert result.data == []


class TestDrugs:

    @pytest.mark.asyncio
    async def test_quotes_from_every_pharmacy_source_sorted(self, aggregator) -> None:
        quotes = await aggregator.fetch_drug_prices("drug-1", "10001")
        effective = [effective_drug_price(q) for q in quotes]

        assert len(quotes) == 15
        assert effective == sorted(effective)
        assert {q.couponProvider.value for q in quotes} == {"GoodRx", "RxSaver", "Blink Health"}

    @pytest.mark.asyncio
    async def test_search_matches_brand_and_generic(self, aggregator) -> None:
        assert {d.id for d in await aggregator.search_drugs("lipitor")} == {"drug-1", "drug-2"}
        assert await aggregator.search_drugs("ibuprofen") == []


# =============================================================================
# Care access
# =============================================================================


class TestEmergency:

    @pytest.mark.asyncio
    async def test_all_returns_both_lists(self, aggregator) -> None:
        services = await aggregator.fetch_emergency_services(LA_LAT, LA_LNG)
        assert [room.id for room in services.emergencyRooms] == ["er-2", "er-1"]
        assert {uc.id for uc in services.urgentCare} == {"uc-1", "uc-2"}

    @pytest.mark.asyncio
    async def test_urgent_only_skips_er_source(self, aggregator, sources) -> None:
        er = count_calls(sources.emergency, "fetch_er_wait_times")
        services = await aggregator.fetch_emergency_services(
            LA_LAT, LA_LNG, 25, EmergencyServiceType.URGENT
        )
        assert services.emergencyRooms == []
        assert services.urgentCare
        assert er.await_count == 0

    @pytest.mark.asyncio
    async def test_default_urgent_care_radius(self, aggregator) -> None:
        # Santa Monica is ~13 miles from downtown; inside 15, outside 5
        assert len(await aggregator.fetch_urgent_care_facilities(LA_LAT, LA_LNG)) == 2
        assert [uc.id for uc in await aggregator.fetch_urgent_care_facilities(LA_LAT, LA_LNG, 5)] == ["uc-1"]


class TestTrialsAndTelemedicine:

    @pytest.mark.asyncio
    async def test_trial_status_filter(self, aggregator) -> None:
        recruiting = await aggregator.fetch_clinical_trials(
            "diabetes", TrialSearchFilters(status=[TrialStatus.RECRUITING])
        )
        completed = await aggregator.fetch_clinical_trials(
            "diabetes", TrialSearchFilters(status=[TrialStatus.COMPLETED])
        )
        assert recruiting[0].conditions == ["diabetes"]
        assert completed == []

    @pytest.mark.asyncio
    async def test_telemedicine_filters(self, aggregator) -> None:
        assert [p.name for p in await aggregator.fetch_telemedicine_providers("dermatology")] == ["Teladoc"]
        assert [p.name for p in await aggregator.fetch_telemedicine_providers(state="WA")] == ["Amwell"]
        assert len(await aggregator.fetch_telemedicine_providers()) == 2


# =============================================================================
# Medical tourism
# =============================================================================


class TestMedicalTourism:

    @pytest.mark.asyncio
    async def test_destinations_are_enriched(self, aggregator) -> None:
        destinations = await aggregator.fetch_medical_tourism_destinations()
        tijuana = next(d for d in destinations if d.id == "dest-1")
        assert tijuana.travelInfo.localTransportDaily == 20
        assert tijuana.costOfLiving.mealCostAverage == 8

    @pytest.mark.asyncio
    async def test_procedure_filter(self, aggregator) -> None:
        destinations = await aggregator.fetch_medical_tourism_destinations("Heart Bypass")
        assert [d.city for d in destinations] == ["Bangkok"]

    @pytest.mark.asyncio
    async def test_travel_cost_arithmetic(self, aggregator) -> None:
        result = await aggregator.calculate_destination_travel_cost("dest-1", "LAX", 10)
        costs = result.travelCosts

        assert costs.accommodation == 1000   # 100/night * 10
        assert costs.meals == 240            # 8 * 3 meals * 10 days
        assert costs.transport == 200        # 20/day * 10
        assert costs.total.min == 300 + 1440
        assert costs.total.max == 1000 + 1440
        assert costs.total.median == 550 + 1440
        assert costs.total.percentile25 == 400 + 1440
        assert costs.total.percentile75 == 750 + 1440

    @pytest.mark.asyncio
    async def test_unknown_destination(self, aggregator) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            await aggregator.calculate_destination_travel_cost("dest-404", "LAX", 10)
        assert exc_info.value.code == "DESTINATION_NOT_FOUND"
        assert exc_info.value.status_code == 404


# =============================================================================
# Insurance & wearables
# =============================================================================


class TestInsurance:

    @pytest.mark.asyncio
    async def test_filters_and_state(self, aggregator) -> None:
        plans = await aggregator.fetch_insurance_plans("ca", InsurancePlanFilters(metalLevel=[MetalLevel.GOLD]))
        assert [p.id for p in plans] == ["CA-gold-epo"]

    @pytest.mark.asyncio
    async def test_plans_cached_for_a_day(self, aggregator, sources, clock) -> None:
        insurance = count_calls(sources.insurance, "fetch_plans")
        await aggregator.fetch_insurance_plans("CA")
        clock.advance(86000)
        await aggregator.fetch_insurance_plans("CA")
        assert insurance.await_count == 1


class TestWearables:

    @pytest.mark.asyncio
    async def test_sync_supported_device(self, aggregator) -> None:
        metrics = await aggregator.sync_wearable_data("user-1", "fitbit", "token")
        assert len(metrics) == 3
        assert all(m.userId == "user-1" and m.source == "fitbit" for m in metrics)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("device", ["oura", "withings", "unknown_brand"])
    async def test_unsupported_device(self, aggregator, device) -> None:
        with pytest.raises(UnsupportedDeviceError) as exc_info:
            await aggregator.sync_wearable_data("user-1", device, "token")
        assert exc_info.value.device_type == device
        assert exc_info.value.code == "UNSUPPORTED_DEVICE"

    @pytest.mark.asyncio
    async def test_every_sync_reaches_the_platform(self, aggregator, sources) -> None:
        garmin = sources.wearables[DeviceType.GARMIN]
        fetch_metrics = garmin.fetch_metrics

        async def check_token(user_id, access_token):
            if access_token != "good":
                raise PermissionError("token revoked")
            return await fetch_metrics(user_id, access_token)

        upstream = AsyncMock(side_effect=check_token)
        garmin.fetch_metrics = upstream

        assert len(await aggregator.sync_wearable_data("user-1", "garmin", "good")) == 3
        with pytest.raises(UpstreamError):
            await aggregator.sync_wearable_data("user-1", "garmin", "revoked")
        assert upstream.await_count == 2
