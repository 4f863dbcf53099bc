"""
Healthcare data aggregator service.

Orchestrates the upstream data sources behind every API endpoint. Each operation
follows the same pipeline:

1. Build a deterministic cache key from the operation name and its inputs.
2. On a cache hit, return the cached value without touching any source.
3. On a miss, run the operation's sub-fetches concurrently (asyncio.gather).
4. Merge the results and compute derived statistics where applicable.
5. Filter, stable-sort and paginate search results.
6. Cache the finished value with the operation's lifetime.

Cache Lifetimes (from Settings):
- Real-time data (ER wait times): cache_realtime_ttl_seconds
- Pharmacy price quotes: cache_drug_price_ttl_seconds
- Slow-moving data (clinical trials, insurance plans): cache_long_ttl_seconds
- Everything else: cache_default_ttl_seconds

Fan-out Policy:
    Fail-fast by default: if any sub-fetch raises, the operation raises an
    UpstreamError naming the failing source, chained to the original exception.
    With allow_partial_results enabled, failed sources contribute empty results,
    are logged, reported in SearchResult.failedSources, and the partial result is
    not cached. Primary lookups whose result the operation cannot do without
    (the destination catalog, a provider's NPI record, travel pricing) always
    fail fast.

The aggregator owns its cache; construct one per application (see main.create_app)
or per test.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, List, Optional, Sequence, Tuple, TypeVar

from price_transparency.core.cache import MISSING, InMemoryCache, make_cache_key
from price_transparency.core.config import Settings, get_settings
from price_transparency.core.errors import NotFoundError, UnsupportedDeviceError, UpstreamError
from price_transparency.models.enums import DeviceType, EmergencyServiceType, UpdateFrequency
from price_transparency.models.schemas import (
    ClinicalTrial,
    DestinationTravelCost,
    Drug,
    DrugPrice,
    EmergencyRoom,
    EmergencyServices,
    HealthMetrics,
    InsurancePlan,
    InsurancePlanFilters,
    MedicalTourismDestination,
    PriceRange,
    ProcedurePrice,
    Provider,
    SearchFilters,
    SearchResult,
    TelemedicineProvider,
    TravelCostBreakdown,
    TrialSearchFilters,
    UrgentCare,
)
from price_transparency.services.filtering import (
    build_search_result,
    filter_insurance_plans,
    filter_prices,
    filter_providers,
    sort_prices,
    sort_providers,
)
from price_transparency.services.merge import merge_price_data, merge_provider_data
from price_transparency.services.statistics import (
    calculate_national_average,
    calculate_price_range,
    calculate_regional_average,
    sort_drug_prices,
)
from price_transparency.sources.base import DataSources


logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_ER_RADIUS_MILES = 25.0
DEFAULT_URGENT_CARE_RADIUS_MILES = 15.0


@dataclass
class SubFetch:
    """
    One upstream call in a fan-out, with the value used if it fails under partial mode.

    A required sub-fetch fails the whole fan-out even when partial results are allowed.
    """
    source: str
    call: Awaitable[Any]
    fallback: Any = None
    required: bool = False


class HealthcareDataAggregator:
    """
    Cache-fronted orchestrator over the healthcare data sources.

    Args:
        sources: Bundle of upstream capabilities.
        settings: Cache lifetimes and fan-out policy; defaults to get_settings().
        cache: Cache instance; defaults to a fresh InMemoryCache using the
            default lifetime from settings.
    """

    def __init__(
        self,
        sources: DataSources,
        settings: Optional[Settings] = None,
        cache: Optional[InMemoryCache] = None,
    ) -> None:
        self.sources = sources
        self.settings = settings or get_settings()
        self.cache = cache if cache is not None else InMemoryCache(
            default_ttl=self.settings.cache_default_ttl_seconds
        )

    # =========================================================================
    # Cache & fan-out helpers
    # =========================================================================

    def _cached(self, key: str) -> Any:
        value = self.cache.get(key, MISSING)
        if value is MISSING:
            logger.debug(f"Cache miss: {key}")
        else:
            logger.debug(f"Cache hit: {key}")
        return value

    def _store(self, key: str, value: Any, ttl: float, failed_sources: Sequence[str] = ()) -> None:
        if failed_sources:
            logger.warning(
                f"Not caching partial result for {key}; failed sources: {', '.join(failed_sources)}"
            )
            return
        purged = self.cache.purge_expired()
        if purged:
            logger.debug(f"Purged {purged} expired cache entries")
        self.cache.set(key, value, ttl=ttl)

    async def _call(self, source: str, call: Awaitable[T]) -> T:
        """Await one upstream call, wrapping any failure in UpstreamError."""
        try:
            return await call
        except UpstreamError:
            raise
        except Exception as exc:
            raise UpstreamError(source, str(exc) or type(exc).__name__) from exc

    async def _fan_out(
        self,
        *fetches: SubFetch,
        allow_partial: Optional[bool] = None,
    ) -> Tuple[List[Any], List[str]]:
        """
        Run sub-fetches concurrently and collect their results in argument order.

        Returns:
            (results, failed_sources). failed_sources is only non-empty when
            partial results are allowed.

        Raises:
            UpstreamError: For the first failing source (in argument order) when
                partial results are not allowed.
        """
        if allow_partial is None:
            allow_partial = self.settings.allow_partial_results

        outcomes = await asyncio.gather(
            *(self._call(f.source, f.call) for f in fetches),
            return_exceptions=True,
        )

        results: List[Any] = []
        failed: List[str] = []
        for fetch, outcome in zip(fetches, outcomes):
            if not isinstance(outcome, BaseException):
                results.append(outcome)
                continue
            if not allow_partial or fetch.required or not isinstance(outcome, Exception):
                raise outcome
            logger.warning(f"Skipping failed source {fetch.source}: {outcome}")
            failed.append(fetch.source)
            results.append(fetch.fallback)

        return results, failed

    def clear_cache(self) -> None:
        self.cache.clear()
        logger.info("Aggregator cache cleared")

    async def aclose(self) -> None:
        await self.sources.aclose()

    # =========================================================================
    # Providers
    # =========================================================================

    async def fetch_providers(self, filters: SearchFilters) -> SearchResult[Provider]:
        """Directory providers enriched with quality ratings and place listings."""
        key = make_cache_key("providers", filters)
        cached = self._cached(key)
        if cached is not MISSING:
            return cached

        directory, places, quality = self.sources.provider_directory, self.sources.places, self.sources.quality
        (providers, listings, ratings), failed = await self._fan_out(
            SubFetch(directory.name, directory.search_providers(filters), required=True),
            SubFetch(places.name, places.search_places(filters), []),
            SubFetch(quality.name, quality.get_quality_ratings(filters), {}),
        )

        merged = merge_provider_data(providers, ratings, listings)
        ordered = sort_providers(filter_providers(merged, filters), filters)
        result = build_search_result(ordered, filters, UpdateFrequency.DAILY, failed)

        self._store(key, result, self.settings.cache_default_ttl_seconds, failed)
        return result

    async def fetch_provider_by_id(self, npi: str) -> Optional[Provider]:
        """
        One provider by NPI, enriched with its place listing and quality rating.

        Returns None when the directory has no such NPI.
        """
        key = make_cache_key("provider", npi)
        cached = self._cached(key)
        if cached is not MISSING:
            return cached

        directory = self.sources.provider_directory
        provider = await self._call(directory.name, directory.get_provider(npi))
        if provider is None:
            return None

        places, quality = self.sources.places, self.sources.quality
        (listing, rating), failed = await self._fan_out(
            SubFetch(places.name, places.get_place(npi)),
            SubFetch(quality.name, quality.get_provider_rating(npi)),
        )

        enriched = merge_provider_data(
            [provider],
            {npi: rating} if rating is not None else {},
            [listing] if listing is not None else [],
        )[0]

        self._store(key, enriched, self.settings.cache_default_ttl_seconds, failed)
        return enriched

    # =========================================================================
    # Procedure prices
    # =========================================================================

    async def fetch_procedure_prices(
        self,
        procedure_code: str,
        filters: SearchFilters,
    ) -> SearchResult[ProcedurePrice]:
        """
        Merged procedure prices with national/regional averages and price range.

        Statistics are computed over every merged record before filtering, so
        they describe the whole market rather than the requested page.
        """
        key = make_cache_key("prices", procedure_code, filters)
        cached = self._cached(key)
        if cached is not MISSING:
            return cached

        source_lists, failed = await self._fan_out(
            *(
                SubFetch(source.name, source.fetch_prices(procedure_code, filters), [])
                for source in self.sources.price_sources
            )
        )

        merged = merge_price_data(*source_lists)
        stats = {
            "nationalAverage": calculate_national_average(merged),
            "regionalAverage": calculate_regional_average(merged, filters.state),
            "priceRange": calculate_price_range(merged),
        }
        with_stats = [price.model_copy(update=stats) for price in merged]

        ordered = sort_prices(filter_prices(with_stats, filters), filters)
        result = build_search_result(ordered, filters, UpdateFrequency.WEEKLY, failed)

        self._store(key, result, self.settings.cache_default_ttl_seconds, failed)
        return result

    # =========================================================================
    # Prescription drugs
    # =========================================================================

    async def fetch_drug_prices(self, drug_id: str, zip_code: str) -> List[DrugPrice]:
        """Quotes from every pharmacy price source, cheapest effective price first."""
        key = make_cache_key("drug_prices", drug_id, zip_code)
        cached = self._cached(key)
        if cached is not MISSING:
            return cached

        quote_lists, failed = await self._fan_out(
            *(
                SubFetch(source.name, source.fetch_drug_prices(drug_id, zip_code), [])
                for source in self.sources.pharmacy_sources
            )
        )

        quotes = sort_drug_prices([quote for quotes in quote_lists for quote in quotes])

        self._store(key, quotes, self.settings.cache_drug_price_ttl_seconds, failed)
        return quotes

    async def search_drugs(self, query: str) -> List[Drug]:
        key = make_cache_key("drugs", query.strip().lower())
        cached = self._cached(key)
        if cached is not MISSING:
            return cached

        catalog = self.sources.drug_catalog
        drugs = await self._call(catalog.name, catalog.search_drugs(query))

        self._store(key, drugs, self.settings.cache_default_ttl_seconds)
        return drugs

    # =========================================================================
    # Telemedicine
    # =========================================================================

    async def fetch_telemedicine_providers(
        self,
        specialty: Optional[str] = None,
        state: Optional[str] = None,
    ) -> List[TelemedicineProvider]:
        key = make_cache_key("telemedicine", specialty or "all", state or "all")
        cached = self._cached(key)
        if cached is not MISSING:
            return cached

        directory = self.sources.telemedicine
        providers = await self._call(directory.name, directory.fetch_providers(specialty, state))

        self._store(key, providers, self.settings.cache_default_ttl_seconds)
        return providers

    # =========================================================================
    # Emergency services
    # =========================================================================

    async def fetch_er_wait_times(
        self,
        lat: float,
        lng: float,
        radius_miles: float = DEFAULT_ER_RADIUS_MILES,
    ) -> List[EmergencyRoom]:
        """Emergency rooms near a point, shortest current wait first."""
        key = make_cache_key("er", lat, lng, radius_miles)
        cached = self._cached(key)
        if cached is not MISSING:
            return cached

        emergency = self.sources.emergency
        rooms = await self._call(emergency.name, emergency.fetch_er_wait_times(lat, lng, radius_miles))
        rooms = sorted(rooms, key=lambda room: room.currentWaitTime)

        self._store(key, rooms, self.settings.cache_realtime_ttl_seconds)
        return rooms

    async def fetch_urgent_care_facilities(
        self,
        lat: float,
        lng: float,
        radius_miles: float = DEFAULT_URGENT_CARE_RADIUS_MILES,
    ) -> List[UrgentCare]:
        key = make_cache_key("urgent_care", lat, lng, radius_miles)
        cached = self._cached(key)
        if cached is not MISSING:
            return cached

        emergency = self.sources.emergency
        facilities = await self._call(emergency.name, emergency.fetch_urgent_care(lat, lng, radius_miles))

        self._store(key, facilities, self.settings.cache_default_ttl_seconds)
        return facilities

    async def fetch_emergency_services(
        self,
        lat: float,
        lng: float,
        radius_miles: float = DEFAULT_ER_RADIUS_MILES,
        service_type: EmergencyServiceType = EmergencyServiceType.ALL,
    ) -> EmergencyServices:
        """
        Emergency rooms and/or urgent care near a point.

        Both lookups run concurrently when service_type is ALL; each keeps its
        own cache entry and lifetime.
        """
        want_er = service_type in (EmergencyServiceType.ER, EmergencyServiceType.ALL)
        want_urgent = service_type in (EmergencyServiceType.URGENT, EmergencyServiceType.ALL)

        async def _none() -> list:
            return []

        rooms, facilities = await asyncio.gather(
            self.fetch_er_wait_times(lat, lng, radius_miles) if want_er else _none(),
            self.fetch_urgent_care_facilities(lat, lng, radius_miles) if want_urgent else _none(),
        )
        return EmergencyServices(emergencyRooms=rooms, urgentCare=facilities)

    # =========================================================================
    # Clinical trials
    # =========================================================================

    async def fetch_clinical_trials(
        self,
        condition: str,
        filters: Optional[TrialSearchFilters] = None,
    ) -> List[ClinicalTrial]:
        key = make_cache_key("trials", condition, filters or {})
        cached = self._cached(key)
        if cached is not MISSING:
            return cached

        registry = self.sources.trials
        trials = await self._call(registry.name, registry.search_trials(condition, filters))

        self._store(key, trials, self.settings.cache_long_ttl_seconds)
        return trials

    # =========================================================================
    # Medical tourism
    # =========================================================================

    async def _enrich_destination(
        self,
        destination: MedicalTourismDestination,
    ) -> Tuple[MedicalTourismDestination, List[str]]:
        travel = self.sources.travel
        (travel_info, cost_of_living), failed = await self._fan_out(
            SubFetch(travel.name, travel.get_travel_info(destination), destination.travelInfo),
            SubFetch(
                travel.name,
                travel.get_cost_of_living(destination.city, destination.country),
                destination.costOfLiving,
            ),
        )
        enriched = destination.model_copy(
            update={"travelInfo": travel_info, "costOfLiving": cost_of_living}
        )
        return enriched, failed

    async def fetch_medical_tourism_destinations(
        self,
        procedure: Optional[str] = None,
    ) -> List[MedicalTourismDestination]:
        """Destinations with travelInfo/costOfLiving refreshed, all destinations in parallel."""
        key = make_cache_key("tourism", procedure or "all")
        cached = self._cached(key)
        if cached is not MISSING:
            return cached

        tourism = self.sources.tourism
        destinations = await self._call(tourism.name, tourism.fetch_destinations(procedure))

        enriched = await asyncio.gather(*(self._enrich_destination(d) for d in destinations))
        results = [destination for destination, _ in enriched]
        failed = sorted({source for _, sources in enriched for source in sources})

        self._store(key, results, self.settings.cache_default_ttl_seconds, failed)
        return results

    async def calculate_total_travel_cost(
        self,
        user_location: str,
        destination: MedicalTourismDestination,
        stay_days: int,
    ) -> TravelCostBreakdown:
        """
        Estimated trip cost for a destination.

        Flights and accommodation are fetched concurrently. Meals are three a day
        at the destination's average meal cost; transport is the daily local
        transport cost. The fixed costs are added to every flight range field.
        """
        travel = self.sources.travel
        (flights, accommodation), _ = await self._fan_out(
            SubFetch(travel.name, travel.get_flight_prices(user_location, destination)),
            SubFetch(travel.name, travel.get_accommodation_cost(destination.city, stay_days)),
            allow_partial=False,
        )

        meals = destination.costOfLiving.mealCostAverage * 3 * stay_days
        transport = destination.travelInfo.localTransportDaily * stay_days
        fixed = accommodation + meals + transport

        return TravelCostBreakdown(
            flights=flights,
            accommodation=accommodation,
            meals=meals,
            transport=transport,
            total=PriceRange(
                min=flights.min + fixed,
                max=flights.max + fixed,
                median=flights.median + fixed,
                percentile25=flights.percentile25 + fixed,
                percentile75=flights.percentile75 + fixed,
            ),
        )

    async def calculate_destination_travel_cost(
        self,
        destination_id: str,
        user_location: str,
        stay_days: int,
        procedure: Optional[str] = None,
    ) -> DestinationTravelCost:
        """
        Look up a destination among the (procedure-filtered) destinations and price the trip.

        Raises:
            NotFoundError: DESTINATION_NOT_FOUND when no destination has that id.
        """
        destinations = await self.fetch_medical_tourism_destinations(procedure)
        destination = next((d for d in destinations if d.id == destination_id), None)
        if destination is None:
            raise NotFoundError(
                "Destination not found",
                code="DESTINATION_NOT_FOUND",
                details={"destinationId": destination_id},
            )

        travel_costs = await self.calculate_total_travel_cost(user_location, destination, stay_days)
        return DestinationTravelCost(destination=destination, travelCosts=travel_costs)

    # =========================================================================
    # Insurance
    # =========================================================================

    async def fetch_insurance_plans(
        self,
        state: str,
        filters: Optional[InsurancePlanFilters] = None,
    ) -> List[InsurancePlan]:
        key = make_cache_key("insurance", state.upper(), filters or {})
        cached = self._cached(key)
        if cached is not MISSING:
            return cached

        insurance = self.sources.insurance
        plans = await self._call(insurance.name, insurance.fetch_plans(state, filters))
        plans = filter_insurance_plans(plans, filters)

        self._store(key, plans, self.settings.cache_long_ttl_seconds)
        return plans

    # =========================================================================
    # Wearables
    # =========================================================================

    async def sync_wearable_data(
        self,
        user_id: str,
        device_type: str,
        access_token: str,
    ) -> List[HealthMetrics]:
        """
        Pull health metrics from the device's platform.

        Every call reaches the platform; synced metrics are never cached.

        Raises:
            UnsupportedDeviceError: device_type has no sync source.
        """
        try:
            device = DeviceType(device_type)
        except ValueError:
            raise UnsupportedDeviceError(device_type) from None

        source = self.sources.wearables.get(device)
        if source is None:
            raise UnsupportedDeviceError(device_type)

        metrics = await self._call(source.name, source.fetch_metrics(user_id, access_token))
        logger.info(f"Synced {len(metrics)} days of {device.value} metrics for user {user_id}")
        return metrics
