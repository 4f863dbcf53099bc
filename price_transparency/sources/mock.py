"""
Deterministic fake implementations of every data source capability.

These stand in for upstreams that need partner agreements or API keys (Google
Places, GoodRx, FAIR Health, hospital real-time feeds, ...) and back every
capability in 'mock' data source mode. Variable values are drawn from a
random.Random seeded with the source name and request inputs, so identical
requests return identical records.
"""

import logging
import random
from datetime import timedelta
from typing import Dict, List, Optional, Sequence

from price_transparency.models.enums import (
    CouponProvider,
    DataSourceType,
    DeviceType,
    GlucoseUnit,
    PharmacyType,
)
from price_transparency.models.schemas import (
    ClinicalTrial,
    CostOfLivingData,
    DataSource,
    Drug,
    DrugPrice,
    EmergencyRoom,
    GeoLocation,
    GlucoseReading,
    HealthMetrics,
    InsurancePlan,
    InsurancePlanFilters,
    MedicalTourismDestination,
    NegotiatedRate,
    PlaceDetails,
    PriceRange,
    PricingDetails,
    ProcedurePrice,
    Provider,
    QualityRatings,
    SearchFilters,
    SleepData,
    TelemedicineProvider,
    TravelInfo,
    TrialSearchFilters,
    UrgentCare,
    VitalReading,
    utc_now,
)
from price_transparency.services.filtering import haversine_miles
from price_transparency.sources import fixtures
from price_transparency.sources.base import (
    ClinicalTrialRegistry,
    DataSources,
    DrugCatalog,
    EmergencyDataSource,
    InsurancePlanSource,
    PharmacyPriceSource,
    PlacesDirectory,
    PriceSource,
    ProviderDirectory,
    QualityRatingSource,
    TelemedicineDirectory,
    TourismDataSource,
    TravelPricingSource,
    WearableSource,
)


logger = logging.getLogger(__name__)


def _matches_state(provider: Provider, state: Optional[str]) -> bool:
    return not state or provider.address.state.upper() == state.strip().upper()


# =============================================================================
# Providers
# =============================================================================


class MockProviderDirectory(ProviderDirectory):
    name = "NPI Registry"

    async def search_providers(self, filters: SearchFilters) -> List[Provider]:
        logger.debug(f"[{self.name}] search query={filters.query!r} state={filters.state!r}")
        providers = [p for p in fixtures.mock_providers() if _matches_state(p, filters.state)]
        if filters.query:
            q = filters.query.lower()
            providers = [p for p in providers if q in p.name.lower() or p.npi == filters.query]
        return providers

    async def get_provider(self, npi: str) -> Optional[Provider]:
        return next((p for p in fixtures.mock_providers() if p.npi == npi), None)


class MockPlacesDirectory(PlacesDirectory):
    name = "Google Places"

    def _listing(self, provider: Provider) -> PlaceDetails:
        slug = "".join(ch for ch in provider.name.lower() if ch.isalnum())
        return PlaceDetails(
            npi=provider.npi,
            name=provider.name,
            operatingHours=fixtures.ALWAYS_OPEN,
            website=f"https://www.{slug}.org",
        )

    async def search_places(self, filters: SearchFilters) -> List[PlaceDetails]:
        return [
            self._listing(p) for p in fixtures.mock_providers() if _matches_state(p, filters.state)
        ]

    async def get_place(self, npi: str) -> Optional[PlaceDetails]:
        provider = next((p for p in fixtures.mock_providers() if p.npi == npi), None)
        return self._listing(provider) if provider is not None else None


class MockQualityRatingSource(QualityRatingSource):
    name = "CMS Hospital Compare"

    def _rating(self, provider: Provider) -> Optional[QualityRatings]:
        stars = fixtures.CMS_STAR_RATINGS.get(provider.npi)
        if stars is None:
            return None
        return provider.qualityRatings.model_copy(
            update={
                "cmsStarRating": float(stars),
                "sources": [fixtures.cms_source(self.name)],
            }
        )

    async def get_quality_ratings(self, filters: SearchFilters) -> Dict[str, QualityRatings]:
        ratings = {}
        for provider in fixtures.mock_providers():
            rating = self._rating(provider)
            if rating is not None:
                ratings[provider.npi] = rating
        return ratings

    async def get_provider_rating(self, npi: str) -> Optional[QualityRatings]:
        provider = next((p for p in fixtures.mock_providers() if p.npi == npi), None)
        return self._rating(provider) if provider is not None else None


# =============================================================================
# Prices
# =============================================================================


KNEE_REPLACEMENT_CODE = "27447"


class MockPriceSource(PriceSource):
    """
    Cash prices for every fixture provider in the requested state.

    Args:
        name: Upstream name recorded in dataSources.
        source_type: Provenance class of the upstream.
        confidence_floor: Lowest confidenceScore this source reports.
        confidence_spread: Scores fall in [floor, floor + spread).
        provider_ids: Restrict coverage to these provider ids (None = all).
    """

    def __init__(
        self,
        name: str,
        source_type: DataSourceType,
        confidence_floor: int,
        confidence_spread: int,
        provider_ids: Optional[Sequence[str]] = None,
    ) -> None:
        self.name = name
        self.source_type = source_type
        self.confidence_floor = confidence_floor
        self.confidence_spread = confidence_spread
        self.provider_ids = set(provider_ids) if provider_ids is not None else None

    async def fetch_prices(self, procedure_code: str, filters: SearchFilters) -> List[ProcedurePrice]:
        logger.debug(f"[{self.name}] prices for {procedure_code}")
        is_knee = procedure_code == KNEE_REPLACEMENT_CODE
        base_price = 35000 if is_knee else 5000

        prices = []
        for provider in fixtures.mock_providers():
            if not _matches_state(provider, filters.state):
                continue
            if self.provider_ids is not None and provider.id not in self.provider_ids:
                continue

            rng = random.Random(f"{self.name}:{procedure_code}:{provider.id}")
            prices.append(
                ProcedurePrice(
                    id=f"price-{procedure_code}-{provider.id}",
                    procedureCode=procedure_code,
                    procedureName="Total Knee Replacement" if is_knee else "Medical Procedure",
                    description="Complete procedure including facility fees",
                    category="Orthopedic",
                    providerId=provider.id,
                    providerName=provider.name,
                    providerState=provider.address.state,
                    pricing=PricingDetails(
                        cashPrice=base_price + rng.randrange(10000) - 5000,
                        chargemasterPrice=base_price * 2.5,
                        medicareRate=base_price * 0.6,
                        selfPayDiscount=20,
                        financingAvailable=True,
                    ),
                    negotiatedRates=[
                        NegotiatedRate(
                            insurerId="1", insurerName="Blue Cross", planType="PPO",
                            negotiatedPrice=base_price * 0.8, inNetwork=True,
                        ),
                        NegotiatedRate(
                            insurerId="2", insurerName="Aetna", planType="HMO",
                            negotiatedPrice=base_price * 0.75, inNetwork=True,
                        ),
                    ],
                    confidenceScore=self.confidence_floor + rng.randrange(self.confidence_spread),
                    dataSources=[DataSource(name=self.name, type=self.source_type)],
                )
            )
        return prices


class MockPharmacyPriceSource(PharmacyPriceSource):
    """Coupon-discounted quotes from the five fixture pharmacies."""

    BASE_PRICE = 150

    def __init__(self, coupon_provider: CouponProvider) -> None:
        self.coupon_provider = coupon_provider
        self.name = coupon_provider.value

    async def fetch_drug_prices(self, drug_id: str, zip_code: str) -> List[DrugPrice]:
        logger.debug(f"[{self.name}] prices for {drug_id} near {zip_code}")
        code_prefix = self.name.upper().replace(" ", "")
        quotes = []
        for index, pharmacy in enumerate(fixtures.PHARMACIES):
            rng = random.Random(f"{self.name}:{drug_id}:{zip_code}:{pharmacy}")
            quotes.append(
                DrugPrice(
                    drugId=drug_id,
                    pharmacyId=f"pharm-{index}",
                    pharmacyName=pharmacy,
                    pharmacyType=PharmacyType.RETAIL,
                    price=self.BASE_PRICE + rng.randrange(50),
                    priceWithCoupon=self.BASE_PRICE - 20 + rng.randrange(30),
                    couponCode=f"{code_prefix}{rng.randrange(1000)}",
                    couponProvider=self.coupon_provider,
                    quantity=30,
                    daysSupply=30,
                    dataSource=DataSource(
                        name=self.name, type=DataSourceType.COMMERCIAL, requiresAttribution=True,
                    ),
                )
            )
        return quotes


class MockDrugCatalog(DrugCatalog):
    name = "FDA NDC Directory"

    async def search_drugs(self, query: str) -> List[Drug]:
        q = query.strip().lower()
        return [
            drug for drug in fixtures.mock_drugs()
            if q in drug.name.lower()
            or q in drug.genericName.lower()
            or any(q in brand.lower() for brand in drug.brandNames)
        ]


# =============================================================================
# Care Access
# =============================================================================


class MockTelemedicineDirectory(TelemedicineDirectory):
    name = "Telemedicine Provider Directory"

    async def fetch_providers(
        self,
        specialty: Optional[str] = None,
        state: Optional[str] = None,
    ) -> List[TelemedicineProvider]:
        providers = fixtures.mock_telemedicine_providers()
        if specialty:
            wanted = specialty.lower()
            providers = [
                p for p in providers if any(wanted in s.lower() for s in p.specialties)
            ]
        if state:
            providers = [p for p in providers if state.upper() in p.statesAvailable]
        return providers


class MockEmergencyDataSource(EmergencyDataSource):
    name = "Hospital Real-Time Data"

    async def fetch_er_wait_times(self, lat: float, lng: float, radius: float) -> List[EmergencyRoom]:
        origin = GeoLocation(lat=lat, lng=lng, radius=radius)
        return [
            room for room in fixtures.mock_emergency_rooms()
            if haversine_miles(origin, room.coordinates) <= radius
        ]

    async def fetch_urgent_care(self, lat: float, lng: float, radius: float) -> List[UrgentCare]:
        origin = GeoLocation(lat=lat, lng=lng, radius=radius)
        return [
            facility for facility in fixtures.mock_urgent_care()
            if haversine_miles(origin, facility.coordinates) <= radius
        ]


class MockClinicalTrialRegistry(ClinicalTrialRegistry):
    name = "ClinicalTrials.gov"

    async def search_trials(
        self,
        condition: str,
        filters: Optional[TrialSearchFilters] = None,
    ) -> List[ClinicalTrial]:
        trials = [fixtures.mock_clinical_trial(condition)]
        if filters is not None and filters.status:
            trials = [t for t in trials if t.status in filters.status]
        if filters is not None and filters.phase:
            trials = [t for t in trials if t.phase in filters.phase]
        return trials


# =============================================================================
# Medical Tourism
# =============================================================================


class MockTourismDataSource(TourismDataSource):
    name = "Medical Tourism Association"

    async def fetch_destinations(self, procedure: Optional[str] = None) -> List[MedicalTourismDestination]:
        destinations = fixtures.mock_tourism_destinations()
        if procedure:
            wanted = procedure.lower()
            destinations = [
                d for d in destinations
                if any(wanted in p.procedureName.lower() for p in d.popularProcedures)
            ]
        return destinations

    async def get_destination(self, destination_id: str) -> Optional[MedicalTourismDestination]:
        return next(
            (d for d in fixtures.mock_tourism_destinations() if d.id == destination_id),
            None,
        )


class MockTravelPricingSource(TravelPricingSource):
    name = "Skyscanner"

    async def get_travel_info(self, destination: MedicalTourismDestination) -> TravelInfo:
        return fixtures.DEFAULT_TRAVEL_INFO

    async def get_cost_of_living(self, city: str, country: str) -> CostOfLivingData:
        return fixtures.COST_OF_LIVING.get(country, fixtures.DEFAULT_COST_OF_LIVING)

    async def get_flight_prices(self, origin: str, destination: MedicalTourismDestination) -> PriceRange:
        logger.debug(f"[{self.name}] flights {origin} -> {destination.city}")
        return fixtures.FLIGHT_PRICES

    async def get_accommodation_cost(self, city: str, nights: int) -> float:
        return fixtures.ACCOMMODATION_PER_NIGHT * nights


# =============================================================================
# Insurance & Wearables
# =============================================================================


class MockInsurancePlanSource(InsurancePlanSource):
    name = "Healthcare.gov"

    async def fetch_plans(
        self,
        state: str,
        filters: Optional[InsurancePlanFilters] = None,
    ) -> List[InsurancePlan]:
        return fixtures.mock_insurance_plans(state)


class MockWearableSource(WearableSource):
    """Three days of plausible metrics per user, seeded by device and user."""

    DAYS = 3

    def __init__(self, device: DeviceType, name: str) -> None:
        self.device = device
        self.name = name

    async def fetch_metrics(self, user_id: str, access_token: str) -> List[HealthMetrics]:
        logger.debug(f"[{self.name}] syncing metrics for user {user_id}")
        now = utc_now()
        metrics = []
        for offset in range(self.DAYS):
            day = now - timedelta(days=offset)
            rng = random.Random(f"{self.device.value}:{user_id}:{offset}")
            deep, light, rem, awake = (
                60 + rng.randrange(40), 200 + rng.randrange(60), 80 + rng.randrange(30), 10 + rng.randrange(20)
            )
            metrics.append(
                HealthMetrics(
                    userId=user_id,
                    date=day.date().isoformat(),
                    heartRate=VitalReading(value=58 + rng.randrange(25), unit="bpm", timestamp=day),
                    bloodGlucose=GlucoseReading(
                        value=85 + rng.randrange(30), unit=GlucoseUnit.MG_DL,
                        timestamp=day, mealContext="fasting",
                    ),
                    steps=4000 + rng.randrange(8000),
                    activeMinutes=20 + rng.randrange(60),
                    caloriesBurned=1800 + rng.randrange(900),
                    sleep=SleepData(
                        totalMinutes=deep + light + rem,
                        deepSleepMinutes=deep,
                        lightSleepMinutes=light,
                        remSleepMinutes=rem,
                        awakeMinutes=awake,
                        sleepScore=70 + rng.randrange(25),
                        bedtime="23:00",
                        wakeTime="07:00",
                    ),
                    oxygenSaturation=95 + rng.randrange(5),
                    source=self.device.value,
                )
            )
        return metrics


def build_mock_sources() -> DataSources:
    """Bundle every capability backed by its deterministic fake."""
    return DataSources(
        provider_directory=MockProviderDirectory(),
        places=MockPlacesDirectory(),
        quality=MockQualityRatingSource(),
        price_sources=[
            MockPriceSource("CMS Price Transparency", DataSourceType.GOVERNMENT, 85, 15),
            MockPriceSource("FAIR Health", DataSourceType.COMMERCIAL, 80, 20, provider_ids=["1", "2", "3"]),
            MockPriceSource("User Reported", DataSourceType.USER_REPORTED, 40, 30, provider_ids=["1", "5"]),
        ],
        pharmacy_sources=[
            MockPharmacyPriceSource(CouponProvider.GOODRX),
            MockPharmacyPriceSource(CouponProvider.RXSAVER),
            MockPharmacyPriceSource(CouponProvider.BLINK_HEALTH),
        ],
        drug_catalog=MockDrugCatalog(),
        telemedicine=MockTelemedicineDirectory(),
        emergency=MockEmergencyDataSource(),
        trials=MockClinicalTrialRegistry(),
        tourism=MockTourismDataSource(),
        travel=MockTravelPricingSource(),
        insurance=MockInsurancePlanSource(),
        wearables={
            DeviceType.APPLE_HEALTH: MockWearableSource(DeviceType.APPLE_HEALTH, "Apple Health"),
            DeviceType.FITBIT: MockWearableSource(DeviceType.FITBIT, "Fitbit"),
            DeviceType.GARMIN: MockWearableSource(DeviceType.GARMIN, "Garmin Connect"),
            DeviceType.GOOGLE_FIT: MockWearableSource(DeviceType.GOOGLE_FIT, "Google Fit"),
        },
    )
