"""
Async HTTP client for the price transparency API.

HealthcareDataClient issues the same queries a browser front end does and
unwraps the APIResponse envelope into typed models. Identical requests made
within an endpoint's de-duplication window are answered from an in-memory cache
instead of the network.

De-duplication Windows:
- providers: 60 s
- procedure prices: 5 min
- drug search: 60 s (queries shorter than 2 characters are not sent)
- drug prices: 1 h
- telemedicine: 5 min
- emergency services: 2 min
- clinical trials, medical tourism, wearable catalog, insurance plans: 24 h
- travel cost estimates and wearable sync: never cached

Usage:
    async with HealthcareDataClient("http://localhost:8000") as client:
        prices = await client.get_procedure_prices("27447", SearchFilters(state="CA"))
        label = describe_data_freshness(prices.dataFreshness.lastUpdated)
"""

import logging
import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

import httpx
from pydantic import BaseModel, TypeAdapter

from price_transparency.core.cache import MISSING, InMemoryCache, make_cache_key
from price_transparency.models.enums import EmergencyServiceType
from price_transparency.models.schemas import (
    ClinicalTrial,
    DestinationTravelCost,
    Drug,
    DrugPrice,
    EmergencyServices,
    HealthMetrics,
    InsurancePlan,
    MedicalTourismDestination,
    ProcedurePrice,
    Provider,
    SearchFilters,
    SearchResult,
    SupportedDevice,
    TelemedicineProvider,
)


logger = logging.getLogger(__name__)

PROVIDERS_WINDOW = 60.0
PRICES_WINDOW = 300.0
DRUG_SEARCH_WINDOW = 60.0
DRUG_PRICES_WINDOW = 3600.0
TELEMEDICINE_WINDOW = 300.0
EMERGENCY_WINDOW = 120.0
DAILY_WINDOW = 86400.0

MIN_DRUG_QUERY_LENGTH = 2
STALE_AFTER_HOURS = 12

QueryValue = Union[str, int, float, bool, Sequence[str], None]


class HealthcareClientError(Exception):
    """
    Raised when the API answers with success=false or the request fails.

    Attributes:
        message: The envelope's error message, or a generic one.
        code: The envelope's machine-readable error code, when present.
        status_code: HTTP status, when a response was received.
        details: The envelope's error details, when present.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details


def build_query_params(params: Dict[str, QueryValue]) -> Dict[str, str]:
    """
    Render query parameters the way the API parses them.

    None values are dropped, sequences are comma-joined and booleans become
    'true'/'false'.
    """
    rendered: Dict[str, str] = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            rendered[key] = "true" if value else "false"
        elif isinstance(value, (list, tuple)):
            rendered[key] = ",".join(str(getattr(item, "value", item)) for item in value)
        else:
            rendered[key] = str(getattr(value, "value", value))
    return rendered


class FreshnessLabel(BaseModel):
    isStale: bool
    formattedTime: str


def describe_data_freshness(
    last_updated: Optional[Union[datetime, str]],
    now: Optional[datetime] = None,
) -> FreshnessLabel:
    """
    Human-readable age of a dataset.

    - under a minute: "Just now"
    - under an hour: "N minute(s) ago"
    - under a day: "N hour(s) ago", stale past 12 hours
    - otherwise: "N day(s) ago", always stale
    """
    if not last_updated:
        return FreshnessLabel(isStale=False, formattedTime="Unknown")

    if isinstance(last_updated, str):
        last_updated = datetime.fromisoformat(last_updated.replace("Z", "+00:00"))
    if last_updated.tzinfo is None:
        last_updated = last_updated.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)

    minutes = int((now - last_updated).total_seconds() // 60)
    hours = minutes // 60
    days = hours // 24

    def plural(count: int, unit: str) -> str:
        return f"{count} {unit}{'s' if count > 1 else ''} ago"

    if minutes < 1:
        return FreshnessLabel(isStale=False, formattedTime="Just now")
    if minutes < 60:
        return FreshnessLabel(isStale=False, formattedTime=plural(minutes, "minute"))
    if hours < 24:
        return FreshnessLabel(isStale=hours > STALE_AFTER_HOURS, formattedTime=plural(hours, "hour"))
    return FreshnessLabel(isStale=True, formattedTime=plural(days, "day"))


class HealthcareDataClient:
    """
    Typed async client over the /api endpoints.

    Args:
        base_url: Root URL of the API.
        client: Pre-built httpx.AsyncClient (tests pass one on ASGITransport);
            the client is closed by aclose only when this instance created it.
        timeout: Request timeout for an owned client.
        clock: Time source for the de-duplication cache.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self.cache = InMemoryCache(default_ttl=PROVIDERS_WINDOW, clock=clock)

    async def __aenter__(self) -> "HealthcareDataClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # =========================================================================
    # Transport
    # =========================================================================

    @staticmethod
    def _unwrap(response: httpx.Response) -> Any:
        try:
            body = response.json()
        except ValueError:
            raise HealthcareClientError(
                "Failed to fetch data", status_code=response.status_code
            ) from None

        if response.is_error or not body.get("success"):
            error = body.get("error") or {}
            raise HealthcareClientError(
                error.get("message") or "API returned error",
                code=error.get("code"),
                status_code=response.status_code,
                details=error.get("details"),
            )
        return body.get("data")

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.error(f"{method} {path} failed: {exc}")
            raise HealthcareClientError(str(exc) or "Failed to fetch data") from exc
        return self._unwrap(response)

    async def _get(
        self,
        path: str,
        params: Dict[str, QueryValue],
        window: Optional[float],
    ) -> Any:
        query = build_query_params(params)
        key = make_cache_key(path, query)
        if window:
            cached = self.cache.get(key, MISSING)
            if cached is not MISSING:
                logger.debug(f"Deduplicated request: {key}")
                return cached

        data = await self._request("GET", path, params=query)
        if window:
            self.cache.set(key, data, ttl=window)
        return data

    # =========================================================================
    # Endpoints
    # =========================================================================

    async def search_providers(self, filters: SearchFilters) -> Optional[SearchResult[Provider]]:
        """Returns None without a request unless query, zipCode or location is set."""
        if not (filters.query or filters.zipCode or filters.location):
            return None

        location = filters.location
        data = await self._get(
            "/api/providers",
            {
                "query": filters.query,
                "procedureCode": filters.procedureCode,
                "zipCode": filters.zipCode,
                "state": filters.state,
                "qualityRating": filters.qualityRating,
                "sortBy": filters.sortBy,
                "sortOrder": filters.sortOrder,
                "page": filters.page,
                "limit": filters.limit,
                "lat": location.lat if location else None,
                "lng": location.lng if location else None,
                "radius": location.radius if location else None,
                "providerTypes": filters.providerTypes,
                "insurance": filters.insuranceAccepted,
                "accreditations": filters.accreditations,
            },
            PROVIDERS_WINDOW,
        )
        return SearchResult[Provider].model_validate(data)

    async def get_procedure_prices(
        self,
        procedure_code: str,
        filters: Optional[SearchFilters] = None,
    ) -> SearchResult[ProcedurePrice]:
        filters = filters or SearchFilters()
        location = filters.location
        price_range = filters.priceRange
        data = await self._get(
            "/api/prices",
            {
                "procedureCode": procedure_code,
                "zipCode": filters.zipCode,
                "state": filters.state,
                "minPrice": price_range.min if price_range else None,
                "maxPrice": price_range.max if price_range else None,
                "sortBy": filters.sortBy or "price",
                "sortOrder": filters.sortOrder or "asc",
                "page": filters.page,
                "limit": filters.limit,
                "lat": location.lat if location else None,
                "lng": location.lng if location else None,
                "radius": location.radius if location else None,
            },
            PRICES_WINDOW,
        )
        return SearchResult[ProcedurePrice].model_validate(data)

    async def search_drugs(self, query: str) -> List[Drug]:
        if len(query) < MIN_DRUG_QUERY_LENGTH:
            return []
        data = await self._get("/api/drugs", {"query": query}, DRUG_SEARCH_WINDOW)
        return TypeAdapter(List[Drug]).validate_python(data)

    async def get_drug_prices(self, drug_id: str, zip_code: str) -> List[DrugPrice]:
        data = await self._get(
            "/api/drugs", {"drugId": drug_id, "zipCode": zip_code}, DRUG_PRICES_WINDOW
        )
        return TypeAdapter(List[DrugPrice]).validate_python(data)

    async def get_telemedicine_providers(
        self,
        specialty: Optional[str] = None,
        state: Optional[str] = None,
    ) -> List[TelemedicineProvider]:
        data = await self._get(
            "/api/telemedicine", {"specialty": specialty, "state": state}, TELEMEDICINE_WINDOW
        )
        return TypeAdapter(List[TelemedicineProvider]).validate_python(data)

    async def get_emergency_services(
        self,
        lat: float,
        lng: float,
        service_type: EmergencyServiceType = EmergencyServiceType.ALL,
        radius: float = 25.0,
    ) -> EmergencyServices:
        data = await self._get(
            "/api/emergency",
            {"lat": lat, "lng": lng, "type": service_type, "radius": radius},
            EMERGENCY_WINDOW,
        )
        return EmergencyServices.model_validate(data)

    async def search_clinical_trials(
        self,
        condition: str,
        status: Optional[Sequence[str]] = None,
        phase: Optional[Sequence[str]] = None,
        lat: Optional[float] = None,
        lng: Optional[float] = None,
        radius: Optional[float] = None,
    ) -> List[ClinicalTrial]:
        data = await self._get(
            "/api/clinical-trials",
            {
                "condition": condition,
                "status": status,
                "phase": phase,
                "lat": lat,
                "lng": lng,
                "radius": radius,
            },
            DAILY_WINDOW,
        )
        return TypeAdapter(List[ClinicalTrial]).validate_python(data)

    async def get_medical_tourism_destinations(
        self,
        procedure: Optional[str] = None,
    ) -> List[MedicalTourismDestination]:
        data = await self._get("/api/medical-tourism", {"procedure": procedure}, DAILY_WINDOW)
        return TypeAdapter(List[MedicalTourismDestination]).validate_python(data)

    async def calculate_travel_cost(
        self,
        destination_id: str,
        user_location: str,
        stay_days: int,
    ) -> DestinationTravelCost:
        data = await self._get(
            "/api/medical-tourism",
            {
                "destinationId": destination_id,
                "calculateCosts": True,
                "userLocation": user_location,
                "stayDays": stay_days,
            },
            None,
        )
        return DestinationTravelCost.model_validate(data)

    async def get_insurance_plans(
        self,
        state: str,
        plan_type: Optional[Sequence[str]] = None,
        metal_level: Optional[Sequence[str]] = None,
        max_premium: Optional[float] = None,
    ) -> List[InsurancePlan]:
        data = await self._get(
            "/api/insurance",
            {
                "state": state,
                "planType": plan_type,
                "metalLevel": metal_level,
                "maxPremium": max_premium,
            },
            DAILY_WINDOW,
        )
        return TypeAdapter(List[InsurancePlan]).validate_python(data)

    async def get_supported_devices(self) -> List[SupportedDevice]:
        data = await self._get("/api/wearables", {}, DAILY_WINDOW)
        return TypeAdapter(List[SupportedDevice]).validate_python(data["supportedDevices"])

    async def sync_wearable_data(
        self,
        user_id: str,
        device_type: str,
        access_token: str,
    ) -> List[HealthMetrics]:
        data = await self._request(
            "POST",
            "/api/wearables",
            json={"userId": user_id, "deviceType": device_type, "accessToken": access_token},
        )
        return TypeAdapter(List[HealthMetrics]).validate_python(data)
