"""
Pytest Configuration and Shared Fixtures for the Price Transparency Backend Tests.

This module provides fixtures and configuration for all backend tests, supporting:
- Async test execution with pytest-asyncio (@pytest.mark.asyncio)
- A controllable clock so cache expiry can be tested without sleeping
- An aggregator over the deterministic mock data sources
- A FastAPI TestClient over an app built around that aggregator
- Small record builders for merge, statistics and filtering tests

The mock sources are seeded from their inputs, so every fixture here yields the
same data on every run.
"""

from typing import Generator, List, Optional

import pytest
from fastapi.testclient import TestClient

from price_transparency.core.cache import InMemoryCache
from price_transparency.core.config import Settings
from price_transparency.main import create_app
from price_transparency.models.enums import DataSourceType, PharmacyType, ProviderType
from price_transparency.models.schemas import (
    Address,
    ContactInfo,
    Coordinates,
    DataSource,
    DrugPrice,
    PricingDetails,
    ProcedurePrice,
    Provider,
    QualityRatings,
)
from price_transparency.services.aggregator import HealthcareDataAggregator
from price_transparency.sources.base import DataSources
from price_transparency.sources.mock import build_mock_sources


# ============================================================
# PYTEST HOOKS
# ============================================================

def pytest_configure(config) -> None:
    """
    Configure custom pytest markers for test organization.

    Custom markers defined:
    - e2e: End-to-end scenarios driven through the HTTP API
    - http: Tests of the httpx-backed upstream clients (served by MockTransport)
    """
    config.addinivalue_line(
        'markers',
        'e2e: end-to-end scenarios exercised through the HTTP API'
    )
    config.addinivalue_line(
        'markers',
        'http: tests of httpx-backed upstream sources using MockTransport'
    )


# ============================================================
# CLOCK & CACHE FIXTURES
# ============================================================

class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> InMemoryCache:
    return InMemoryCache(default_ttl=300.0, clock=clock)


# ============================================================
# APPLICATION FIXTURES
# ============================================================

@pytest.fixture
def settings() -> Settings:
    """Settings pinned to mock sources and fail-fast fan-out, independent of the environment."""
    return Settings(
        data_source_mode='mock',
        allow_partial_results=False,
        cache_default_ttl_seconds=300.0,
        cache_realtime_ttl_seconds=120.0,
        cache_drug_price_ttl_seconds=3600.0,
        cache_long_ttl_seconds=86400.0,
        log_level='DEBUG',
    )


@pytest.fixture
def sources() -> DataSources:
    return build_mock_sources()


@pytest.fixture
def aggregator(sources: DataSources, settings: Settings, cache: InMemoryCache) -> HealthcareDataAggregator:
    return HealthcareDataAggregator(sources, settings=settings, cache=cache)


@pytest.fixture
def partial_aggregator(sources: DataSources, settings: Settings, cache: InMemoryCache) -> HealthcareDataAggregator:
    """Aggregator that skips failed sources instead of failing the operation."""
    partial = settings.model_copy(update={'allow_partial_results': True})
    return HealthcareDataAggregator(sources, settings=partial, cache=cache)


@pytest.fixture
def api_client(aggregator: HealthcareDataAggregator, settings: Settings) -> Generator[TestClient, None, None]:
    """
    TestClient over an app wired to the shared aggregator fixture.

    Tests can reach the aggregator's sources through the aggregator fixture to
    inject failures or count calls.
    """
    app = create_app(settings=settings, aggregator=aggregator)
    with TestClient(app) as client:
        yield client


# ============================================================
# RECORD BUILDERS
# ============================================================

def make_price(
    provider_id: str,
    cash_price: float,
    confidence: float = 90,
    procedure_code: str = '27447',
    state: Optional[str] = 'CA',
    source: str = 'CMS Price Transparency',
) -> ProcedurePrice:
    return ProcedurePrice(
        id=f'price-{procedure_code}-{provider_id}-{source}',
        procedureCode=procedure_code,
        procedureName='Total Knee Replacement',
        providerId=provider_id,
        providerName=f'Provider {provider_id}',
        providerState=state,
        pricing=PricingDetails(cashPrice=cash_price),
        confidenceScore=confidence,
        dataSources=[DataSource(name=source, type=DataSourceType.GOVERNMENT)],
    )


def make_drug_price(
    pharmacy: str,
    price: float,
    coupon: Optional[float] = None,
) -> DrugPrice:
    return DrugPrice(
        drugId='drug-1',
        pharmacyId=pharmacy.lower(),
        pharmacyName=pharmacy,
        pharmacyType=PharmacyType.RETAIL,
        price=price,
        priceWithCoupon=coupon,
        quantity=30,
        daysSupply=30,
        dataSource=DataSource(name='GoodRx', type=DataSourceType.COMMERCIAL),
    )


def make_provider(
    npi: str,
    overall: float = 4.0,
    provider_type: ProviderType = ProviderType.HOSPITAL,
    insurance: Optional[List[str]] = None,
    coordinates: Optional[Coordinates] = None,
    website: Optional[str] = None,
) -> Provider:
    return Provider(
        id=npi,
        npi=npi,
        name=f'Provider {npi}',
        type=provider_type,
        address=Address(city='Los Angeles', state='CA', zipCode='90048'),
        contact=ContactInfo(phone='(555) 000-0000'),
        coordinates=coordinates,
        qualityRatings=QualityRatings(overall=overall),
        acceptedInsurance=insurance or [],
        website=website,
        dataSource=DataSource(name='NPI Registry', type=DataSourceType.GOVERNMENT),
    )
