"""
Settings and environment management module for the price transparency API.

One pydantic-settings model holds every tunable of the service. Values come from
the process environment or a local .env file; defaults run the whole API on
deterministic fake upstreams, so a fresh checkout needs no configuration.

Cache lifetimes are grouped by how quickly the underlying data changes.

Environment Variables:
- LOG_LEVEL: Root logging level (default: INFO)
- CORS_ORIGINS: JSON list of allowed browser origins
- DATA_SOURCE_MODE: 'mock' (default) or 'live'
- ALLOW_PARTIAL_RESULTS: Return what succeeded when an upstream fails (default: false)
- NPI_REGISTRY_URL / CLINICAL_TRIALS_URL / OPENFDA_NDC_URL: Public upstream endpoints
- HTTP_TIMEOUT_SECONDS: Timeout applied to every live upstream request

Cache Lifetimes (seconds):
- cache_default_ttl_seconds: 300 (general search results)
- cache_realtime_ttl_seconds: 120 (ER wait times)
- cache_drug_price_ttl_seconds: 3600 (pharmacy price quotes)
- cache_long_ttl_seconds: 86400 (clinical trials, insurance plans)

Usage:
    from price_transparency.core.config import get_settings

    settings = get_settings()
    ttl = settings.cache_default_ttl_seconds
"""

from functools import lru_cache
from typing import List, Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Service configuration. Field names map to upper-case environment variables.

    Attributes:
        app_name: Human-readable service name used in the OpenAPI document.
        app_version: Service version reported by the root endpoint.
        log_level: Root logging level applied at application start.
        cors_origins: Browser origins allowed to call the API.
        cache_default_ttl_seconds: Lifetime of general search results.
        cache_realtime_ttl_seconds: Lifetime of real-time data (ER wait times).
        cache_drug_price_ttl_seconds: Lifetime of pharmacy price quotes.
        cache_long_ttl_seconds: Lifetime of slow-moving data (trials, insurance plans).
        allow_partial_results: When True, failed upstreams are skipped instead of
            failing the whole operation.
        data_source_mode: 'mock' serves every capability from fakes; 'live' uses the
            public HTTP upstreams where one exists.
        npi_registry_url: NPPES NPI Registry API endpoint.
        clinical_trials_url: ClinicalTrials.gov v2 studies endpoint.
        openfda_ndc_url: openFDA NDC directory endpoint.
        http_timeout_seconds: Timeout for live upstream requests.
    """

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore',
        case_sensitive=False,
    )

    # =========================================================================
    # Service
    # =========================================================================

    app_name: str = 'Healthcare Price Transparency API'
    app_version: str = '1.0.0'
    log_level: str = 'INFO'

    # Next.js dev server origins
    cors_origins: List[str] = [
        'http://localhost:3000',
        'http://127.0.0.1:3000',
    ]

    # =========================================================================
    # Cache lifetimes
    # =========================================================================

    cache_default_ttl_seconds: float = 300.0
    cache_realtime_ttl_seconds: float = 120.0
    cache_drug_price_ttl_seconds: float = 3600.0
    cache_long_ttl_seconds: float = 86400.0

    # =========================================================================
    # Upstream fan-out
    # =========================================================================

    # Fail-fast by default: any rejected sub-fetch fails the operation
    allow_partial_results: bool = False

    # =========================================================================
    # Upstream data sources
    # =========================================================================

    data_source_mode: Literal['mock', 'live'] = 'mock'
    npi_registry_url: str = 'https://npiregistry.cms.hhs.gov/api/'
    clinical_trials_url: str = 'https://clinicaltrials.gov/api/v2/studies'
    openfda_ndc_url: str = 'https://api.fda.gov/drug/ndc.json'
    http_timeout_seconds: float = 10.0


@lru_cache()
def get_settings() -> Settings:
    """
    Process-wide Settings, read from the environment on first call.

    Raises:
        pydantic.ValidationError: If an environment variable has an invalid value
            (e.g., DATA_SOURCE_MODE=remote).

    Note:
        To refresh settings in tests, clear the cache:
        >>> get_settings.cache_clear()
    """
    return Settings()
