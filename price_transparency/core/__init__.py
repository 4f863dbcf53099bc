"""
Core infrastructure package for the price transparency backend.

Provides:
- Configuration management via pydantic-settings (config)
- The in-memory TTL cache owned by the aggregator (cache)
- The error taxonomy translated into API envelopes by route handlers (errors)
- FastAPI dependency injection utilities (dependencies)

This module re-exports the leaf components for convenient importing:

    from price_transparency.core import get_settings, InMemoryCache, NotFoundError

The dependencies module depends on the service layer and is imported directly:

    from price_transparency.core.dependencies import AggregatorDep
"""

# =============================================================================
# Re-exports from price_transparency.core.config
# =============================================================================
from price_transparency.core.config import Settings, get_settings

# =============================================================================
# Re-exports from price_transparency.core.cache
# =============================================================================
from price_transparency.core.cache import InMemoryCache, make_cache_key

# =============================================================================
# Re-exports from price_transparency.core.errors
# =============================================================================
from price_transparency.core.errors import (
    HealthcareDataError,
    NotFoundError,
    ParameterValidationError,
    UnsupportedDeviceError,
    UpstreamError,
)

__all__ = [
    # Configuration management (from config.py)
    'Settings',
    'get_settings',
    # Caching (from cache.py)
    'InMemoryCache',
    'make_cache_key',
    # Error taxonomy (from errors.py)
    'HealthcareDataError',
    'NotFoundError',
    'ParameterValidationError',
    'UnsupportedDeviceError',
    'UpstreamError',
]
