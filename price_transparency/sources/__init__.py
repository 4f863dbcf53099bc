"""
Upstream data sources for the healthcare data aggregator.

Usage:
    from price_transparency.sources import build_data_sources

    sources = build_data_sources(get_settings())
"""

import logging
from dataclasses import replace

from price_transparency.core.config import Settings
from price_transparency.sources.base import DataSources
from price_transparency.sources.http import (
    ClinicalTrialsGovRegistry,
    NPIRegistryDirectory,
    OpenFDADrugCatalog,
)
from price_transparency.sources.mock import build_mock_sources


logger = logging.getLogger(__name__)


def build_data_sources(settings: Settings) -> DataSources:
    """
    Build the source bundle for the configured data source mode.

    'mock' backs every capability with a deterministic fake. 'live' swaps the
    provider directory, clinical trial registry and drug catalog for their
    public HTTP upstreams; every other capability stays on its fake.
    """
    sources = build_mock_sources()
    if settings.data_source_mode != "live":
        logger.info("Using mock data sources")
        return sources

    timeout = settings.http_timeout_seconds
    logger.info("Using live NPI Registry, ClinicalTrials.gov and openFDA sources")
    return replace(
        sources,
        provider_directory=NPIRegistryDirectory(settings.npi_registry_url, timeout),
        trials=ClinicalTrialsGovRegistry(settings.clinical_trials_url, timeout),
        drug_catalog=OpenFDADrugCatalog(settings.openfda_ndc_url, timeout),
    )


__all__ = ["DataSources", "build_data_sources"]
