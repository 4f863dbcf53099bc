"""
Capability interfaces for the upstream data sources the aggregator depends on.

Each interface names one capability (provider directory, pharmacy price quotes,
clinical-trial registry, ...) and is implemented once per real upstream and once
by a deterministic fake in sources.mock. The aggregator only ever sees these
interfaces, bundled in a DataSources instance.

Every source carries a human-readable ``name`` used in logs, UpstreamError
messages and SearchResult.failedSources.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from price_transparency.models.enums import DeviceType
from price_transparency.models.schemas import (
    ClinicalTrial,
    CostOfLivingData,
    Drug,
    DrugPrice,
    EmergencyRoom,
    HealthMetrics,
    InsurancePlan,
    InsurancePlanFilters,
    MedicalTourismDestination,
    PlaceDetails,
    PriceRange,
    ProcedurePrice,
    Provider,
    QualityRatings,
    SearchFilters,
    TelemedicineProvider,
    TravelInfo,
    TrialSearchFilters,
    UrgentCare,
)


logger = logging.getLogger(__name__)


class DataSourceBase(ABC):
    """Common base for every upstream capability."""

    name: str = "unknown"

    async def aclose(self) -> None:
        """Release network resources. Sources without any keep the default no-op."""
        return None


# =============================================================================
# Providers
# =============================================================================


class ProviderDirectory(DataSourceBase):
    """Provider identity and location records (e.g. NPPES NPI Registry)."""

    @abstractmethod
    async def search_providers(self, filters: SearchFilters) -> List[Provider]:
        pass

    @abstractmethod
    async def get_provider(self, npi: str) -> Optional[Provider]:
        """Return the provider with this NPI, or None when unknown."""
        pass


class PlacesDirectory(DataSourceBase):
    """Business listings (hours, website, photos) keyed back to an NPI."""

    @abstractmethod
    async def search_places(self, filters: SearchFilters) -> List[PlaceDetails]:
        pass

    @abstractmethod
    async def get_place(self, npi: str) -> Optional[PlaceDetails]:
        pass


class QualityRatingSource(DataSourceBase):
    """Quality scores (e.g. CMS Hospital Compare, Leapfrog) keyed by NPI."""

    @abstractmethod
    async def get_quality_ratings(self, filters: SearchFilters) -> Dict[str, QualityRatings]:
        pass

    @abstractmethod
    async def get_provider_rating(self, npi: str) -> Optional[QualityRatings]:
        pass


# =============================================================================
# Prices & Drugs
# =============================================================================


class PriceSource(DataSourceBase):
    """Procedure price records (CMS transparency files, FAIR Health, user reports)."""

    @abstractmethod
    async def fetch_prices(self, procedure_code: str, filters: SearchFilters) -> List[ProcedurePrice]:
        pass


class PharmacyPriceSource(DataSourceBase):
    """Per-pharmacy drug quotes (GoodRx, RxSaver, Blink Health)."""

    @abstractmethod
    async def fetch_drug_prices(self, drug_id: str, zip_code: str) -> List[DrugPrice]:
        pass


class DrugCatalog(DataSourceBase):
    """Drug catalog search (FDA NDC directory)."""

    @abstractmethod
    async def search_drugs(self, query: str) -> List[Drug]:
        pass


# =============================================================================
# Care Access
# =============================================================================


class TelemedicineDirectory(DataSourceBase):
    @abstractmethod
    async def fetch_providers(
        self,
        specialty: Optional[str] = None,
        state: Optional[str] = None,
    ) -> List[TelemedicineProvider]:
        pass


class EmergencyDataSource(DataSourceBase):
    """Real-time ER wait times and urgent care facility listings."""

    @abstractmethod
    async def fetch_er_wait_times(self, lat: float, lng: float, radius: float) -> List[EmergencyRoom]:
        pass

    @abstractmethod
    async def fetch_urgent_care(self, lat: float, lng: float, radius: float) -> List[UrgentCare]:
        pass


class ClinicalTrialRegistry(DataSourceBase):
    """Trial search (ClinicalTrials.gov)."""

    @abstractmethod
    async def search_trials(
        self,
        condition: str,
        filters: Optional[TrialSearchFilters] = None,
    ) -> List[ClinicalTrial]:
        pass


# =============================================================================
# Medical Tourism
# =============================================================================


class TourismDataSource(DataSourceBase):
    """Destination catalog with accredited international hospitals."""

    @abstractmethod
    async def fetch_destinations(self, procedure: Optional[str] = None) -> List[MedicalTourismDestination]:
        pass

    @abstractmethod
    async def get_destination(self, destination_id: str) -> Optional[MedicalTourismDestination]:
        pass


class TravelPricingSource(DataSourceBase):
    """Flight, hotel and cost-of-living pricing for travel cost estimates."""

    @abstractmethod
    async def get_travel_info(self, destination: MedicalTourismDestination) -> TravelInfo:
        pass

    @abstractmethod
    async def get_cost_of_living(self, city: str, country: str) -> CostOfLivingData:
        pass

    @abstractmethod
    async def get_flight_prices(self, origin: str, destination: MedicalTourismDestination) -> PriceRange:
        pass

    @abstractmethod
    async def get_accommodation_cost(self, city: str, nights: int) -> float:
        """Total accommodation cost in USD for the stay."""
        pass


# =============================================================================
# Insurance & Wearables
# =============================================================================


class InsurancePlanSource(DataSourceBase):
    """Marketplace plans per state (Healthcare.gov)."""

    @abstractmethod
    async def fetch_plans(
        self,
        state: str,
        filters: Optional[InsurancePlanFilters] = None,
    ) -> List[InsurancePlan]:
        pass


class WearableSource(DataSourceBase):
    """Health metrics from one wearable platform."""

    @abstractmethod
    async def fetch_metrics(self, user_id: str, access_token: str) -> List[HealthMetrics]:
        pass


# =============================================================================
# Bundle
# =============================================================================


@dataclass
class DataSources:
    """
    Every collaborator the aggregator fans out to.

    price_sources and pharmacy_sources are queried together and merged.
    wearables maps each syncable device to its source; catalog devices missing
    from the map cannot be synced.
    """
    provider_directory: ProviderDirectory
    places: PlacesDirectory
    quality: QualityRatingSource
    price_sources: List[PriceSource]
    pharmacy_sources: List[PharmacyPriceSource]
    drug_catalog: DrugCatalog
    telemedicine: TelemedicineDirectory
    emergency: EmergencyDataSource
    trials: ClinicalTrialRegistry
    tourism: TourismDataSource
    travel: TravelPricingSource
    insurance: InsurancePlanSource
    wearables: Dict[DeviceType, WearableSource] = field(default_factory=dict)

    def all_sources(self) -> List[DataSourceBase]:
        sources: List[DataSourceBase] = [
            self.provider_directory,
            self.places,
            self.quality,
            *self.price_sources,
            *self.pharmacy_sources,
            self.drug_catalog,
            self.telemedicine,
            self.emergency,
            self.trials,
            self.tourism,
            self.travel,
            self.insurance,
            *self.wearables.values(),
        ]
        # Sources shared between capabilities are closed once
        unique: List[DataSourceBase] = []
        for source in sources:
            if not any(source is seen for seen in unique):
                unique.append(source)
        return unique

    async def aclose(self) -> None:
        for source in self.all_sources():
            await source.aclose()
        logger.info("Data sources closed")
