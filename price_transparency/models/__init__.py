"""
Package initialization file for price transparency models.

This module exports the Pydantic schemas and enumerations from schemas.py and enums.py,
making them importable from price_transparency.models directly.

Usage:
    from price_transparency.models import (
        Provider,
        ProcedurePrice,
        SearchFilters,
        SearchResult,
        SortBy,
        # ... etc
    )
"""

# =============================================================================
# Enums
# =============================================================================

from price_transparency.models.enums import (
    AccreditationOrganization,
    AccreditationStatus,
    CapacityStatus,
    ConfidenceLevel,
    CouponProvider,
    DataSourceType,
    DeviceType,
    EligibilityGender,
    EmergencyServiceType,
    GlucoseUnit,
    InteractionSeverity,
    InterventionType,
    LeapfrogGrade,
    MetalLevel,
    PharmacyType,
    PlanType,
    ProviderType,
    SortBy,
    SortOrder,
    StudyType,
    TelemedicineCategory,
    TrialPhase,
    TrialSiteStatus,
    TrialStatus,
    UpdateFrequency,
    WaitTimeTrend,
)

# =============================================================================
# Schemas
# =============================================================================

from price_transparency.models.schemas import (
    # Provenance
    DataFreshness,
    DataSource,
    utc_now,
    # Shared value types
    Address,
    ContactInfo,
    Coordinates,
    PriceRange,
    # Providers
    Accreditation,
    DayHours,
    OperatingHours,
    PlaceDetails,
    Provider,
    QualityRatings,
    # Pricing
    NegotiatedRate,
    PricingDetails,
    ProcedurePrice,
    # Drugs
    Drug,
    DrugInteraction,
    DrugPrice,
    # Telemedicine
    TelemedicineAvailability,
    TelemedicinePricing,
    TelemedicineProvider,
    TelemedicineRatings,
    TelemedicineService,
    # Emergency
    EmergencyRoom,
    EmergencyServices,
    ERCostEstimate,
    UrgentCare,
    UrgentCarePricing,
    # Clinical trials
    ClinicalTrial,
    TrialCompensation,
    TrialEligibility,
    TrialEnrollment,
    TrialIntervention,
    TrialLocation,
    TrialSearchFilters,
    # Medical tourism
    CostOfLivingData,
    DestinationTravelCost,
    InternationalHospital,
    MedicalTourismDestination,
    TourismProcedure,
    TourismQualityIndicators,
    TravelCostBreakdown,
    TravelInfo,
    VisaInfo,
    # Insurance
    IndividualFamilyAmount,
    InsurancePlan,
    InsurancePlanFilters,
    PlanCopays,
    # Wearables
    BloodPressureReading,
    GlucoseReading,
    HealthMetrics,
    SleepData,
    SupportedDevice,
    VitalReading,
    WearableSyncRequest,
    # Search contract & envelope
    APIError,
    APIResponse,
    GeoLocation,
    PriceBounds,
    ResponseMeta,
    SearchFilters,
    SearchResult,
)

__all__ = [
    # Enums
    "AccreditationOrganization",
    "AccreditationStatus",
    "CapacityStatus",
    "ConfidenceLevel",
    "CouponProvider",
    "DataSourceType",
    "DeviceType",
    "EligibilityGender",
    "EmergencyServiceType",
    "GlucoseUnit",
    "InteractionSeverity",
    "InterventionType",
    "LeapfrogGrade",
    "MetalLevel",
    "PharmacyType",
    "PlanType",
    "ProviderType",
    "SortBy",
    "SortOrder",
    "StudyType",
    "TelemedicineCategory",
    "TrialPhase",
    "TrialSiteStatus",
    "TrialStatus",
    "UpdateFrequency",
    "WaitTimeTrend",
    # Schemas
    "DataFreshness",
    "DataSource",
    "utc_now",
    "Address",
    "ContactInfo",
    "Coordinates",
    "PriceRange",
    "Accreditation",
    "DayHours",
    "OperatingHours",
    "PlaceDetails",
    "Provider",
    "QualityRatings",
    "NegotiatedRate",
    "PricingDetails",
    "ProcedurePrice",
    "Drug",
    "DrugInteraction",
    "DrugPrice",
    "TelemedicineAvailability",
    "TelemedicinePricing",
    "TelemedicineProvider",
    "TelemedicineRatings",
    "TelemedicineService",
    "EmergencyRoom",
    "EmergencyServices",
    "ERCostEstimate",
    "UrgentCare",
    "UrgentCarePricing",
    "ClinicalTrial",
    "TrialCompensation",
    "TrialEligibility",
    "TrialEnrollment",
    "TrialIntervention",
    "TrialLocation",
    "TrialSearchFilters",
    "CostOfLivingData",
    "DestinationTravelCost",
    "InternationalHospital",
    "MedicalTourismDestination",
    "TourismProcedure",
    "TourismQualityIndicators",
    "TravelCostBreakdown",
    "TravelInfo",
    "VisaInfo",
    "IndividualFamilyAmount",
    "InsurancePlan",
    "InsurancePlanFilters",
    "PlanCopays",
    "BloodPressureReading",
    "GlucoseReading",
    "HealthMetrics",
    "SleepData",
    "SupportedDevice",
    "VitalReading",
    "WearableSyncRequest",
    "APIError",
    "APIResponse",
    "GeoLocation",
    "PriceBounds",
    "ResponseMeta",
    "SearchFilters",
    "SearchResult",
]
