"""
Pydantic request/response models for the price transparency backend.

This module provides type-safe data validation and serialization for the healthcare
data model: providers, procedure prices, drugs and pharmacy quotes, telemedicine,
emergency services, clinical trials, medical tourism, insurance plans, wearable
metrics, and the generic search/envelope/provenance shapes shared by every endpoint.

Field names are camelCase because they are the JSON contract consumed by the web
frontend. Domain records are frozen: the aggregator composes new records with
``model_copy(update=...)`` and never mutates a record it received from a source or
from the cache.

All models use Pydantic v2 syntax.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from price_transparency.models.enums import (
    AccreditationOrganization,
    AccreditationStatus,
    CapacityStatus,
    ConfidenceLevel,
    CouponProvider,
    DataSourceType,
    DeviceType,
    EligibilityGender,
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


T = TypeVar("T")


def utc_now() -> datetime:
    """Timezone-aware current time used for every lastUpdated/lastFetched stamp."""
    return datetime.now(timezone.utc)


class HealthcareRecord(BaseModel):
    """Base for immutable domain records produced by data sources."""
    model_config = ConfigDict(frozen=True)


# =============================================================================
# Provenance & Freshness
# =============================================================================


class DataSource(HealthcareRecord):
    """
    Provenance tag attached to nearly every record.

    Used both for UI disclosure (attribution requirements) and as the trust signal
    when deciding which upstream to believe.
    """
    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "name": "CMS Price Transparency",
                "type": "government",
                "lastFetched": "2026-01-15T12:00:00Z",
                "confidenceLevel": "high",
                "requiresAttribution": False,
            }
        },
    )

    name: str = Field(..., description="Upstream name, e.g. 'NPI Registry'")
    type: DataSourceType = Field(..., description="Provenance class of the upstream")
    url: Optional[str] = None
    lastFetched: datetime = Field(default_factory=utc_now)
    confidenceLevel: ConfidenceLevel = ConfidenceLevel.HIGH
    requiresAttribution: bool = False


class DataFreshness(BaseModel):
    lastUpdated: datetime = Field(default_factory=utc_now)
    updateFrequency: UpdateFrequency
    nextUpdate: Optional[datetime] = None
    isStale: bool = False


# =============================================================================
# Shared Value Types
# =============================================================================


class Address(HealthcareRecord):
    street: str = ""
    city: str
    state: str
    zipCode: str
    country: str = "US"


class ContactInfo(HealthcareRecord):
    phone: str
    fax: Optional[str] = None
    email: Optional[str] = None


class Coordinates(HealthcareRecord):
    lat: float = Field(..., ge=-90.0, le=90.0)
    lng: float = Field(..., ge=-180.0, le=180.0)


class PriceRange(HealthcareRecord):
    """
    Descriptive spread of a price collection.

    Invariant for computed ranges: min <= percentile25 <= median <= percentile75 <= max.
    """
    min: float
    max: float
    median: float
    percentile25: float
    percentile75: float


# =============================================================================
# Provider & Hospital Models
# =============================================================================


class Accreditation(HealthcareRecord):
    name: str
    organization: AccreditationOrganization
    status: AccreditationStatus
    expirationDate: Optional[str] = None


class QualityRatings(HealthcareRecord):
    """
    Aggregate quality score plus component scores and their provenance.

    overall is on a 0-5 scale; 0 means "not yet rated" for records from
    directories that carry no quality information.
    """
    overall: float = Field(..., ge=0.0, le=5.0)
    patientSatisfaction: Optional[float] = None
    safetyScore: Optional[float] = None
    readmissionRate: Optional[float] = None
    mortalityRate: Optional[float] = None
    infectionRate: Optional[float] = None
    leapfrogGrade: Optional[LeapfrogGrade] = None
    cmsStarRating: Optional[float] = None
    reviewCount: int = Field(default=0, ge=0)
    sources: List[DataSource] = Field(default_factory=list)


class DayHours(HealthcareRecord):
    open: str
    close: str
    isClosed: Optional[bool] = None


class OperatingHours(HealthcareRecord):
    monday: Optional[DayHours] = None
    tuesday: Optional[DayHours] = None
    wednesday: Optional[DayHours] = None
    thursday: Optional[DayHours] = None
    friday: Optional[DayHours] = None
    saturday: Optional[DayHours] = None
    sunday: Optional[DayHours] = None
    is24Hours: Optional[bool] = None
    holidayHours: Optional[str] = None


class Provider(HealthcareRecord):
    """
    Hospital, clinic or practitioner record.

    npi is unique per provider and is the join key for quality ratings and
    places enrichment. coordinates may be absent for directory records that
    carry no geocode; such providers are excluded by location-radius filters.
    """
    id: str
    npi: str = Field(..., description="National Provider Identifier")
    name: str
    type: ProviderType
    specialty: Optional[str] = None
    address: Address
    contact: ContactInfo
    coordinates: Optional[Coordinates] = None
    accreditations: List[Accreditation] = Field(default_factory=list)
    qualityRatings: QualityRatings
    services: List[str] = Field(default_factory=list)
    acceptedInsurance: List[str] = Field(default_factory=list)
    operatingHours: OperatingHours = Field(default_factory=OperatingHours)
    imageUrl: Optional[str] = None
    website: Optional[str] = None
    isVerified: bool = False
    lastUpdated: datetime = Field(default_factory=utc_now)
    dataSource: DataSource


class PlaceDetails(HealthcareRecord):
    """Listing details from a places directory, keyed back to a provider NPI."""
    npi: Optional[str] = None
    name: Optional[str] = None
    operatingHours: Optional[OperatingHours] = None
    website: Optional[str] = None
    imageUrl: Optional[str] = None


# =============================================================================
# Pricing Models
# =============================================================================


class PricingDetails(HealthcareRecord):
    cashPrice: float = Field(..., ge=0.0)
    chargemasterPrice: Optional[float] = None
    medicareRate: Optional[float] = None
    medicaidRate: Optional[float] = None
    selfPayDiscount: Optional[float] = None
    financingAvailable: Optional[bool] = None


class NegotiatedRate(HealthcareRecord):
    insurerId: str
    insurerName: str
    planType: str
    negotiatedPrice: float
    inNetwork: bool


class ProcedurePrice(HealthcareRecord):
    """
    Price of one procedure (CPT/HCPCS code) at one provider.

    Exactly one record survives merge per (providerId, procedureCode): the one
    with the highest confidenceScore. providerState, when the source knows it,
    enables per-state regional averaging.
    """
    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "id": "price-0",
                "procedureCode": "27447",
                "procedureName": "Total Knee Replacement",
                "providerId": "1",
                "providerName": "Cedars-Sinai Medical Center",
                "pricing": {"cashPrice": 33120.0},
                "confidenceScore": 92,
            }
        },
    )

    id: str
    procedureCode: str = Field(..., description="CPT/HCPCS code")
    procedureName: str
    description: str = ""
    category: str = ""
    providerId: str
    providerName: str
    providerState: Optional[str] = None
    pricing: PricingDetails
    negotiatedRates: List[NegotiatedRate] = Field(default_factory=list)
    nationalAverage: float = 0.0
    regionalAverage: float = 0.0
    priceRange: Optional[PriceRange] = None
    confidenceScore: float = Field(..., ge=0.0, le=100.0)
    lastUpdated: datetime = Field(default_factory=utc_now)
    dataSources: List[DataSource] = Field(default_factory=list)


# =============================================================================
# Prescription Drug Models
# =============================================================================


class DrugInteraction(HealthcareRecord):
    interactingDrug: str
    severity: InteractionSeverity
    description: str


class Drug(HealthcareRecord):
    """Drug catalog entry (FDA NDC directory)."""
    id: str
    ndc: str = Field(..., description="National Drug Code")
    name: str
    genericName: str
    brandNames: List[str] = Field(default_factory=list)
    manufacturer: str
    dosageForm: str
    strength: str
    quantity: int = 30
    isGeneric: bool
    requiresPrescription: bool
    controlledSubstance: Optional[bool] = None
    therapeuticClass: str = ""
    interactions: List[DrugInteraction] = Field(default_factory=list)


class DrugPrice(HealthcareRecord):
    """
    One pharmacy's quote for a drug.

    The effective price is priceWithCoupon when present, otherwise price.
    """
    drugId: str
    pharmacyId: str
    pharmacyName: str
    pharmacyType: PharmacyType
    pharmacyAddress: Optional[Address] = None
    price: float = Field(..., ge=0.0)
    priceWithCoupon: Optional[float] = Field(default=None, ge=0.0)
    couponCode: Optional[str] = None
    couponProvider: Optional[CouponProvider] = None
    quantity: int
    daysSupply: int
    lastUpdated: datetime = Field(default_factory=utc_now)
    dataSource: DataSource


# =============================================================================
# Telemedicine Models
# =============================================================================


class TelemedicineService(HealthcareRecord):
    name: str
    description: str
    price: float
    duration: int = Field(..., description="Minutes")
    category: TelemedicineCategory


class TelemedicinePricing(HealthcareRecord):
    consultationFee: float
    subscriptionMonthly: Optional[float] = None
    subscriptionAnnual: Optional[float] = None
    insuranceCopay: Optional[float] = None


class TelemedicineAvailability(HealthcareRecord):
    is24_7: bool
    averageWaitTime: int = Field(..., description="Minutes")
    scheduleInAdvance: bool
    sameDayAvailable: bool


class TelemedicineRatings(HealthcareRecord):
    overall: float = Field(..., ge=0.0, le=5.0)
    reviewCount: int
    responseTime: int = Field(..., description="Average minutes to first response")


class TelemedicineProvider(HealthcareRecord):
    id: str
    name: str
    logo: Optional[str] = None
    description: str
    services: List[TelemedicineService] = Field(default_factory=list)
    pricing: TelemedicinePricing
    availability: TelemedicineAvailability
    ratings: TelemedicineRatings
    acceptedInsurance: List[str] = Field(default_factory=list)
    languages: List[str] = Field(default_factory=list)
    specialties: List[str] = Field(default_factory=list)
    statesAvailable: List[str] = Field(default_factory=list)
    website: str
    appStoreUrl: Optional[str] = None
    playStoreUrl: Optional[str] = None


# =============================================================================
# Emergency Services Models
# =============================================================================


class ERCostEstimate(HealthcareRecord):
    lowAcuity: PriceRange
    moderateAcuity: PriceRange
    highAcuity: PriceRange
    critical: PriceRange


class EmergencyRoom(HealthcareRecord):
    """Emergency department with a real-time wait time; volatile, cached briefly."""
    id: str
    providerId: str
    hospitalName: str
    address: Address
    coordinates: Coordinates
    contact: ContactInfo
    currentWaitTime: int = Field(..., ge=0, description="Minutes")
    waitTimeTrend: WaitTimeTrend
    capacityStatus: CapacityStatus
    traumaLevel: Optional[int] = Field(default=None, ge=1, le=5)
    pediatricER: bool
    strokeCenter: bool
    cardiacCenter: bool
    burnCenter: bool
    lastUpdated: datetime = Field(default_factory=utc_now)
    estimatedCosts: ERCostEstimate


class UrgentCarePricing(HealthcareRecord):
    visitFee: float
    xrayFee: Optional[float] = None
    labFee: Optional[float] = None


class UrgentCare(HealthcareRecord):
    id: str
    name: str
    address: Address
    coordinates: Coordinates
    contact: ContactInfo
    operatingHours: OperatingHours
    currentWaitTime: Optional[int] = None
    walkInAccepted: bool
    servicesOffered: List[str] = Field(default_factory=list)
    pricing: UrgentCarePricing
    acceptedInsurance: List[str] = Field(default_factory=list)
    ratings: QualityRatings


class EmergencyServices(BaseModel):
    """Payload of GET /api/emergency."""
    emergencyRooms: List[EmergencyRoom] = Field(default_factory=list)
    urgentCare: List[UrgentCare] = Field(default_factory=list)


# =============================================================================
# Clinical Trial Models
# =============================================================================


class TrialIntervention(HealthcareRecord):
    type: InterventionType
    name: str
    description: Optional[str] = None


class TrialEligibility(HealthcareRecord):
    gender: EligibilityGender
    minAge: int
    maxAge: int
    healthyVolunteers: bool
    criteria: List[str] = Field(default_factory=list)


class TrialLocation(HealthcareRecord):
    facility: str
    city: str
    state: str = ""
    country: str
    status: TrialSiteStatus
    contactName: Optional[str] = None
    contactPhone: Optional[str] = None
    contactEmail: Optional[str] = None


class TrialCompensation(HealthcareRecord):
    amount: Optional[float] = None
    frequency: Optional[str] = None
    description: str
    travelReimbursement: bool


class TrialEnrollment(HealthcareRecord):
    current: int = Field(..., ge=0)
    target: int = Field(..., ge=0)


class ClinicalTrial(HealthcareRecord):
    """ClinicalTrials.gov study; slow-moving, cached for a day."""
    id: str
    nctId: str = Field(..., description="ClinicalTrials.gov identifier")
    title: str
    briefSummary: str
    detailedDescription: Optional[str] = None
    status: TrialStatus
    phase: TrialPhase
    studyType: StudyType
    conditions: List[str] = Field(default_factory=list)
    interventions: List[TrialIntervention] = Field(default_factory=list)
    eligibility: TrialEligibility
    locations: List[TrialLocation] = Field(default_factory=list)
    sponsor: str
    compensation: Optional[TrialCompensation] = None
    startDate: str
    estimatedCompletionDate: Optional[str] = None
    enrollment: TrialEnrollment
    contactInfo: ContactInfo
    lastUpdated: datetime = Field(default_factory=utc_now)


# =============================================================================
# Medical Tourism Models
# =============================================================================


class InternationalHospital(HealthcareRecord):
    id: str
    name: str
    address: Address
    accreditations: List[Accreditation] = Field(default_factory=list)
    specialties: List[str] = Field(default_factory=list)
    internationalPatientServices: bool
    interpreterServices: List[str] = Field(default_factory=list)
    website: str
    ratings: QualityRatings


class TourismProcedure(HealthcareRecord):
    procedureName: str
    averageCostLocal: float
    averageCostUS: float
    savingsPercentage: float
    recoveryTimeWeeks: float
    hospitalStayDays: int


class TravelInfo(HealthcareRecord):
    flightEstimate: PriceRange
    flightDurationHours: float
    accommodationPerNight: PriceRange
    localTransportDaily: float
    mealCostDaily: float
    recommendedStayDays: int


class CostOfLivingData(HealthcareRecord):
    index: float = Field(..., description="Relative to US = 100")
    mealCostAverage: float
    publicTransport: float
    taxi: float
    currency: str
    exchangeRate: float


class VisaInfo(HealthcareRecord):
    required: bool
    type: Optional[str] = None
    processingTimeDays: Optional[int] = None
    medicalVisaAvailable: Optional[bool] = None
    eVisaAvailable: Optional[bool] = None


class TourismQualityIndicators(HealthcareRecord):
    jciAccreditedHospitals: int
    medicalTourismRanking: Optional[int] = None


class MedicalTourismDestination(HealthcareRecord):
    """
    Destination city with its hospitals and cost comparisons.

    travelInfo and costOfLiving are replaced at request time with values from the
    travel pricing source.
    """
    id: str
    country: str
    city: str
    hospitals: List[InternationalHospital] = Field(default_factory=list)
    popularProcedures: List[TourismProcedure] = Field(default_factory=list)
    averageSavings: float = Field(..., description="Percentage vs US prices")
    travelInfo: TravelInfo
    costOfLiving: CostOfLivingData
    visaRequirements: VisaInfo
    languagesSpoken: List[str] = Field(default_factory=list)
    qualityIndicators: TourismQualityIndicators


class TravelCostBreakdown(BaseModel):
    """Estimated trip cost; total adds the fixed costs to each flight range field."""
    flights: PriceRange
    accommodation: float
    meals: float
    transport: float
    total: PriceRange


class DestinationTravelCost(BaseModel):
    """Payload of the medical-tourism cost-calculation sub-mode."""
    destination: MedicalTourismDestination
    travelCosts: TravelCostBreakdown


# =============================================================================
# Insurance Models
# =============================================================================


class IndividualFamilyAmount(HealthcareRecord):
    individual: float
    family: float


class PlanCopays(HealthcareRecord):
    primaryCare: float
    specialist: float
    urgentCare: float
    emergencyRoom: float
    genericDrug: float
    brandDrug: float


class InsurancePlan(HealthcareRecord):
    id: str
    carrierId: str
    carrierName: str
    planName: str
    planType: PlanType
    metalLevel: Optional[MetalLevel] = None
    premium: IndividualFamilyAmount
    deductible: IndividualFamilyAmount
    outOfPocketMax: IndividualFamilyAmount
    copays: PlanCopays
    coinsurance: float = Field(..., description="Percentage")
    hsaEligible: bool
    networkSize: int
    rating: Optional[float] = None
    stateAvailable: List[str] = Field(default_factory=list)


class InsurancePlanFilters(BaseModel):
    planType: Optional[List[PlanType]] = None
    metalLevel: Optional[List[MetalLevel]] = None
    maxPremium: Optional[float] = Field(default=None, ge=0.0)


# =============================================================================
# Wearable & Health Metric Models
# =============================================================================


class VitalReading(HealthcareRecord):
    value: float
    unit: str
    timestamp: datetime
    context: Optional[str] = None


class BloodPressureReading(HealthcareRecord):
    systolic: int
    diastolic: int
    pulse: int
    timestamp: datetime


class GlucoseReading(HealthcareRecord):
    value: float
    unit: GlucoseUnit
    timestamp: datetime
    mealContext: Optional[str] = None


class SleepData(HealthcareRecord):
    totalMinutes: int
    deepSleepMinutes: int
    lightSleepMinutes: int
    remSleepMinutes: int
    awakeMinutes: int
    sleepScore: Optional[int] = None
    bedtime: str
    wakeTime: str


class HealthMetrics(HealthcareRecord):
    """One day of metrics synced from a wearable platform."""
    userId: str
    date: str
    heartRate: Optional[VitalReading] = None
    bloodPressure: Optional[BloodPressureReading] = None
    bloodGlucose: Optional[GlucoseReading] = None
    steps: Optional[int] = None
    activeMinutes: Optional[int] = None
    caloriesBurned: Optional[int] = None
    sleep: Optional[SleepData] = None
    weight: Optional[float] = None
    bodyFat: Optional[float] = None
    oxygenSaturation: Optional[float] = None
    respiratoryRate: Optional[float] = None
    temperature: Optional[float] = None
    source: str


class SupportedDevice(BaseModel):
    id: DeviceType
    name: str
    platform: str
    metrics: List[str]
    authType: str


class WearableSyncRequest(BaseModel):
    """
    Body of POST /api/wearables.

    Fields are optional at the schema level so the handler can answer a missing
    field with the MISSING_PARAMS envelope rather than a framework error.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    userId: Optional[str] = None
    deviceType: Optional[str] = None
    accessToken: Optional[str] = None


# =============================================================================
# Search Contract
# =============================================================================


class GeoLocation(BaseModel):
    lat: float = Field(..., ge=-90.0, le=90.0)
    lng: float = Field(..., ge=-180.0, le=180.0)
    radius: float = Field(..., gt=0.0, description="Miles")


class PriceBounds(BaseModel):
    min: float = Field(default=0.0, ge=0.0)
    max: float = Field(default=float(2**53 - 1), ge=0.0)


class SearchFilters(BaseModel):
    """
    Generic query contract shared by provider and price searches.

    The filters are echoed back in every SearchResult and are part of the cache key.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        json_schema_extra={
            "example": {
                "procedureCode": "27447",
                "zipCode": "90048",
                "priceRange": {"min": 20000, "max": 40000},
                "sortBy": "price",
                "sortOrder": "asc",
                "page": 1,
                "limit": 20,
            }
        },
    )

    query: Optional[str] = None
    procedureCode: Optional[str] = None
    location: Optional[GeoLocation] = None
    zipCode: Optional[str] = None
    state: Optional[str] = None
    priceRange: Optional[PriceBounds] = None
    providerTypes: Optional[List[ProviderType]] = None
    insuranceAccepted: Optional[List[str]] = None
    qualityRating: Optional[float] = Field(default=None, ge=0.0, le=5.0)
    accreditations: Optional[List[str]] = None
    sortBy: Optional[SortBy] = None
    sortOrder: Optional[SortOrder] = None
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1, le=100)


class SearchResult(BaseModel, Generic[T]):
    """
    One page of a filtered, sorted search.

    total counts every record that passed the filters; hasMore is true iff
    total > page * limit. failedSources lists upstreams skipped under
    partial-result fan-out and is empty otherwise.
    """
    data: List[T]
    total: int = Field(..., ge=0)
    page: int
    limit: int
    hasMore: bool
    filters: SearchFilters
    dataFreshness: DataFreshness
    failedSources: List[str] = Field(default_factory=list)


class TrialSearchFilters(BaseModel):
    status: Optional[List[TrialStatus]] = None
    phase: Optional[List[TrialPhase]] = None
    location: Optional[GeoLocation] = None


# =============================================================================
# API Envelope
# =============================================================================


class APIError(BaseModel):
    code: str = Field(..., description="Machine-readable error code, e.g. MISSING_CONDITION")
    message: str
    details: Optional[Dict[str, Any]] = None


class ResponseMeta(BaseModel):
    requestId: str
    timestamp: datetime = Field(default_factory=utc_now)
    cached: bool = False
    dataSources: List[DataSource] = Field(default_factory=list)


class APIResponse(BaseModel):
    """
    Uniform envelope returned by every endpoint.

    success=True carries data; success=False carries error. meta is present on
    successful responses.
    """
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": False,
                "error": {
                    "code": "MISSING_PROCEDURE_CODE",
                    "message": "procedureCode query parameter is required",
                },
            }
        }
    )

    success: bool
    data: Optional[Any] = None
    error: Optional[APIError] = None
    meta: Optional[ResponseMeta] = None
