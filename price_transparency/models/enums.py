"""
Enumeration definitions for the price transparency backend.

This module provides type-safe enumeration values for every closed vocabulary in
the healthcare data model: provider classification, data provenance, search
ordering, clinical trial lifecycle, insurance plan tiers and wearable devices.

All enums inherit from both `str` and `Enum` to ensure JSON serialization compatibility
with Pydantic models, enabling automatic serialization/deserialization in API responses.
"""

from enum import Enum


class ProviderType(str, Enum):
    """
    Facility or practitioner classification for a provider record.

    Used by the providerTypes search filter (comma-separated on the wire).
    """
    HOSPITAL = "hospital"
    CLINIC = "clinic"
    URGENT_CARE = "urgent_care"
    IMAGING_CENTER = "imaging_center"
    SURGERY_CENTER = "surgery_center"
    PHYSICIAN = "physician"


class AccreditationOrganization(str, Enum):
    """
    Accrediting bodies referenced by provider and hospital records.

    - JCI: Joint Commission International (medical tourism hospitals)
    - Joint Commission: US hospital accreditation
    """
    JCI = "JCI"
    NCQA = "NCQA"
    JOINT_COMMISSION = "Joint Commission"
    AAAHC = "AAAHC"
    DNV = "DNV"
    OTHER = "Other"


class AccreditationStatus(str, Enum):
    ACCREDITED = "accredited"
    PENDING = "pending"
    EXPIRED = "expired"


class LeapfrogGrade(str, Enum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    F = "F"


class DataSourceType(str, Enum):
    """
    Provenance class of a data source.

    Shown to users for disclosure and used to judge how much to trust a record.
    """
    GOVERNMENT = "government"
    COMMERCIAL = "commercial"
    USER_REPORTED = "user_reported"
    PARTNER = "partner"
    SCRAPED = "scraped"


class ConfidenceLevel(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class UpdateFrequency(str, Enum):
    """How often the data behind a search result is refreshed upstream."""
    REAL_TIME = "real_time"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"


class SortBy(str, Enum):
    """
    Sort keys accepted by search endpoints.

    - price: ascending cash price is the natural order (prices endpoint default)
    - rating: descending overall quality rating (providers endpoint default)
    - distance: great-circle distance from the requested location
    - wait_time: current ER wait time
    """
    PRICE = "price"
    DISTANCE = "distance"
    RATING = "rating"
    WAIT_TIME = "wait_time"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class PharmacyType(str, Enum):
    RETAIL = "retail"
    MAIL_ORDER = "mail_order"
    ONLINE = "online"


class CouponProvider(str, Enum):
    GOODRX = "GoodRx"
    RXSAVER = "RxSaver"
    SINGLECARE = "SingleCare"
    BLINK_HEALTH = "Blink Health"
    OTHER = "Other"


class InteractionSeverity(str, Enum):
    MAJOR = "major"
    MODERATE = "moderate"
    MINOR = "minor"


class TelemedicineCategory(str, Enum):
    PRIMARY_CARE = "primary_care"
    MENTAL_HEALTH = "mental_health"
    DERMATOLOGY = "dermatology"
    URGENT_CARE = "urgent_care"
    SPECIALIST = "specialist"
    OTHER = "other"


class WaitTimeTrend(str, Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class CapacityStatus(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    CRITICAL = "critical"


class EmergencyServiceType(str, Enum):
    """Facility selector for the emergency endpoint (type query parameter)."""
    ER = "er"
    URGENT = "urgent"
    ALL = "all"


class TrialStatus(str, Enum):
    """
    Recruitment status of a clinical trial.

    Mirrors the ClinicalTrials.gov overallStatus vocabulary in lower snake case.
    """
    RECRUITING = "recruiting"
    NOT_YET_RECRUITING = "not_yet_recruiting"
    ACTIVE_NOT_RECRUITING = "active_not_recruiting"
    COMPLETED = "completed"
    SUSPENDED = "suspended"
    TERMINATED = "terminated"
    WITHDRAWN = "withdrawn"


class TrialPhase(str, Enum):
    PHASE_1 = "Phase 1"
    PHASE_2 = "Phase 2"
    PHASE_3 = "Phase 3"
    PHASE_4 = "Phase 4"
    NOT_APPLICABLE = "N/A"


class StudyType(str, Enum):
    INTERVENTIONAL = "interventional"
    OBSERVATIONAL = "observational"


class InterventionType(str, Enum):
    DRUG = "drug"
    DEVICE = "device"
    BIOLOGICAL = "biological"
    PROCEDURE = "procedure"
    BEHAVIORAL = "behavioral"
    OTHER = "other"


class EligibilityGender(str, Enum):
    ALL = "all"
    MALE = "male"
    FEMALE = "female"


class TrialSiteStatus(str, Enum):
    RECRUITING = "recruiting"
    NOT_RECRUITING = "not_recruiting"
    COMPLETED = "completed"


class PlanType(str, Enum):
    HMO = "HMO"
    PPO = "PPO"
    EPO = "EPO"
    POS = "POS"
    HDHP = "HDHP"
    CATASTROPHIC = "Catastrophic"


class MetalLevel(str, Enum):
    BRONZE = "Bronze"
    SILVER = "Silver"
    GOLD = "Gold"
    PLATINUM = "Platinum"


class DeviceType(str, Enum):
    """
    Wearable platforms listed in the supported-device catalog.

    Only APPLE_HEALTH, FITBIT, GARMIN and GOOGLE_FIT have a sync source;
    OURA and WITHINGS are listed for connection but cannot be synced yet.
    """
    APPLE_HEALTH = "apple_health"
    GOOGLE_FIT = "google_fit"
    FITBIT = "fitbit"
    GARMIN = "garmin"
    OURA = "oura"
    WITHINGS = "withings"


class GlucoseUnit(str, Enum):
    MG_DL = "mg/dL"
    MMOL_L = "mmol/L"
