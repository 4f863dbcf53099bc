"""
httpx-backed data sources for public upstreams that need no API key.

- NPIRegistryDirectory: NPPES NPI Registry API v2.1 (provider identity/location)
- ClinicalTrialsGovRegistry: ClinicalTrials.gov API v2 (study search)
- OpenFDADrugCatalog: openFDA NDC directory (drug catalog search)

Each source owns an httpx.AsyncClient unless one is injected (tests pass a client
built on httpx.MockTransport). HTTP errors propagate as httpx exceptions; the
aggregator wraps them in UpstreamError naming the source.
"""

import logging
import re
from typing import Any, Dict, List, Optional

import httpx

from price_transparency.core.errors import UpstreamError
from price_transparency.models.enums import (
    DataSourceType,
    EligibilityGender,
    InterventionType,
    ProviderType,
    StudyType,
    TrialPhase,
    TrialSiteStatus,
    TrialStatus,
)
from price_transparency.models.schemas import (
    Address,
    ClinicalTrial,
    ContactInfo,
    DataSource,
    Drug,
    Provider,
    QualityRatings,
    SearchFilters,
    TrialEligibility,
    TrialEnrollment,
    TrialIntervention,
    TrialLocation,
    TrialSearchFilters,
)
from price_transparency.sources.base import ClinicalTrialRegistry, DrugCatalog, ProviderDirectory


logger = logging.getLogger(__name__)


class HttpSourceMixin:
    """Shared client lifecycle and JSON GET for httpx-backed sources."""

    name: str

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = base_url
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)

    async def _get_json(self, params: Dict[str, Any]) -> Dict[str, Any]:
        logger.debug(f"[{self.name}] GET {self.base_url} params={params}")
        response = await self._client.get(self.base_url, params=params)
        response.raise_for_status()
        return response.json()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


# =============================================================================
# NPPES NPI Registry
# =============================================================================


_NPI_PATTERN = re.compile(r"^\d{10}$")

# Taxonomy description keyword -> provider type, first match wins
_TAXONOMY_TYPES = [
    ("hospital", ProviderType.HOSPITAL),
    ("urgent care", ProviderType.URGENT_CARE),
    ("radiology", ProviderType.IMAGING_CENTER),
    ("imaging", ProviderType.IMAGING_CENTER),
    ("surgical", ProviderType.SURGERY_CENTER),
]


def _provider_type(enumeration_type: str, taxonomy: str) -> ProviderType:
    if enumeration_type == "NPI-1":
        return ProviderType.PHYSICIAN
    lowered = taxonomy.lower()
    for keyword, provider_type in _TAXONOMY_TYPES:
        if keyword in lowered:
            return provider_type
    return ProviderType.CLINIC


def parse_npi_result(result: Dict[str, Any]) -> Provider:
    """Convert one NPPES ``results`` entry into a Provider."""
    npi = str(result["number"])
    basic = result.get("basic", {})
    enumeration_type = result.get("enumeration_type", "NPI-2")

    if enumeration_type == "NPI-1":
        parts = [basic.get("first_name", ""), basic.get("last_name", "")]
        name = " ".join(p.title() for p in parts if p)
        if basic.get("credential"):
            name = f"{name}, {basic['credential']}"
    else:
        name = basic.get("organization_name", "").title()

    addresses = result.get("addresses", [])
    location = next(
        (a for a in addresses if a.get("address_purpose") == "LOCATION"),
        addresses[0] if addresses else {},
    )

    taxonomies = result.get("taxonomies", [])
    primary = next((t for t in taxonomies if t.get("primary")), taxonomies[0] if taxonomies else {})
    specialty = primary.get("desc") or None

    return Provider(
        id=npi,
        npi=npi,
        name=name or npi,
        type=_provider_type(enumeration_type, specialty or ""),
        specialty=specialty,
        address=Address(
            street=location.get("address_1", ""),
            city=location.get("city", "").title(),
            state=location.get("state", ""),
            zipCode=str(location.get("postal_code", ""))[:5],
            country=location.get("country_code", "US"),
        ),
        contact=ContactInfo(
            phone=location.get("telephone_number", ""),
            fax=location.get("fax_number"),
        ),
        qualityRatings=QualityRatings(overall=0),
        isVerified=basic.get("status", "A") == "A",
        dataSource=DataSource(name="NPI Registry", type=DataSourceType.GOVERNMENT),
    )


class NPIRegistryDirectory(HttpSourceMixin, ProviderDirectory):
    """
    Provider search against the NPPES NPI Registry.

    A ten-digit query is treated as an NPI number, any other query as an
    organization name prefix. NPPES reports request errors in an ``Errors``
    list with HTTP 200; those raise UpstreamError.
    """

    name = "NPI Registry"
    API_VERSION = "2.1"
    MAX_LIMIT = 200

    async def _search(self, params: Dict[str, Any]) -> List[Provider]:
        payload = await self._get_json({"version": self.API_VERSION, **params})
        errors = payload.get("Errors")
        if errors:
            description = "; ".join(e.get("description", "") for e in errors)
            raise UpstreamError(self.name, description)
        return [parse_npi_result(r) for r in payload.get("results", [])]

    async def search_providers(self, filters: SearchFilters) -> List[Provider]:
        params: Dict[str, Any] = {"limit": min(self.MAX_LIMIT, filters.page * filters.limit)}
        if filters.query:
            if _NPI_PATTERN.match(filters.query):
                params["number"] = filters.query
            else:
                params["organization_name"] = f"{filters.query}*"
        if filters.zipCode:
            params["postal_code"] = filters.zipCode
        if filters.state:
            params["state"] = filters.state.upper()
        return await self._search(params)

    async def get_provider(self, npi: str) -> Optional[Provider]:
        providers = await self._search({"number": npi})
        return providers[0] if providers else None


# =============================================================================
# ClinicalTrials.gov v2
# =============================================================================


_TRIAL_STATUS = {
    "RECRUITING": TrialStatus.RECRUITING,
    "NOT_YET_RECRUITING": TrialStatus.NOT_YET_RECRUITING,
    "ACTIVE_NOT_RECRUITING": TrialStatus.ACTIVE_NOT_RECRUITING,
    "ENROLLING_BY_INVITATION": TrialStatus.ACTIVE_NOT_RECRUITING,
    "COMPLETED": TrialStatus.COMPLETED,
    "SUSPENDED": TrialStatus.SUSPENDED,
    "TERMINATED": TrialStatus.TERMINATED,
    "WITHDRAWN": TrialStatus.WITHDRAWN,
}

_TRIAL_PHASE = {
    "EARLY_PHASE1": TrialPhase.PHASE_1,
    "PHASE1": TrialPhase.PHASE_1,
    "PHASE2": TrialPhase.PHASE_2,
    "PHASE3": TrialPhase.PHASE_3,
    "PHASE4": TrialPhase.PHASE_4,
}

_PHASE_ORDER = [TrialPhase.PHASE_1, TrialPhase.PHASE_2, TrialPhase.PHASE_3, TrialPhase.PHASE_4]

_AGE_PATTERN = re.compile(r"^\s*(\d+)\s*(year|month|week|day)", re.IGNORECASE)


def parse_age(value: Optional[str], default: int) -> int:
    """Whole years from a ClinicalTrials.gov age such as '18 Years' or '6 Months'."""
    if not value:
        return default
    match = _AGE_PATTERN.match(value)
    if not match:
        return default
    amount, unit = int(match.group(1)), match.group(2).lower()
    if unit == "year":
        return amount
    if unit == "month":
        return amount // 12
    return 0


def _phase(phases: List[str]) -> TrialPhase:
    mapped = [_TRIAL_PHASE[p] for p in phases if p in _TRIAL_PHASE]
    if not mapped:
        return TrialPhase.NOT_APPLICABLE
    return max(mapped, key=_PHASE_ORDER.index)


def _intervention_type(value: str) -> InterventionType:
    try:
        return InterventionType(value.lower())
    except ValueError:
        return InterventionType.OTHER


def _site_status(value: str) -> TrialSiteStatus:
    if value == "RECRUITING":
        return TrialSiteStatus.RECRUITING
    if value == "COMPLETED":
        return TrialSiteStatus.COMPLETED
    return TrialSiteStatus.NOT_RECRUITING


def _criteria(text: str) -> List[str]:
    lines = (line.strip().lstrip("*-•").strip() for line in text.splitlines())
    return [line for line in lines if line and not line.endswith(":")]


def parse_study(study: Dict[str, Any]) -> ClinicalTrial:
    """Convert one ClinicalTrials.gov v2 ``studies`` entry into a ClinicalTrial."""
    protocol = study.get("protocolSection", {})
    identification = protocol.get("identificationModule", {})
    status = protocol.get("statusModule", {})
    description = protocol.get("descriptionModule", {})
    design = protocol.get("designModule", {})
    eligibility = protocol.get("eligibilityModule", {})
    contacts = protocol.get("contactsLocationsModule", {})
    sponsor = protocol.get("sponsorCollaboratorsModule", {}).get("leadSponsor", {})

    nct_id = identification["nctId"]
    enrollment_info = design.get("enrollmentInfo", {})
    enrollment_count = int(enrollment_info.get("count", 0))
    central = (contacts.get("centralContacts") or [{}])[0]

    study_type = design.get("studyType", "INTERVENTIONAL")

    return ClinicalTrial(
        id=nct_id,
        nctId=nct_id,
        title=identification.get("briefTitle") or identification.get("officialTitle", ""),
        briefSummary=description.get("briefSummary", ""),
        detailedDescription=description.get("detailedDescription"),
        status=_TRIAL_STATUS.get(status.get("overallStatus", ""), TrialStatus.ACTIVE_NOT_RECRUITING),
        phase=_phase(design.get("phases", [])),
        studyType=StudyType.OBSERVATIONAL if study_type == "OBSERVATIONAL" else StudyType.INTERVENTIONAL,
        conditions=protocol.get("conditionsModule", {}).get("conditions", []),
        interventions=[
            TrialIntervention(
                type=_intervention_type(i.get("type", "OTHER")),
                name=i.get("name", ""),
                description=i.get("description"),
            )
            for i in protocol.get("armsInterventionsModule", {}).get("interventions", [])
        ],
        eligibility=TrialEligibility(
            gender=EligibilityGender(eligibility.get("sex", "ALL").lower()),
            minAge=parse_age(eligibility.get("minimumAge"), 0),
            maxAge=parse_age(eligibility.get("maximumAge"), 120),
            healthyVolunteers=bool(eligibility.get("healthyVolunteers", False)),
            criteria=_criteria(eligibility.get("eligibilityCriteria", "")),
        ),
        locations=[
            TrialLocation(
                facility=loc.get("facility", ""),
                city=loc.get("city", ""),
                state=loc.get("state", ""),
                country=loc.get("country", ""),
                status=_site_status(loc.get("status", "")),
            )
            for loc in contacts.get("locations", [])
        ],
        sponsor=sponsor.get("name", ""),
        startDate=status.get("startDateStruct", {}).get("date", ""),
        estimatedCompletionDate=status.get("completionDateStruct", {}).get("date"),
        enrollment=TrialEnrollment(
            current=enrollment_count if enrollment_info.get("type") == "ACTUAL" else 0,
            target=enrollment_count,
        ),
        contactInfo=ContactInfo(
            phone=central.get("phone", ""),
            email=central.get("email"),
        ),
    )


class ClinicalTrialsGovRegistry(HttpSourceMixin, ClinicalTrialRegistry):
    """Condition search against the ClinicalTrials.gov v2 studies endpoint."""

    name = "ClinicalTrials.gov"
    PAGE_SIZE = 50

    async def search_trials(
        self,
        condition: str,
        filters: Optional[TrialSearchFilters] = None,
    ) -> List[ClinicalTrial]:
        params: Dict[str, Any] = {
            "query.cond": condition,
            "format": "json",
            "pageSize": self.PAGE_SIZE,
        }
        if filters is not None and filters.status:
            params["filter.overallStatus"] = ",".join(s.value.upper() for s in filters.status)
        if filters is not None and filters.location is not None:
            loc = filters.location
            params["filter.geo"] = f"distance({loc.lat},{loc.lng},{loc.radius}mi)"

        payload = await self._get_json(params)
        trials = [parse_study(s) for s in payload.get("studies", [])]

        # The v2 API has no plain phase filter; phases are matched locally
        if filters is not None and filters.phase:
            trials = [t for t in trials if t.phase in filters.phase]
        return trials


# =============================================================================
# openFDA NDC Directory
# =============================================================================


_GENERIC_CATEGORIES = {"ANDA", "NDA AUTHORIZED GENERIC"}


def parse_ndc_product(product: Dict[str, Any]) -> Drug:
    """Convert one openFDA NDC ``results`` entry into a Drug."""
    generic_name = product.get("generic_name", "").title()
    brand_name = product.get("brand_name", "").title()
    ingredients = product.get("active_ingredients", [])
    pharm_class = product.get("pharm_class", [])

    return Drug(
        id=product["product_ndc"],
        ndc=product["product_ndc"],
        name=brand_name or generic_name,
        genericName=generic_name,
        brandNames=[brand_name] if brand_name else [],
        manufacturer=product.get("labeler_name", ""),
        dosageForm=product.get("dosage_form", "").title(),
        strength=ingredients[0].get("strength", "") if ingredients else "",
        isGeneric=product.get("marketing_category", "") in _GENERIC_CATEGORIES,
        requiresPrescription="PRESCRIPTION" in product.get("product_type", ""),
        controlledSubstance=bool(product.get("dea_schedule")),
        therapeuticClass=pharm_class[0].split(" [")[0] if pharm_class else "",
    )


class OpenFDADrugCatalog(HttpSourceMixin, DrugCatalog):
    """
    Brand/generic name search against the openFDA NDC directory.

    openFDA answers 404 when nothing matches; that is an empty result, not an error.
    """

    name = "FDA NDC Directory"
    LIMIT = 20

    async def search_drugs(self, query: str) -> List[Drug]:
        term = query.strip().replace('"', "")
        params = {
            "search": f'brand_name:"{term}" generic_name:"{term}"',
            "limit": self.LIMIT,
        }
        try:
            payload = await self._get_json(params)
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                logger.debug(f"[{self.name}] no products match {term!r}")
                return []
            raise
        return [parse_ndc_product(p) for p in payload.get("results", [])]
