"""
Reference records served by the mock data sources.

Los Angeles area hospitals, Atorvastatin/Lipitor, a handful of telemedicine
platforms, nearby emergency and urgent care facilities, one recruiting trial and
two medical tourism destinations. Values that would vary upstream (cash prices,
pharmacy quotes, wearable readings) are produced by the mock sources from a
random.Random seeded with the request inputs, so the same request always yields
the same data.
"""

from typing import Dict, List

from price_transparency.models.enums import (
    AccreditationOrganization,
    AccreditationStatus,
    CapacityStatus,
    DataSourceType,
    EligibilityGender,
    InterventionType,
    LeapfrogGrade,
    MetalLevel,
    PlanType,
    ProviderType,
    StudyType,
    TelemedicineCategory,
    TrialPhase,
    TrialSiteStatus,
    TrialStatus,
    WaitTimeTrend,
)
from price_transparency.models.schemas import (
    Accreditation,
    Address,
    ClinicalTrial,
    ContactInfo,
    Coordinates,
    CostOfLivingData,
    DataSource,
    DayHours,
    Drug,
    EmergencyRoom,
    ERCostEstimate,
    IndividualFamilyAmount,
    InsurancePlan,
    InternationalHospital,
    MedicalTourismDestination,
    OperatingHours,
    PlanCopays,
    PriceRange,
    Provider,
    QualityRatings,
    TelemedicineAvailability,
    TelemedicinePricing,
    TelemedicineProvider,
    TelemedicineRatings,
    TelemedicineService,
    TourismProcedure,
    TourismQualityIndicators,
    TravelInfo,
    TrialCompensation,
    TrialEligibility,
    TrialEnrollment,
    TrialIntervention,
    TrialLocation,
    UrgentCare,
    UrgentCarePricing,
    VisaInfo,
)


def _price_range(low: float, high: float, median: float, p25: float, p75: float) -> PriceRange:
    return PriceRange(min=low, max=high, median=median, percentile25=p25, percentile75=p75)


def _daily_hours(open_: str, close: str) -> OperatingHours:
    day = DayHours(open=open_, close=close)
    return OperatingHours(
        monday=day, tuesday=day, wednesday=day, thursday=day,
        friday=day, saturday=day, sunday=day,
    )


ALWAYS_OPEN = OperatingHours(monday=DayHours(open="00:00", close="23:59"), is24Hours=True)


# =============================================================================
# Providers
# =============================================================================


# (id, npi, name, overall, leapfrog, street, zip, lat, lng, insurance)
_PROVIDER_ROWS = [
    ("1", "1234567890", "Cedars-Sinai Medical Center", 4.8, LeapfrogGrade.A,
     "8700 Beverly Blvd", "90048", 34.0762, -118.3801,
     ["Aetna", "Blue Cross", "Cigna", "United Healthcare"]),
    ("2", "2345678901", "UCLA Medical Center", 4.7, LeapfrogGrade.A,
     "757 Westwood Plaza", "90095", 34.0664, -118.4466,
     ["Aetna", "Blue Cross", "Cigna", "United Healthcare"]),
    ("3", "3456789012", "Providence Saint John's", 4.5, LeapfrogGrade.B,
     "2121 Santa Monica Blvd", "90404", 34.0306, -118.4793,
     ["Aetna", "Blue Cross", "United Healthcare"]),
    ("4", "4567890123", "Torrance Memorial", 4.3, LeapfrogGrade.A,
     "3330 Lomita Blvd", "90505", 33.8130, -118.3451,
     ["Blue Cross", "Cigna", "United Healthcare"]),
    ("5", "5678901234", "Kaiser Permanente", 4.1, LeapfrogGrade.B,
     "4867 Sunset Blvd", "90027", 34.0983, -118.2929,
     ["Kaiser Permanente", "Medicare"]),
]


def npi_registry_source() -> DataSource:
    return DataSource(name="NPI Registry", type=DataSourceType.GOVERNMENT)


def cms_source(name: str = "CMS") -> DataSource:
    return DataSource(name=name, type=DataSourceType.GOVERNMENT)


def mock_providers() -> List[Provider]:
    providers = []
    for (id_, npi, name, overall, grade, street, zip_code, lat, lng, insurance) in _PROVIDER_ROWS:
        providers.append(
            Provider(
                id=id_,
                npi=npi,
                name=name,
                type=ProviderType.HOSPITAL,
                address=Address(street=street, city="Los Angeles", state="CA", zipCode=zip_code),
                contact=ContactInfo(phone="(555) 123-4567"),
                coordinates=Coordinates(lat=lat, lng=lng),
                accreditations=[
                    Accreditation(
                        name="Joint Commission",
                        organization=AccreditationOrganization.JOINT_COMMISSION,
                        status=AccreditationStatus.ACCREDITED,
                    )
                ],
                qualityRatings=QualityRatings(
                    overall=overall,
                    patientSatisfaction=4.0,
                    safetyScore=4.5,
                    reviewCount=234,
                    leapfrogGrade=grade,
                    sources=[cms_source()],
                ),
                services=["Emergency Care", "Surgery", "Imaging"],
                acceptedInsurance=insurance,
                operatingHours=ALWAYS_OPEN,
                isVerified=True,
                dataSource=npi_registry_source(),
            )
        )
    return providers


# Hospital Compare star ratings for the hospitals CMS has scored
CMS_STAR_RATINGS: Dict[str, int] = {
    "1234567890": 5,
    "2345678901": 5,
    "3456789012": 4,
    "4567890123": 4,
}


# =============================================================================
# Drugs
# =============================================================================


PHARMACIES = ["CVS", "Walgreens", "Rite Aid", "Costco", "Walmart"]


def mock_drugs() -> List[Drug]:
    return [
        Drug(
            id="drug-1",
            ndc="00069-0150-30",
            name="Lipitor",
            genericName="Atorvastatin",
            brandNames=["Lipitor"],
            manufacturer="Pfizer",
            dosageForm="Tablet",
            strength="20mg",
            quantity=30,
            isGeneric=False,
            requiresPrescription=True,
            therapeuticClass="Statins",
        ),
        Drug(
            id="drug-2",
            ndc="00093-7180-01",
            name="Atorvastatin",
            genericName="Atorvastatin",
            brandNames=["Lipitor"],
            manufacturer="Teva",
            dosageForm="Tablet",
            strength="20mg",
            quantity=30,
            isGeneric=True,
            requiresPrescription=True,
            therapeuticClass="Statins",
        ),
    ]


# =============================================================================
# Telemedicine
# =============================================================================


def mock_telemedicine_providers() -> List[TelemedicineProvider]:
    return [
        TelemedicineProvider(
            id="tele-1",
            name="Teladoc",
            description="24/7 access to doctors via phone or video",
            services=[
                TelemedicineService(
                    name="General Medical", description="Primary care consultations",
                    price=75, duration=15, category=TelemedicineCategory.PRIMARY_CARE,
                ),
                TelemedicineService(
                    name="Mental Health", description="Therapy and psychiatry",
                    price=99, duration=45, category=TelemedicineCategory.MENTAL_HEALTH,
                ),
            ],
            pricing=TelemedicinePricing(consultationFee=75, subscriptionMonthly=15),
            availability=TelemedicineAvailability(
                is24_7=True, averageWaitTime=10, scheduleInAdvance=True, sameDayAvailable=True,
            ),
            ratings=TelemedicineRatings(overall=4.5, reviewCount=12500, responseTime=8),
            acceptedInsurance=["Aetna", "Blue Cross", "Cigna"],
            languages=["English", "Spanish"],
            specialties=["Primary Care", "Dermatology", "Mental Health"],
            statesAvailable=["CA", "NY", "TX", "FL"],
            website="https://teladoc.com",
        ),
        TelemedicineProvider(
            id="tele-2",
            name="Amwell",
            description="Scheduled and on-demand video visits",
            services=[
                TelemedicineService(
                    name="Urgent Care Visit", description="Cold, flu and minor injuries",
                    price=79, duration=15, category=TelemedicineCategory.URGENT_CARE,
                ),
                TelemedicineService(
                    name="Therapy Session", description="Licensed therapist video session",
                    price=109, duration=45, category=TelemedicineCategory.MENTAL_HEALTH,
                ),
            ],
            pricing=TelemedicinePricing(consultationFee=79, insuranceCopay=20),
            availability=TelemedicineAvailability(
                is24_7=True, averageWaitTime=12, scheduleInAdvance=True, sameDayAvailable=True,
            ),
            ratings=TelemedicineRatings(overall=4.3, reviewCount=8400, responseTime=11),
            acceptedInsurance=["Blue Cross", "United Healthcare"],
            languages=["English"],
            specialties=["Urgent Care", "Mental Health", "Pediatrics"],
            statesAvailable=["CA", "NY", "WA", "IL"],
            website="https://amwell.com",
        ),
    ]


# =============================================================================
# Emergency Services
# =============================================================================


def _er_costs() -> ERCostEstimate:
    return ERCostEstimate(
        lowAcuity=_price_range(500, 1500, 900, 650, 1200),
        moderateAcuity=_price_range(1500, 5000, 2800, 2000, 4000),
        highAcuity=_price_range(5000, 15000, 8500, 6500, 12000),
        critical=_price_range(15000, 50000, 28000, 20000, 40000),
    )


def mock_emergency_rooms() -> List[EmergencyRoom]:
    return [
        EmergencyRoom(
            id="er-1",
            providerId="1",
            hospitalName="Cedars-Sinai Emergency",
            address=Address(street="8700 Beverly Blvd", city="Los Angeles", state="CA", zipCode="90048"),
            coordinates=Coordinates(lat=34.0762, lng=-118.3785),
            contact=ContactInfo(phone="(310) 423-3277"),
            currentWaitTime=45,
            waitTimeTrend=WaitTimeTrend.DECREASING,
            capacityStatus=CapacityStatus.MODERATE,
            traumaLevel=1,
            pediatricER=True,
            strokeCenter=True,
            cardiacCenter=True,
            burnCenter=False,
            estimatedCosts=_er_costs(),
        ),
        EmergencyRoom(
            id="er-2",
            providerId="2",
            hospitalName="UCLA Ronald Reagan Emergency",
            address=Address(street="757 Westwood Plaza", city="Los Angeles", state="CA", zipCode="90095"),
            coordinates=Coordinates(lat=34.0663, lng=-118.4455),
            contact=ContactInfo(phone="(310) 825-2111"),
            currentWaitTime=30,
            waitTimeTrend=WaitTimeTrend.STABLE,
            capacityStatus=CapacityStatus.HIGH,
            traumaLevel=1,
            pediatricER=True,
            strokeCenter=True,
            cardiacCenter=True,
            burnCenter=True,
            estimatedCosts=_er_costs(),
        ),
    ]


def mock_urgent_care() -> List[UrgentCare]:
    return [
        UrgentCare(
            id="uc-1",
            name="Downtown LA Urgent Care",
            address=Address(street="888 S Figueroa St", city="Los Angeles", state="CA", zipCode="90017"),
            coordinates=Coordinates(lat=34.0489, lng=-118.2592),
            contact=ContactInfo(phone="(213) 555-0142"),
            operatingHours=_daily_hours("08:00", "20:00"),
            currentWaitTime=20,
            walkInAccepted=True,
            servicesOffered=["X-Ray", "Lab Work", "Stitches", "Flu Shots"],
            pricing=UrgentCarePricing(visitFee=150, xrayFee=95, labFee=60),
            acceptedInsurance=["Aetna", "Blue Cross", "Cigna"],
            ratings=QualityRatings(overall=4.4, reviewCount=512),
        ),
        UrgentCare(
            id="uc-2",
            name="Santa Monica Urgent Care",
            address=Address(street="2424 Wilshire Blvd", city="Santa Monica", state="CA", zipCode="90403"),
            coordinates=Coordinates(lat=34.0341, lng=-118.4789),
            contact=ContactInfo(phone="(310) 555-0199"),
            operatingHours=_daily_hours("09:00", "21:00"),
            currentWaitTime=35,
            walkInAccepted=True,
            servicesOffered=["X-Ray", "Lab Work", "Physicals"],
            pricing=UrgentCarePricing(visitFee=175, xrayFee=110),
            acceptedInsurance=["Blue Cross", "United Healthcare"],
            ratings=QualityRatings(overall=4.1, reviewCount=287),
        ),
    ]


# =============================================================================
# Clinical Trials
# =============================================================================


def mock_clinical_trial(condition: str) -> ClinicalTrial:
    return ClinicalTrial(
        id="trial-1",
        nctId="NCT04567890",
        title=f"Phase 3 Study of Novel Treatment for {condition}",
        briefSummary=(
            "A randomized, double-blind study evaluating the efficacy and safety "
            "of a new treatment approach."
        ),
        status=TrialStatus.RECRUITING,
        phase=TrialPhase.PHASE_3,
        studyType=StudyType.INTERVENTIONAL,
        conditions=[condition],
        interventions=[
            TrialIntervention(
                type=InterventionType.DRUG, name="Study Drug XYZ", description="Novel therapeutic agent",
            )
        ],
        eligibility=TrialEligibility(
            gender=EligibilityGender.ALL,
            minAge=18,
            maxAge=75,
            healthyVolunteers=False,
            criteria=["Diagnosed with condition", "No prior treatment with similar drugs"],
        ),
        locations=[
            TrialLocation(
                facility="UCLA Medical Center", city="Los Angeles", state="CA",
                country="US", status=TrialSiteStatus.RECRUITING,
            )
        ],
        sponsor="Pharmaceutical Research Corp",
        compensation=TrialCompensation(
            amount=500, frequency="per visit",
            description="Compensation for time and travel", travelReimbursement=True,
        ),
        startDate="2024-01-15",
        estimatedCompletionDate="2026-06-30",
        enrollment=TrialEnrollment(current=156, target=300),
        contactInfo=ContactInfo(phone="(310) 555-0123", email="trials@example.com"),
    )


# =============================================================================
# Medical Tourism
# =============================================================================


def _jci() -> Accreditation:
    return Accreditation(
        name="JCI", organization=AccreditationOrganization.JCI, status=AccreditationStatus.ACCREDITED,
    )


def mock_tourism_destinations() -> List[MedicalTourismDestination]:
    return [
        MedicalTourismDestination(
            id="dest-1",
            country="Mexico",
            city="Tijuana",
            hospitals=[
                InternationalHospital(
                    id="hosp-1",
                    name="Hospital Angeles Tijuana",
                    address=Address(
                        street="Av Paseo de los Heroes", city="Tijuana", state="BC",
                        zipCode="22010", country="Mexico",
                    ),
                    accreditations=[_jci()],
                    specialties=["Orthopedics", "Cardiology", "Bariatric Surgery"],
                    internationalPatientServices=True,
                    interpreterServices=["English", "Spanish"],
                    website="https://hospitalangelestijuana.com",
                    ratings=QualityRatings(overall=4.6, reviewCount=890),
                )
            ],
            popularProcedures=[
                TourismProcedure(
                    procedureName="Knee Replacement", averageCostLocal=12000, averageCostUS=45000,
                    savingsPercentage=73, recoveryTimeWeeks=6, hospitalStayDays=3,
                ),
                TourismProcedure(
                    procedureName="Dental Implants", averageCostLocal=1500, averageCostUS=5000,
                    savingsPercentage=70, recoveryTimeWeeks=2, hospitalStayDays=0,
                ),
            ],
            averageSavings=65,
            travelInfo=TravelInfo(
                flightEstimate=_price_range(150, 400, 250, 180, 320),
                flightDurationHours=2.5,
                accommodationPerNight=_price_range(40, 150, 80, 55, 110),
                localTransportDaily=15,
                mealCostDaily=25,
                recommendedStayDays=10,
            ),
            costOfLiving=CostOfLivingData(
                index=45, mealCostAverage=8, publicTransport=1, taxi=5, currency="MXN", exchangeRate=17.5,
            ),
            visaRequirements=VisaInfo(required=False, medicalVisaAvailable=False),
            languagesSpoken=["Spanish", "English"],
            qualityIndicators=TourismQualityIndicators(jciAccreditedHospitals=8),
        ),
        MedicalTourismDestination(
            id="dest-2",
            country="Thailand",
            city="Bangkok",
            hospitals=[
                InternationalHospital(
                    id="hosp-2",
                    name="Bumrungrad International Hospital",
                    address=Address(
                        street="33 Sukhumvit 3", city="Bangkok", state="Bangkok",
                        zipCode="10110", country="Thailand",
                    ),
                    accreditations=[_jci()],
                    specialties=["Cardiology", "Orthopedics", "Oncology"],
                    internationalPatientServices=True,
                    interpreterServices=["English", "Arabic", "Japanese"],
                    website="https://www.bumrungrad.com",
                    ratings=QualityRatings(overall=4.7, reviewCount=2150),
                )
            ],
            popularProcedures=[
                TourismProcedure(
                    procedureName="Knee Replacement", averageCostLocal=15000, averageCostUS=45000,
                    savingsPercentage=67, recoveryTimeWeeks=6, hospitalStayDays=5,
                ),
                TourismProcedure(
                    procedureName="Heart Bypass", averageCostLocal=22000, averageCostUS=123000,
                    savingsPercentage=82, recoveryTimeWeeks=8, hospitalStayDays=7,
                ),
            ],
            averageSavings=70,
            travelInfo=TravelInfo(
                flightEstimate=_price_range(700, 1600, 1050, 850, 1300),
                flightDurationHours=17,
                accommodationPerNight=_price_range(35, 180, 75, 50, 120),
                localTransportDaily=10,
                mealCostDaily=20,
                recommendedStayDays=21,
            ),
            costOfLiving=CostOfLivingData(
                index=38, mealCostAverage=6, publicTransport=1, taxi=4, currency="THB", exchangeRate=35.0,
            ),
            visaRequirements=VisaInfo(
                required=True, type="Medical Treatment Visa", processingTimeDays=5,
                medicalVisaAvailable=True, eVisaAvailable=True,
            ),
            languagesSpoken=["Thai", "English"],
            qualityIndicators=TourismQualityIndicators(jciAccreditedHospitals=60, medicalTourismRanking=3),
        ),
    ]


# Live travel-pricing estimates per destination country
COST_OF_LIVING: Dict[str, CostOfLivingData] = {
    "Mexico": CostOfLivingData(
        index=45, mealCostAverage=8, publicTransport=1, taxi=5, currency="MXN", exchangeRate=17.5,
    ),
    "Thailand": CostOfLivingData(
        index=38, mealCostAverage=6, publicTransport=1, taxi=4, currency="THB", exchangeRate=35.0,
    ),
}

DEFAULT_COST_OF_LIVING = CostOfLivingData(
    index=60, mealCostAverage=12, publicTransport=2, taxi=10, currency="USD", exchangeRate=1.0,
)

DEFAULT_TRAVEL_INFO = TravelInfo(
    flightEstimate=_price_range(400, 1200, 700, 500, 900),
    flightDurationHours=5,
    accommodationPerNight=_price_range(50, 200, 100, 70, 150),
    localTransportDaily=20,
    mealCostDaily=30,
    recommendedStayDays=14,
)

FLIGHT_PRICES = _price_range(300, 1000, 550, 400, 750)

ACCOMMODATION_PER_NIGHT = 100.0


# =============================================================================
# Insurance
# =============================================================================


def mock_insurance_plans(state: str) -> List[InsurancePlan]:
    state = state.upper()
    return [
        InsurancePlan(
            id=f"{state}-bronze-hmo",
            carrierId="carrier-1",
            carrierName="Blue Cross",
            planName="Blue Cross Bronze HMO",
            planType=PlanType.HMO,
            metalLevel=MetalLevel.BRONZE,
            premium=IndividualFamilyAmount(individual=320, family=890),
            deductible=IndividualFamilyAmount(individual=7000, family=14000),
            outOfPocketMax=IndividualFamilyAmount(individual=9100, family=18200),
            copays=PlanCopays(
                primaryCare=60, specialist=90, urgentCare=90,
                emergencyRoom=500, genericDrug=20, brandDrug=75,
            ),
            coinsurance=40,
            hsaEligible=True,
            networkSize=4200,
            rating=3.4,
            stateAvailable=[state],
        ),
        InsurancePlan(
            id=f"{state}-silver-ppo",
            carrierId="carrier-2",
            carrierName="Aetna",
            planName="Aetna Silver PPO",
            planType=PlanType.PPO,
            metalLevel=MetalLevel.SILVER,
            premium=IndividualFamilyAmount(individual=465, family=1290),
            deductible=IndividualFamilyAmount(individual=4500, family=9000),
            outOfPocketMax=IndividualFamilyAmount(individual=8700, family=17400),
            copays=PlanCopays(
                primaryCare=35, specialist=70, urgentCare=75,
                emergencyRoom=400, genericDrug=15, brandDrug=50,
            ),
            coinsurance=30,
            hsaEligible=False,
            networkSize=9800,
            rating=3.9,
            stateAvailable=[state],
        ),
        InsurancePlan(
            id=f"{state}-gold-epo",
            carrierId="carrier-3",
            carrierName="Cigna",
            planName="Cigna Gold EPO",
            planType=PlanType.EPO,
            metalLevel=MetalLevel.GOLD,
            premium=IndividualFamilyAmount(individual=610, family=1700),
            deductible=IndividualFamilyAmount(individual=1500, family=3000),
            outOfPocketMax=IndividualFamilyAmount(individual=6000, family=12000),
            copays=PlanCopays(
                primaryCare=20, specialist=45, urgentCare=50,
                emergencyRoom=300, genericDrug=10, brandDrug=35,
            ),
            coinsurance=20,
            hsaEligible=False,
            networkSize=7100,
            rating=4.2,
            stateAvailable=[state],
        ),
    ]
