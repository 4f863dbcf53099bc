"""
API package initialization.

This package contains FastAPI router modules for the price transparency API,
all mounted under /api:
- providers: Provider search and NPI lookup
- prices: Procedure price comparison
- drugs: Drug catalog search and pharmacy price quotes
- emergency: ER wait times and urgent care near a point
- clinical_trials: Clinical trial search
- medical_tourism: International destinations and trip cost estimates
- telemedicine: Virtual care providers
- insurance: Marketplace plan lookup
- wearables: Wearable sync and supported-device catalog

responses holds the APIResponse envelope helpers shared by every router.
"""

from fastapi import APIRouter

# Import router modules
from price_transparency.api.clinical_trials import router as clinical_trials_router
from price_transparency.api.drugs import router as drugs_router
from price_transparency.api.emergency import router as emergency_router
from price_transparency.api.insurance import router as insurance_router
from price_transparency.api.medical_tourism import router as medical_tourism_router
from price_transparency.api.prices import router as prices_router
from price_transparency.api.providers import router as providers_router
from price_transparency.api.telemedicine import router as telemedicine_router
from price_transparency.api.wearables import router as wearables_router

# Create main API router; every sub-router carries its own prefix
api_router = APIRouter(prefix="/api")

api_router.include_router(providers_router)
api_router.include_router(prices_router)
api_router.include_router(drugs_router)
api_router.include_router(emergency_router)
api_router.include_router(clinical_trials_router)
api_router.include_router(medical_tourism_router)
api_router.include_router(telemedicine_router)
api_router.include_router(insurance_router)
api_router.include_router(wearables_router)

__all__ = [
    "api_router",
    "providers_router",
    "prices_router",
    "drugs_router",
    "emergency_router",
    "clinical_trials_router",
    "medical_tourism_router",
    "telemedicine_router",
    "insurance_router",
    "wearables_router",
]
