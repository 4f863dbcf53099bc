"""
FastAPI router module for wearable devices.

POST /api/wearables  {userId, deviceType, accessToken}
    Sync health metrics from the device's platform.
    - any field missing -> 400 MISSING_PARAMS
    - deviceType outside the catalog -> 400 INVALID_DEVICE
    - catalog device without a sync integration -> 400 UNSUPPORTED_DEVICE

GET /api/wearables
    Static catalog of supported devices and the metrics each provides.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse

from price_transparency.api.responses import error_response, handle_exception, success_response
from price_transparency.core.dependencies import AggregatorDep
from price_transparency.models.enums import DataSourceType, DeviceType
from price_transparency.models.schemas import SupportedDevice, WearableSyncRequest


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/wearables", tags=["wearables"])

_ACTIVITY_METRICS = ["steps", "heartRate", "sleep", "activeMinutes", "caloriesBurned"]

SUPPORTED_DEVICES: List[SupportedDevice] = [
    SupportedDevice(
        id=DeviceType.APPLE_HEALTH,
        name="Apple Health",
        platform="iOS",
        metrics=_ACTIVITY_METRICS,
        authType="healthkit",
    ),
    SupportedDevice(
        id=DeviceType.GOOGLE_FIT,
        name="Google Fit",
        platform="Android",
        metrics=_ACTIVITY_METRICS,
        authType="oauth2",
    ),
    SupportedDevice(
        id=DeviceType.FITBIT,
        name="Fitbit",
        platform="Cross-platform",
        metrics=_ACTIVITY_METRICS + ["weight"],
        authType="oauth2",
    ),
    SupportedDevice(
        id=DeviceType.GARMIN,
        name="Garmin",
        platform="Cross-platform",
        metrics=_ACTIVITY_METRICS + ["stress"],
        authType="oauth2",
    ),
    SupportedDevice(
        id=DeviceType.OURA,
        name="Oura Ring",
        platform="Cross-platform",
        metrics=["sleep", "heartRate", "readiness", "activity"],
        authType="oauth2",
    ),
    SupportedDevice(
        id=DeviceType.WITHINGS,
        name="Withings",
        platform="Cross-platform",
        metrics=["weight", "bloodPressure", "sleep", "steps"],
        authType="oauth2",
    ),
]

VALID_DEVICES = ["apple_health", "fitbit", "garmin", "google_fit", "oura", "withings"]


@router.post("")
async def sync_wearable(
    aggregator: AggregatorDep,
    body: Optional[WearableSyncRequest] = Body(default=None),
) -> JSONResponse:
    body = body or WearableSyncRequest()
    if not body.userId or not body.deviceType or not body.accessToken:
        logger.warning("Wearable sync rejected: missing userId, deviceType or accessToken")
        return error_response(400, "MISSING_PARAMS", "userId, deviceType, and accessToken are required")

    if body.deviceType not in VALID_DEVICES:
        logger.warning(f"Wearable sync rejected: unknown device {body.deviceType!r}")
        return error_response(
            400,
            "INVALID_DEVICE",
            f"deviceType must be one of: {', '.join(VALID_DEVICES)}",
        )

    try:
        metrics = await aggregator.sync_wearable_data(body.userId, body.deviceType, body.accessToken)
        return success_response(
            [day.model_dump(mode="json") for day in metrics],
            [(body.deviceType, DataSourceType.PARTNER, False)],
        )

    except Exception as e:
        return handle_exception(e, "WEARABLE_SYNC_ERROR", "Failed to sync wearable data")


@router.get("")
async def list_supported_devices() -> JSONResponse:
    return success_response(
        {"supportedDevices": [device.model_dump(mode="json") for device in SUPPORTED_DEVICES]},
        cached=True,
    )
