"""
Error taxonomy for the price transparency service.

Every failure that reaches a route handler is either one of the classes below or
an arbitrary exception from an upstream collaborator. Route handlers are the
single recovery boundary: they translate a HealthcareDataError into its HTTP
status and machine-readable code, and anything else into the endpoint's generic
500 code.

Classes:
    HealthcareDataError: Base class carrying code, message, details and status.
    ParameterValidationError: Missing or malformed request parameter (400).
    NotFoundError: Referenced entity does not exist (404).
    UnsupportedDeviceError: Wearable device type without a sync source (400).
    UpstreamError: A data-source sub-fetch failed (500).
"""

from typing import Any, Dict, Optional


class HealthcareDataError(Exception):
    """Base error with an API-facing code and HTTP status."""

    status_code: int = 500
    default_code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = details


class ParameterValidationError(HealthcareDataError):
    """Raised when a request parameter is missing or cannot be coerced."""

    status_code = 400
    default_code = "INVALID_PARAMETER"


class NotFoundError(HealthcareDataError):
    """Raised when a referenced entity (destination, provider) is absent."""

    status_code = 404
    default_code = "NOT_FOUND"


class UnsupportedDeviceError(HealthcareDataError):
    """Raised when a wearable sync is requested for a device with no source."""

    status_code = 400
    default_code = "UNSUPPORTED_DEVICE"

    def __init__(self, device_type: str) -> None:
        super().__init__(
            f"Unsupported device type: {device_type}",
            details={"deviceType": device_type},
        )
        self.device_type = device_type


class UpstreamError(HealthcareDataError):
    """Raised when a data-source sub-fetch rejects; chained to the cause."""

    status_code = 500
    default_code = "UPSTREAM_FAILURE"

    def __init__(self, source: str, message: str) -> None:
        super().__init__(
            f"{source} request failed: {message}",
            details={"source": source},
        )
        self.source = source
