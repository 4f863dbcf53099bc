"""
APIResponse envelope helpers shared by every router.

Every endpoint answers with the same JSON envelope:

    {"success": true,  "data": ..., "meta": {"requestId", "timestamp", "cached", "dataSources"}}
    {"success": false, "error": {"code", "message", "details?"}}

Route handlers are the single recovery boundary. handle_exception maps:
- HealthcareDataError subclasses -> their own status and code
- UpstreamError -> 500 with the endpoint's fetch-error code, naming the source
- pydantic.ValidationError while building filters -> 400 INVALID_PARAMETER
- anything else -> 500 with the endpoint's fetch-error code (logged with traceback)
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple
from uuid import uuid4

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from price_transparency.core.errors import HealthcareDataError, UpstreamError
from price_transparency.models.enums import DataSourceType
from price_transparency.models.schemas import APIError, APIResponse, DataSource, ResponseMeta


logger = logging.getLogger(__name__)

# (name, type, requiresAttribution)
DataSourceSpec = Tuple[str, DataSourceType, bool]


def data_sources(specs: Iterable[DataSourceSpec]) -> List[DataSource]:
    """Provenance tags stamped with the current time."""
    return [
        DataSource(name=name, type=source_type, requiresAttribution=attribution)
        for name, source_type, attribution in specs
    ]


def _dump(response: APIResponse) -> Dict[str, Any]:
    return response.model_dump(mode="json", exclude_none=True)


def success_response(
    data: Any,
    sources: Iterable[DataSourceSpec] = (),
    cached: bool = False,
) -> JSONResponse:
    response = APIResponse(
        success=True,
        data=data,
        meta=ResponseMeta(
            requestId=str(uuid4()),
            cached=cached,
            dataSources=data_sources(sources),
        ),
    )
    return JSONResponse(status_code=200, content=_dump(response))


def error_response(
    status_code: int,
    code: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
) -> JSONResponse:
    response = APIResponse(
        success=False,
        error=APIError(code=code, message=message, details=details),
    )
    return JSONResponse(status_code=status_code, content=_dump(response))


def validation_details(exc: ValidationError) -> Dict[str, Any]:
    return {
        "errors": [
            {"loc": [str(part) for part in err["loc"]], "msg": err["msg"], "type": err["type"]}
            for err in exc.errors()
        ]
    }


def handle_exception(exc: Exception, code: str, message: str) -> JSONResponse:
    """
    Translate an exception raised while serving a request into an error envelope.

    Args:
        exc: The exception caught at the handler boundary.
        code: The endpoint's generic failure code, e.g. PRICE_FETCH_ERROR.
        message: The endpoint's generic failure message.
    """
    if isinstance(exc, UpstreamError):
        logger.error(f"{code}: {exc.message}", exc_info=exc)
        return error_response(500, code, message, {"message": exc.message, "source": exc.source})

    if isinstance(exc, HealthcareDataError):
        logger.warning(f"{exc.code}: {exc.message}")
        return error_response(exc.status_code, exc.code, exc.message, exc.details)

    if isinstance(exc, ValidationError):
        logger.warning(f"Invalid parameters: {exc.error_count()} error(s)")
        return error_response(400, "INVALID_PARAMETER", "Invalid request parameters", validation_details(exc))

    logger.exception(f"{code}: unhandled error")
    return error_response(500, code, message, {"message": str(exc)})


async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Answer FastAPI query/body coercion failures with the 400 envelope instead of a bare 422."""
    logger.warning(f"Rejected request to {request.url.path}: {len(exc.errors())} invalid parameter(s)")
    details = {
        "errors": [
            {"loc": [str(part) for part in err["loc"]], "msg": err["msg"], "type": err["type"]}
            for err in exc.errors()
        ]
    }
    return error_response(400, "INVALID_PARAMETER", "Invalid request parameters", details)


def split_csv(value: Optional[str]) -> Optional[List[str]]:
    """Comma-split an array query parameter, dropping blanks; None when absent or empty."""
    if not value:
        return None
    items = [item.strip() for item in value.split(",") if item.strip()]
    return items or None
