"""
Error responses of the mock backend, shaped like the production API's.
"""

import logging
from datetime import datetime, timezone
from uuid import uuid4

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..utils.exceptions import (
    BusinessLogicError,
    ErrorCode,
    TicketingError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_CODE = {
    ErrorCode.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_BOOKING_REQUEST: status.HTTP_400_BAD_REQUEST,
    ErrorCode.SELECTION_LIMIT_EXCEEDED: status.HTTP_400_BAD_REQUEST,
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.SEAT_NOT_AVAILABLE: status.HTTP_409_CONFLICT,
    ErrorCode.SEAT_ALREADY_BOOKED: status.HTTP_409_CONFLICT,
    ErrorCode.CONCURRENCY_CONFLICT: status.HTTP_409_CONFLICT,
}


def status_code_for(exc: TicketingError) -> int:
    """Map error codes to HTTP status codes."""
    if exc.error_code in _STATUS_BY_CODE:
        return _STATUS_BY_CODE[exc.error_code]
    if isinstance(exc, BusinessLogicError):
        return status.HTTP_400_BAD_REQUEST
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _error_body(exc: TicketingError) -> dict:
    return {
        "error": exc.to_dict(),
        "error_id": str(uuid4()),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


async def ticketing_error_handler(request: Request, exc: TicketingError) -> JSONResponse:
    status_code = status_code_for(exc)
    log = logger.error if status_code >= 500 else logger.info
    log("%s %s failed with %s: %s", request.method, request.url.path, exc.error_code.value, exc.message)

    headers = {"Retry-After": str(exc.retry_after)} if exc.retry_after else None
    return JSONResponse(status_code=status_code, content=_error_body(exc), headers=headers)


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    field_errors = {}
    for error in exc.errors():
        field_path = ".".join(str(loc) for loc in error["loc"])
        field_errors.setdefault(field_path, []).append(error["msg"])

    validation_error = ValidationError("Request validation failed", field_errors=field_errors)
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=_error_body(validation_error),
    )
