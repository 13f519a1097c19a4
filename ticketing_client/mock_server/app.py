"""
FastAPI application serving the ticketing endpoints from memory.

Used for local development against a realistic backend and for
integration tests through ``httpx.ASGITransport``.
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, FastAPI, Header, Request
from fastapi.exceptions import RequestValidationError

from ..schemas.booking import CancelBookingRequest, CreateBookingRequest
from ..schemas.common import ApiEnvelope
from ..schemas.seat import SeatLockRequest, SeatReleaseRequest
from ..utils.exceptions import AuthenticationError, TicketingError
from .errors import request_validation_error_handler, ticketing_error_handler
from .state import MockBackend

logger = logging.getLogger(__name__)


def get_backend(request: Request) -> MockBackend:
    return request.app.state.backend


async def require_token(request: Request, authorization: Optional[str] = Header(None)) -> Optional[str]:
    """Bearer token, enforced only when the app was created with ``require_auth``."""
    token = None
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization[7:].strip() or None
    if token is None and request.app.state.require_auth:
        raise AuthenticationError("Missing bearer token")
    return token


router = APIRouter(dependencies=[Depends(require_token)])


def _envelope(data: Any, message: Optional[str] = None) -> dict:
    return ApiEnvelope[Any](data=data, message=message).to_wire()


@router.get("/api/venues/{venue_id}/seatmap", tags=["seats"])
async def get_seat_map(venue_id: int, backend: MockBackend = Depends(get_backend)):
    # Seat maps are stored as a JSON string column
    return backend.get_seat_map(venue_id)


@router.get("/api/v1/schedules/{schedule_id}/seats", tags=["seats"])
async def get_schedule_seats(schedule_id: int, backend: MockBackend = Depends(get_backend)):
    return _envelope(backend.get_schedule_seats(schedule_id))


@router.post("/api/v1/schedules/{schedule_id}/seats/lock", tags=["seats"])
async def lock_seats(schedule_id: int, body: SeatLockRequest, backend: MockBackend = Depends(get_backend)):
    return _envelope(backend.lock_seats(schedule_id, body.seat_ids, body.user_id))


@router.delete("/api/v1/schedules/{schedule_id}/seats/lock", tags=["seats"])
async def release_seats(schedule_id: int, body: SeatReleaseRequest, backend: MockBackend = Depends(get_backend)):
    return {"success": backend.release_seats(schedule_id, body.seat_ids, body.user_id)}


@router.get("/v1/performances/{performance_id}", tags=["performances"])
async def get_performance(performance_id: int, backend: MockBackend = Depends(get_backend)):
    return _envelope(backend.get_performance(performance_id))


@router.get("/v1/performances/{performance_id}/schedules", tags=["performances"])
async def get_schedules(performance_id: int, backend: MockBackend = Depends(get_backend)):
    return _envelope(backend.get_schedules(performance_id))


@router.post("/v1/bookings", status_code=201, tags=["bookings"])
async def create_booking(body: CreateBookingRequest, backend: MockBackend = Depends(get_backend)):
    return _envelope(backend.create_booking(body), message="Booking created")


@router.get("/v1/bookings/me", tags=["bookings"])
async def get_my_bookings(
    status: Optional[str] = None,
    page: int = 1,
    limit: int = 20,
    backend: MockBackend = Depends(get_backend),
):
    return _envelope(backend.list_bookings(status=status, page=page, limit=limit))


@router.patch("/v1/bookings/{booking_id}/cancel", tags=["bookings"])
async def cancel_booking(
    booking_id: int,
    body: Optional[CancelBookingRequest] = None,
    backend: MockBackend = Depends(get_backend),
):
    return _envelope(backend.cancel_booking(booking_id, body.reason if body else None))


def create_app(backend: Optional[MockBackend] = None, require_auth: bool = False) -> FastAPI:
    """Build the mock backend application around ``backend`` (demo data by default)."""
    app = FastAPI(
        title="Ticketing Mock Backend",
        description="In-memory stand-in for the ticketing API used by the seat booking client.",
        version="1.0.0",
    )
    app.state.backend = backend if backend is not None else MockBackend.demo()
    app.state.require_auth = require_auth

    app.add_exception_handler(TicketingError, ticketing_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.include_router(router)

    @app.get("/health", tags=["health"])
    async def health_check():
        return {"status": "healthy", "service": "ticketing-mock-backend"}

    logger.info("Mock backend ready with %s venue(s)", len(app.state.backend.venues))
    return app
