"""
Schedule seat inventory and seat hold endpoints.
"""

from typing import List, Optional

from ..schemas.common import unwrap_data
from ..schemas.seat import (
    SeatAvailabilityResponse, SeatLockRequest, SeatLockResponse, SeatReleaseRequest,
)
from .client import ApiClient


class SeatApi:
    """Seat availability for one schedule, plus temporary holds."""

    def __init__(self, client: ApiClient):
        self.client = client

    async def get_schedule_seats(self, schedule_id: int) -> SeatAvailabilityResponse:
        """Seat list of a schedule; accepts both ``{seats}`` and ``{data: {seats}}``."""
        payload = await self.client.get(f"/api/v1/schedules/{schedule_id}/seats")
        return SeatAvailabilityResponse.model_validate(unwrap_data(payload) or {})

    async def lock_seats(
        self,
        schedule_id: int,
        seat_ids: List[int],
        user_id: Optional[int] = None,
        session_id: Optional[str] = None,
    ) -> SeatLockResponse:
        request = SeatLockRequest(seat_ids=seat_ids, user_id=user_id, session_id=session_id)
        payload = await self.client.post(f"/api/v1/schedules/{schedule_id}/seats/lock", request.to_wire())
        return SeatLockResponse.model_validate(unwrap_data(payload) or {"success": True})

    async def release_seats(
        self,
        schedule_id: int,
        seat_ids: List[int],
        user_id: Optional[int] = None,
        session_id: Optional[str] = None,
    ) -> bool:
        request = SeatReleaseRequest(seat_ids=seat_ids, user_id=user_id, session_id=session_id)
        payload = await self.client.delete(f"/api/v1/schedules/{schedule_id}/seats/lock", request.to_wire())
        if isinstance(payload, dict):
            return bool(payload.get("data", payload.get("success", True)))
        return bool(payload) if payload is not None else True
