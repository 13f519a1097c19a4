"""
Pydantic schemas for performances and their schedules.
"""

from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from .common import CamelModel


class ScheduleResponse(CamelModel):
    """One show time of a performance."""
    schedule_id: int
    show_datetime: Optional[str] = None
    available_seats: Optional[int] = None
    total_seats: Optional[int] = None
    status: str = "AVAILABLE"
    venue_id: Optional[int] = None


class PerformanceResponse(CamelModel):
    """Performance details."""
    performance_id: int
    title: str
    venue: Optional[str] = None
    venue_id: Optional[int] = None
    price: Optional[Decimal] = None
    status: Optional[str] = None
    schedules: List[ScheduleResponse] = Field(default_factory=list)


class PerformanceSchedulesResponse(CamelModel):
    """Schedules of one performance."""
    schedules: List[ScheduleResponse] = Field(default_factory=list)


def resolve_venue_id(
    performance: Optional[PerformanceResponse],
    schedules: Optional[List[ScheduleResponse]] = None,
) -> Optional[int]:
    """Venue of a performance: its own venue id, else the first schedule that names one."""
    if performance is not None and performance.venue_id is not None:
        return performance.venue_id
    candidates = list(schedules or [])
    if performance is not None:
        candidates.extend(performance.schedules)
    for schedule in candidates:
        if schedule.venue_id is not None:
            return schedule.venue_id
    return None
