"""
Performance and schedule endpoints.
"""

from ..schemas.common import unwrap_data
from ..schemas.performance import PerformanceResponse, PerformanceSchedulesResponse
from .client import ApiClient


class PerformanceApi:
    """Performance details and show times."""

    def __init__(self, client: ApiClient):
        self.client = client

    async def get_performance(self, performance_id: int) -> PerformanceResponse:
        payload = await self.client.get(f"/v1/performances/{performance_id}")
        return PerformanceResponse.model_validate(unwrap_data(payload))

    async def get_schedules(self, performance_id: int) -> PerformanceSchedulesResponse:
        payload = await self.client.get(f"/v1/performances/{performance_id}/schedules")
        return PerformanceSchedulesResponse.model_validate(unwrap_data(payload) or {})
