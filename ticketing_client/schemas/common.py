"""
Common schema helpers shared by the backend DTOs.
"""

from typing import Any, Dict, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base model that reads and writes the backend's camelCase field names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_wire(self) -> Dict[str, Any]:
        """Serialize with camelCase keys for a request body."""
        return self.model_dump(by_alias=True, mode="json")


class ApiEnvelope(CamelModel, Generic[T]):
    """Schema for the backend's standard response envelope."""

    message: Optional[str] = Field(None, description="Human-readable status message")
    data: Optional[T] = Field(None, description="Response payload")
    success: bool = Field(True, description="Whether the call succeeded")
    error: Optional[str] = Field(None, description="Error description on failure")
    timestamp: Optional[str] = None


def unwrap_data(payload: Any) -> Any:
    """Return the ``data`` member of an envelope, or the payload itself when bare."""
    if isinstance(payload, dict) and isinstance(payload.get("data"), (dict, list)):
        return payload["data"]
    return payload
