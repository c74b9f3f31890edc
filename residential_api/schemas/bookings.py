"""
Service booking and review schemas.
"""

from datetime import date
from typing import Literal, Optional

from pydantic import Field

from residential_api.schemas.common import Priority, Schema


BookingStatus = Literal["PENDING", "CONFIRMED", "IN_PROGRESS", "COMPLETED", "CANCELLED"]


class ServiceBookingCreateRequest(Schema):
    service_provider_id: str = Field(..., min_length=1, description="Service provider is required")
    service_category: str = Field(..., min_length=1)
    description: str = Field(..., min_length=10)
    scheduled_date: date
    scheduled_time: str = Field(..., min_length=1, description="Scheduled time is required")
    priority: Optional[Priority] = None
    estimated_cost: Optional[float] = None
    notes: Optional[str] = None


class ServiceBookingUpdateRequest(Schema):
    status: Optional[BookingStatus] = None
    actual_cost: Optional[float] = None
    notes: Optional[str] = None
    completion_date: Optional[date] = None


class ServiceReviewRequest(Schema):
    rating: int = Field(..., ge=1, le=5, description="Rating must be between 1 and 5")
    review: str = Field(..., min_length=10, description="Review must be at least 10 characters")


__all__ = [
    "BookingStatus",
    "ServiceBookingCreateRequest",
    "ServiceBookingUpdateRequest",
    "ServiceReviewRequest",
]
