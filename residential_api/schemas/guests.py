"""
Guest registration schemas.
"""

from datetime import date
from typing import Literal, Optional

from pydantic import Field

from residential_api.schemas.common import IdDocumentType, Schema

_TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class GuestCreateRequest(Schema):
    guest_name: str = Field(..., min_length=2, description="Guest name must be at least 2 characters")
    purpose: str = Field(..., min_length=1)
    visit_date: date
    time_from: str = Field(..., pattern=_TIME_PATTERN, description="Start time, HH:MM")
    time_to: str = Field(..., pattern=_TIME_PATTERN, description="End time, HH:MM")
    vehicle_type: Optional[str] = None
    license_plate: Optional[str] = None
    id_number: str = Field(..., min_length=1)
    id_type: IdDocumentType
    phone: str = Field(..., min_length=10)
    # Only honoured for admins registering on behalf of a resident
    resident_id: Optional[str] = None


class GuestStatusRequest(Schema):
    status: Literal["ACTIVE", "EXPIRED", "CANCELLED"]


__all__ = ["GuestCreateRequest", "GuestStatusRequest"]
