"""
Gate entry schemas.
"""

from typing import Literal, Optional

from pydantic import Field

from residential_api.schemas.common import Schema


class GateEntryCreateRequest(Schema):
    type: Literal["ENTRY", "EXIT"]
    person: str = Field(..., min_length=1, description="Person name is required")
    apartment: str = Field(..., min_length=1, description="Apartment is required")
    entry_type: str = Field(..., min_length=1, description="Entry type is required")
    vehicle: Optional[str] = None
    gate: Optional[str] = None
    method: Optional[str] = None
    resident_id: Optional[str] = None


class QrScanRequest(Schema):
    qr_data: Optional[str] = None


__all__ = ["GateEntryCreateRequest", "QrScanRequest"]
