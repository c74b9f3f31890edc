"""
Delivery schemas.
"""

from typing import Literal, Optional

from pydantic import Field

from residential_api.schemas.common import IdDocumentType, Schema


class DeliveryCreateRequest(Schema):
    rider_name: str = Field(..., min_length=2)
    id_number: str = Field(..., min_length=1)
    id_type: IdDocumentType
    company_name: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    resident_id: Optional[str] = None


class DeliveryStatusRequest(Schema):
    status: Literal["EXPECTED", "ARRIVED", "COMPLETED"]


__all__ = ["DeliveryCreateRequest", "DeliveryStatusRequest"]
