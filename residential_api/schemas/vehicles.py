"""
Vehicle registration schema.
"""

from datetime import date

from pydantic import Field, field_validator

from residential_api.schemas.common import Schema, VehicleType


class VehicleCreateRequest(Schema):
    vehicle_type: VehicleType
    make: str = Field(..., min_length=1, description="Vehicle make is required")
    model: str = Field(..., min_length=1, description="Vehicle model is required")
    year: int = Field(..., ge=1990, description="Year must be 1990 or later")
    color: str = Field(..., min_length=1, description="Vehicle color is required")
    license_plate: str = Field(..., min_length=1, description="License plate is required")

    @field_validator("year")
    @classmethod
    def not_beyond_next_year(cls, v: int) -> int:
        if v > date.today().year + 1:
            raise ValueError("Year cannot be later than next year")
        return v


__all__ = ["VehicleCreateRequest"]
