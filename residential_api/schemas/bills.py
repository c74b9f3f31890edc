"""
Maintenance bill schemas.
"""

from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import Field

from residential_api.schemas.common import Schema


class BillItem(Schema):
    description: str = Field(..., min_length=1, description="Item description is required")
    amount: float = Field(..., ge=0, description="Item amount must be positive")
    type: Literal["FIXED", "VARIABLE", "ONE_TIME"]


class BillData(Schema):
    month: str = Field(..., min_length=1, description="Month is required")
    year: int = Field(..., ge=2020, description="Year must be 2020 or later")
    amount: float = Field(..., ge=0, description="Amount must be positive")
    due_date: date
    items: List[BillItem]


class GenerateBillsRequest(Schema):
    resident_ids: Optional[List[str]] = None
    bill_data: BillData


class BillStatusRequest(Schema):
    status: Optional[Literal["PENDING", "PAID", "OVERDUE"]] = None
    paid_date: Optional[datetime] = None


__all__ = ["BillItem", "BillData", "GenerateBillsRequest", "BillStatusRequest"]
