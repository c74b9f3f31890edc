"""
Complaint schemas.
"""

from typing import List, Literal, Optional

from pydantic import Field

from residential_api.schemas.common import Priority, Schema


class ComplaintCreateRequest(Schema):
    title: str = Field(..., min_length=5, description="Title must be at least 5 characters")
    category: str = Field(..., min_length=1)
    priority: Priority
    description: str = Field(..., min_length=10, description="Description must be at least 10 characters")
    images: Optional[List[str]] = None


class ComplaintUpdateRequest(Schema):
    status: Optional[Literal["OPEN", "IN_PROGRESS", "RESOLVED", "CLOSED"]] = None
    admin_response: Optional[str] = None


__all__ = ["ComplaintCreateRequest", "ComplaintUpdateRequest"]
