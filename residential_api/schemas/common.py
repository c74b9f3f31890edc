"""
Shared enums, base model and query-parameter schemas.
"""

from enum import Enum
from typing import Callable, Literal, Optional

from fastapi import Query
from pydantic import BaseModel, ConfigDict


class Schema(BaseModel):
    """Request model base: enums are stored as their plain string values."""

    model_config = ConfigDict(use_enum_values=True)


class UserRole(str, Enum):
    ADMIN = "admin"
    RESIDENT = "resident"
    SERVICE_PROVIDER = "service_provider"
    EMPLOYEE = "employee"


class IdDocumentType(str, Enum):
    CNIC = "CNIC"
    PASSPORT = "PASSPORT"
    DRIVER_LICENSE = "DRIVER_LICENSE"


class OwnershipType(str, Enum):
    OWNER = "OWNER"
    TENANT = "TENANT"


class VehicleType(str, Enum):
    CAR = "CAR"
    BIKE = "BIKE"
    SCOOTER = "SCOOTER"
    TRUCK = "TRUCK"
    MOTORCYCLE = "MOTORCYCLE"


class Priority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class ResidentStatus(str, Enum):
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    REJECTED = "REJECTED"


class ApprovalStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class ProviderStatus(str, Enum):
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    REJECTED = "REJECTED"
    SUSPENDED = "SUSPENDED"


class EmployeeStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class MessageResponse(BaseModel):
    message: str


class PaginationParams:
    """page / limit / search / filter / sort query parameters."""

    def __init__(
        self,
        page: int,
        limit: int,
        search: Optional[str] = None,
        status: Optional[str] = None,
        category: Optional[str] = None,
        sort: Optional[str] = None,
        order: Optional[str] = None,
    ):
        self.page = page
        self.limit = limit
        self.search = search
        self.status = status
        self.category = category
        self.sort = sort
        self.order = order


def pagination(default_limit: int = 10) -> Callable[..., PaginationParams]:
    """Build a FastAPI dependency parsing pagination query parameters."""

    def dependency(
        page: int = Query(1, ge=1, description="Page must be positive"),
        limit: int = Query(default_limit, ge=1, le=100, description="Limit must be between 1 and 100"),
        search: Optional[str] = Query(None),
        status: Optional[str] = Query(None),
        category: Optional[str] = Query(None),
        sort: Optional[str] = Query(None, pattern=r"^[A-Za-z_][A-Za-z0-9_]*$"),
        order: Optional[Literal["asc", "desc"]] = Query(None),
    ) -> PaginationParams:
        return PaginationParams(page, limit, search, status, category, sort, order)

    return dependency


__all__ = [
    "Schema",
    "UserRole",
    "IdDocumentType",
    "OwnershipType",
    "VehicleType",
    "Priority",
    "ResidentStatus",
    "ApprovalStatus",
    "ProviderStatus",
    "EmployeeStatus",
    "MessageResponse",
    "PaginationParams",
    "pagination",
]
