"""
Employee schemas.
"""

from datetime import date
from typing import Literal, Optional

from pydantic import EmailStr, Field

from residential_api.schemas.common import IdDocumentType, Schema


class EmployeeCreateRequest(Schema):
    name: str = Field(..., min_length=2)
    designation: str = Field(..., min_length=1)
    department: str = Field(..., min_length=1)
    email: EmailStr
    phone: str = Field(..., min_length=10)
    address: str = Field(..., min_length=5)

    # KYC fields
    id_document_type: IdDocumentType
    cnic_number: Optional[str] = None
    passport_number: Optional[str] = None
    driver_license_number: Optional[str] = None

    emergency_contact: str = Field(..., min_length=2, description="Emergency contact name is required")
    emergency_contact_phone: str = Field(..., min_length=10, description="Emergency contact phone is required")
    joining_date: date
    # Optional: employees with a password can use /api/auth/employee/login
    password: Optional[str] = Field(None, min_length=6)


class EmployeeUpdateRequest(Schema):
    name: Optional[str] = Field(None, min_length=2)
    designation: Optional[str] = Field(None, min_length=1)
    department: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, min_length=10)
    address: Optional[str] = Field(None, min_length=5)
    id_document_type: Optional[IdDocumentType] = None
    cnic_number: Optional[str] = None
    passport_number: Optional[str] = None
    driver_license_number: Optional[str] = None
    emergency_contact: Optional[str] = Field(None, min_length=2)
    emergency_contact_phone: Optional[str] = Field(None, min_length=10)
    joining_date: Optional[date] = None
    password: Optional[str] = Field(None, min_length=6)


class EmployeeStatusRequest(Schema):
    status: Literal["ACTIVE", "INACTIVE"]


__all__ = [
    "EmployeeCreateRequest",
    "EmployeeUpdateRequest",
    "EmployeeStatusRequest",
]
