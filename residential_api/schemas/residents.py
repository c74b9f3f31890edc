"""
Resident registration / update schemas.
"""

from typing import Literal, Optional

from pydantic import EmailStr, Field

from residential_api.schemas.common import IdDocumentType, OwnershipType, Schema


class ResidentRegisterRequest(Schema):
    name: str = Field(..., min_length=2, description="Name must be at least 2 characters")
    apartment: str = Field(..., min_length=1, description="Apartment is required")
    phone: str = Field(..., min_length=10, description="Phone number must be at least 10 digits")
    email: EmailStr
    family_members: int = Field(..., ge=1, description="Family members must be at least 1")
    username: Optional[str] = Field(None, min_length=3)
    password: Optional[str] = Field(None, min_length=6)

    # KYC fields
    id_document_type: IdDocumentType
    cnic_number: Optional[str] = None
    passport_number: Optional[str] = None
    driver_license_number: Optional[str] = None
    ownership_type: OwnershipType
    emergency_contact: Optional[str] = None
    emergency_contact_phone: Optional[str] = None
    occupation: Optional[str] = None
    work_address: Optional[str] = None
    monthly_income: Optional[float] = None
    previous_address: Optional[str] = None
    reference1_name: Optional[str] = None
    reference1_phone: Optional[str] = None
    reference2_name: Optional[str] = None
    reference2_phone: Optional[str] = None
    additional_notes: Optional[str] = None
    profile_photo: Optional[str] = None


class ResidentUpdateRequest(Schema):
    """Every registration field, all optional."""
    name: Optional[str] = Field(None, min_length=2)
    apartment: Optional[str] = Field(None, min_length=1)
    phone: Optional[str] = Field(None, min_length=10)
    email: Optional[EmailStr] = None
    family_members: Optional[int] = Field(None, ge=1)
    username: Optional[str] = Field(None, min_length=3)
    password: Optional[str] = Field(None, min_length=6)
    id_document_type: Optional[IdDocumentType] = None
    cnic_number: Optional[str] = None
    passport_number: Optional[str] = None
    driver_license_number: Optional[str] = None
    ownership_type: Optional[OwnershipType] = None
    emergency_contact: Optional[str] = None
    emergency_contact_phone: Optional[str] = None
    occupation: Optional[str] = None
    work_address: Optional[str] = None
    monthly_income: Optional[float] = None
    previous_address: Optional[str] = None
    reference1_name: Optional[str] = None
    reference1_phone: Optional[str] = None
    reference2_name: Optional[str] = None
    reference2_phone: Optional[str] = None
    additional_notes: Optional[str] = None
    profile_photo: Optional[str] = None


class ResidentApprovalRequest(Schema):
    approval_status: Literal["APPROVED", "REJECTED"]


__all__ = [
    "ResidentRegisterRequest",
    "ResidentUpdateRequest",
    "ResidentApprovalRequest",
]
