"""
Service provider registration / update schemas.
"""

from typing import Literal, Optional

from pydantic import EmailStr, Field

from residential_api.schemas.common import IdDocumentType, Schema


class ServiceProviderRegisterRequest(Schema):
    name: str = Field(..., min_length=2)
    username: str = Field(..., min_length=3)
    email: EmailStr
    phone: str = Field(..., min_length=10)
    password: str = Field(..., min_length=6)

    # KYC fields
    id_document_type: IdDocumentType
    cnic_number: Optional[str] = None
    passport_number: Optional[str] = None
    driver_license_number: Optional[str] = None

    # Service fields
    service_category: str
    keywords: str
    short_intro: str
    experience: str
    previous_work: Optional[str] = None
    certifications: Optional[str] = None
    availability: str
    service_area: str
    profile_photo: Optional[str] = None
    additional_notes: Optional[str] = None


class ServiceProviderUpdateRequest(Schema):
    name: Optional[str] = Field(None, min_length=2)
    username: Optional[str] = Field(None, min_length=3)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, min_length=10)
    password: Optional[str] = Field(None, min_length=6)
    id_document_type: Optional[IdDocumentType] = None
    cnic_number: Optional[str] = None
    passport_number: Optional[str] = None
    driver_license_number: Optional[str] = None
    service_category: Optional[str] = None
    keywords: Optional[str] = None
    short_intro: Optional[str] = None
    experience: Optional[str] = None
    previous_work: Optional[str] = None
    certifications: Optional[str] = None
    availability: Optional[str] = None
    service_area: Optional[str] = None
    profile_photo: Optional[str] = None
    additional_notes: Optional[str] = None


class ServiceProviderApprovalRequest(Schema):
    status: Literal["ACTIVE", "REJECTED", "SUSPENDED"]


__all__ = [
    "ServiceProviderRegisterRequest",
    "ServiceProviderUpdateRequest",
    "ServiceProviderApprovalRequest",
]
