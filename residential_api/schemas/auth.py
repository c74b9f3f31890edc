"""
Auth-related Pydantic schemas.
"""

from typing import Optional, Dict, Any

from pydantic import BaseModel, EmailStr, Field


class AdminLoginRequest(BaseModel):
    username: str = Field(..., min_length=3, description="Username must be at least 3 characters")
    password: str = Field(..., min_length=6, description="Password must be at least 6 characters")


class LoginRequest(BaseModel):
    """Email login used by residents, service providers and employees."""
    email: EmailStr
    password: str = Field(..., min_length=6, description="Password must be at least 6 characters")


class LoginResponse(BaseModel):
    message: str
    token: str
    user: Dict[str, Any]


class TokenResponse(BaseModel):
    message: str
    token: str


class CurrentUserResponse(BaseModel):
    user: Dict[str, Any]


__all__ = [
    "AdminLoginRequest",
    "LoginRequest",
    "LoginResponse",
    "TokenResponse",
    "CurrentUserResponse",
]
