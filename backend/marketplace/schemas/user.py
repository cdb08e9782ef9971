"""
Pydantic schemas for signup, sign-in, and user/profile responses.
"""

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from marketplace.domain import BusinessType, Role
from marketplace.schemas.common import ApiModel

PHONE_PATTERN = r"^\+?[0-9 ()-]{7,20}$"


class SignInRequest(ApiModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class SignUpRequest(ApiModel):
    name: str = Field(..., min_length=1, max_length=150)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    role: Role = Role.USER


class OrganizerSignUpRequest(ApiModel):
    name: str = Field(..., min_length=1, max_length=150)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    company: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    website: Optional[str] = Field(None, max_length=255)


class DoctorSignUpRequest(ApiModel):
    name: str = Field(..., min_length=1, max_length=150)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    reg_number: str = Field(..., min_length=1, max_length=50)
    specialization: Optional[str] = Field(None, max_length=150)
    qualification: Optional[str] = Field(None, max_length=150)
    hospital: Optional[str] = Field(None, max_length=255)


class UserResponse(ApiModel):
    id: int
    name: str
    email: str
    role: Role
    phone: Optional[str] = None
    is_active: bool
    created_at: datetime


class AuthResponse(ApiModel):
    success: bool = True
    token: str
    user: UserResponse


class CurrentUserResponse(ApiModel):
    success: bool = True
    user: UserResponse


class CompanyResponse(ApiModel):
    id: int
    name: str
    registration_number: Optional[str] = None
    business_type: Optional[BusinessType] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    postal_code: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    website: Optional[str] = None
    logo: Optional[str] = None
    description: Optional[str] = None
    verified: bool


class OrganizerProfileResponse(ApiModel):
    id: int
    user_id: int
    first_name: str
    last_name: Optional[str] = None
    position: Optional[str] = None
    phone_number: Optional[str] = None
    bio: Optional[str] = None
    profile_picture: Optional[str] = None
    is_verified: bool
    company: CompanyResponse


class OrganizerProfileEnvelope(ApiModel):
    success: bool = True
    data: OrganizerProfileResponse
