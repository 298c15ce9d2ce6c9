"""
User API schemas.

Pydantic models for user-related request/response validation.
"""

import datetime
from typing import Optional

from pydantic import EmailStr, Field, field_validator

from bizzleap.models.user import BuyerType, SocialProvider, UserRole
from bizzleap.schemas.base import CamelModel


def _normalize_email(value: str) -> str:
    return value.strip().lower()


# Request schemas
class UserCreate(CamelModel):
    """Schema for user registration."""
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    # Minimum length is enforced by the service from settings
    password: str = Field(..., min_length=1, max_length=128)
    device_info: Optional[str] = Field(None, max_length=500)

    @field_validator("first_name", "last_name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        return _normalize_email(value) if isinstance(value, str) else value


class UserLogin(CamelModel):
    """Schema for user login."""
    email: EmailStr
    password: str = Field(..., min_length=1)
    device_info: Optional[str] = Field(None, max_length=500)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        return _normalize_email(value) if isinstance(value, str) else value


class UserProfileUpdate(CamelModel):
    """
    Allow-listed profile fields.

    Only fields present in the request body are applied; anything not
    declared here (email, password, social identity, flags) is ignored.
    """
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    role: Optional[UserRole] = None
    phone: Optional[str] = Field(None, max_length=20)
    bio: Optional[str] = Field(None, max_length=5000)
    country: Optional[str] = Field(None, max_length=2)
    state: Optional[str] = Field(None, max_length=100)
    city: Optional[str] = Field(None, max_length=100)
    location: Optional[str] = Field(None, max_length=255)
    zip_code: Optional[str] = Field(None, max_length=20)
    profile_setup: Optional[bool] = None
    currency: Optional[str] = Field(None, min_length=3, max_length=3)

    farm_name: Optional[str] = Field(None, max_length=255)
    farm_size: Optional[str] = Field(None, max_length=50)
    farm_type: Optional[str] = Field(None, max_length=100)
    products_grown: Optional[str] = None
    organic_certified: Optional[bool] = None

    business_name: Optional[str] = Field(None, max_length=255)
    business_type: Optional[str] = Field(None, max_length=100)
    services_offered: Optional[str] = None
    years_in_business: Optional[int] = Field(None, ge=0, le=200)
    website: Optional[str] = Field(None, max_length=500)

    buyer_type: Optional[BuyerType] = None
    interests: Optional[str] = None
    monthly_budget: Optional[str] = Field(None, max_length=50)

    @field_validator("first_name", "last_name", "currency", "profile_setup", "organic_certified", mode="before")
    @classmethod
    def reject_null(cls, value):
        # These columns are NOT NULL; omit the key to leave them unchanged
        if value is None:
            raise ValueError("must not be null")
        return value

    @field_validator("first_name", "last_name", "country")
    @classmethod
    def strip_text(cls, value: Optional[str]) -> Optional[str]:
        return value.strip() if value is not None else value


class PasswordChange(CamelModel):
    """Schema for changing the current user's password."""
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=1, max_length=128)


# Response schemas
class UserResponse(CamelModel):
    """Schema for user data in API responses (no password hash)."""
    id: int
    email: str
    first_name: str
    last_name: str
    role: Optional[UserRole] = None
    avatar: Optional[str] = None

    phone: Optional[str] = None
    bio: Optional[str] = None
    country: Optional[str] = None
    state: Optional[str] = None
    city: Optional[str] = None
    location: Optional[str] = None
    zip_code: Optional[str] = None
    currency: str = "USD"
    profile_setup: bool = False

    farm_name: Optional[str] = None
    farm_size: Optional[str] = None
    farm_type: Optional[str] = None
    products_grown: Optional[str] = None
    organic_certified: bool = False

    business_name: Optional[str] = None
    business_type: Optional[str] = None
    services_offered: Optional[str] = None
    years_in_business: Optional[int] = None
    website: Optional[str] = None

    buyer_type: Optional[BuyerType] = None
    interests: Optional[str] = None
    monthly_budget: Optional[str] = None

    social_provider: Optional[SocialProvider] = None
    email_verified: bool = False
    created_at: datetime.datetime
    last_login: Optional[datetime.datetime] = None


class ProfileUpdateResponse(CamelModel):
    message: str
    user: UserResponse
