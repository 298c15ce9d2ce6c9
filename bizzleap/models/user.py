"""
User database model.

Defines the User table for authentication and marketplace profiles.
"""

import datetime
import enum
from typing import Optional

from sqlalchemy import Column, DateTime, Text, UniqueConstraint
from sqlmodel import Field, SQLModel

from bizzleap.core.clock import utcnow


class UserRole(str, enum.Enum):
    FARMER = "farmer"
    BUSINESS = "business"
    BUYER = "buyer"


class BuyerType(str, enum.Enum):
    INDIVIDUAL = "individual"
    RESTAURANT = "restaurant"
    RETAILER = "retailer"


class SocialProvider(str, enum.Enum):
    GOOGLE = "google"
    FACEBOOK = "facebook"
    GITHUB = "github"


class User(SQLModel, table=True):
    """
    Marketplace user.

    A usable account has a password, a linked social identity, or both.
    Users are never hard-deleted; ``is_active`` is cleared instead.
    """
    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("social_provider", "social_id", name="uq_users_social"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255, nullable=False)
    hashed_password: Optional[str] = Field(default=None, max_length=255)

    # Identity
    first_name: str = Field(default="", max_length=100)
    last_name: str = Field(default="", max_length=100)
    role: Optional[UserRole] = Field(default=None, index=True)
    avatar: Optional[str] = Field(default=None, max_length=500)

    # Contact / location
    phone: Optional[str] = Field(default=None, max_length=20)
    bio: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    country: Optional[str] = Field(default=None, max_length=2)
    state: Optional[str] = Field(default=None, max_length=100)
    city: Optional[str] = Field(default=None, max_length=100)
    location: Optional[str] = Field(default=None, max_length=255)
    zip_code: Optional[str] = Field(default=None, max_length=20)
    currency: str = Field(default="USD", max_length=3)
    profile_setup: bool = Field(default=False)

    # Farmer
    farm_name: Optional[str] = Field(default=None, max_length=255)
    farm_size: Optional[str] = Field(default=None, max_length=50)
    farm_type: Optional[str] = Field(default=None, max_length=100)
    products_grown: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    organic_certified: bool = Field(default=False)

    # Business
    business_name: Optional[str] = Field(default=None, max_length=255)
    business_type: Optional[str] = Field(default=None, max_length=100)
    services_offered: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    years_in_business: Optional[int] = Field(default=None)
    website: Optional[str] = Field(default=None, max_length=500)

    # Buyer
    buyer_type: Optional[BuyerType] = Field(default=BuyerType.INDIVIDUAL)
    interests: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    monthly_budget: Optional[str] = Field(default=None, max_length=50)

    # Social authentication
    social_id: Optional[str] = Field(default=None, max_length=255)
    social_provider: Optional[SocialProvider] = Field(default=None)

    # Account status
    email_verified: bool = Field(default=False)
    is_active: bool = Field(default=True, index=True)
    last_login: Optional[datetime.datetime] = Field(default=None, sa_type=DateTime)

    # Timestamps
    created_at: datetime.datetime = Field(default_factory=utcnow, sa_type=DateTime)
    updated_at: datetime.datetime = Field(default_factory=utcnow, sa_type=DateTime)
