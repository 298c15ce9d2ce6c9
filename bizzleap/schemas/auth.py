"""
Authentication API schemas.
"""

import datetime
from dataclasses import dataclass
from typing import Optional

from pydantic import Field

from bizzleap.models.user import User
from bizzleap.schemas.base import CamelModel
from bizzleap.schemas.user import UserResponse


@dataclass(frozen=True)
class ClientInfo:
    """Request metadata recorded on each session."""
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    device_info: Optional[str] = None


@dataclass(frozen=True)
class AuthResult:
    """A user together with a freshly issued, registered token."""
    user: User
    token: str
    expires_at: datetime.datetime

    @property
    def redirect_to(self) -> str:
        return "/dashboard" if self.user.profile_setup else "/role-selection"


class SocialProfile(CamelModel):
    """
    Profile handed over by an OAuth provider after user consent.

    ``emails`` and ``photos`` are ordered, primary first.
    """
    id: str = Field(..., min_length=1)
    emails: list[str] = Field(default_factory=list)
    display_name: Optional[str] = None
    given_name: Optional[str] = None
    family_name: Optional[str] = None
    photos: list[str] = Field(default_factory=list)

    @property
    def email(self) -> Optional[str]:
        return self.emails[0].strip().lower() if self.emails else None

    @property
    def photo(self) -> Optional[str]:
        return self.photos[0] if self.photos else None

    def split_name(self) -> tuple[str, str]:
        """First and last name, falling back to the display name."""
        parts = (self.display_name or "").split()
        first = self.given_name or (parts[0] if parts else "")
        last = self.family_name or (parts[1] if len(parts) > 1 else "")
        return first, last


# Response schemas
class AuthResponse(CamelModel):
    """Schema returned by register and login."""
    message: str
    user: UserResponse
    token: str
    token_type: str = "bearer"
    expires_at: datetime.datetime
    redirect_to: str


class TokenResponse(CamelModel):
    """Schema returned by token refresh."""
    token: str
    token_type: str = "bearer"
    expires_at: datetime.datetime


class MessageResponse(CamelModel):
    message: str


class SessionResponse(CamelModel):
    """Schema for an active session in API responses (token omitted)."""
    id: int
    device_info: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: datetime.datetime
    expires_at: datetime.datetime
    last_used_at: datetime.datetime
    current: bool = False
