"""Pydantic schemas for request/response validation."""

from bizzleap.schemas.auth import (
    AuthResponse,
    AuthResult,
    ClientInfo,
    MessageResponse,
    SessionResponse,
    SocialProfile,
    TokenResponse,
)
from bizzleap.schemas.user import (
    PasswordChange,
    ProfileUpdateResponse,
    UserCreate,
    UserLogin,
    UserProfileUpdate,
    UserResponse,
)

__all__ = [
    "AuthResponse",
    "AuthResult",
    "ClientInfo",
    "MessageResponse",
    "SessionResponse",
    "SocialProfile",
    "TokenResponse",
    "PasswordChange",
    "ProfileUpdateResponse",
    "UserCreate",
    "UserLogin",
    "UserProfileUpdate",
    "UserResponse",
]
