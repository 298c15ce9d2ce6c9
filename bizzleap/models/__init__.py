"""SQLModel database models."""

from bizzleap.models.user import BuyerType, SocialProvider, User, UserRole
from bizzleap.models.session import UserSession

__all__ = [
    "User",
    "UserRole",
    "BuyerType",
    "SocialProvider",
    "UserSession",
]
