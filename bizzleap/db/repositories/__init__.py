"""Database repositories."""

from bizzleap.db.repositories.user import UserRepository
from bizzleap.db.repositories.session import UserSessionRepository

__all__ = [
    "UserRepository",
    "UserSessionRepository",
]
