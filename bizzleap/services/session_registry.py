"""
Session registry.

Server-side record of issued tokens, so a token can be revoked before
its natural expiry.
"""

import datetime
import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from bizzleap.core.clock import Clock, utcnow
from bizzleap.db.repositories.session import UserSessionRepository
from bizzleap.models.session import UserSession

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Service for session lifecycle: create, check, touch, revoke."""

    def __init__(self, session: Session, clock: Clock = utcnow):
        self.repository = UserSessionRepository(session)
        self.clock = clock

    def create(self, user_id: int, token: str, expires_at: datetime.datetime,
               device_info: Optional[str] = None, ip_address: Optional[str] = None,
               user_agent: Optional[str] = None) -> UserSession:
        now = self.clock()
        entry = UserSession(
            user_id=user_id,
            token=token,
            device_info=device_info,
            ip_address=ip_address,
            user_agent=user_agent,
            created_at=now,
            last_used_at=now,
            expires_at=expires_at,
        )
        return self.repository.create(entry)

    def get_live(self, token: str) -> Optional[UserSession]:
        return self.repository.get_live(token, self.clock())

    def is_live(self, token: str) -> bool:
        """True iff an active, unexpired session exists for the token."""
        return self.get_live(token) is not None

    def list_active(self, user_id: int) -> list[UserSession]:
        return self.repository.get_live_by_user(user_id, self.clock())

    def touch(self, token: str) -> None:
        """Bump ``last_used_at``. Failures are logged, never raised."""
        try:
            self.repository.touch(token, self.clock())
        except SQLAlchemyError as exc:
            self.repository.rollback()
            logger.warning("Failed to update session last-used time: %s", exc)

    def revoke(self, token: str) -> bool:
        """
        Deactivate the session for a token.

        Idempotent: an unknown or already revoked token is not an error.

        Returns:
            True if an active session was revoked by this call.
        """
        revoked = self.repository.deactivate(token) > 0
        if revoked:
            logger.info("Session revoked")
        return revoked

    def revoke_all_for_user(self, user_id: int) -> int:
        """Deactivate every active session of a user. Returns the count."""
        count = self.repository.deactivate_all_for_user(user_id)
        logger.info("Revoked %d session(s) for user %s", count, user_id)
        return count
