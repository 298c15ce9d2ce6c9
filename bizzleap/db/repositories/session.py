"""
User session repository.

Handles database operations for UserSession model. Every mutation is a
single UPDATE statement so concurrent requests never need a lock.
"""

import datetime
from typing import Optional

from sqlalchemy import update
from sqlmodel import Session, select

from bizzleap.models.session import UserSession


class UserSessionRepository:
    """Repository for UserSession database operations."""

    def __init__(self, session: Session):
        self.session = session

    def create(self, entry: UserSession) -> UserSession:
        self.session.add(entry)
        self.session.commit()
        self.session.refresh(entry)
        return entry

    def get_by_token(self, token: str) -> Optional[UserSession]:
        statement = select(UserSession).where(UserSession.token == token)
        return self.session.exec(statement).first()

    def get_live(self, token: str, now: datetime.datetime) -> Optional[UserSession]:
        """Get the active, unexpired session for a token."""
        statement = select(UserSession).where(
            UserSession.token == token,
            UserSession.is_active == True,  # noqa: E712
            UserSession.expires_at > now,
        )
        return self.session.exec(statement).first()

    def get_live_by_user(self, user_id: int, now: datetime.datetime) -> list[UserSession]:
        """Get all active, unexpired sessions of a user, newest first."""
        statement = (
            select(UserSession)
            .where(
                UserSession.user_id == user_id,
                UserSession.is_active == True,  # noqa: E712
                UserSession.expires_at > now,
            )
            .order_by(UserSession.created_at.desc(), UserSession.id.desc())
        )
        return list(self.session.exec(statement).all())

    def touch(self, token: str, now: datetime.datetime) -> int:
        statement = update(UserSession).where(UserSession.token == token).values(last_used_at=now)
        result = self.session.exec(statement)
        self.session.commit()
        return result.rowcount

    def deactivate(self, token: str) -> int:
        statement = (
            update(UserSession)
            .where(UserSession.token == token, UserSession.is_active == True)  # noqa: E712
            .values(is_active=False)
        )
        result = self.session.exec(statement)
        self.session.commit()
        return result.rowcount

    def deactivate_all_for_user(self, user_id: int) -> int:
        statement = (
            update(UserSession)
            .where(UserSession.user_id == user_id, UserSession.is_active == True)  # noqa: E712
            .values(is_active=False)
        )
        result = self.session.exec(statement)
        self.session.commit()
        return result.rowcount

    def rollback(self) -> None:
        self.session.rollback()
