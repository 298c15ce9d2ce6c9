"""
User session database model.

One row per issued bearer token, so a token can be revoked before it
expires.
"""

import datetime
from typing import Optional

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Text
from sqlmodel import Field, SQLModel

from bizzleap.core.clock import utcnow


class UserSession(SQLModel, table=True):
    """
    Revocable record of one issued token.

    Valid only while ``is_active`` is true and ``expires_at`` is in the
    future. Rows are deactivated, never deleted inline.
    """
    __tablename__ = "user_sessions"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(
        sa_column=Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    )
    token: str = Field(unique=True, index=True, max_length=512, nullable=False)

    # Client metadata
    device_info: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    ip_address: Optional[str] = Field(default=None, max_length=45)
    user_agent: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))

    is_active: bool = Field(default=True, index=True)

    # Timestamps
    created_at: datetime.datetime = Field(default_factory=utcnow, sa_type=DateTime)
    expires_at: datetime.datetime = Field(sa_type=DateTime, nullable=False, index=True)
    last_used_at: datetime.datetime = Field(default_factory=utcnow, sa_type=DateTime)

    def is_live(self, now: datetime.datetime) -> bool:
        return self.is_active and now < self.expires_at
