"""
Auth gateway.

Request-time gatekeeper. A request is authenticated only when its
bearer token has a valid signature, is unexpired, has a live session
in the registry and belongs to an active user. Each stage either
advances or rejects:

    NoToken -> Extracted -> SignatureVerified -> SessionConfirmed -> Authenticated
"""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlmodel import Session

from bizzleap.core.clock import Clock, utcnow
from bizzleap.core.config import Settings, settings as default_settings
from bizzleap.core.exceptions import SessionNotLive, TokenError, TokenMissing
from bizzleap.core.security import TokenIssuer
from bizzleap.db.repositories.user import UserRepository
from bizzleap.models.session import UserSession
from bizzleap.models.user import User
from bizzleap.services.session_registry import SessionRegistry

logger = logging.getLogger(__name__)


@dataclass
class AuthContext:
    """Identity bound to an authenticated request."""
    user: User
    token: str
    session: UserSession


class AuthGateway:
    """Stateful bearer-token authentication."""

    def __init__(self, session: Session, settings: Settings = default_settings, clock: Clock = utcnow):
        self.tokens = TokenIssuer.from_settings(settings, clock)
        self.sessions = SessionRegistry(session, clock)
        self.users = UserRepository(session)

    def authenticate(self, token: Optional[str]) -> AuthContext:
        """
        Run the full check for one request.

        Raises:
            TokenMissing: no bearer token (401)
            TokenMalformed / TokenBadSignature / TokenExpired: token rejected (401)
            SessionNotLive: signature fine but session revoked or unknown (403)
            TokenError: session live but user missing or inactive (401)
        """
        if not token:
            raise TokenMissing()

        payload = self.tokens.verify(token)

        user_session = self.sessions.get_live(token)
        if user_session is None or user_session.user_id != payload.user_id:
            raise SessionNotLive()

        user = self.users.get_active_by_id(payload.user_id)
        if user is None:
            raise TokenError("User not found")

        self.sessions.touch(token)
        return AuthContext(user=user, token=token, session=user_session)
