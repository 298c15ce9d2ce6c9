"""
Auth service.

Orchestrates the session lifecycle: every successful register, login,
refresh or social login mints a token and records it as a session.
"""

import logging
from typing import Optional

from sqlmodel import Session

from bizzleap.core.clock import Clock, utcnow
from bizzleap.core.config import Settings, settings as default_settings
from bizzleap.core.exceptions import OAuthError, TokenError, TokenMissing
from bizzleap.core.security import TokenIssuer
from bizzleap.models.user import SocialProvider, User
from bizzleap.schemas.auth import AuthResult, ClientInfo, SocialProfile
from bizzleap.schemas.user import UserCreate, UserLogin
from bizzleap.services.session_registry import SessionRegistry
from bizzleap.services.social_identity import SocialIdentityLinker
from bizzleap.services.user_service import UserService

logger = logging.getLogger(__name__)


class AuthService:
    """Service for authentication flows."""

    def __init__(self, session: Session, settings: Settings = default_settings, clock: Clock = utcnow):
        self.users = UserService(session, settings, clock)
        self.sessions = SessionRegistry(session, clock)
        self.linker = SocialIdentityLinker(session, clock)
        self.tokens = TokenIssuer.from_settings(settings, clock)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def register(self, user_data: UserCreate, client: ClientInfo) -> AuthResult:
        """Create a password account and sign it in."""
        user = self.users.register(user_data)
        return self._start_session(user, client)

    def login(self, login_data: UserLogin, client: ClientInfo) -> AuthResult:
        """
        Authenticate with email and password.

        Raises:
            InvalidCredentials: for any bad email/password combination
        """
        user = self.users.verify_credentials(login_data.email, login_data.password)
        logger.info("User %s logged in", user.id)
        return self._start_session(user, client)

    def refresh(self, token: Optional[str], client: ClientInfo) -> AuthResult:
        """
        Exchange a live token for a new one.

        The old token must verify, its session must still be live and its
        user active. The old session is revoked once the new one exists.

        Raises:
            TokenError: missing, malformed, expired or revoked token,
                or the user is gone
        """
        if not token:
            raise TokenMissing()
        payload = self.tokens.verify(token)
        if not self.sessions.is_live(token):
            raise TokenError("Session is no longer active", error="Invalid or expired token")

        user = self.users.get_active_user(payload.user_id)
        if user is None:
            raise TokenError("User not found")

        result = self._start_session(user, client)
        self.sessions.revoke(token)
        return result

    def logout(self, token: Optional[str]) -> None:
        """Revoke the session behind a token. Never fails on unknown tokens."""
        if token:
            self.sessions.revoke(token)

    def social_login(self, provider: SocialProvider, profile: SocialProfile, client: ClientInfo) -> AuthResult:
        """Resolve a provider profile to a user and sign it in."""
        user = self.linker.resolve(provider, profile)
        if not user.is_active:
            raise OAuthError("Account is deactivated")
        device_info = client.device_info or f"OAuth {provider.value.capitalize()}"
        return self._start_session(user, ClientInfo(ip_address=client.ip_address,
                                                    user_agent=client.user_agent,
                                                    device_info=device_info))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _start_session(self, user: User, client: ClientInfo) -> AuthResult:
        issued = self.tokens.issue(user.id)
        self.sessions.create(
            user_id=user.id,
            token=issued.token,
            expires_at=issued.expires_at,
            device_info=client.device_info,
            ip_address=client.ip_address,
            user_agent=client.user_agent,
        )
        return AuthResult(user=user, token=issued.token, expires_at=issued.expires_at)
