"""Tests for request-time authentication."""

import pytest

from bizzleap.core.exceptions import (
    SessionNotLive,
    TokenBadSignature,
    TokenError,
    TokenExpired,
    TokenMalformed,
    TokenMissing,
)
from bizzleap.core.security import TokenIssuer
from bizzleap.schemas.auth import ClientInfo
from bizzleap.services.auth_gateway import AuthGateway
from bizzleap.services.auth_service import AuthService


@pytest.fixture
def auth(db, settings, clock):
    return AuthService(db, settings, clock)


@pytest.fixture
def gateway(db, settings, clock):
    return AuthGateway(db, settings, clock)


@pytest.fixture
def signed_in(auth, registration):
    return auth.register(registration, ClientInfo())


class TestAuthenticate:

    def test_live_token(self, gateway, signed_in):
        context = gateway.authenticate(signed_in.token)
        assert context.user.id == signed_in.user.id
        assert context.token == signed_in.token
        assert context.session.is_active

    def test_touches_session(self, gateway, auth, signed_in, clock):
        clock.advance(minutes=10)
        gateway.authenticate(signed_in.token)
        assert auth.sessions.get_live(signed_in.token).last_used_at == clock.now

    def test_missing(self, gateway):
        with pytest.raises(TokenMissing):
            gateway.authenticate(None)

    def test_malformed(self, gateway):
        with pytest.raises(TokenMalformed):
            gateway.authenticate("definitely-not-a-jwt")

    def test_foreign_signature(self, gateway, signed_in, clock):
        forged = TokenIssuer("some-other-secret-of-sufficient-length-00", clock=clock).issue(signed_in.user.id)
        with pytest.raises(TokenBadSignature):
            gateway.authenticate(forged.token)

    def test_expired(self, gateway, signed_in, clock):
        clock.advance(days=7)
        with pytest.raises(TokenExpired):
            gateway.authenticate(signed_in.token)

    def test_revoked_session_is_forbidden(self, gateway, auth, signed_in):
        auth.logout(signed_in.token)
        assert auth.tokens.verify(signed_in.token).user_id == signed_in.user.id
        with pytest.raises(SessionNotLive) as exc_info:
            gateway.authenticate(signed_in.token)
        assert exc_info.value.status_code == 403

    def test_valid_signature_without_session(self, gateway, signed_in, settings, clock):
        # Correctly signed but never registered
        token = TokenIssuer.from_settings(settings, clock).issue(signed_in.user.id).token
        with pytest.raises(SessionNotLive):
            gateway.authenticate(token)

    def test_deactivated_user(self, gateway, auth, signed_in, db):
        user = signed_in.user
        user.is_active = False
        db.add(user)
        db.commit()
        with pytest.raises(TokenError) as exc_info:
            gateway.authenticate(signed_in.token)
        assert exc_info.value.status_code == 401

    def test_old_token_rejected_after_refresh(self, gateway, auth, signed_in):
        refreshed = auth.refresh(signed_in.token, ClientInfo())
        with pytest.raises(SessionNotLive):
            gateway.authenticate(signed_in.token)
        assert gateway.authenticate(refreshed.token).user.id == signed_in.user.id
