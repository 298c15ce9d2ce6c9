"""
Security primitives.

Password hashing (bcrypt) and signed bearer tokens (JWT via PyJWT).
Token verification is offline: signature and expiry only. Liveness of
the matching session is checked by the session registry.
"""

import calendar
import datetime
import uuid
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

import bcrypt
import jwt
from fastapi.security import OAuth2PasswordBearer

from bizzleap.core.clock import Clock, utcnow
from bizzleap.core.config import Settings
from bizzleap.core.exceptions import (
    OAuthError,
    TokenBadSignature,
    TokenExpired,
    TokenMalformed,
    ValidationError,
)

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72

ACCESS_TOKEN_TYPE = "access"
OAUTH_STATE_TYPE = "oauth_state"

# auto_error=False so a missing header reaches the auth gateway
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


# ----------------------------------------------------------------------
# Passwords
# ----------------------------------------------------------------------


def get_password_hash(password: str, rounds: int = 12) -> str:
    """Hash a password with a per-call random salt."""
    encoded = password.encode("utf-8")
    if len(encoded) > BCRYPT_MAX_BYTES:
        raise ValidationError(f"Password must be at most {BCRYPT_MAX_BYTES} bytes long")
    return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed_password: Optional[str], rounds: int = 12) -> bool:
    """
    Check a password against its hash in constant time.

    When there is no hash (unknown user, social-only account) a dummy
    hash is checked instead so the call costs the same either way.
    """
    encoded = plain_password.encode("utf-8")
    if hashed_password is None:
        bcrypt.checkpw(encoded[:BCRYPT_MAX_BYTES], _dummy_hash(rounds))
        return False
    if len(encoded) > BCRYPT_MAX_BYTES:
        return False
    try:
        return bcrypt.checkpw(encoded, hashed_password.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


@lru_cache(maxsize=4)
def _dummy_hash(rounds: int) -> bytes:
    return bcrypt.hashpw(b"bizzleap-timing-equaliser", bcrypt.gensalt(rounds=rounds))


# ----------------------------------------------------------------------
# Tokens
# ----------------------------------------------------------------------


@dataclass(frozen=True)
class IssuedToken:
    token: str
    expires_at: datetime.datetime


@dataclass(frozen=True)
class TokenPayload:
    user_id: int
    expires_at: datetime.datetime
    token_id: str


def _to_timestamp(value: datetime.datetime) -> int:
    return calendar.timegm(value.utctimetuple())


def _from_timestamp(value: int) -> datetime.datetime:
    return datetime.datetime.fromtimestamp(value, tz=datetime.timezone.utc).replace(tzinfo=None)


class TokenIssuer:
    """
    Mints and verifies signed, time-bounded bearer tokens.

    Expiry is evaluated against ``clock`` rather than the wall clock so
    callers (and tests) control what "now" means.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256",
                 expire_minutes: int = 60 * 24 * 7, state_expire_minutes: int = 10,
                 clock: Clock = utcnow):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expires_delta = datetime.timedelta(minutes=expire_minutes)
        self.state_expires_delta = datetime.timedelta(minutes=state_expire_minutes)
        self.clock = clock

    @classmethod
    def from_settings(cls, settings: Settings, clock: Clock = utcnow) -> "TokenIssuer":
        return cls(secret_key=settings.SECRET_KEY, algorithm=settings.ALGORITHM,
                   expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
                   state_expire_minutes=settings.OAUTH_STATE_EXPIRE_MINUTES, clock=clock)

    def issue(self, user_id: int) -> IssuedToken:
        """Create an access token for ``user_id``."""
        now = self.clock()
        expires_at = (now + self.expires_delta).replace(microsecond=0)
        claims = {
            "sub": str(user_id),
            "type": ACCESS_TOKEN_TYPE,
            "iat": _to_timestamp(now),
            "exp": _to_timestamp(expires_at),
            "jti": uuid.uuid4().hex,
        }
        token = jwt.encode(claims, self.secret_key, algorithm=self.algorithm)
        return IssuedToken(token=token, expires_at=expires_at)

    def verify(self, token: str) -> TokenPayload:
        """
        Verify signature and expiry of an access token.

        Raises:
            TokenMalformed: token cannot be parsed or lacks required claims
            TokenBadSignature: signature does not match the server secret
            TokenExpired: token is past its ``exp`` claim
        """
        claims = self._decode(token)
        if claims.get("type") != ACCESS_TOKEN_TYPE:
            raise TokenMalformed("Token is not an access token")
        try:
            user_id = int(claims["sub"])
        except (TypeError, ValueError):
            raise TokenMalformed()
        return TokenPayload(user_id=user_id, expires_at=_from_timestamp(claims["exp"]),
                            token_id=str(claims.get("jti", "")))

    def issue_state(self, provider: str) -> str:
        """Create a short-lived signed OAuth ``state`` value bound to a provider."""
        now = self.clock()
        claims = {
            "sub": provider,
            "type": OAUTH_STATE_TYPE,
            "exp": _to_timestamp(now + self.state_expires_delta),
            "nonce": uuid.uuid4().hex,
        }
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    def verify_state(self, state: str, provider: str) -> None:
        """Reject tampered, expired or cross-provider OAuth state."""
        try:
            claims = self._decode(state)
        except (TokenMalformed, TokenBadSignature, TokenExpired) as exc:
            raise OAuthError(f"Invalid OAuth state: {exc.message}")
        if claims.get("type") != OAUTH_STATE_TYPE or claims.get("sub") != provider:
            raise OAuthError("OAuth state does not match provider")

    def _decode(self, token: str) -> dict:
        try:
            claims = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"verify_exp": False, "verify_iat": False, "require": ["exp", "sub"]},
            )
        except jwt.InvalidSignatureError:
            raise TokenBadSignature()
        except jwt.InvalidTokenError:
            raise TokenMalformed()

        exp = claims["exp"]
        if not isinstance(exp, int):
            raise TokenMalformed()
        if _to_timestamp(self.clock()) >= exp:
            raise TokenExpired()
        return claims
