"""
Shared API dependencies.

Reusable FastAPI dependencies for authentication, services and
request metadata.
"""

import logging
from typing import Optional

from fastapi import Depends, Request
from sqlmodel import Session

from bizzleap.core.clock import Clock
from bizzleap.core.config import Settings
from bizzleap.core.exceptions import RateLimited
from bizzleap.core.security import oauth2_scheme
from bizzleap.db.session import get_db
from bizzleap.models.user import User
from bizzleap.schemas.auth import ClientInfo
from bizzleap.services.auth_gateway import AuthContext, AuthGateway
from bizzleap.services.auth_service import AuthService
from bizzleap.services.oauth_client import OAuthClient
from bizzleap.services.user_service import UserService

logger = logging.getLogger(__name__)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_clock(request: Request) -> Clock:
    return request.app.state.clock


def get_oauth_client(request: Request) -> OAuthClient:
    return request.app.state.oauth_client


def get_client_info(request: Request) -> ClientInfo:
    """IP address and user agent of the caller."""
    return ClientInfo(
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )


def enforce_auth_rate_limit(request: Request, client: ClientInfo = Depends(get_client_info)) -> None:
    """Reject the request with 429 once the caller's IP has used up its credential attempts."""
    limiter = request.app.state.auth_rate_limiter
    result = limiter.hit(f"auth:{client.ip_address or 'unknown'}")
    if not result.allowed:
        logger.warning("Auth rate limit exceeded for %s on %s", client.ip_address, request.url.path)
        raise RateLimited(headers={"Retry-After": str(result.retry_after)})


def get_auth_service(db: Session = Depends(get_db), settings: Settings = Depends(get_settings),
                     clock: Clock = Depends(get_clock), ) -> AuthService:
    return AuthService(db, settings, clock)


def get_user_service(db: Session = Depends(get_db), settings: Settings = Depends(get_settings),
                     clock: Clock = Depends(get_clock), ) -> UserService:
    return UserService(db, settings, clock)


def get_auth_context(token: Optional[str] = Depends(oauth2_scheme), db: Session = Depends(get_db),
                     settings: Settings = Depends(get_settings), clock: Clock = Depends(get_clock), ) -> AuthContext:
    """Authenticate the request's bearer token against signature, expiry and session registry."""
    return AuthGateway(db, settings, clock).authenticate(token)


def get_current_user(context: AuthContext = Depends(get_auth_context)) -> User:
    return context.user
