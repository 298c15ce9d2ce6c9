"""
Authentication endpoints.

Handles registration, login, token refresh, logout and the OAuth
redirect flow.
"""

import dataclasses
import logging
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.exc import SQLAlchemyError

from bizzleap.api.dependencies import (
    enforce_auth_rate_limit,
    get_auth_service,
    get_client_info,
    get_oauth_client,
    get_settings,
)
from bizzleap.core.clock import utcnow
from bizzleap.core.config import Settings
from bizzleap.core.exceptions import BizzLeapError, OAuthError
from bizzleap.core.security import oauth2_scheme
from bizzleap.schemas.auth import AuthResponse, AuthResult, ClientInfo, MessageResponse, TokenResponse
from bizzleap.schemas.user import UserCreate, UserLogin, UserResponse
from bizzleap.services.auth_service import AuthService
from bizzleap.services.oauth_client import OAuthClient

logger = logging.getLogger(__name__)

router = APIRouter()


def _auth_response(result: AuthResult, message: str) -> AuthResponse:
    return AuthResponse(
        message=message,
        user=UserResponse.model_validate(result.user),
        token=result.token,
        expires_at=result.expires_at,
        redirect_to=result.redirect_to,
    )


@router.post("/register",
             summary="User registration endpoint.",
             response_model=AuthResponse,
             status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(enforce_auth_rate_limit)])
def register(user_data: UserCreate, client: ClientInfo = Depends(get_client_info),
             service: AuthService = Depends(get_auth_service)):
    """
    Register a new user and open a session.

    Raises:
        400: invalid input or password too short
        409: email already registered
    """
    client = dataclasses.replace(client, device_info=user_data.device_info)
    result = service.register(user_data, client)
    return _auth_response(result, "User registered successfully")


@router.post("/login",
             summary="User login endpoint.",
             response_model=AuthResponse,
             dependencies=[Depends(enforce_auth_rate_limit)])
def login(login_data: UserLogin, client: ClientInfo = Depends(get_client_info),
          service: AuthService = Depends(get_auth_service)):
    """
    Authenticate with email and password.

    Unknown email and wrong password produce the same 401.
    """
    client = dataclasses.replace(client, device_info=login_data.device_info)
    result = service.login(login_data, client)
    return _auth_response(result, "Login successful")


@router.post("/refresh",
             summary="Exchange a live bearer token for a new one.",
             response_model=TokenResponse,
             dependencies=[Depends(enforce_auth_rate_limit)])
def refresh(token: Optional[str] = Depends(oauth2_scheme), client: ClientInfo = Depends(get_client_info),
            service: AuthService = Depends(get_auth_service)):
    result = service.refresh(token, client)
    return TokenResponse(token=result.token, expires_at=result.expires_at)


@router.post("/logout",
             summary="Revoke the current bearer token.",
             response_model=MessageResponse)
def logout(token: Optional[str] = Depends(oauth2_scheme), service: AuthService = Depends(get_auth_service)):
    """Always succeeds, whether or not the token maps to a live session."""
    service.logout(token)
    return MessageResponse(message="Logout successful")


@router.get("/health", summary="Auth routes health check.")
def auth_health():
    return {
        "success": True,
        "message": "Auth routes are working",
        "timestamp": utcnow().isoformat(),
    }


@router.get("/{provider}",
            summary="Start social login with an OAuth provider.",
            status_code=status.HTTP_302_FOUND,
            response_class=RedirectResponse)
def oauth_start(provider: str, request: Request, oauth: OAuthClient = Depends(get_oauth_client)):
    social_provider = oauth.get_provider(provider)
    redirect_uri = str(request.url_for("oauth_callback", provider=social_provider.value))
    return RedirectResponse(oauth.authorization_url(social_provider, redirect_uri),
                            status_code=status.HTTP_302_FOUND)


@router.get("/{provider}/callback",
            name="oauth_callback",
            summary="OAuth provider callback.",
            status_code=status.HTTP_302_FOUND,
            response_class=RedirectResponse)
def oauth_callback(provider: str, request: Request,
                   code: Optional[str] = Query(None), state: Optional[str] = Query(None),
                   error: Optional[str] = Query(None),
                   client: ClientInfo = Depends(get_client_info),
                   oauth: OAuthClient = Depends(get_oauth_client),
                   service: AuthService = Depends(get_auth_service),
                   settings: Settings = Depends(get_settings)):
    """
    Finish social login and hand the token to the frontend.

    Success redirects to the dashboard (or role selection for users who
    have not completed their profile); any failure redirects to the
    frontend login page with ``error=oauth_failed``.
    """
    frontend = settings.FRONTEND_URL.rstrip("/")
    try:
        social_provider = oauth.get_provider(provider)
        if error or not code:
            raise OAuthError(f"Provider returned no code ({error or 'missing'})")
        oauth.validate_state(social_provider, state)
        redirect_uri = str(request.url_for("oauth_callback", provider=social_provider.value))
        profile = oauth.fetch_profile(social_provider, code, redirect_uri)
        result = service.social_login(social_provider, profile, client)
    except (BizzLeapError, SQLAlchemyError) as exc:
        logger.warning("%s OAuth callback failed: %s", provider, exc)
        return RedirectResponse(f"{frontend}/login?{urlencode({'error': 'oauth_failed'})}",
                                status_code=status.HTTP_302_FOUND)

    return RedirectResponse(f"{frontend}{result.redirect_to}?{urlencode({'token': result.token})}",
                            status_code=status.HTTP_302_FOUND)
