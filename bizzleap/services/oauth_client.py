"""
OAuth 2.0 provider client.

Drives the authorization-code flow for the supported social providers
and normalizes each provider's userinfo into a :class:`SocialProfile`.
The ``state`` parameter is a short-lived signed token, so no server-side
state store is needed.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional
from urllib.parse import urlencode

import httpx

from bizzleap.core.config import Settings, settings as default_settings
from bizzleap.core.exceptions import NotFound, OAuthError
from bizzleap.core.security import TokenIssuer
from bizzleap.models.user import SocialProvider
from bizzleap.schemas.auth import SocialProfile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderEndpoints:
    authorization_url: str
    token_url: str
    userinfo_url: str
    scope: str
    parse_profile: Callable[[dict], SocialProfile]
    emails_url: Optional[str] = None


def _parse_google(data: dict) -> SocialProfile:
    return SocialProfile(
        id=str(data["sub"]),
        emails=[data["email"]] if data.get("email") else [],
        display_name=data.get("name"),
        given_name=data.get("given_name"),
        family_name=data.get("family_name"),
        photos=[data["picture"]] if data.get("picture") else [],
    )


def _parse_facebook(data: dict) -> SocialProfile:
    picture = (data.get("picture") or {}).get("data") or {}
    return SocialProfile(
        id=str(data["id"]),
        emails=[data["email"]] if data.get("email") else [],
        display_name=data.get("name"),
        given_name=data.get("first_name"),
        family_name=data.get("last_name"),
        photos=[picture["url"]] if picture.get("url") else [],
    )


def _parse_github(data: dict) -> SocialProfile:
    return SocialProfile(
        id=str(data["id"]),
        emails=[data["email"]] if data.get("email") else [],
        display_name=data.get("name") or data.get("login"),
        photos=[data["avatar_url"]] if data.get("avatar_url") else [],
    )


PROVIDERS: dict[SocialProvider, ProviderEndpoints] = {
    SocialProvider.GOOGLE: ProviderEndpoints(
        authorization_url="https://accounts.google.com/o/oauth2/v2/auth",
        token_url="https://oauth2.googleapis.com/token",
        userinfo_url="https://openidconnect.googleapis.com/v1/userinfo",
        scope="openid email profile",
        parse_profile=_parse_google,
    ),
    SocialProvider.FACEBOOK: ProviderEndpoints(
        authorization_url="https://www.facebook.com/v19.0/dialog/oauth",
        token_url="https://graph.facebook.com/v19.0/oauth/access_token",
        userinfo_url="https://graph.facebook.com/me?fields=id,name,first_name,last_name,email,picture.type(large)",
        scope="email",
        parse_profile=_parse_facebook,
    ),
    SocialProvider.GITHUB: ProviderEndpoints(
        authorization_url="https://github.com/login/oauth/authorize",
        token_url="https://github.com/login/oauth/access_token",
        userinfo_url="https://api.github.com/user",
        scope="user:email",
        parse_profile=_parse_github,
        emails_url="https://api.github.com/user/emails",
    ),
}


class OAuthClient:
    """Client for the OAuth redirect flow of all configured providers."""

    def __init__(self, settings: Settings = default_settings, tokens: Optional[TokenIssuer] = None,
                 transport: Optional[httpx.BaseTransport] = None):
        self.settings = settings
        self.tokens = tokens or TokenIssuer.from_settings(settings)
        self.transport = transport

    def get_provider(self, name: str) -> SocialProvider:
        """
        Look up an enabled provider by name.

        Raises:
            NotFound: unknown provider or missing client credentials
        """
        try:
            provider = SocialProvider(name.lower())
        except ValueError:
            raise NotFound(f"Unknown OAuth provider '{name}'")
        client_id, _ = self.settings.oauth_credentials(provider.value)
        if not client_id:
            raise NotFound(f"OAuth provider '{provider.value}' is not configured")
        return provider

    def authorization_url(self, provider: SocialProvider, redirect_uri: str) -> str:
        """Build the provider consent URL the browser is redirected to."""
        endpoints = PROVIDERS[provider]
        client_id, _ = self.settings.oauth_credentials(provider.value)
        params = {
            "client_id": client_id,
            "redirect_uri": redirect_uri,
            "response_type": "code",
            "scope": endpoints.scope,
            "state": self.tokens.issue_state(provider.value),
        }
        return f"{endpoints.authorization_url}?{urlencode(params)}"

    def validate_state(self, provider: SocialProvider, state: Optional[str]) -> None:
        if not state:
            raise OAuthError("Missing OAuth state")
        self.tokens.verify_state(state, provider.value)

    def fetch_profile(self, provider: SocialProvider, code: str, redirect_uri: str) -> SocialProfile:
        """
        Exchange an authorization code and read the user's profile.

        Raises:
            OAuthError: on any transport error or unexpected provider response
        """
        endpoints = PROVIDERS[provider]
        client_id, client_secret = self.settings.oauth_credentials(provider.value)

        with httpx.Client(timeout=self.settings.OAUTH_HTTP_TIMEOUT, transport=self.transport) as client:
            try:
                token_response = client.post(
                    endpoints.token_url,
                    data={
                        "grant_type": "authorization_code",
                        "client_id": client_id,
                        "client_secret": client_secret,
                        "code": code,
                        "redirect_uri": redirect_uri,
                    },
                    headers={"Accept": "application/json"},
                )
                token_response.raise_for_status()
                access_token = self._json_object(token_response).get("access_token")
                if not access_token:
                    raise OAuthError("Provider returned no access token")

                auth_headers = {"Authorization": f"Bearer {access_token}", "Accept": "application/json"}
                userinfo = self._json_object(self._get(client, endpoints.userinfo_url, auth_headers))
                if endpoints.emails_url and not userinfo.get("email"):
                    userinfo["email"] = self._primary_email(
                        self._json(self._get(client, endpoints.emails_url, auth_headers)))
            except httpx.HTTPError as exc:
                logger.error("OAuth exchange with %s failed: %s", provider.value, exc)
                raise OAuthError(f"Could not reach {provider.value}")

        try:
            return endpoints.parse_profile(userinfo)
        except (KeyError, TypeError, ValueError) as exc:
            logger.error("Unexpected %s profile payload: %s", provider.value, exc)
            raise OAuthError(f"Unexpected profile from {provider.value}")

    @staticmethod
    def _get(client: httpx.Client, url: str, headers: dict) -> httpx.Response:
        response = client.get(url, headers=headers)
        response.raise_for_status()
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            logger.error("Non-JSON response from %s", response.request.url.host)
            raise OAuthError("Unexpected response from provider")

    @classmethod
    def _json_object(cls, response: httpx.Response) -> dict:
        payload = cls._json(response)
        if not isinstance(payload, dict):
            logger.error("Expected a JSON object from %s", response.request.url.host)
            raise OAuthError("Unexpected response from provider")
        return payload

    @staticmethod
    def _primary_email(emails: Any) -> Optional[str]:
        """Pick the primary verified address from GitHub's email list."""
        if not isinstance(emails, list):
            return None
        verified = [e for e in emails if isinstance(e, dict) and e.get("verified")]
        for entry in verified:
            if entry.get("primary"):
                return entry.get("email")
        return verified[0].get("email") if verified else None
