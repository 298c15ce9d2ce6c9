"""Business logic services."""

from bizzleap.services.auth_gateway import AuthContext, AuthGateway
from bizzleap.services.auth_service import AuthService
from bizzleap.services.oauth_client import OAuthClient
from bizzleap.services.session_registry import SessionRegistry
from bizzleap.services.social_identity import SocialIdentityLinker
from bizzleap.services.user_service import UserService

__all__ = [
    "AuthContext",
    "AuthGateway",
    "AuthService",
    "OAuthClient",
    "SessionRegistry",
    "SocialIdentityLinker",
    "UserService",
]
