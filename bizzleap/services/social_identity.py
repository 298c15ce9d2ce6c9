"""
Social identity linker.

Maps a profile from an external OAuth provider to a local user:
existing link first, then email match (which links the accounts), then
a brand-new social-only user.
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from bizzleap.core.clock import Clock, utcnow
from bizzleap.core.exceptions import OAuthError
from bizzleap.db.repositories.user import UserRepository
from bizzleap.models.user import SocialProvider, User
from bizzleap.schemas.auth import SocialProfile

logger = logging.getLogger(__name__)


class SocialIdentityLinker:
    """Resolve provider profiles to local users."""

    def __init__(self, session: Session, clock: Clock = utcnow):
        self.repository = UserRepository(session)
        self.clock = clock

    def resolve(self, provider: SocialProvider, profile: SocialProfile) -> User:
        """
        Find, link or create the user behind a provider profile.

        Repeated calls with the same profile return the same user. A
        unique violation from a concurrent resolve is retried once
        against the row the other request created.

        Raises:
            OAuthError: if the profile has no email address, or its email
                belongs to a deactivated account
        """
        user = self._find_or_link(provider, profile)
        if user is not None:
            return user

        try:
            return self._create(provider, profile)
        except IntegrityError:
            self.repository.rollback()
            user = self._find_or_link(provider, profile)
            if user is None:
                raise
            return user

    def _find_or_link(self, provider: SocialProvider, profile: SocialProfile):
        user = self.repository.get_by_social(provider, profile.id)
        if user is not None:
            return user

        email = profile.email
        if not email:
            raise OAuthError("Provider did not share an email address")

        user = self.repository.get_by_email(email)
        if user is None:
            return None
        if not user.is_active:
            raise OAuthError("Account is deactivated")

        # Email match is taken as proof that both accounts belong to one person
        user.social_id = profile.id
        user.social_provider = provider
        if profile.photo:
            user.avatar = profile.photo
        user.updated_at = self.clock()
        user = self.repository.update(user)
        logger.info("Linked %s account to user %s", provider.value, user.id)
        return user

    def _create(self, provider: SocialProvider, profile: SocialProfile) -> User:
        first_name, last_name = profile.split_name()
        now = self.clock()
        user = User(
            email=profile.email,
            hashed_password=None,
            first_name=first_name[:100],
            last_name=last_name[:100],
            social_id=profile.id,
            social_provider=provider,
            avatar=profile.photo,
            email_verified=True,
            profile_setup=False,
            created_at=now,
            updated_at=now,
        )
        user = self.repository.create(user)
        logger.info("Created user %s from %s login", user.id, provider.value)
        return user
