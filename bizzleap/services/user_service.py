"""
User service.

Business logic for credentials and profiles: registration, credential
verification, profile updates, password change and deactivation.
"""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from bizzleap.core.clock import Clock, utcnow
from bizzleap.core.config import Settings, settings as default_settings
from bizzleap.core.exceptions import DuplicateEmail, InvalidCredentials, NotFound, ValidationError
from bizzleap.core.security import get_password_hash, verify_password
from bizzleap.db.repositories.user import UserRepository
from bizzleap.models.user import User
from bizzleap.schemas.user import UserCreate, UserProfileUpdate
from bizzleap.services.session_registry import SessionRegistry

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserService:
    """Service for user-related business logic."""

    def __init__(self, session: Session, settings: Settings = default_settings, clock: Clock = utcnow):
        """
        Initialize service with database session.

        Args:
            session: SQLModel database session
            settings: Application settings (password policy, bcrypt cost)
            clock: Source of "now" for timestamps
        """
        self.repository = UserRepository(session)
        self.sessions = SessionRegistry(session, clock)
        self.settings = settings
        self.clock = clock

    # ------------------------------------------------------------------
    # Credentials
    # ------------------------------------------------------------------

    def register(self, user_data: UserCreate) -> User:
        """
        Register a new user.

        Args:
            user_data: User registration data

        Returns:
            Created user, role unset

        Raises:
            ValidationError: If the password is too short
            DuplicateEmail: If the email is already registered
        """
        self._check_password_policy(user_data.password)
        email = normalize_email(user_data.email)

        if self.repository.exists_by_email(email):
            raise DuplicateEmail()

        now = self.clock()
        user = User(
            email=email,
            hashed_password=get_password_hash(user_data.password, self.settings.BCRYPT_ROUNDS),
            first_name=user_data.first_name.strip(),
            last_name=user_data.last_name.strip(),
            role=None,
            created_at=now,
            updated_at=now,
        )
        try:
            user = self.repository.create(user)
        except IntegrityError:
            # Lost the race against a concurrent registration
            self.repository.rollback()
            raise DuplicateEmail()

        logger.info("Registered user %s", user.id)
        return user

    def verify_credentials(self, email: str, password: str) -> User:
        """
        Check an email/password pair and record the login.

        Unknown email, inactive account, social-only account and wrong
        password all fail with the same InvalidCredentials error.
        """
        user = self.repository.get_active_by_email(normalize_email(email))
        hashed = user.hashed_password if user else None

        if not verify_password(password, hashed, self.settings.BCRYPT_ROUNDS) or user is None:
            logger.warning("Failed login attempt")
            raise InvalidCredentials()

        user.last_login = self.clock()
        return self.repository.update(user)

    # ------------------------------------------------------------------
    # Profile
    # ------------------------------------------------------------------

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        return self.repository.get_by_id(user_id)

    def get_active_user(self, user_id: int) -> Optional[User]:
        return self.repository.get_active_by_id(user_id)

    def get_profile(self, user_id: int) -> User:
        user = self.repository.get_active_by_id(user_id)
        if not user:
            raise NotFound("User not found", error="User not found")
        return user

    def update_profile(self, user_id: int, data: UserProfileUpdate) -> User:
        """Apply the fields present in ``data`` to the user's profile."""
        updates = data.model_dump(exclude_unset=True)
        if not updates:
            raise ValidationError("No valid fields to update")

        user = self.get_profile(user_id)
        for key, value in updates.items():
            setattr(user, key, value)
        user.updated_at = self.clock()
        return self.repository.update(user)

    def change_password(self, user_id: int, current_password: str, new_password: str) -> int:
        """
        Replace the user's password and revoke all of their sessions.

        Returns:
            Number of sessions revoked

        Raises:
            ValidationError: If the account is social-only or the new
                password is too short
            InvalidCredentials: If the current password is wrong
        """
        user = self.get_profile(user_id)
        if user.hashed_password is None:
            raise ValidationError("Account has no password; sign in with your social provider")
        if not verify_password(current_password, user.hashed_password, self.settings.BCRYPT_ROUNDS):
            raise InvalidCredentials("Current password is incorrect")
        self._check_password_policy(new_password)

        user.hashed_password = get_password_hash(new_password, self.settings.BCRYPT_ROUNDS)
        user.updated_at = self.clock()
        self.repository.update(user)
        return self.sessions.revoke_all_for_user(user_id)

    def deactivate(self, user_id: int) -> None:
        """Soft-delete the user and revoke all of their sessions."""
        user = self.get_profile(user_id)
        user.is_active = False
        user.updated_at = self.clock()
        self.repository.update(user)
        self.sessions.revoke_all_for_user(user_id)
        logger.info("Deactivated user %s", user_id)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _check_password_policy(self, password: str) -> None:
        minimum = self.settings.PASSWORD_MIN_LENGTH
        if len(password) < minimum:
            raise ValidationError(f"Password must be at least {minimum} characters long")
