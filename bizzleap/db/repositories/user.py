"""
User repository.

Handles database operations for User model.
"""

from typing import Optional

from sqlmodel import Session, select

from bizzleap.models.user import SocialProvider, User


class UserRepository:
    """Repository for User database operations."""

    def __init__(self, session: Session):
        """
        Initialize repository with database session.

        Args:
            session: SQLModel database session
        """
        self.session = session

    def create(self, user: User) -> User:
        """
        Create a new user in the database.

        Args:
            user: User instance to create

        Returns:
            Created user with generated id

        Raises:
            sqlalchemy.exc.IntegrityError: on a unique constraint violation
        """
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)
        return user

    def get_by_id(self, user_id: int) -> Optional[User]:
        """
        Get user by ID.

        Args:
            user_id: User ID

        Returns:
            User instance if found, None otherwise
        """
        return self.session.get(User, user_id)

    def get_active_by_id(self, user_id: int) -> Optional[User]:
        statement = select(User).where(User.id == user_id, User.is_active == True)  # noqa: E712
        return self.session.exec(statement).first()

    def get_by_email(self, email: str) -> Optional[User]:
        """
        Get user by email address.

        Args:
            email: Normalized (lower-cased) email

        Returns:
            User instance if found, None otherwise
        """
        statement = select(User).where(User.email == email)
        return self.session.exec(statement).first()

    def get_active_by_email(self, email: str) -> Optional[User]:
        statement = select(User).where(User.email == email, User.is_active == True)  # noqa: E712
        return self.session.exec(statement).first()

    def get_by_social(self, provider: SocialProvider, social_id: str) -> Optional[User]:
        """
        Get user by linked social identity.

        Args:
            provider: Social provider
            social_id: Provider-assigned user id

        Returns:
            User instance if found, None otherwise
        """
        statement = select(User).where(User.social_provider == provider, User.social_id == social_id)
        return self.session.exec(statement).first()

    def update(self, user: User) -> User:
        """
        Update an existing user.

        Args:
            user: User instance with updated data

        Returns:
            Updated user
        """
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)
        return user

    def exists_by_email(self, email: str) -> bool:
        """
        Check if a user with the given email exists.

        Args:
            email: Email to check

        Returns:
            True if user exists, False otherwise
        """
        return self.get_by_email(email) is not None

    def rollback(self) -> None:
        self.session.rollback()
