"""
Base database configuration.

Import all models here so Alembic can detect them for migrations.
"""

# Import all models for Alembic autogenerate
from bizzleap.models.user import User  # noqa: F401
from bizzleap.models.session import UserSession  # noqa: F401
