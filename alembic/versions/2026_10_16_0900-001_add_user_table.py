"""Add users table

Revision ID: 001
Revises:
Create Date: 2026-10-16 09:00:00.000000

"""
from typing import Sequence, Union

import sqlalchemy as sa
import sqlmodel
from alembic import op

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

AutoString = sqlmodel.sql.sqltypes.AutoString

user_role = sa.Enum('FARMER', 'BUSINESS', 'BUYER', name='userrole')
buyer_type = sa.Enum('INDIVIDUAL', 'RESTAURANT', 'RETAILER', name='buyertype')
social_provider = sa.Enum('GOOGLE', 'FACEBOOK', 'GITHUB', name='socialprovider')


def upgrade() -> None:
    """Create users table."""
    op.create_table('users', sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', AutoString(length=255), nullable=False),
        sa.Column('hashed_password', AutoString(length=255), nullable=True),
        sa.Column('first_name', AutoString(length=100), nullable=False),
        sa.Column('last_name', AutoString(length=100), nullable=False),
        sa.Column('role', user_role, nullable=True),
        sa.Column('avatar', AutoString(length=500), nullable=True),
        sa.Column('phone', AutoString(length=20), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('country', AutoString(length=2), nullable=True),
        sa.Column('state', AutoString(length=100), nullable=True),
        sa.Column('city', AutoString(length=100), nullable=True),
        sa.Column('location', AutoString(length=255), nullable=True),
        sa.Column('zip_code', AutoString(length=20), nullable=True),
        sa.Column('currency', AutoString(length=3), nullable=False, server_default='USD'),
        sa.Column('profile_setup', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('farm_name', AutoString(length=255), nullable=True),
        sa.Column('farm_size', AutoString(length=50), nullable=True),
        sa.Column('farm_type', AutoString(length=100), nullable=True),
        sa.Column('products_grown', sa.Text(), nullable=True),
        sa.Column('organic_certified', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('business_name', AutoString(length=255), nullable=True),
        sa.Column('business_type', AutoString(length=100), nullable=True),
        sa.Column('services_offered', sa.Text(), nullable=True),
        sa.Column('years_in_business', sa.Integer(), nullable=True),
        sa.Column('website', AutoString(length=500), nullable=True),
        sa.Column('buyer_type', buyer_type, nullable=True),
        sa.Column('interests', sa.Text(), nullable=True),
        sa.Column('monthly_budget', AutoString(length=50), nullable=True),
        sa.Column('social_id', AutoString(length=255), nullable=True),
        sa.Column('social_provider', social_provider, nullable=True),
        sa.Column('email_verified', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('last_login', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('(CURRENT_TIMESTAMP)')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('(CURRENT_TIMESTAMP)')),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('social_provider', 'social_id', name='uq_users_social'))
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_role'), 'users', ['role'], unique=False)
    op.create_index(op.f('ix_users_is_active'), 'users', ['is_active'], unique=False)


def downgrade() -> None:
    """Drop users table."""
    op.drop_index(op.f('ix_users_is_active'), table_name='users')
    op.drop_index(op.f('ix_users_role'), table_name='users')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')
    bind = op.get_bind()
    for enum_type in (social_provider, buyer_type, user_role):
        enum_type.drop(bind, checkfirst=True)
