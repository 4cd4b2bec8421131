"""create_rider_tables

Revision ID: 3f1c9a7d2b10
Revises: 
Create Date: 2026-10-17 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = '3f1c9a7d2b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def table_exists(table_name):
    """Check if a table exists."""
    bind = op.get_bind()
    inspector = inspect(bind)
    return table_name in inspector.get_table_names()


def upgrade() -> None:
    """Upgrade schema - Create users, daily_records and monthly_summaries tables."""
    if not table_exists('users'):
        op.create_table(
            'users',
            sa.Column('id', sa.Integer(), primary_key=True, index=True),
            sa.Column('name', sa.String(length=20), nullable=False),
            sa.Column('email', sa.String(), nullable=False),
            sa.Column('password_hash', sa.String(), nullable=False),
            sa.Column('employment_type', sa.String(length=20), nullable=False),
            sa.Column('fixed_salary', sa.Float(), nullable=False),
            sa.Column('is_account_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('verify_otp', sa.String(length=6), nullable=True),
            sa.Column('verify_otp_expire_at', sa.DateTime(), nullable=True),
            sa.Column('reset_otp', sa.String(length=6), nullable=True),
            sa.Column('reset_otp_expire_at', sa.DateTime(), nullable=True),
            sa.Column('account_created_at', sa.DateTime(), nullable=False),
            sa.Column('profile_picture', sa.Text(), nullable=True),
        )
        op.create_index('ix_users_email', 'users', ['email'], unique=True)

    if not table_exists('daily_records'):
        op.create_table(
            'daily_records',
            sa.Column('id', sa.Integer(), primary_key=True, index=True),
            sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False, index=True),
            sa.Column('date', sa.Date(), nullable=False),
            sa.Column('work_status', sa.String(length=3), nullable=False),
            sa.Column('deliveries', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('tips', sa.Float(), nullable=False, server_default='0'),
            sa.Column('expenses', sa.Float(), nullable=False, server_default='0'),
            sa.Column('day_quality', sa.String(length=20), nullable=True),
            sa.Column('created_at', sa.DateTime(), nullable=True),
            sa.Column('updated_at', sa.DateTime(), nullable=True),
            sa.UniqueConstraint('user_id', 'date', name='uq_daily_records_user_date'),
        )

    if not table_exists('monthly_summaries'):
        op.create_table(
            'monthly_summaries',
            sa.Column('id', sa.Integer(), primary_key=True, index=True),
            sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False, index=True),
            sa.Column('start_date', sa.Date(), nullable=False),
            sa.Column('end_date', sa.Date(), nullable=False),
            sa.Column('total_earnings', sa.Float(), nullable=False),
            sa.Column('total_tips', sa.Float(), nullable=False),
            sa.Column('total_expenses', sa.Float(), nullable=False),
            sa.Column('savings', sa.Float(), nullable=False),
            sa.Column('total_deliveries', sa.Integer(), nullable=False),
            sa.Column('days_off', sa.Integer(), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=True),
            sa.Column('updated_at', sa.DateTime(), nullable=True),
            sa.UniqueConstraint('user_id', 'start_date', 'end_date', name='uq_monthly_summaries_cycle'),
        )


def downgrade() -> None:
    """Downgrade schema - Drop all rider tables."""
    op.drop_table('monthly_summaries')
    op.drop_table('daily_records')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
