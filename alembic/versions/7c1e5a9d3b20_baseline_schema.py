"""baseline_schema

Revision ID: 7c1e5a9d3b20
Revises:
Create Date: 2026-10-18 10:12:44.512031

Creates the full schema. Tables that already exist are left untouched.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = '7c1e5a9d3b20'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def table_exists(table_name: str) -> bool:
    """Check if a table exists in the database."""
    bind = op.get_bind()
    inspector = inspect(bind)
    return table_name in inspector.get_table_names()


def upgrade() -> None:
    if not table_exists('users'):
        op.create_table('users',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('full_name', sa.String(), nullable=False),
            sa.Column('email', sa.String(), nullable=False),
            sa.Column('password_hash', sa.String(), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
        op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)

    if not table_exists('user_settings'):
        op.create_table('user_settings',
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('follow_up_cadence_days', sa.JSON(), nullable=False),
            sa.Column('default_email_templates', sa.JSON(), nullable=False),
            sa.Column('usage_preference', sa.String(), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('user_id')
        )

    if not table_exists('user_subscriptions'):
        op.create_table('user_subscriptions',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('tier', sa.String(), nullable=False),
            sa.Column('status', sa.String(), nullable=False),
            sa.Column('plan_start_date', sa.DateTime(timezone=True), nullable=True),
            sa.Column('plan_expiry_date', sa.DateTime(timezone=True), nullable=True),
            sa.Column('stripe_session_id', sa.String(), nullable=True),
            sa.Column('stripe_payment_intent_id', sa.String(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('user_id')
        )
        op.create_index(op.f('ix_user_subscriptions_id'), 'user_subscriptions', ['id'], unique=False)

    if not table_exists('payments'):
        op.create_table('payments',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('plan_id', sa.String(), nullable=False),
            sa.Column('plan_name', sa.String(), nullable=False),
            sa.Column('duration_months', sa.Integer(), nullable=False),
            sa.Column('amount', sa.Integer(), nullable=False),
            sa.Column('currency', sa.String(length=3), nullable=False),
            sa.Column('stripe_session_id', sa.String(), nullable=False),
            sa.Column('stripe_payment_intent_id', sa.String(), nullable=True),
            sa.Column('status', sa.String(), nullable=False),
            sa.Column('invoice_number', sa.String(), nullable=True),
            sa.Column('period_start', sa.DateTime(timezone=True), nullable=True),
            sa.Column('period_end', sa.DateTime(timezone=True), nullable=True),
            sa.Column('paid_at', sa.DateTime(timezone=True), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('invoice_number')
        )
        op.create_index('idx_payments_user_created', 'payments', ['user_id', 'created_at'], unique=False)
        op.create_index(op.f('ix_payments_created_at'), 'payments', ['created_at'], unique=False)
        op.create_index(op.f('ix_payments_id'), 'payments', ['id'], unique=False)
        op.create_index(op.f('ix_payments_stripe_session_id'), 'payments', ['stripe_session_id'], unique=True)
        op.create_index(op.f('ix_payments_user_id'), 'payments', ['user_id'], unique=False)

    if not table_exists('companies'):
        op.create_table('companies',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('name', sa.String(), nullable=False),
            sa.Column('website', sa.String(), nullable=True),
            sa.Column('linkedin_url', sa.String(), nullable=True),
            sa.Column('notes', sa.Text(), nullable=True),
            sa.Column('is_favorite', sa.Boolean(), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('idx_companies_user_name', 'companies', ['user_id', 'name'], unique=False)
        op.create_index(op.f('ix_companies_id'), 'companies', ['id'], unique=False)
        op.create_index(op.f('ix_companies_name'), 'companies', ['name'], unique=False)
        op.create_index(op.f('ix_companies_user_id'), 'companies', ['user_id'], unique=False)

    if not table_exists('contacts'):
        op.create_table('contacts',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('company_id', sa.Integer(), nullable=True),
            sa.Column('name', sa.String(), nullable=False),
            sa.Column('role', sa.String(), nullable=True),
            sa.Column('email', sa.String(), nullable=False),
            sa.Column('linkedin_url', sa.String(), nullable=True),
            sa.Column('phone', sa.String(), nullable=True),
            sa.Column('company_name_cache', sa.String(), nullable=True),
            sa.Column('notes', sa.Text(), nullable=True),
            sa.Column('tags', sa.JSON(), nullable=False),
            sa.Column('is_favorite', sa.Boolean(), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.ForeignKeyConstraint(['company_id'], ['companies.id'], ondelete='SET NULL'),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('idx_contacts_user_email', 'contacts', ['user_id', 'email'], unique=False)
        op.create_index(op.f('ix_contacts_company_id'), 'contacts', ['company_id'], unique=False)
        op.create_index(op.f('ix_contacts_id'), 'contacts', ['id'], unique=False)
        op.create_index(op.f('ix_contacts_name'), 'contacts', ['name'], unique=False)
        op.create_index(op.f('ix_contacts_user_id'), 'contacts', ['user_id'], unique=False)

    if not table_exists('job_openings'):
        op.create_table('job_openings',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('company_id', sa.Integer(), nullable=True),
            sa.Column('company_name_cache', sa.String(), nullable=False),
            sa.Column('role_title', sa.String(), nullable=False),
            sa.Column('initial_email_date', sa.Date(), nullable=False),
            sa.Column('status', sa.String(), nullable=False),
            sa.Column('tags', sa.JSON(), nullable=False),
            sa.Column('job_description_url', sa.String(), nullable=True),
            sa.Column('notes', sa.Text(), nullable=True),
            sa.Column('is_favorite', sa.Boolean(), nullable=False),
            sa.Column('favorited_at', sa.DateTime(timezone=True), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.ForeignKeyConstraint(['company_id'], ['companies.id'], ondelete='SET NULL'),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('idx_job_openings_user_created', 'job_openings', ['user_id', 'created_at'], unique=False)
        op.create_index(op.f('ix_job_openings_company_id'), 'job_openings', ['company_id'], unique=False)
        op.create_index(op.f('ix_job_openings_created_at'), 'job_openings', ['created_at'], unique=False)
        op.create_index(op.f('ix_job_openings_id'), 'job_openings', ['id'], unique=False)
        op.create_index(op.f('ix_job_openings_status'), 'job_openings', ['status'], unique=False)
        op.create_index(op.f('ix_job_openings_user_id'), 'job_openings', ['user_id'], unique=False)

    if not table_exists('job_opening_contacts'):
        op.create_table('job_opening_contacts',
            sa.Column('job_opening_id', sa.Integer(), nullable=False),
            sa.Column('contact_id', sa.Integer(), nullable=False),
            sa.ForeignKeyConstraint(['contact_id'], ['contacts.id'], ondelete='CASCADE'),
            sa.ForeignKeyConstraint(['job_opening_id'], ['job_openings.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('job_opening_id', 'contact_id')
        )

    if not table_exists('follow_ups'):
        op.create_table('follow_ups',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('job_opening_id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('follow_up_date', sa.Date(), nullable=False),
            sa.Column('original_due_date', sa.Date(), nullable=True),
            sa.Column('email_subject', sa.String(length=255), nullable=True),
            sa.Column('email_body', sa.Text(), nullable=True),
            sa.Column('status', sa.String(), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.ForeignKeyConstraint(['job_opening_id'], ['job_openings.id'], ondelete='CASCADE'),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('idx_follow_ups_user_status_date', 'follow_ups', ['user_id', 'status', 'follow_up_date'], unique=False)
        op.create_index(op.f('ix_follow_ups_id'), 'follow_ups', ['id'], unique=False)
        op.create_index(op.f('ix_follow_ups_job_opening_id'), 'follow_ups', ['job_opening_id'], unique=False)
        op.create_index(op.f('ix_follow_ups_user_id'), 'follow_ups', ['user_id'], unique=False)

    if not table_exists('posts'):
        op.create_table('posts',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=True),
            sa.Column('author_name_cache', sa.String(), nullable=True),
            sa.Column('title', sa.String(length=200), nullable=False),
            sa.Column('slug', sa.String(length=250), nullable=False),
            sa.Column('content', sa.Text(), nullable=False),
            sa.Column('excerpt', sa.String(length=300), nullable=True),
            sa.Column('cover_image_url', sa.String(), nullable=True),
            sa.Column('status', sa.String(), nullable=False),
            sa.Column('is_featured', sa.Boolean(), nullable=False),
            sa.Column('published_at', sa.DateTime(timezone=True), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='SET NULL'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('idx_posts_status_published', 'posts', ['status', 'published_at'], unique=False)
        op.create_index(op.f('ix_posts_id'), 'posts', ['id'], unique=False)
        op.create_index(op.f('ix_posts_slug'), 'posts', ['slug'], unique=True)
        op.create_index(op.f('ix_posts_user_id'), 'posts', ['user_id'], unique=False)


def downgrade() -> None:
    for table in (
        'posts',
        'follow_ups',
        'job_opening_contacts',
        'job_openings',
        'contacts',
        'companies',
        'payments',
        'user_subscriptions',
        'user_settings',
        'users',
    ):
        if table_exists(table):
            op.drop_table(table)
