"""create users, google_drive_connections, projects and project_usage tables

Revision ID: 4e7a1c9d2b60
Revises:
Create Date: 2026-10-18 09:00:00.000000

Initial schema:
1. users: one row per Google account email
2. google_drive_connections: OAuth tokens, unique per Google email
3. projects: unique per (user_id, project_name)
4. project_usage: one row per generation request, status pending/ready/error
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4e7a1c9d2b60'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the four application tables."""
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('google_user_id', sa.String(length=255), nullable=True),
        sa.Column('session_id', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('last_active', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_session_id'), 'users', ['session_id'], unique=False)

    op.create_table(
        'google_drive_connections',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('google_email', sa.String(length=255), nullable=False),

        # Token data
        sa.Column('access_token', sa.Text(), nullable=False),
        sa.Column('refresh_token', sa.Text(), nullable=True),
        sa.Column('token_expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('scope', sa.Text(), nullable=True),

        # Health
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('error_message', sa.Text(), nullable=True),
        sa.Column('retry_count', sa.Integer(), nullable=False),
        sa.Column('last_error_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('last_used', sa.DateTime(timezone=True), nullable=True),

        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
    )
    op.create_index(
        op.f('ix_google_drive_connections_user_id'),
        'google_drive_connections',
        ['user_id'],
        unique=False
    )
    # Upsert target: one connection per Google account
    op.create_index(
        op.f('ix_google_drive_connections_google_email'),
        'google_drive_connections',
        ['google_email'],
        unique=True
    )

    op.create_table(
        'projects',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('project_name', sa.String(length=255), nullable=False),
        sa.Column('business_details', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=50), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        # Conditional insert target for find-or-create
        sa.UniqueConstraint('user_id', 'project_name', name='uq_projects_user_project_name'),
    )
    op.create_index(op.f('ix_projects_user_id'), 'projects', ['user_id'], unique=False)

    op.create_table(
        'project_usage',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('project_id', sa.Uuid(), nullable=False),
        sa.Column('request_type', sa.String(length=50), nullable=False),
        sa.Column('request_data', sa.JSON(), nullable=True),
        sa.Column('response_data', sa.JSON(), nullable=True),
        sa.Column('website_structure', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('output_link', sa.Text(), nullable=True),
        sa.Column('error_message', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id'], ondelete='CASCADE'),
    )
    op.create_index(op.f('ix_project_usage_user_id'), 'project_usage', ['user_id'], unique=False)
    op.create_index(op.f('ix_project_usage_project_id'), 'project_usage', ['project_id'], unique=False)
    op.create_index(op.f('ix_project_usage_status'), 'project_usage', ['status'], unique=False)
    op.create_index(op.f('ix_project_usage_created_at'), 'project_usage', ['created_at'], unique=False)


def downgrade() -> None:
    """Drop the application tables, children first."""
    op.drop_index(op.f('ix_project_usage_created_at'), table_name='project_usage')
    op.drop_index(op.f('ix_project_usage_status'), table_name='project_usage')
    op.drop_index(op.f('ix_project_usage_project_id'), table_name='project_usage')
    op.drop_index(op.f('ix_project_usage_user_id'), table_name='project_usage')
    op.drop_table('project_usage')

    op.drop_index(op.f('ix_projects_user_id'), table_name='projects')
    op.drop_table('projects')

    op.drop_index(op.f('ix_google_drive_connections_google_email'), table_name='google_drive_connections')
    op.drop_index(op.f('ix_google_drive_connections_user_id'), table_name='google_drive_connections')
    op.drop_table('google_drive_connections')

    op.drop_index(op.f('ix_users_session_id'), table_name='users')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')
