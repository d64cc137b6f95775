"""initial_pmh_schema

Creates the position board schema and seeds the ability catalog.

This migration implements:
1. Staff accounts with a single role label (users)
2. Positions with a name-based employee link (jobs)
3. Hiring pipeline candidates (candidates)
4. Ability catalog and per-role grants (abilities, role_permissions)

Default grants: operations manages positions and photos and can view
candidates; employment manages candidates. Manager and user start empty and
admin bypasses the table.

Revision ID: 3f9a2c7d1e40
Revises:
Create Date: 2026-10-19 09:12:44.318204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9a2c7d1e40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


ABILITIES = [
    ('job_create', 'Create positions'),
    ('job_edit', 'Edit position details'),
    ('job_delete', 'Delete positions'),
    ('job_assign', 'Assign a hired candidate to a position'),
    ('job_unassign', 'Clear the employee from a position'),
    ('candidate_view', 'View candidates'),
    ('candidate_create', 'Add candidates'),
    ('candidate_edit', 'Edit candidates, including setting status directly'),
    ('candidate_delete', 'Delete candidates'),
    ('candidate_advance', 'Move a candidate one stage forward'),
    ('candidate_revert', 'Move a candidate one stage back'),
    ('photo_upload', 'Upload employee photos'),
]

DEFAULT_GRANTS = {
    'operations': [
        'job_create', 'job_edit', 'job_delete', 'job_assign', 'job_unassign',
        'photo_upload', 'candidate_view',
    ],
    'employment': [
        'candidate_view', 'candidate_create', 'candidate_edit', 'candidate_delete',
        'candidate_advance', 'candidate_revert',
    ],
}


def upgrade() -> None:
    """Create all tables and seed the ability catalog."""

    # 1. Users
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('role', sa.String(length=10), nullable=False, server_default='user'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_role', 'users', ['role'])

    # 2. Jobs
    op.create_table(
        'jobs',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('job_number', sa.String(), nullable=True),
        sa.Column('department', sa.String(), nullable=True),
        sa.Column('due_date', sa.Date(), nullable=True),
        sa.Column('filled_date', sa.Date(), nullable=True),
        sa.Column('employee', sa.String(), nullable=True),
        sa.Column('employee_photo_url', sa.String(), nullable=True),
        sa.Column('status', sa.String(length=6), nullable=False, server_default='Open'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_jobs_id', 'jobs', ['id'])
    op.create_index('ix_jobs_title', 'jobs', ['title'])
    op.create_index('ix_jobs_department', 'jobs', ['department'])
    op.create_index('ix_jobs_employee', 'jobs', ['employee'])
    op.create_index('ix_jobs_status', 'jobs', ['status'])
    op.create_index('ix_jobs_created_at', 'jobs', ['created_at'])
    # One position per employee name (case and surrounding space ignored)
    op.create_index(
        'uq_jobs_employee_name',
        'jobs',
        [sa.text('lower(trim(employee))')],
        unique=True,
        postgresql_where=sa.text("employee IS NOT NULL AND trim(employee) <> ''"),
        sqlite_where=sa.text("employee IS NOT NULL AND trim(employee) <> ''"),
    )

    # 3. Candidates
    op.create_table(
        'candidates',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('full_name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=22), nullable=False, server_default='pending_pre_employment'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_candidates_id', 'candidates', ['id'])
    op.create_index('ix_candidates_full_name', 'candidates', ['full_name'])
    op.create_index('ix_candidates_status', 'candidates', ['status'])
    op.create_index('ix_candidates_created_at', 'candidates', ['created_at'])

    # 4. Ability catalog and grants
    abilities = op.create_table(
        'abilities',
        sa.Column('key', sa.String(length=64), primary_key=True, nullable=False),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    role_permissions = op.create_table(
        'role_permissions',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('role', sa.String(length=10), nullable=False),
        sa.Column(
            'ability_key',
            sa.String(length=64),
            sa.ForeignKey('abilities.key', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('role', 'ability_key', name='uq_role_permissions_role_ability'),
    )
    op.create_index('ix_role_permissions_role', 'role_permissions', ['role'])
    op.create_index('ix_role_permissions_ability_key', 'role_permissions', ['ability_key'])

    # 5. Seed catalog and default grants
    op.bulk_insert(abilities, [{'key': key, 'description': desc} for key, desc in ABILITIES])
    op.bulk_insert(
        role_permissions,
        [
            {'role': role, 'ability_key': key}
            for role, keys in DEFAULT_GRANTS.items()
            for key in keys
        ],
    )


def downgrade() -> None:
    """Drop all tables."""
    op.drop_index('ix_role_permissions_ability_key', table_name='role_permissions')
    op.drop_index('ix_role_permissions_role', table_name='role_permissions')
    op.drop_table('role_permissions')
    op.drop_table('abilities')

    op.drop_index('ix_candidates_created_at', table_name='candidates')
    op.drop_index('ix_candidates_status', table_name='candidates')
    op.drop_index('ix_candidates_full_name', table_name='candidates')
    op.drop_index('ix_candidates_id', table_name='candidates')
    op.drop_table('candidates')

    op.drop_index('uq_jobs_employee_name', table_name='jobs')
    op.drop_index('ix_jobs_created_at', table_name='jobs')
    op.drop_index('ix_jobs_status', table_name='jobs')
    op.drop_index('ix_jobs_employee', table_name='jobs')
    op.drop_index('ix_jobs_department', table_name='jobs')
    op.drop_index('ix_jobs_title', table_name='jobs')
    op.drop_index('ix_jobs_id', table_name='jobs')
    op.drop_table('jobs')

    op.drop_index('ix_users_role', table_name='users')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_index('ix_users_id', table_name='users')
    op.drop_table('users')
