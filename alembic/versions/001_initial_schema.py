"""Initial schema: organizations, members, projects, tasks, comments, notifications.

Revision ID: 001
Revises:
Create Date: 2025-08-06

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'organizations',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime, nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_organizations_created_at', 'organizations', ['created_at'])

    op.create_table(
        'users',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('full_name', sa.String(255)),
        sa.Column('is_active', sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime, nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'organization_members',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('organization_id', sa.Uuid, sa.ForeignKey('organizations.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.Uuid, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column(
            'role',
            sa.Enum('employee', 'team_leader', 'admin', 'super_admin', name='memberrole'),
            nullable=False,
            server_default='employee',
        ),
        sa.Column('joined_at', sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint('organization_id', 'user_id', name='unique_org_user'),
    )
    op.create_index('ix_organization_members_organization_id', 'organization_members', ['organization_id'])
    op.create_index('ix_organization_members_user_id', 'organization_members', ['user_id'])
    op.create_index('ix_organization_members_role', 'organization_members', ['role'])

    op.create_table(
        'projects',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('organization_id', sa.Uuid, sa.ForeignKey('organizations.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text),
        sa.Column('start_date', sa.Date),
        sa.Column('end_date', sa.Date),
        sa.Column('is_archived', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.Column('created_by_user_id', sa.Uuid, sa.ForeignKey('users.id', ondelete='SET NULL')),
    )
    op.create_index('ix_projects_organization_id', 'projects', ['organization_id'])
    op.create_index('ix_projects_is_archived', 'projects', ['is_archived'])
    op.create_index('ix_projects_created_at', 'projects', ['created_at'])
    op.create_index('ix_projects_created_by_user_id', 'projects', ['created_by_user_id'])

    op.create_table(
        'project_team_leads',
        sa.Column('project_id', sa.Uuid, sa.ForeignKey('projects.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('user_id', sa.Uuid, sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('assigned_at', sa.DateTime, nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_project_team_leads_user_id', 'project_team_leads', ['user_id'])

    op.create_table(
        'tasks',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('project_id', sa.Uuid, sa.ForeignKey('projects.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('description', sa.Text),
        sa.Column(
            'status',
            sa.Enum('planned', 'in_progress', 'stuck', 'completed', name='taskstatus'),
            nullable=False,
            server_default='planned',
        ),
        sa.Column('start_date', sa.Date, nullable=False),
        sa.Column('end_date', sa.Date, nullable=False),
        sa.Column('display_order', sa.Integer, nullable=False, server_default='0'),
        sa.Column('expense', sa.Numeric(12, 2)),
        sa.Column('color', sa.String(32), nullable=False),
        sa.Column('created_at', sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime, nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_tasks_project_id', 'tasks', ['project_id'])
    op.create_index('ix_tasks_status', 'tasks', ['status'])
    op.create_index('ix_tasks_end_date', 'tasks', ['end_date'])
    op.create_index('ix_tasks_display_order', 'tasks', ['display_order'])
    op.create_index('ix_tasks_created_at', 'tasks', ['created_at'])

    op.create_table(
        'task_assignees',
        sa.Column('task_id', sa.Uuid, sa.ForeignKey('tasks.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('user_id', sa.Uuid, sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('assigned_at', sa.DateTime, nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_task_assignees_user_id', 'task_assignees', ['user_id'])

    op.create_table(
        'comments',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('task_id', sa.Uuid, sa.ForeignKey('tasks.id', ondelete='CASCADE'), nullable=False),
        sa.Column('author_id', sa.Uuid, sa.ForeignKey('users.id', ondelete='SET NULL')),
        sa.Column('content', sa.Text, nullable=False),
        sa.Column('created_at', sa.DateTime, nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_comments_task_id', 'comments', ['task_id'])
    op.create_index('ix_comments_created_at', 'comments', ['created_at'])

    op.create_table(
        'notifications',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('user_id', sa.Uuid, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column(
            'type',
            sa.Enum('comment', 'assignment', 'status_change', 'deadline', name='notificationtype'),
            nullable=False,
        ),
        sa.Column('text', sa.Text, nullable=False),
        sa.Column('link', sa.String(500)),
        sa.Column('is_read', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime, nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_notifications_user_id', 'notifications', ['user_id'])
    op.create_index('ix_notifications_is_read', 'notifications', ['is_read'])
    op.create_index('ix_notifications_created_at', 'notifications', ['created_at'])


def downgrade() -> None:
    op.drop_table('notifications')
    op.drop_table('comments')
    op.drop_table('task_assignees')
    op.drop_table('tasks')
    op.drop_table('project_team_leads')
    op.drop_table('projects')
    op.drop_table('organization_members')
    op.drop_table('users')
    op.drop_table('organizations')

    # Drop enums (no-op on backends without named enum types)
    op.execute('DROP TYPE IF EXISTS notificationtype') if op.get_bind().dialect.name == 'postgresql' else None
    op.execute('DROP TYPE IF EXISTS taskstatus') if op.get_bind().dialect.name == 'postgresql' else None
    op.execute('DROP TYPE IF EXISTS memberrole') if op.get_bind().dialect.name == 'postgresql' else None
