"""Add teams, project teams and finance entries.

Revision ID: 002
Revises: 001
Create Date: 2025-08-20

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '002'
down_revision: Union[str, None] = '001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'teams',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('organization_id', sa.Uuid, sa.ForeignKey('organizations.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime, nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_teams_organization_id', 'teams', ['organization_id'])
    op.create_index('ix_teams_created_at', 'teams', ['created_at'])

    for table in ('team_leads', 'team_members'):
        op.create_table(
            table,
            sa.Column('team_id', sa.Uuid, sa.ForeignKey('teams.id', ondelete='CASCADE'), primary_key=True),
            sa.Column('user_id', sa.Uuid, sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
        )
        op.create_index(f'ix_{table}_user_id', table, ['user_id'])

    op.create_table(
        'project_teams',
        sa.Column('project_id', sa.Uuid, sa.ForeignKey('projects.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('team_id', sa.Uuid, sa.ForeignKey('teams.id', ondelete='CASCADE'), primary_key=True),
    )
    op.create_index('ix_project_teams_team_id', 'project_teams', ['team_id'])

    op.create_table(
        'finance_entries',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('organization_id', sa.Uuid, sa.ForeignKey('organizations.id', ondelete='CASCADE'), nullable=False),
        sa.Column('project_id', sa.Uuid, sa.ForeignKey('projects.id', ondelete='SET NULL'), nullable=True),
        sa.Column('task_id', sa.Uuid, sa.ForeignKey('tasks.id', ondelete='SET NULL'), nullable=True),
        sa.Column('type', sa.Enum('income', 'expense', name='financeentrytype'), nullable=False),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('description', sa.Text, nullable=False),
        sa.Column('date', sa.Date, nullable=False),
        sa.Column('created_at', sa.DateTime, nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_finance_entries_organization_id', 'finance_entries', ['organization_id'])
    op.create_index('ix_finance_entries_project_id', 'finance_entries', ['project_id'])
    op.create_index('ix_finance_entries_task_id', 'finance_entries', ['task_id'])
    op.create_index('ix_finance_entries_type', 'finance_entries', ['type'])
    op.create_index('ix_finance_entries_date', 'finance_entries', ['date'])


def downgrade() -> None:
    op.drop_table('finance_entries')
    op.drop_table('project_teams')
    op.drop_table('team_members')
    op.drop_table('team_leads')
    op.drop_table('teams')

    op.execute('DROP TYPE IF EXISTS financeentrytype') if op.get_bind().dialect.name == 'postgresql' else None
