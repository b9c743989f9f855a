"""initial tables

Revision ID: 20261019_01
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '20261019_01'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'question_versions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('label', sa.String(length=64), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('label')
    )

    op.create_table(
        'questions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('version_id', sa.Integer(), nullable=False),
        sa.Column('question_order', sa.Integer(), nullable=False),
        sa.Column('text', sa.String(length=500), nullable=False),
        sa.Column('dimension', sa.String(length=32), nullable=False),
        sa.Column('subscale', sa.String(length=8), nullable=False),
        sa.Column('is_reversed', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.ForeignKeyConstraint(['version_id'], ['question_versions.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('version_id', 'question_order', name='uq_question_version_order')
    )

    op.create_table(
        'teams',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('leader_name', sa.String(length=255), nullable=False),
        sa.Column('leader_email', sa.String(length=255), nullable=False),
        sa.Column('firm_name', sa.String(length=255), nullable=False),
        sa.Column('question_version_id', sa.Integer(), nullable=False),
        sa.Column('admin_token_hash', sa.String(length=128), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['question_version_id'], ['question_versions.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('admin_token_hash')
    )

    op.create_table(
        'team_members',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('team_id', sa.String(length=36), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('display_name', sa.String(length=255), nullable=True),
        sa.Column('is_leader', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('completed', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('assessment_token_hash', sa.String(length=128), nullable=False),
        sa.Column('responses', sa.JSON(), nullable=True),
        sa.Column('alignment_score', sa.Float(), nullable=True),
        sa.Column('execution_score', sa.Float(), nullable=True),
        sa.Column('accountability_score', sa.Float(), nullable=True),
        sa.Column('subscales', sa.JSON(), nullable=True),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['team_id'], ['teams.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('assessment_token_hash'),
        sa.UniqueConstraint('team_id', 'email', name='uq_team_member_email')
    )

    op.create_table(
        'team_reports',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('team_id', sa.String(length=36), nullable=False),
        sa.Column('report_token_hash', sa.String(length=128), nullable=False),
        sa.Column('completion_count', sa.Integer(), nullable=False),
        sa.Column('total_count', sa.Integer(), nullable=False),
        sa.Column('scores_json', sa.JSON(), nullable=False),
        sa.Column('generated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['team_id'], ['teams.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('team_id'),
        sa.UniqueConstraint('report_token_hash')
    )

    op.create_table(
        'email_events',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('team_id', sa.String(length=36), nullable=True),
        sa.Column('team_member_id', sa.String(length=36), nullable=True),
        sa.Column('email_type', sa.String(length=32), nullable=False),
        sa.Column('recipient_email', sa.String(length=255), nullable=False),
        sa.Column('success', sa.Boolean(), nullable=False),
        sa.Column('provider_message_id', sa.String(length=255), nullable=True),
        sa.Column('error', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['team_id'], ['teams.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['team_member_id'], ['team_members.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )


def downgrade() -> None:
    op.drop_table('email_events')
    op.drop_table('team_reports')
    op.drop_table('team_members')
    op.drop_table('teams')
    op.drop_table('questions')
    op.drop_table('question_versions')
