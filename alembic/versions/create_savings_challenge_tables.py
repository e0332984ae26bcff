"""create savings challenge tables

Revision ID: create_savings_challenge_tables
Revises:
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = 'create_savings_challenge_tables'
down_revision = None
branch_labels = None
depends_on = None

MOTIVATIONS = ('VERY_LOW', 'LOW', 'MEDIUM', 'HIGH', 'VERY_HIGH')
BADGE_CRITERIA = ('CHALLENGES_COMPLETED', 'SAVED_AMOUNT', 'STREAK')


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('username', sa.String(length=50), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('is_superuser', sa.Boolean(), nullable=False),
        sa.Column('is_verified', sa.Boolean(), nullable=False),
        sa.Column('full_name', sa.String(), nullable=True),
        sa.Column('saved_amount', sa.Numeric(14, 2), nullable=False, server_default='0'),
        sa.Column('streak', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('completed_challenges', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('streak_start', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint('saved_amount >= 0', name='ck_users_saved_amount_non_negative'),
        sa.CheckConstraint('streak >= 0', name='ck_users_streak_non_negative'),
        sa.CheckConstraint('completed_challenges >= 0', name='ck_users_completed_challenges_non_negative'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_username', 'users', ['username'], unique=True)

    op.create_table(
        'badges',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(length=100), nullable=False, unique=True),
        sa.Column('description', sa.String(length=255), nullable=True),
        sa.Column('criteria', sa.Enum(*BADGE_CRITERIA, name='badge_criteria'), nullable=False),
        sa.Column('threshold', sa.Numeric(12, 2), nullable=False),
    )

    op.create_table(
        'user_badges',
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('badge_id', sa.Uuid(), sa.ForeignKey('badges.id', ondelete='CASCADE'), primary_key=True),
    )

    op.create_table(
        'challenge_configs',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('motivation', sa.Enum(*MOTIVATIONS, name='motivation'), nullable=False),
        sa.Column('target_min', sa.Numeric(12, 2), nullable=False),
        sa.Column('target_max', sa.Numeric(12, 2), nullable=False),
        sa.CheckConstraint('target_min > 0', name='ck_challenge_config_target_min_positive'),
        sa.CheckConstraint('target_max >= target_min', name='ck_challenge_config_target_range'),
    )

    op.create_table(
        'challenge_type_configs',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('config_id', sa.Uuid(), sa.ForeignKey('challenge_configs.id', ondelete='CASCADE'), nullable=False),
        sa.Column('type', sa.String(length=100), nullable=False),
        sa.Column('specific_amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('general_amount', sa.Numeric(12, 2), nullable=True),
        sa.UniqueConstraint('config_id', 'type', name='uq_challenge_type_configs_config_type'),
    )

    op.create_table(
        'challenges',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(length=100), nullable=False),
        sa.Column('description', sa.String(length=255), nullable=True),
        sa.Column('type', sa.String(length=100), nullable=True),
        sa.Column('target', sa.Numeric(12, 2), nullable=False),
        sa.Column('saved', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('due_date', sa.Date(), nullable=True),
        sa.Column('created_on', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('completed_on', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint('target > 0', name='ck_challenges_target_positive'),
        sa.CheckConstraint('saved >= 0', name='ck_challenges_saved_non_negative'),
    )
    op.create_index('ix_challenges_user_completed_on', 'challenges', ['user_id', 'completed_on'])


def downgrade():
    op.drop_index('ix_challenges_user_completed_on', table_name='challenges')
    op.drop_table('challenges')
    op.drop_table('challenge_type_configs')
    op.drop_table('challenge_configs')
    op.drop_table('user_badges')
    op.drop_table('badges')
    op.drop_index('ix_users_username', table_name='users')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
    sa.Enum(name='badge_criteria').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='motivation').drop(op.get_bind(), checkfirst=True)
