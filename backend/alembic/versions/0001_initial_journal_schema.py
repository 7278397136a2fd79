"""initial journal schema

Revision ID: 0001_initial_journal_schema
Revises:
Create Date: 2025-03-02 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '0001_initial_journal_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

OUTCOMES = ('CONNECTED', 'TRIED_AND_LISTENED', 'HARD_BUT_HONEST', 'NO_OUTCOME')


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('hashed_password', sa.String(length=255), nullable=False),
        sa.Column('partner_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('invite_code', sa.String(length=32), nullable=True),
        sa.Column('profile_picture', sa.Text(), nullable=True),
        sa.Column('role', sa.Enum('USER', 'ADMIN', 'SUPERADMIN', name='userrole'), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('email', name='uq_users_email'),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_invite_code', 'users', ['invite_code'], unique=True)

    op.create_table(
        'questions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('theme', sa.String(length=100), nullable=False),
        sa.Column('user_generated', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_approved', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_by_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
    )
    op.create_index('ix_questions_id', 'questions', ['id'])
    op.create_index('ix_questions_theme', 'questions', ['theme'])

    op.create_table(
        'responses',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('question_id', sa.Integer(), sa.ForeignKey('questions.id'), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_responses_id', 'responses', ['id'])

    op.create_table(
        'loveslices',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('question_id', sa.Integer(), sa.ForeignKey('questions.id'), nullable=False),
        sa.Column('user1_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('user2_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('response1_id', sa.Integer(), sa.ForeignKey('responses.id'), nullable=False),
        sa.Column('response2_id', sa.Integer(), sa.ForeignKey('responses.id'), nullable=False),
        sa.Column('private_note', sa.Text(), nullable=True),
        sa.Column('type', sa.String(length=16), nullable=False, server_default='written'),
        sa.Column('has_started_conversation', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_loveslices_id', 'loveslices', ['id'])

    op.create_table(
        'conversations',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('loveslice_id', sa.Integer(), sa.ForeignKey('loveslices.id'), nullable=True),
        sa.Column('initiated_by_user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('started_at', sa.DateTime(), nullable=False),
        sa.Column('ended_at', sa.DateTime(), nullable=True),
        sa.Column('duration_seconds', sa.Integer(), nullable=True),
        sa.Column('outcome', sa.Enum(*OUTCOMES, name='conversationoutcome'), nullable=True),
        sa.Column('created_spoken_loveslice', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('final_note', sa.Text(), nullable=True),
    )
    op.create_index('ix_conversations_id', 'conversations', ['id'])

    op.create_table(
        'spoken_loveslices',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('conversation_id', sa.Integer(), sa.ForeignKey('conversations.id'), nullable=False),
        sa.Column('user1_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('user2_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        # Enum type already exists from the conversations table on PostgreSQL
        sa.Column('outcome', postgresql.ENUM(*OUTCOMES, name='conversationoutcome', create_type=False), nullable=False),
        sa.Column('theme', sa.String(length=100), nullable=False),
        sa.Column('duration_seconds', sa.Integer(), nullable=False),
        sa.Column('continued_offline', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_spoken_loveslices_id', 'spoken_loveslices', ['id'])

    op.create_table(
        'journal_entries',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user1_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('user2_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('written_loveslice_id', sa.Integer(), sa.ForeignKey('loveslices.id'), nullable=True),
        sa.Column('spoken_loveslice_id', sa.Integer(), sa.ForeignKey('spoken_loveslices.id'), nullable=True),
        sa.Column('theme', sa.String(length=100), nullable=False),
        sa.Column('searchable_content', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint(
            'written_loveslice_id IS NULL OR spoken_loveslice_id IS NULL',
            name='ck_journal_entries_single_loveslice',
        ),
    )
    op.create_index('ix_journal_entries_id', 'journal_entries', ['id'])
    op.create_index('ix_journal_entries_user1_id', 'journal_entries', ['user1_id'])
    op.create_index('ix_journal_entries_user2_id', 'journal_entries', ['user2_id'])
    op.create_index('ix_journal_entries_theme', 'journal_entries', ['theme'])
    op.create_index('ix_journal_entries_created_at', 'journal_entries', ['created_at'])


def downgrade() -> None:
    op.drop_table('journal_entries')
    op.drop_table('spoken_loveslices')
    op.drop_table('conversations')
    op.drop_table('loveslices')
    op.drop_table('responses')
    op.drop_table('questions')
    op.drop_table('users')
    bind = op.get_bind()
    sa.Enum(name='conversationoutcome').drop(bind, checkfirst=True)
    sa.Enum(name='userrole').drop(bind, checkfirst=True)
