"""create_sat_tables

Revision ID: 3f1c9a7b2d45
Revises:
Create Date: 2026-10-12 18:04:37.512803

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c9a7b2d45'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table('sat_tests',
        sa.Column('id', sa.String(64), nullable=False),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('test_type', sa.String(32), nullable=False),
        sa.Column('difficulty', sa.String(16), nullable=False, server_default='normal'),
        sa.Column('is_official', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('length', sa.String(16), nullable=False, server_default='medium'),
        sa.Column('section', sa.String(32), nullable=True),
        sa.Column('module_number', sa.Integer(), nullable=True),
        sa.Column('time_limit_minutes', sa.Integer(), nullable=True),
        sa.Column('questions_json', sa.Text(), nullable=False, server_default='[]'),
        sa.Column('created_by', sa.String(64), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_sat_tests_test_type', 'sat_tests', ['test_type'])
    op.create_index('ix_sat_tests_difficulty', 'sat_tests', ['difficulty'])
    op.create_index('ix_sat_tests_is_official', 'sat_tests', ['is_official'])

    op.create_table('test_attempts',
        sa.Column('id', sa.String(64), nullable=False),
        sa.Column('user_id', sa.String(64), nullable=False),
        sa.Column('test_id', sa.String(64), nullable=False),
        sa.Column('answers_json', sa.Text(), nullable=False, server_default='[]'),
        sa.Column('questions_json', sa.Text(), nullable=True),
        sa.Column('feedback_json', sa.Text(), nullable=True),
        sa.Column('total_questions', sa.Integer(), nullable=True),
        sa.Column('correct_answers', sa.Integer(), nullable=True),
        sa.Column('score', sa.Integer(), nullable=True),
        sa.Column('time_spent_seconds', sa.Integer(), nullable=True),
        sa.Column('started_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['test_id'], ['sat_tests.id'], ondelete='RESTRICT')
    )
    op.create_index('ix_test_attempts_user_id', 'test_attempts', ['user_id'])
    op.create_index('ix_test_attempts_test_id', 'test_attempts', ['test_id'])
    op.create_index('ix_test_attempts_completed_at', 'test_attempts', ['completed_at'])
    op.create_index('ix_test_attempts_created_at', 'test_attempts', ['created_at'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_test_attempts_created_at', table_name='test_attempts')
    op.drop_index('ix_test_attempts_completed_at', table_name='test_attempts')
    op.drop_index('ix_test_attempts_test_id', table_name='test_attempts')
    op.drop_index('ix_test_attempts_user_id', table_name='test_attempts')
    op.drop_table('test_attempts')
    op.drop_index('ix_sat_tests_is_official', table_name='sat_tests')
    op.drop_index('ix_sat_tests_difficulty', table_name='sat_tests')
    op.drop_index('ix_sat_tests_test_type', table_name='sat_tests')
    op.drop_table('sat_tests')
