"""initial survey schema

Revision ID: 001
Revises:
Create Date: 2025-10-06 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'questions',
        sa.Column('question_id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category', sa.String(length=100), nullable=True),
        sa.Column('priority', sa.String(length=10), nullable=False, server_default='medium'),
        sa.Column('status', sa.String(length=10), nullable=False, server_default='active'),
        sa.Column('created_by', sa.String(length=100), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('question_id'),
    )
    op.create_index('ix_questions_status', 'questions', ['status'])
    op.create_index('ix_questions_category', 'questions', ['category'])

    op.create_table(
        'submissions',
        sa.Column('submission_id', sa.Uuid(), nullable=False),
        sa.Column('survey_type', sa.String(length=20), nullable=False, server_default='regular'),
        sa.Column('location', sa.String(length=50), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('submission_id'),
    )
    op.create_index('ix_submissions_created_at', 'submissions', ['created_at'])
    op.create_index('ix_submissions_location', 'submissions', ['location'])

    op.create_table(
        'responses',
        sa.Column('response_id', sa.Uuid(), nullable=False),
        sa.Column('submission_id', sa.Uuid(), nullable=False),
        sa.Column('question_id', sa.Uuid(), nullable=False),
        sa.Column('response_data', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column('user_identifier', sa.String(length=255), nullable=True),
        sa.Column('survey_type', sa.String(length=20), nullable=False, server_default='regular'),
        sa.ForeignKeyConstraint(['submission_id'], ['submissions.submission_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('response_id'),
    )
    op.create_index('ix_responses_submission_id', 'responses', ['submission_id'])
    op.create_index('ix_responses_question_id', 'responses', ['question_id'])
    op.create_index('ix_responses_survey_type', 'responses', ['survey_type'])


def downgrade() -> None:
    op.drop_index('ix_responses_survey_type', table_name='responses')
    op.drop_index('ix_responses_question_id', table_name='responses')
    op.drop_index('ix_responses_submission_id', table_name='responses')
    op.drop_table('responses')

    op.drop_index('ix_submissions_location', table_name='submissions')
    op.drop_index('ix_submissions_created_at', table_name='submissions')
    op.drop_table('submissions')

    op.drop_index('ix_questions_category', table_name='questions')
    op.drop_index('ix_questions_status', table_name='questions')
    op.drop_table('questions')
