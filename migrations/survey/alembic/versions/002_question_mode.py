"""add questions.mode

Revision ID: 002
Revises: 001
Create Date: 2025-11-17 09:30:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = '002'
down_revision: Union[str, None] = '001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Existing rows were all asked on regular days.
    op.add_column('questions', sa.Column('mode', sa.String(length=20), nullable=True, server_default='regular'))
    op.create_index('ix_questions_mode', 'questions', ['mode'])


def downgrade() -> None:
    op.drop_index('ix_questions_mode', table_name='questions')
    op.drop_column('questions', 'mode')
