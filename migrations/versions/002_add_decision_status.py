"""Add decision status

Revision ID: 002_add_decision_status
Revises: 001_initial
Create Date: 2025-02-01 00:00:00.000000

Decisions get a lifecycle status. Existing rows start in the proposition
phase; the hourly job moves those already past featured_from to general
vote.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '002_add_decision_status'
down_revision: Union[str, None] = '001_initial'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    with op.batch_alter_table('decisions') as batch_op:
        batch_op.add_column(
            sa.Column('status', sa.String(30), nullable=False, server_default='SUGGEST_AND_VOTE_PROPOSAL')
        )
        batch_op.create_index('idx_decisions_status_featured', ['status', 'featured_from'])


def downgrade() -> None:
    with op.batch_alter_table('decisions') as batch_op:
        batch_op.drop_index('idx_decisions_status_featured')
        batch_op.drop_column('status')
