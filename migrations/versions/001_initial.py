"""Initial schema - territories and decisions

Revision ID: 001_initial
Revises:
Create Date: 2025-01-01 00:00:00.000000

Creates the territory hierarchy, votable state, trigger history,
decisions and voting activity tables.
Based on the SQLAlchemy models defined in database/models/.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ==================================================
    # TERRITORIES
    # ==================================================

    op.create_table(
        'territories',
        sa.Column('id', sa.String(50), primary_key=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('shortname', sa.String(50), nullable=True),
        sa.Column('official_code', sa.String(50), nullable=True),
        sa.Column('active', sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column('registered_users_count', sa.Integer, nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime, nullable=True),
        sa.Column('updated_at', sa.DateTime, nullable=True),
    )

    op.create_table(
        'votable_territories',
        sa.Column('territory_id', sa.String(50),
                  sa.ForeignKey('territories.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('votable_decisions', sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column('current_featured_decision_trigger', sa.Float, nullable=False, server_default='10'),
        sa.Column('latest_featured_decision_trigger', sa.Float, nullable=True),
        sa.Column('latest_featured_decision_date', sa.BigInteger, nullable=True),
        sa.Column('chatroom_id', sa.String(200), nullable=True),
    )

    op.create_table(
        'territory_trigger_history',
        sa.Column('territory_id', sa.String(50),
                  sa.ForeignKey('votable_territories.territory_id', ondelete='CASCADE'), primary_key=True),
        sa.Column('featured_at', sa.BigInteger, primary_key=True),
        sa.Column('trigger', sa.Float, nullable=False),
    )

    with op.batch_alter_table('territory_trigger_history') as batch_op:
        batch_op.create_index('idx_trigger_history_territory', ['territory_id', 'featured_at'])

    # ==================================================
    # DECISIONS
    # ==================================================

    op.create_table(
        'decisions',
        sa.Column('id', sa.String(50), primary_key=True),
        sa.Column('territory_id', sa.String(50), sa.ForeignKey('territories.id'), nullable=False),
        sa.Column('subject', sa.Text, nullable=False),
        sa.Column('hotness_score', sa.Integer, nullable=False, server_default='0'),
        sa.Column('submitted_propositions_count', sa.Integer, nullable=False, server_default='0'),
        sa.Column('featured_from', sa.BigInteger, nullable=True),
        sa.Column('created_at', sa.DateTime, nullable=True),
        sa.Column('updated_at', sa.DateTime, nullable=True),
    )

    with op.batch_alter_table('decisions') as batch_op:
        batch_op.create_index('ix_decisions_territory_id', ['territory_id'])
        batch_op.create_index('idx_decisions_featured', ['featured_from', 'hotness_score'])

    op.create_table(
        'decision_voting_activity',
        sa.Column('decision_id', sa.String(50),
                  sa.ForeignKey('decisions.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('day', sa.BigInteger, primary_key=True),
        sa.Column('votes', sa.Integer, nullable=False, server_default='0'),
    )


def downgrade() -> None:
    op.drop_table('decision_voting_activity')
    op.drop_table('decisions')
    op.drop_table('territory_trigger_history')
    op.drop_table('votable_territories')
    op.drop_table('territories')
