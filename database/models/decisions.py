"""
Decision Models

Decisions are proposed on a votable territory. Their hotness score is
derived from recent voting activity and compared against the territory's
featured decision trigger.
"""
from typing import Optional, List

from sqlalchemy import String, Integer, BigInteger, Text, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from constants import DecisionStatus

from .base import Base, TimestampMixin


class Decision(Base, TimestampMixin):
    """
    A decision submitted to the citizens of a territory.

    featured_from is set (epoch ms) once the decision is scheduled for
    general vote; a featured decision is never featured again. The
    status moves to GENERAL_VOTE once featured_from is reached.
    """
    __tablename__ = "decisions"

    # Primary key
    id: Mapped[str] = mapped_column(String(50), primary_key=True)

    territory_id: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("territories.id"),
        nullable=False,
        index=True
    )

    subject: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(
        String(30),
        default=DecisionStatus.SUGGEST_AND_VOTE_PROPOSAL.value,
        nullable=False
    )

    # Ranking
    hotness_score: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    submitted_propositions_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Featuring
    featured_from: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)

    # Relationships
    voting_activity: Mapped[List["DecisionVotingActivity"]] = relationship(
        "DecisionVotingActivity",
        back_populates="decision",
        cascade="all, delete-orphan",
        order_by="DecisionVotingActivity.day",
        lazy="selectin",
    )

    __table_args__ = (
        Index('idx_decisions_featured', 'featured_from', 'hotness_score'),
        Index('idx_decisions_status_featured', 'status', 'featured_from'),
    )


class DecisionVotingActivity(Base):
    """
    Number of votes cast on a decision during one local day.

    day is the local midnight (cron timezone) as epoch ms.
    """
    __tablename__ = "decision_voting_activity"

    decision_id: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("decisions.id", ondelete="CASCADE"),
        primary_key=True
    )
    day: Mapped[int] = mapped_column(BigInteger, primary_key=True)

    votes: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Relationships
    decision: Mapped["Decision"] = relationship("Decision", back_populates="voting_activity")
