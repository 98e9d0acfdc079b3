"""
Decision Repository

Handles all database operations for decisions and their voting activity.
"""
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy import select, update, func

from constants import DecisionStatus
from database.models import Decision, DecisionVotingActivity, VotableTerritory
from .base import BaseRepository


@dataclass
class DecisionOverThreshold:
    """A non-featured decision whose hotness reached its territory trigger."""
    decision_id: str
    territory_id: str
    hotness_score: int
    territory_trigger: float


class DecisionRepository(BaseRepository[Decision]):
    """Repository for decision operations."""

    model = Decision

    # ============================================
    # DECISIONS
    # ============================================

    async def create_decision(
        self,
        territory_id: str,
        subject: str,
        submitted_propositions_count: int = 0,
        decision_id: str = None,
    ) -> Decision:
        """Create a new, non-featured decision."""
        decision = Decision(
            id=decision_id or self.generate_id("dec"),
            territory_id=territory_id,
            subject=subject,
            hotness_score=0,
            submitted_propositions_count=submitted_propositions_count,
            featured_from=None,
        )
        return await self.add(decision)

    async def set_hotness_score(self, decision_id: str, hotness_score: int) -> int:
        stmt = (
            update(Decision)
            .where(Decision.id == decision_id)
            .values(hotness_score=hotness_score)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    async def set_featured_from(self, decision_id: str, featured_from: int) -> int:
        """Schedule a non-featured decision for general vote."""
        stmt = (
            update(Decision)
            .where(Decision.id == decision_id, Decision.featured_from.is_(None))
            .values(featured_from=featured_from)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    async def increment_propositions(self, decision_id: str) -> int:
        """
        Count one more submitted proposition, while propositions are open.

        Returns:
            Number of matched rows (0: missing or past the proposition phase)
        """
        stmt = (
            update(Decision)
            .where(
                Decision.id == decision_id,
                Decision.status == DecisionStatus.SUGGEST_AND_VOTE_PROPOSAL.value,
            )
            .values(submitted_propositions_count=Decision.submitted_propositions_count + 1)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    async def find_ready_for_general_vote(self, now: int) -> List[str]:
        """IDs of decisions whose featured_from is reached but not yet in general vote."""
        stmt = (
            select(Decision.id)
            .where(
                Decision.featured_from.is_not(None),
                Decision.featured_from <= now,
                Decision.status != DecisionStatus.GENERAL_VOTE.value,
            )
            .order_by(Decision.featured_from, Decision.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def move_to_general_vote(self, decision_id: str, now: int) -> int:
        """
        Open the general vote of a featured decision.

        Only matches a decision still in the proposition phase whose
        featured_from is reached.

        Returns:
            Number of matched rows
        """
        stmt = (
            update(Decision)
            .where(
                Decision.id == decision_id,
                Decision.status == DecisionStatus.SUGGEST_AND_VOTE_PROPOSAL.value,
                Decision.featured_from.is_not(None),
                Decision.featured_from <= now,
            )
            .values(status=DecisionStatus.GENERAL_VOTE.value)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    async def get_over_threshold(self, decision_id: Optional[str] = None) -> List[DecisionOverThreshold]:
        """
        Get non-featured decisions whose hotness reached their territory trigger.

        Decisions on non-votable territories are skipped (inner join).
        Highest hotness first.

        Args:
            decision_id: Restrict the check to this decision
        """
        conditions = [
            Decision.featured_from.is_(None),
            Decision.status == DecisionStatus.SUGGEST_AND_VOTE_PROPOSAL.value,
            Decision.hotness_score >= VotableTerritory.current_featured_decision_trigger,
        ]
        if decision_id:
            conditions.append(Decision.id == decision_id)

        stmt = (
            select(
                Decision.id,
                Decision.territory_id,
                Decision.hotness_score,
                VotableTerritory.current_featured_decision_trigger,
            )
            .join(VotableTerritory, VotableTerritory.territory_id == Decision.territory_id)
            .where(*conditions)
            .order_by(Decision.hotness_score.desc(), Decision.id)
        )
        result = await self.session.execute(stmt)
        return [DecisionOverThreshold(*row) for row in result.all()]

    # ============================================
    # VOTING ACTIVITY
    # ============================================

    async def increment_votes(self, decision_id: str, day: int) -> int:
        """
        Add one vote to the decision's bucket for a day.

        Returns:
            Vote count of the bucket after increment
        """
        activity = await self.session.get(DecisionVotingActivity, (decision_id, day))
        if activity is None:
            activity = DecisionVotingActivity(decision_id=decision_id, day=day, votes=1)
            self.session.add(activity)
        else:
            activity.votes += 1
        await self.session.flush()
        return activity.votes

    async def count_votes_since(self, decision_id: str, since: int) -> int:
        """Sum of votes in buckets starting at or after since (epoch ms)."""
        stmt = (
            select(func.coalesce(func.sum(DecisionVotingActivity.votes), 0))
            .where(
                DecisionVotingActivity.decision_id == decision_id,
                DecisionVotingActivity.day >= since,
            )
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())
