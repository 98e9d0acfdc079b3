"""
Decision Featuring

Promotes decisions to general vote when their hotness score reaches the
featured decision trigger of their territory.

Flow:
1. A vote lands in the decision's bucket for the local day (a new
   proposition also refreshes the score)
2. The hotness score is recomputed (last 7 days of votes, penalties, bonus)
3. Non-featured decisions over their territory trigger are featured:
   - at most one per territory per check, highest score first
   - featured from noon (cron timezone), a few days later
   - the territory trigger is reset from the score just reached
4. Once featured_from is reached, the hourly job opens the general vote

The check also runs for all decisions whenever the daily decay pass
signals that territory triggers changed.
"""
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Set

from loguru import logger

from config import settings
from constants import InternalEvent
from database.models import Decision
from repositories import DecisionRepository
from signals import SignalBus
from utils.clock import (
    get_current_date,
    get_next_occurrence_of_hour_in_timezone,
    local_midnight_ms,
    to_timestamp_ms,
)
from utils.logger import cron_logger

from .config import HOTNESS_LOOKBACK_DAYS, compute_hotness_score
from .exceptions import NotVotableError, PropositionsClosedError
from .tracker import HotnessTracker


class DecisionFeaturingService:
    """Hotness scoring and featuring of decisions."""

    def __init__(
        self,
        tracker: HotnessTracker,
        session_factory: Callable = None,
        bus: SignalBus = None,
        clock: Callable[[], datetime] = None,
        timezone: str = None,
    ):
        self.tracker = tracker
        self.session_factory = session_factory or tracker.session_factory
        self.bus = bus or tracker.bus
        self.clock = clock or tracker.clock or get_current_date
        self.timezone = timezone or settings.TIMEZONE_FOR_CRONJOBS

    def register(self) -> None:
        """Listen for trigger updates from the daily decay pass."""
        if self.handle_triggers_updated in self.bus.handlers(
            InternalEvent.TERRITORY_FEATURED_DECISIONS_TRIGGER_UPDATE
        ):
            return
        self.bus.subscribe(
            InternalEvent.TERRITORY_FEATURED_DECISIONS_TRIGGER_UPDATE,
            self.handle_triggers_updated,
        )

    async def handle_triggers_updated(self) -> None:
        logger.info("Territory triggers updated, checking all decisions")
        await self.check_decision_hotness()

    # ============================================
    # DECISIONS AND VOTES
    # ============================================

    async def create_decision(
        self,
        territory_id: str,
        subject: str,
        submitted_propositions_count: int = 0,
        decision_id: str = None,
    ) -> Decision:
        """
        Create a decision on a votable territory.

        Raises:
            NotVotableError: territory is not votable
        """
        if not await self.tracker.is_votable(territory_id):
            raise NotVotableError(territory_id)

        async with self.session_factory() as session:
            decision = await DecisionRepository(session).create_decision(
                territory_id=territory_id,
                subject=subject,
                submitted_propositions_count=submitted_propositions_count,
                decision_id=decision_id,
            )

        logger.info(f"Decision {decision.id} created on territory {territory_id}")
        return decision

    async def record_vote(self, decision_id: str) -> Optional[int]:
        """
        Count one vote for a decision and refresh its hotness.

        Returns:
            New hotness score, or None if the decision does not exist
        """
        day = local_midnight_ms(self.clock(), self.timezone)

        async with self.session_factory() as session:
            repo = DecisionRepository(session)
            if not await repo.exists(decision_id):
                logger.info(f"record_vote: decision not found: {decision_id}")
                return None
            votes = await repo.increment_votes(decision_id, day)

        logger.debug(f"Voting activity for decision {decision_id} at {day}: {votes}")
        return await self.update_hotness_score(decision_id)

    async def record_proposition(self, decision_id: str) -> Optional[int]:
        """
        Count one submitted proposition and refresh the decision's hotness.

        Returns:
            New hotness score, or None if the decision does not exist

        Raises:
            PropositionsClosedError: decision is past its proposition phase
        """
        async with self.session_factory() as session:
            repo = DecisionRepository(session)
            if not await repo.exists(decision_id):
                logger.info(f"record_proposition: decision not found: {decision_id}")
                return None
            if await repo.increment_propositions(decision_id) == 0:
                raise PropositionsClosedError(decision_id)

        logger.info(f"Proposition added to decision {decision_id}")
        return await self.update_hotness_score(decision_id)

    async def update_hotness_score(self, decision_id: str) -> Optional[int]:
        """
        Recompute and persist the hotness score of a decision.

        Non-featured decisions are then checked against their territory
        trigger.

        Returns:
            Hotness score, or None if the decision does not exist
        """
        now = self.clock()
        since = to_timestamp_ms(now - timedelta(days=HOTNESS_LOOKBACK_DAYS))

        async with self.session_factory() as session:
            repo = DecisionRepository(session)
            decision = await repo.get(decision_id)
            if decision is None:
                logger.info(f"update_hotness_score: decision not found: {decision_id}")
                return None

            featured = decision.featured_from is not None
            recent_votes = await repo.count_votes_since(decision_id, since)
            hotness_score = compute_hotness_score(
                recent_votes=recent_votes,
                submitted_propositions=decision.submitted_propositions_count,
                featured=featured,
            )
            await repo.set_hotness_score(decision_id, hotness_score)

        logger.info(f"Calculated hotness score for decision {decision_id}: {hotness_score} ({recent_votes} recent votes)")

        if featured:
            logger.debug(f"Decision {decision_id} is already featured, skipping hotness check")
        else:
            await self.check_decision_hotness(decision_id)

        return hotness_score

    # ============================================
    # FEATURING
    # ============================================

    def featured_from_timestamp(self) -> int:
        """Instant (epoch ms) from which a decision featured now goes to general vote."""
        featured_from = get_next_occurrence_of_hour_in_timezone(
            self.clock(),
            settings.FEATURING_DELAY_DAYS,
            settings.FEATURING_HOUR,
            self.timezone,
        )
        return to_timestamp_ms(featured_from)

    async def check_decision_hotness(self, decision_id: Optional[str] = None) -> List[str]:
        """
        Feature decisions whose hotness reached their territory trigger.

        Args:
            decision_id: Only check this decision (all decisions if None)

        Returns:
            IDs of the decisions featured by this check
        """
        logger.info("Checking decision hotness" + (f" for decision {decision_id}" if decision_id else " for all decisions"))

        async with self.session_factory() as session:
            candidates = await DecisionRepository(session).get_over_threshold(decision_id)

        featured: List[str] = []
        processed_territories: Set[str] = set()

        for candidate in candidates:
            # The trigger is reset after each featuring: one decision per territory
            if candidate.territory_id in processed_territories:
                logger.info(
                    f"Skipping decision {candidate.decision_id}: a decision was already featured "
                    f"for territory {candidate.territory_id}"
                )
                continue
            processed_territories.add(candidate.territory_id)

            logger.info(
                f"Decision {candidate.decision_id} is over hotness threshold "
                f"({candidate.hotness_score} >= {candidate.territory_trigger}) - featuring it now"
            )

            featured_from = self.featured_from_timestamp()
            async with self.session_factory() as session:
                matched = await DecisionRepository(session).set_featured_from(candidate.decision_id, featured_from)
            if matched == 0:
                logger.info(f"Decision {candidate.decision_id} was featured concurrently, skipping")
                continue

            logger.info(f"Decision {candidate.decision_id} is now featured from {featured_from}")

            # Featured decisions get their bonus; no new check since featured_from is set
            await self.update_hotness_score(candidate.decision_id)

            try:
                new_trigger = await self.tracker.reset_after_featuring(
                    candidate.territory_id,
                    candidate.hotness_score,
                )
                logger.info(
                    f"Territory {candidate.territory_id} hotness threshold updated to {new_trigger} "
                    f"after decision {candidate.decision_id} featuring"
                )
            except NotVotableError as e:
                logger.error(f"Could not reset trigger after featuring {candidate.decision_id}: {e}")

            featured.append(candidate.decision_id)
            await self.bus.emit(
                InternalEvent.DECISION_NEW_DECISION_TO_BE_FEATURED,
                decision_id=candidate.decision_id,
            )

        logger.info("Decision hotness check completed")
        return featured

    # ============================================
    # GENERAL VOTE
    # ============================================

    async def move_decisions_to_featured(self) -> List[str]:
        """
        Open the general vote of every decision whose featured_from is reached.

        Each decision moves in its own transaction; one that can no longer
        move (no longer in the proposition phase) is logged and skipped.

        Returns:
            IDs of the decisions moved to GENERAL_VOTE
        """
        cron_logger.info("Checking for decisions to move to featured status")
        now = to_timestamp_ms(self.clock())

        async with self.session_factory() as session:
            ready = await DecisionRepository(session).find_ready_for_general_vote(now)

        moved: List[str] = []
        for decision_id in ready:
            cron_logger.info(f"Moving decision {decision_id} to featured status (general vote phase)")

            async with self.session_factory() as session:
                matched = await DecisionRepository(session).move_to_general_vote(decision_id, now)

            if matched == 0:
                cron_logger.info(f"Decision {decision_id} could not be moved to featured status")
                continue

            cron_logger.info(f"Decision {decision_id} moved to featured status successfully")
            moved.append(decision_id)
            await self.bus.emit(InternalEvent.DECISION_NEW_FEATURED_DECISION, decision_id=decision_id)

        return moved
