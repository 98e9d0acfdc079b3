"""
Territory Hotness Tracker

Keeps, per votable territory, the featured decision trigger: the hotness
score a decision must reach to be featured (promoted to general vote).

- After a featuring, the trigger is reset to twice the value just crossed
  and the (trigger, date) anchor is moved.
- Once a day, every trigger is recomputed from its anchor with the decay
  curve, so featuring gets easier as time passes without one.

Decay never compounds: each recomputation starts again from the anchor,
so two recomputations at the same instant give the same value.
"""
from datetime import datetime
from typing import Callable, List, Optional

from loguru import logger

from config import settings
from constants import InternalEvent
from database import get_session
from repositories import TerritoryRepository, VotableTerritoryView
from signals import SignalBus, signal_bus
from utils.clock import MS_PER_DAY, get_current_date, to_timestamp_ms
from utils.logger import cron_logger

from .config import TRIGGER_RESET_MULTIPLIER, decay_factor, decayed_trigger
from .exceptions import NotVotableError, TerritoryNotFoundError, TransientStoreError
from .models import HotnessPassResult, TerritoryDecayResult


class HotnessTracker:
    """
    Territory hotness threshold management.

    Each public operation runs in its own session (one transaction).
    """

    def __init__(
        self,
        session_factory: Callable = None,
        bus: SignalBus = None,
        clock: Callable[[], datetime] = None,
        default_trigger: float = None,
    ):
        """
        Initialize tracker.

        Args:
            session_factory: Async context manager factory yielding a session
                (defaults to database.get_session)
            bus: Signal bus receiving the "triggers updated" signal
            clock: Returns the current aware datetime
            default_trigger: Initial trigger of a newly votable territory
        """
        self.session_factory = session_factory or get_session
        self.bus = bus or signal_bus
        self.clock = clock or get_current_date
        self.default_trigger = default_trigger or settings.DEFAULT_FEATURED_DECISION_TRIGGER

    def _now_ms(self) -> int:
        return to_timestamp_ms(self.clock())

    # ============================================
    # TERRITORY SETUP
    # ============================================

    async def set_votable(self, territory_id: str) -> bool:
        """
        Mark a territory as votable.

        Creates the votable record with the default trigger. Already
        votable territories are left untouched.

        Raises:
            TerritoryNotFoundError: territory does not exist
        """
        logger.info(f"Setting territory {territory_id} as votable")

        async with self.session_factory() as session:
            repo = TerritoryRepository(session)

            if not await repo.exists(territory_id):
                raise TerritoryNotFoundError(territory_id)

            votable = await repo.get_votable(territory_id)
            if votable is not None and votable.votable_decisions:
                logger.info(" - territory is already votable")
                return True

            await repo.create_votable(territory_id, self.default_trigger)
            logger.info(f" - votable record created with trigger {self.default_trigger}")

        return True

    async def is_votable(self, territory_id: str) -> bool:
        """True if the territory has a votable record with votable decisions."""
        logger.debug(f"Checking if territory {territory_id} is votable")

        async with self.session_factory() as session:
            votable = await TerritoryRepository(session).get_votable(territory_id)
            return bool(votable is not None and votable.votable_decisions)

    async def get_votable_territories(self) -> List[VotableTerritoryView]:
        async with self.session_factory() as session:
            return await TerritoryRepository(session).find_votable_territories()

    # ============================================
    # FEATURING RESET
    # ============================================

    async def reset_after_featuring(self, territory_id: str, last_threshold: float) -> float:
        """
        Reset a territory trigger after one of its decisions was featured.

        - new trigger = 2 x last_threshold
        - anchor moves to (last_threshold, now)
        - last_threshold is appended to the trigger history under now

        Args:
            territory_id: Territory ID
            last_threshold: Trigger value that was just crossed

        Returns:
            New trigger value

        Raises:
            ValueError: last_threshold is not positive
            NotVotableError: territory missing or without votable record
        """
        if last_threshold <= 0:
            raise ValueError(f"last_threshold must be positive, got {last_threshold}")

        new_threshold = TRIGGER_RESET_MULTIPLIER * last_threshold
        now = self._now_ms()

        async with self.session_factory() as session:
            repo = TerritoryRepository(session)

            matched = await repo.conditional_update_trigger(
                territory_id,
                {
                    "current_featured_decision_trigger": new_threshold,
                    "latest_featured_decision_trigger": last_threshold,
                    "latest_featured_decision_date": now,
                },
            )
            if matched == 0:
                raise NotVotableError(territory_id)

            await repo.add_trigger_history(territory_id, now, last_threshold)

        logger.info(f"Territory {territory_id} trigger reset to {new_threshold} (crossed {last_threshold})")
        return new_threshold

    # ============================================
    # DECAY
    # ============================================

    def _compute_decay(self, view: VotableTerritoryView, now: int) -> TerritoryDecayResult:
        """Compute the decayed trigger of a territory, without writing it."""
        result = TerritoryDecayResult(
            territory_id=view.id,
            name=view.name,
            previous_trigger=view.current_featured_decision_trigger,
            new_trigger=None,
        )

        if view.latest_featured_decision_date is None:
            result.skipped_reason = "no latest featured decision date"
            return result
        if view.latest_featured_decision_trigger is None:
            result.skipped_reason = "no latest featured decision trigger"
            return result

        days_passed = (now - view.latest_featured_decision_date) / MS_PER_DAY
        if days_passed < 0:
            cron_logger.warning(
                f"   - latest featured decision date of {view.name} is in the future "
                f"({days_passed:.3f} days), using 0"
            )
            days_passed = 0.0

        result.days_passed = days_passed
        result.decay_factor = decay_factor(days_passed)
        result.new_trigger = decayed_trigger(view.latest_featured_decision_trigger, days_passed)
        return result

    async def _apply_decay(self, repo: TerritoryRepository, view: VotableTerritoryView, now: int) -> TerritoryDecayResult:
        result = self._compute_decay(view, now)
        if result.skipped:
            return result

        matched = await repo.conditional_update_trigger(
            view.id,
            {"current_featured_decision_trigger": result.new_trigger},
        )
        if matched == 0:
            raise NotVotableError(view.id)
        return result

    async def recompute_decay(self, territory_id: str) -> Optional[int]:
        """
        Recompute one territory trigger from its anchor.

        Returns:
            New trigger, or None when the territory was never featured
            (trigger left unchanged)

        Raises:
            NotVotableError: territory missing or without votable record
        """
        now = self._now_ms()

        async with self.session_factory() as session:
            repo = TerritoryRepository(session)
            view = await repo.get_votable_view(territory_id)
            if view is None:
                raise NotVotableError(territory_id)

            result = await self._apply_decay(repo, view, now)

        if result.skipped:
            logger.debug(f"Territory {result.name} decay skipped: {result.skipped_reason}")
        else:
            logger.info(f"Territory {result.name} trigger decayed to {result.new_trigger} ({result.days_passed:.3f} days)")
        return result.new_trigger

    async def update_territories_featured_decision_trigger(self) -> HotnessPassResult:
        """
        Daily pass: recompute the trigger of every votable territory.

        Territories are processed one after the other, each in its own
        transaction. A failure on one territory is logged and the pass goes
        on. When at least one votable territory exists, the "triggers
        updated" signal is emitted once at the end.
        """
        cron_logger.info("Updating territories featured decision trigger...")
        pass_result = HotnessPassResult()

        async with self.session_factory() as session:
            territories = await TerritoryRepository(session).find_votable_territories()

        if not territories:
            cron_logger.info("   - no votable territory found, nothing to do.")
            return pass_result

        now = self._now_ms()

        for view in territories:
            cron_logger.info(
                f" - processing territory {view.name} with current trigger {view.current_featured_decision_trigger}"
            )
            try:
                async with self.session_factory() as session:
                    result = await self._apply_decay(TerritoryRepository(session), view, now)
            except Exception as e:
                error = TransientStoreError(view.id, e)
                cron_logger.opt(exception=e).error(f"   - {error}, skipping until next run")
                pass_result.failures[view.id] = str(e)
                continue

            if result.skipped:
                cron_logger.info(f"   - {result.skipped_reason}, skipping...")
            else:
                cron_logger.info(
                    f"   - days passed since last featured decision: {result.days_passed:.3f}, "
                    f"decay factor: {result.decay_factor:.4f}, "
                    f"previous trigger: {view.latest_featured_decision_trigger}, "
                    f"new trigger: {result.new_trigger}"
                )
            pass_result.processed.append(result)

        # Decision featuring re-scans decisions against the new triggers
        await self.bus.emit(InternalEvent.TERRITORY_FEATURED_DECISIONS_TRIGGER_UPDATE)
        pass_result.signal_emitted = True

        cron_logger.info(
            f"Territories featured decision trigger updated: {len(pass_result.processed)} processed, "
            f"{len(pass_result.failures)} failed"
        )
        return pass_result
