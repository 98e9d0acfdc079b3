"""
Scheduler - Daily territory hotness maintenance

Job Schedule:
1. Territory trigger decay: every day at noon (TIMEZONE_FOR_CRONJOBS)
   -> signals decision featuring to re-check decisions against new triggers
2. General vote start: every hour, for decisions whose featured_from is reached
3. Decision hotness check: manual only (--job check_decision_hotness)

Usage:
    python scheduler.py                  # Run scheduler daemon
    python scheduler.py --once           # Run the trigger decay once and exit
    python scheduler.py --job NAME       # Run one job once and exit
    python scheduler.py --list-jobs      # Show registered jobs
    python scheduler.py --init-db        # Create tables from the models
    python scheduler.py --stats          # Row counts per table
"""
import asyncio
import signal
import sys
from typing import Awaitable, Callable, Dict, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from config import settings, ensure_directories
from constants import InternalEvent, JobName
from processor.hotness import HotnessTracker, DecisionFeaturingService
from signals import SignalBus, signal_bus
from utils import logger, cron_logger, init_logging, log_cronjob_exception


class HotnessScheduler:
    """
    Scheduler for territory hotness maintenance.

    Jobs are looked up by name in a registry. Each job catches its own
    errors and returns True on success.
    """

    def __init__(
        self,
        tracker: HotnessTracker = None,
        featuring: DecisionFeaturingService = None,
        bus: SignalBus = None,
    ):
        self.scheduler = AsyncIOScheduler(timezone=settings.TIMEZONE_FOR_CRONJOBS)
        self.bus = bus or signal_bus
        self.tracker = tracker or HotnessTracker(bus=self.bus)
        self.featuring = featuring or DecisionFeaturingService(self.tracker, bus=self.bus)
        self._last_run_result = None

        self.featuring.register()
        self._subscribe(InternalEvent.DECISION_NEW_DECISION_TO_BE_FEATURED, self._on_decision_featured)
        self._subscribe(InternalEvent.DECISION_NEW_FEATURED_DECISION, self._on_decision_general_vote)

        self.jobs: Dict[str, Callable[[], Awaitable[bool]]] = {
            JobName.UPDATE_TERRITORIES_FEATURED_DECISION_TRIGGER.value: self.update_territories_featured_decision_trigger,
            JobName.MOVE_DECISIONS_TO_FEATURED.value: self.move_decisions_to_featured,
            JobName.CHECK_DECISION_HOTNESS.value: self.check_decision_hotness,
        }

    @property
    def last_run_result(self) -> Optional[dict]:
        """Summary of the latest job run, None before the first run."""
        return self._last_run_result

    def _subscribe(self, name: InternalEvent, handler):
        if handler not in self.bus.handlers(name):
            self.bus.subscribe(name, handler)

    def setup(self):
        """Setup scheduled jobs."""
        ensure_directories()

        # NOTE: Schema is managed by Alembic (--migrate), not by the scheduler

        self.scheduler.add_job(
            self.update_territories_featured_decision_trigger,
            CronTrigger(
                hour=settings.HOTNESS_UPDATE_HOUR,
                minute=settings.HOTNESS_UPDATE_MINUTE,
                timezone=settings.TIMEZONE_FOR_CRONJOBS,
            ),
            id=JobName.UPDATE_TERRITORIES_FEATURED_DECISION_TRIGGER.value,
            name="Update Territories Featured Decision Trigger",
            replace_existing=True,
        )

        # Featured decisions enter their general vote at the top of the hour
        self.scheduler.add_job(
            self.move_decisions_to_featured,
            CronTrigger(minute=0, timezone=settings.TIMEZONE_FOR_CRONJOBS),
            id=JobName.MOVE_DECISIONS_TO_FEATURED.value,
            name="Move Decisions To Featured",
            replace_existing=True,
        )

        logger.info("Scheduler setup complete with 2 jobs (territory trigger decay, general vote start)")
        self._log_schedule()

    def _log_schedule(self):
        """Log current job schedule."""
        jobs = self.scheduler.get_jobs()
        logger.info(f"Scheduled jobs ({len(jobs)}):")
        for job in jobs:
            logger.info(f"  - {job.name}: {job.trigger}")

    async def _on_decision_featured(self, decision_id: str):
        cron_logger.info(f"Decision {decision_id} will be featured")

    async def _on_decision_general_vote(self, decision_id: str):
        cron_logger.info(f"Decision {decision_id} is now in general vote")

    # ============================================
    # JOBS
    # ============================================

    async def update_territories_featured_decision_trigger(self) -> bool:
        """
        Job: Decay the featured decision trigger of every votable territory.

        Per-territory failures are handled inside the pass; this only
        catches failures of the pass itself (e.g. database unreachable).
        """
        job_name = JobName.UPDATE_TERRITORIES_FEATURED_DECISION_TRIGGER.value
        cron_logger.info("Update territories featured decision trigger")

        try:
            result = await self.tracker.update_territories_featured_decision_trigger()
            self._last_run_result = result.to_dict()

            if result.failures:
                cron_logger.warning(f"Trigger update had {len(result.failures)} failure(s): {list(result.failures)}")
            return True

        except Exception as e:
            log_cronjob_exception(job_name, e)
            return False

    async def move_decisions_to_featured(self) -> bool:
        """Job: Open the general vote of decisions whose featured_from is reached."""
        job_name = JobName.MOVE_DECISIONS_TO_FEATURED.value

        try:
            moved = await self.featuring.move_decisions_to_featured()
            self._last_run_result = {"moved": moved}
            return True

        except Exception as e:
            log_cronjob_exception(job_name, e)
            return False

    async def check_decision_hotness(self) -> bool:
        """Job: Feature every decision already over its territory trigger."""
        job_name = JobName.CHECK_DECISION_HOTNESS.value
        cron_logger.info("Check decision hotness")

        try:
            featured = await self.featuring.check_decision_hotness()
            self._last_run_result = {"featured": featured}
            return True

        except Exception as e:
            log_cronjob_exception(job_name, e)
            return False

    async def run_job(self, name: str) -> bool:
        """
        Run a registered job by name.

        Raises:
            KeyError: unknown job name
        """
        job = self.jobs.get(name)
        if job is None:
            raise KeyError(f"Unknown job '{name}'. Available: {', '.join(self.jobs)}")
        return await job()

    # ============================================
    # LIFECYCLE
    # ============================================

    def start(self):
        """Start the scheduler (inside a running event loop)."""
        self.setup()
        self.scheduler.start()
        logger.info("Scheduler started - Press Ctrl+C to stop")

    def stop(self):
        """Stop the scheduler."""
        if self.scheduler.running:
            self.scheduler.shutdown()
        logger.info("Scheduler stopped")

    async def _run_standalone(self, name: str) -> bool:
        from database import init_engine, close_engine

        await init_engine()
        try:
            return await self.run_job(name)
        finally:
            await close_engine()

    def run_once(self, name: str = JobName.UPDATE_TERRITORIES_FEATURED_DECISION_TRIGGER.value) -> bool:
        """Run a single job once and exit."""
        ensure_directories()

        logger.info(f"Running job {name} once...")
        result = asyncio.run(self._run_standalone(name))

        if result:
            logger.info(f"Job {name} completed successfully")
        else:
            logger.error(f"Job {name} failed")

        return result


async def _serve(scheduler: HotnessScheduler):
    from database import init_engine, close_engine

    await init_engine()
    scheduler.start()

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()

    # Handle graceful shutdown
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop_event.set)

    try:
        await stop_event.wait()
        logger.info("Received shutdown signal")
    finally:
        scheduler.stop()
        await close_engine()


def run_scheduler(scheduler: HotnessScheduler = None):
    """Run the scheduler as main process."""
    scheduler = scheduler or HotnessScheduler()
    try:
        asyncio.run(_serve(scheduler))
    except KeyboardInterrupt:
        scheduler.stop()


def main():
    """Main entry point with CLI arguments."""
    import argparse

    job_names = [j.value for j in JobName]

    parser = argparse.ArgumentParser(description="Baztille Hotness Scheduler")
    parser.add_argument("--once", action="store_true", help="Run the trigger decay once and exit")
    parser.add_argument("--job", choices=job_names, help="Run one job once and exit")
    parser.add_argument("--list-jobs", action="store_true", help="List registered jobs and exit")
    parser.add_argument("--migrate", action="store_true", help="Apply database migrations before running")
    parser.add_argument("--init-db", action="store_true", help="Create missing tables from the models and exit")
    parser.add_argument("--stats", action="store_true", help="Print row counts per table and exit")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    args = parser.parse_args()

    # Configure logging
    init_logging(app_name="scheduler", log_level="DEBUG" if args.verbose else None)

    if args.list_jobs:
        for name in job_names:
            print(name)
        sys.exit(0)

    if args.init_db:
        from database import check_database_exists, init_database
        if check_database_exists(settings.DATABASE_PATH):
            logger.info(f"Database already exists: {settings.DATABASE_PATH}")
        init_database()
        sys.exit(0)

    if args.stats:
        from database import get_table_counts_async
        for table, count in asyncio.run(get_table_counts_async()).items():
            print(f"{table}: {count}")
        sys.exit(0)

    if args.migrate:
        from database import run_migrations
        run_migrations()

    scheduler = HotnessScheduler()

    if args.job:
        result = scheduler.run_once(args.job)
        sys.exit(0 if result else 1)
    elif args.once:
        result = scheduler.run_once()
        sys.exit(0 if result else 1)
    else:
        # Run as daemon
        run_scheduler(scheduler)


if __name__ == "__main__":
    main()
