"""
tests/test_scheduler.py - Job registry and cron wiring of the scheduler.
"""
import sys

import pytest
from apscheduler.triggers.cron import CronTrigger

import scheduler as scheduler_module
from constants import InternalEvent, JobName
from processor.hotness import DecisionFeaturingService
from scheduler import HotnessScheduler
from signals import SignalBus


@pytest.fixture
def hotness_scheduler(tracker, bus):
    featuring = DecisionFeaturingService(tracker, timezone="UTC")
    return HotnessScheduler(tracker=tracker, featuring=featuring, bus=bus)


class TestJobRegistry:
    async def test_every_job_name_registered(self, hotness_scheduler):
        assert set(hotness_scheduler.jobs) == {j.value for j in JobName}

    async def test_unknown_job(self, hotness_scheduler):
        with pytest.raises(KeyError, match="Unknown job"):
            await hotness_scheduler.run_job("rebuild_everything")

    async def test_run_trigger_update(self, hotness_scheduler, tracker, add_territory, clock, get_votable):
        await add_territory("paris")
        await tracker.set_votable("paris")
        await tracker.reset_after_featuring("paris", 10)
        clock.advance(days=7)

        ok = await hotness_scheduler.run_job(JobName.UPDATE_TERRITORIES_FEATURED_DECISION_TRIGGER.value)

        assert ok is True
        assert hotness_scheduler.last_run_result["updated"] == ["paris"]
        assert (await get_votable("paris")).current_featured_decision_trigger == 10

    async def test_run_check_decision_hotness(self, hotness_scheduler):
        ok = await hotness_scheduler.run_job(JobName.CHECK_DECISION_HOTNESS.value)
        assert ok is True
        assert hotness_scheduler.last_run_result == {"featured": []}

    async def test_failing_job_reports_false(self, hotness_scheduler, tracker, monkeypatch):
        async def boom():
            raise RuntimeError("database unreachable")

        monkeypatch.setattr(tracker, "update_territories_featured_decision_trigger", boom)

        ok = await hotness_scheduler.run_job(JobName.UPDATE_TERRITORIES_FEATURED_DECISION_TRIGGER.value)
        assert ok is False

    async def test_featuring_listens_to_trigger_updates(self, hotness_scheduler, bus):
        handlers = bus.handlers(InternalEvent.TERRITORY_FEATURED_DECISIONS_TRIGGER_UPDATE)
        assert hotness_scheduler.featuring.handle_triggers_updated in handlers


class TestCronSetup:
    async def test_daily_job_at_noon(self, hotness_scheduler, monkeypatch):
        monkeypatch.setattr(scheduler_module, "ensure_directories", lambda: None)

        hotness_scheduler.setup()

        jobs = {job.id: job for job in hotness_scheduler.scheduler.get_jobs()}
        assert set(jobs) == {
            JobName.UPDATE_TERRITORIES_FEATURED_DECISION_TRIGGER.value,
            JobName.MOVE_DECISIONS_TO_FEATURED.value,
        }

        daily = jobs[JobName.UPDATE_TERRITORIES_FEATURED_DECISION_TRIGGER.value].trigger
        assert isinstance(daily, CronTrigger)
        fields = {f.name: str(f) for f in daily.fields}
        assert fields["hour"] == "12"
        assert fields["minute"] == "0"

    async def test_general_vote_job_every_hour(self, hotness_scheduler, monkeypatch):
        monkeypatch.setattr(scheduler_module, "ensure_directories", lambda: None)

        hotness_scheduler.setup()

        jobs = {job.id: job for job in hotness_scheduler.scheduler.get_jobs()}
        fields = {f.name: str(f) for f in jobs[JobName.MOVE_DECISIONS_TO_FEATURED.value].trigger.fields}
        assert fields["hour"] == "*"
        assert fields["minute"] == "0"


# ---------------------------------------------------------------------------
# Signal wiring
# ---------------------------------------------------------------------------

class TestSignalWiring:
    async def test_second_scheduler_does_not_duplicate_handlers(self, tracker, bus):
        featuring = DecisionFeaturingService(tracker, timezone="UTC")
        HotnessScheduler(tracker=tracker, featuring=featuring, bus=bus)
        HotnessScheduler(tracker=tracker, featuring=featuring, bus=bus)

        assert len(bus.handlers(InternalEvent.TERRITORY_FEATURED_DECISIONS_TRIGGER_UPDATE)) == 1

    def test_daemon_builds_a_single_scheduler(self, monkeypatch):
        bus = SignalBus()
        served = []

        async def fake_serve(scheduler):
            served.append(scheduler)

        monkeypatch.setattr(scheduler_module, "signal_bus", bus)
        monkeypatch.setattr(scheduler_module, "_serve", fake_serve)
        monkeypatch.setattr(scheduler_module, "init_logging", lambda **kwargs: None)
        monkeypatch.setattr(sys, "argv", ["scheduler"])

        scheduler_module.main()

        assert len(served) == 1
        handlers = bus.handlers(InternalEvent.TERRITORY_FEATURED_DECISIONS_TRIGGER_UPDATE)
        assert handlers == [served[0].featuring.handle_triggers_updated]
        assert len(bus.handlers(InternalEvent.DECISION_NEW_DECISION_TO_BE_FEATURED)) == 1


class TestGeneralVoteJob:
    async def test_moves_due_decisions(self, hotness_scheduler, tracker, add_territory, clock):
        await add_territory("paris")
        await tracker.set_votable("paris")
        featuring = hotness_scheduler.featuring
        await featuring.create_decision("paris", "Bike lanes", submitted_propositions_count=4, decision_id="d1")
        for _ in range(10):
            await featuring.record_vote("d1")

        clock.advance(days=5)
        ok = await hotness_scheduler.run_job(JobName.MOVE_DECISIONS_TO_FEATURED.value)

        assert ok is True
        assert hotness_scheduler.last_run_result == {"moved": ["d1"]}
