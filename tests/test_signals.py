"""
tests/test_signals.py - In-process signal bus.
"""
from constants import InternalEvent
from signals import SignalBus
from tests.conftest import SignalRecorder


EVENT = InternalEvent.TERRITORY_FEATURED_DECISIONS_TRIGGER_UPDATE


class TestSignalBus:
    async def test_sync_and_async_handlers(self):
        bus = SignalBus()
        seen = []

        def sync_handler(**payload):
            seen.append(("sync", payload))

        async def async_handler(**payload):
            seen.append(("async", payload))

        bus.subscribe(EVENT, sync_handler)
        bus.subscribe(EVENT, async_handler)

        delivered = await bus.emit(EVENT, decision_id="d1")

        assert delivered == 2
        assert seen == [("sync", {"decision_id": "d1"}), ("async", {"decision_id": "d1"})]

    async def test_enum_and_raw_name_are_the_same_signal(self):
        bus = SignalBus()
        recorder = SignalRecorder()
        bus.subscribe(EVENT.value, recorder)

        await bus.emit(EVENT)
        assert recorder.count == 1

    async def test_failing_handler_is_isolated(self):
        bus = SignalBus()
        recorder = SignalRecorder()

        async def broken(**payload):
            raise RuntimeError("boom")

        bus.subscribe(EVENT, broken)
        bus.subscribe(EVENT, recorder)

        delivered = await bus.emit(EVENT)

        assert delivered == 1
        assert recorder.count == 1

    async def test_no_subscribers(self):
        assert await SignalBus().emit(EVENT) == 0

    async def test_unsubscribe(self):
        bus = SignalBus()
        recorder = SignalRecorder()
        bus.subscribe(EVENT, recorder)

        assert bus.unsubscribe(EVENT, recorder) is True
        assert bus.unsubscribe(EVENT, recorder) is False

        await bus.emit(EVENT)
        assert recorder.count == 0
