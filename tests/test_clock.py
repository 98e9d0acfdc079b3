"""
tests/test_clock.py - Clock helpers and cron log channel.
"""
from datetime import datetime, timezone

from loguru import logger

from utils.clock import (
    MS_PER_DAY,
    from_timestamp_ms,
    get_current_date,
    get_next_occurrence_of_hour_in_timezone,
    local_midnight_ms,
    to_timestamp_ms,
)
from utils.logger import _is_cron_record, cron_logger, log_cronjob_exception


# ---------------------------------------------------------------------------
# Clock
# ---------------------------------------------------------------------------

class TestCurrentDate:
    def test_fake_date_naive_is_utc(self):
        assert get_current_date("2025-01-01T10:00:00") == datetime(2025, 1, 1, 10, tzinfo=timezone.utc)

    def test_fake_date_with_offset(self):
        assert get_current_date("2025-01-01T10:00:00+02:00") == datetime(2025, 1, 1, 8, tzinfo=timezone.utc)

    def test_real_clock_is_aware(self, monkeypatch):
        from config import settings

        monkeypatch.setattr(settings, "FAKE_DATE", None)
        assert get_current_date().tzinfo is not None


class TestTimestamps:
    def test_epoch_milliseconds(self):
        value = datetime(2025, 3, 2, 9, tzinfo=timezone.utc)
        assert to_timestamp_ms(value) == 1740906000000
        assert from_timestamp_ms(1740906000000) == value

    def test_one_day(self):
        start = datetime(2025, 3, 2, tzinfo=timezone.utc)
        end = datetime(2025, 3, 3, tzinfo=timezone.utc)
        assert to_timestamp_ms(end) - to_timestamp_ms(start) == MS_PER_DAY


class TestNextOccurrence:
    def test_noon_paris_winter(self):
        start = datetime(2025, 3, 2, 9, tzinfo=timezone.utc)
        result = get_next_occurrence_of_hour_in_timezone(start, 4, 12, "Europe/Paris")
        assert result == datetime(2025, 3, 6, 11, tzinfo=timezone.utc)

    def test_across_daylight_saving_change(self):
        start = datetime(2025, 3, 28, 9, tzinfo=timezone.utc)
        result = get_next_occurrence_of_hour_in_timezone(start, 4, 12, "Europe/Paris")
        assert result == datetime(2025, 4, 1, 10, tzinfo=timezone.utc)

    def test_uses_local_date(self):
        # Already the 3rd in Paris
        start = datetime(2025, 3, 2, 23, 30, tzinfo=timezone.utc)
        result = get_next_occurrence_of_hour_in_timezone(start, 1, 12, "Europe/Paris")
        assert result == datetime(2025, 3, 4, 11, tzinfo=timezone.utc)

    def test_local_midnight(self):
        start = datetime(2025, 3, 2, 23, 30, tzinfo=timezone.utc)
        assert local_midnight_ms(start, "Europe/Paris") == to_timestamp_ms(
            datetime(2025, 3, 2, 23, tzinfo=timezone.utc)
        )
        assert local_midnight_ms(start, "UTC") == to_timestamp_ms(datetime(2025, 3, 2, tzinfo=timezone.utc))


# ---------------------------------------------------------------------------
# Cron log channel
# ---------------------------------------------------------------------------

class TestCronChannel:
    def test_only_cron_records_pass_filter(self):
        messages = []
        sink_id = logger.add(lambda m: messages.append(m.record["message"]), filter=_is_cron_record)
        try:
            logger.info("general")
            cron_logger.info("daily pass")
        finally:
            logger.remove(sink_id)

        assert messages == ["daily pass"]

    def test_job_exception_logged_on_both_channels(self):
        records = []
        sink_id = logger.add(lambda m: records.append(m.record), level="ERROR")
        try:
            log_cronjob_exception("update_territories_featured_decision_trigger", RuntimeError("db down"))
        finally:
            logger.remove(sink_id)

        assert len(records) == 2
        assert sum(_is_cron_record(r) for r in records) == 1
        assert all("db down" in r["message"] for r in records)
        assert records[0]["exception"] is not None
