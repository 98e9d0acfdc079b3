"""
Utilities module for the Baztille hotness engine.
"""
from .logger import logger, cron_logger, init_logging, setup_logging, log_cronjob_exception
from .clock import (
    MS_PER_DAY,
    get_current_date,
    to_timestamp_ms,
    from_timestamp_ms,
    get_next_occurrence_of_hour_in_timezone,
    local_midnight_ms,
)

__all__ = [
    "logger",
    "cron_logger",
    "init_logging",
    "setup_logging",
    "log_cronjob_exception",
    "MS_PER_DAY",
    "get_current_date",
    "to_timestamp_ms",
    "from_timestamp_ms",
    "get_next_occurrence_of_hour_in_timezone",
    "local_midnight_ms",
]
