"""
Centralized logging configuration for the Baztille hotness engine.

Two channels share the same loguru logger:
- general: everything (console + app file + error file)
- cron: records bound with channel="cron" also land in cron_{date}.log

Usage:
    from utils.logger import logger, cron_logger

    logger.info("Your message")
    cron_logger.info("Daily job message")
"""
import sys
from pathlib import Path
from loguru import logger

# Remove default handler
logger.remove()

CRON_CHANNEL = "cron"

cron_logger = logger.bind(channel=CRON_CHANNEL)

_configured = False

_FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function} - {message}"


def _is_cron_record(record) -> bool:
    return record["extra"].get("channel") == CRON_CHANNEL


def setup_logging(
    log_dir: Path = None,
    log_level: str = "INFO",
    app_name: str = "app",
    console: bool = True,
):
    """
    Configure logging with console and file outputs.

    Args:
        log_dir: Directory to store log files. If None, file logging is disabled.
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR)
        app_name: Name prefix for log files (e.g., "scheduler")
        console: Also log to stderr
    """
    global _configured

    if _configured:
        return

    if console:
        logger.add(
            sys.stderr,
            level=log_level,
            format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
        )

    if log_dir:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        # Main log file - rotates daily
        logger.add(
            log_dir / f"{app_name}_{{time:YYYY-MM-DD}}.log",
            level=log_level,
            format=_FILE_FORMAT,
            rotation="00:00",
            retention="30 days",
            compression="gz",
            encoding="utf-8"
        )

        # Warnings and errors, kept apart so they are never missed
        logger.add(
            log_dir / f"error_{app_name}_{{time:YYYY-MM-DD}}.log",
            level="WARNING",
            format=_FILE_FORMAT,
            rotation="00:00",
            retention="30 days",
            compression="gz",
            encoding="utf-8"
        )

        # Scheduled jobs
        logger.add(
            log_dir / "cron_{time:YYYY-MM-DD}.log",
            level=log_level,
            format=_FILE_FORMAT,
            filter=_is_cron_record,
            rotation="00:00",
            retention="30 days",
            compression="gz",
            encoding="utf-8"
        )

        logger.info(f"Logging configured. Log directory: {log_dir}")

    _configured = True


def init_logging(app_name: str = "app", log_level: str = None):
    """
    Initialize logging using settings from config.
    Call this once at application startup.

    Args:
        app_name: Name prefix for log files (e.g., "scheduler")
        log_level: Override for settings.LOG_LEVEL
    """
    from config import settings, ensure_directories

    ensure_directories()
    setup_logging(
        log_dir=settings.LOG_DIR,
        log_level=log_level or settings.LOG_LEVEL,
        app_name=app_name,
        console=settings.LOG_ALL_TO_CONSOLE,
    )


def log_cronjob_exception(job_name: str, exception: BaseException):
    """
    Log an exception raised by a scheduled job.

    Goes to the cron channel and, unbound, to the general log too so it
    shows up in the error file.
    """
    message = f"EXCEPTION during cronjob {job_name}"
    if str(exception):
        message += f": {exception}"

    cron_logger.opt(exception=exception).error(message)
    logger.opt(exception=exception).error(message)


# Export logger for easy import
__all__ = ["logger", "cron_logger", "setup_logging", "init_logging", "log_cronjob_exception"]
