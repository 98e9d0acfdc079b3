"""
Database setup helpers used by the scheduler CLI.
"""
import asyncio
from pathlib import Path
from typing import Dict

from loguru import logger
from sqlalchemy import text
from sqlalchemy.exc import OperationalError


TABLES = [
    'territories',
    'votable_territories',
    'territory_trigger_history',
    'decisions',
    'decision_voting_activity',
]


def check_database_exists(db_path: Path) -> bool:
    return Path(db_path).exists()


async def init_database_async() -> None:
    """Create every table from the ORM metadata (no migration history)."""
    from .session import create_tables

    await create_tables()
    logger.info("Database initialized from models")


def init_database() -> None:
    """Sync wrapper; call outside a running event loop."""
    asyncio.run(init_database_async())


async def get_table_counts_async() -> Dict[str, int]:
    """
    Row count per engine table.

    Tables not created yet count as 0.
    """
    from .session import get_session

    counts = {}
    async with get_session() as session:
        for table in TABLES:
            try:
                result = await session.execute(text(f"SELECT COUNT(*) FROM {table}"))
                counts[table] = result.scalar()
            except OperationalError:
                counts[table] = 0

    return counts


def run_migrations() -> None:
    """Upgrade the configured database to the latest Alembic revision."""
    from alembic.config import Config
    from alembic import command
    from config import settings

    alembic_cfg = Config(str(settings.BASE_DIR / "alembic.ini"))
    command.upgrade(alembic_cfg, "head")
    logger.info("Database migrations completed")
