"""
Database Module - Baztille Hotness Engine

Structure:
    database/
    ├── __init__.py      # This file - public API
    ├── session.py       # SQLAlchemy async session management
    ├── init.py          # Database initialization utilities
    └── models/          # SQLAlchemy ORM models
        ├── __init__.py
        ├── base.py
        ├── territories.py
        └── decisions.py

Usage:
    from database import get_session
    from database.models import Territory, VotableTerritory

    async with get_session() as session:
        result = await session.execute(select(Territory))
        territories = result.scalars().all()
"""

# SQLAlchemy Models
from .models import (
    # Base
    Base,
    TimestampMixin,
    # Territories
    Territory,
    VotableTerritory,
    TerritoryTriggerHistory,
    # Decisions
    Decision,
    DecisionVotingActivity,
)

# Session Management
from .session import (
    init_engine,
    close_engine,
    create_tables,
    drop_tables,
    get_session,
)

# Initialization utilities
from .init import (
    TABLES,
    init_database,
    init_database_async,
    get_table_counts_async,
    check_database_exists,
    run_migrations,
)

__all__ = [
    # SQLAlchemy Models
    "Base",
    "TimestampMixin",
    "Territory",
    "VotableTerritory",
    "TerritoryTriggerHistory",
    "Decision",
    "DecisionVotingActivity",
    # Session Management
    "init_engine",
    "close_engine",
    "create_tables",
    "drop_tables",
    "get_session",
    # Init utilities
    "TABLES",
    "init_database",
    "init_database_async",
    "get_table_counts_async",
    "check_database_exists",
    "run_migrations",
]
