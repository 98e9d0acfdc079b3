"""
SQLAlchemy-based Repositories

This package provides async repository pattern using SQLAlchemy ORM.

Usage:
    from repositories import TerritoryRepository
    from database import get_session

    async with get_session() as session:
        repo = TerritoryRepository(session)
        territories = await repo.find_votable_territories()
"""

from .base import BaseRepository
from .territories import TerritoryRepository, VotableTerritoryView
from .decisions import DecisionRepository, DecisionOverThreshold

__all__ = [
    "BaseRepository",
    "TerritoryRepository",
    "VotableTerritoryView",
    "DecisionRepository",
    "DecisionOverThreshold",
]
