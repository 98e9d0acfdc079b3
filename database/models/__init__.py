"""
SQLAlchemy ORM Models

This module defines all database models using SQLAlchemy ORM.
Models are organized by domain:
- Territories: Territory hierarchy, votable state and trigger history
- Decisions: Decisions and their daily voting activity
"""

from .base import Base, TimestampMixin
from .territories import Territory, VotableTerritory, TerritoryTriggerHistory
from .decisions import Decision, DecisionVotingActivity

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    # Territories
    "Territory",
    "VotableTerritory",
    "TerritoryTriggerHistory",
    # Decisions
    "Decision",
    "DecisionVotingActivity",
]
