"""
Constants package for the Baztille hotness engine.

Contains shared enums and hotness constants.
"""

from .enums import (
    DecisionStatus,
    InternalEvent,
    JobName,
)

__all__ = [
    # Enums
    "DecisionStatus",
    "InternalEvent",
    "JobName",
]
