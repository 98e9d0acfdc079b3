"""
Processor package for the Baztille hotness engine.

- Hotness: territory featured decision triggers (reset after featuring,
  daily decay) and decision featuring

Main entry points: HotnessTracker, DecisionFeaturingService
"""

from .hotness import (
    HotnessTracker,
    DecisionFeaturingService,
    HotnessPassResult,
    TerritoryDecayResult,
    HotnessError,
    TerritoryNotFoundError,
    NotVotableError,
    TransientStoreError,
    PropositionsClosedError,
    decay_factor,
)

__all__ = [
    "HotnessTracker",
    "DecisionFeaturingService",
    "HotnessPassResult",
    "TerritoryDecayResult",
    "HotnessError",
    "TerritoryNotFoundError",
    "NotVotableError",
    "TransientStoreError",
    "PropositionsClosedError",
    "decay_factor",
]
