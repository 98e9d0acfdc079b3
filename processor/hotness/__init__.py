"""
Hotness Module - territory triggers and decision featuring

Components:
- HotnessTracker: per-territory featured decision trigger (reset, daily decay)
- DecisionFeaturingService: decision hotness scoring and featuring
- Decay/trigger configuration and utilities
"""

from .config import (
    DECAY_HALF_LIFE_DAYS,
    DECAY_FLOOR_FACTOR,
    TRIGGER_RESET_MULTIPLIER,
    MIN_FEATURED_DECISION_TRIGGER,
    HOTNESS_LOOKBACK_DAYS,
    decay_factor,
    decayed_trigger,
    round_half_up,
    compute_hotness_score,
)
from .exceptions import (
    HotnessError,
    TerritoryNotFoundError,
    NotVotableError,
    TransientStoreError,
    PropositionsClosedError,
)
from .models import TerritoryDecayResult, HotnessPassResult
from .tracker import HotnessTracker
from .featuring import DecisionFeaturingService


__all__ = [
    # Main classes
    "HotnessTracker",
    "DecisionFeaturingService",
    # Models
    "TerritoryDecayResult",
    "HotnessPassResult",
    # Errors
    "HotnessError",
    "TerritoryNotFoundError",
    "NotVotableError",
    "TransientStoreError",
    "PropositionsClosedError",
    # Config
    "DECAY_HALF_LIFE_DAYS",
    "DECAY_FLOOR_FACTOR",
    "TRIGGER_RESET_MULTIPLIER",
    "MIN_FEATURED_DECISION_TRIGGER",
    "HOTNESS_LOOKBACK_DAYS",
    # Utilities
    "decay_factor",
    "decayed_trigger",
    "round_half_up",
    "compute_hotness_score",
]
