"""
Configuration and utilities for territory hotness decay.

Contains:
- Decay curve breakpoints
- Trigger reset and rounding rules
- Decision hotness score weights
"""
import math


# ============================================
# DECAY CONFIGURATION
# ============================================

# Linear 2.0 -> 1.6 over the first days after a featuring
DECAY_START_FACTOR = 2.0
DECAY_FIRST_STAGE_END_DAY = 4
DECAY_FIRST_STAGE_DROP = 0.4
DECAY_FIRST_STAGE_END_FACTOR = 1.6

# Linear 1.6 -> 0.4 until day 10 (factor 1.0 on day 7: one featuring per week)
DECAY_SECOND_STAGE_END_DAY = 10
DECAY_SECOND_STAGE_DROP = 1.2
DECAY_SECOND_STAGE_END_FACTOR = 0.4

# Exponential 0.4 -> 0.1 afterwards
DECAY_FLOOR_FACTOR = 0.1
DECAY_EXPONENTIAL_AMPLITUDE = 0.3
DECAY_HALF_LIFE_DAYS = 3


# ============================================
# TRIGGER CONFIGURATION
# ============================================

TRIGGER_RESET_MULTIPLIER = 2
MIN_FEATURED_DECISION_TRIGGER = 1


# ============================================
# DECISION HOTNESS SCORE
# ============================================

HOTNESS_LOOKBACK_DAYS = 7
EXPECTED_PROPOSITIONS = 4
MISSING_PROPOSITION_PENALTY = 250
FEATURED_DECISION_BONUS = 10000


# ============================================
# UTILITY FUNCTIONS
# ============================================

def decay_factor(days_passed: float) -> float:
    """
    Get the trigger decay factor for the time elapsed since the latest featuring.

    Piecewise: linear 2.0 -> 1.6 on [0, 4], linear 1.6 -> 0.4 on ]4, 10],
    then 0.1 + 0.3 * 0.5 ** ((d - 10) / 3). Continuous at 4 and 10, never
    below 0.1 for d >= 0.

    Negative values are not filtered: the first segment is extrapolated.

    Args:
        days_passed: Days since the latest featuring (fractional)

    Returns:
        Multiplier applied to the latest featured decision trigger
    """
    if days_passed <= DECAY_FIRST_STAGE_END_DAY:
        return DECAY_START_FACTOR - (days_passed * DECAY_FIRST_STAGE_DROP) / DECAY_FIRST_STAGE_END_DAY

    if days_passed <= DECAY_SECOND_STAGE_END_DAY:
        stage_days = DECAY_SECOND_STAGE_END_DAY - DECAY_FIRST_STAGE_END_DAY
        elapsed = days_passed - DECAY_FIRST_STAGE_END_DAY
        return DECAY_FIRST_STAGE_END_FACTOR - (elapsed * DECAY_SECOND_STAGE_DROP) / stage_days

    exponent = (days_passed - DECAY_SECOND_STAGE_END_DAY) / DECAY_HALF_LIFE_DAYS
    return DECAY_FLOOR_FACTOR + DECAY_EXPONENTIAL_AMPLITUDE * math.pow(0.5, exponent)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves rounded up (2.5 -> 3, -2.5 -> -2)."""
    return math.floor(value + 0.5)


def decayed_trigger(latest_trigger: float, days_passed: float) -> int:
    """
    Trigger value after days_passed days, recomputed from the anchor.

    Never below MIN_FEATURED_DECISION_TRIGGER.
    """
    return max(
        MIN_FEATURED_DECISION_TRIGGER,
        round_half_up(latest_trigger * decay_factor(days_passed)),
    )


def compute_hotness_score(
    recent_votes: int,
    submitted_propositions: int,
    featured: bool,
) -> int:
    """
    Hotness score of a decision.

    Votes of the lookback window, minus a penalty per proposition missing
    from the expected count, plus a bonus keeping featured decisions on top.
    """
    missing = max(0, EXPECTED_PROPOSITIONS - submitted_propositions)
    score = recent_votes - missing * MISSING_PROPOSITION_PENALTY
    if featured:
        score += FEATURED_DECISION_BONUS
    return score
