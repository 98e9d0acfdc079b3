"""
tests/test_decay.py - Unit tests for the trigger decay curve and scoring helpers.

Pure functions only, no database.
"""
import pytest

from processor.hotness import (
    DECAY_FLOOR_FACTOR,
    compute_hotness_score,
    decay_factor,
    decayed_trigger,
    round_half_up,
)


EPSILON = 1e-9


# ---------------------------------------------------------------------------
# Decay factor
# ---------------------------------------------------------------------------

class TestDecayFactor:
    def test_starts_at_two(self):
        assert decay_factor(0) == pytest.approx(2.0)

    def test_day_four(self):
        assert decay_factor(4) == pytest.approx(1.6)

    def test_one_featuring_per_week(self):
        assert decay_factor(7) == pytest.approx(1.0)

    def test_day_ten(self):
        assert decay_factor(10) == pytest.approx(0.4)

    def test_half_life_after_day_ten(self):
        # 0.1 + 0.3 * 0.5
        assert decay_factor(13) == pytest.approx(0.25)

    def test_fractional_days(self):
        assert decay_factor(2) == pytest.approx(1.8)
        assert decay_factor(5.5) == pytest.approx(1.3)

    @pytest.mark.parametrize("boundary", [4, 10])
    def test_continuous_at_boundaries(self, boundary):
        before = decay_factor(boundary - EPSILON)
        after = decay_factor(boundary + EPSILON)
        assert abs(before - after) < 1e-6

    def test_tends_to_floor(self):
        assert decay_factor(1000) == pytest.approx(DECAY_FLOOR_FACTOR)

    def test_never_below_floor(self):
        for day in range(0, 365):
            assert decay_factor(day) >= DECAY_FLOOR_FACTOR

    def test_monotonically_decreasing(self):
        values = [decay_factor(d / 4) for d in range(0, 200)]
        assert all(a >= b for a, b in zip(values, values[1:]))

    def test_negative_days_extrapolate_first_segment(self):
        assert decay_factor(-4) == pytest.approx(2.4)


# ---------------------------------------------------------------------------
# Trigger rounding
# ---------------------------------------------------------------------------

class TestDecayedTrigger:
    def test_week_after_featuring(self):
        assert decayed_trigger(10, 7) == 10

    def test_right_after_featuring(self):
        assert decayed_trigger(10, 0) == 20

    def test_rounds_to_nearest(self):
        # 7 * 0.4 = 2.8
        assert decayed_trigger(7, 10) == 3

    def test_never_reaches_zero(self):
        assert decayed_trigger(1, 100) == 1

    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(3.5) == 4
        assert round_half_up(2.4) == 2
        assert round_half_up(-2.5) == -2


# ---------------------------------------------------------------------------
# Decision hotness score
# ---------------------------------------------------------------------------

class TestHotnessScore:
    def test_votes_only(self):
        assert compute_hotness_score(recent_votes=12, submitted_propositions=4, featured=False) == 12

    def test_missing_propositions_penalty(self):
        assert compute_hotness_score(recent_votes=3, submitted_propositions=1, featured=False) == 3 - 750

    def test_extra_propositions_not_rewarded(self):
        assert compute_hotness_score(recent_votes=3, submitted_propositions=6, featured=False) == 3

    def test_featured_bonus(self):
        assert compute_hotness_score(recent_votes=3, submitted_propositions=4, featured=True) == 10003
