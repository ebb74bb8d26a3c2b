"""
Tests for fitness scoring and confidence classification.
"""

import random
import pytest

from loadsim.common.models import Status
from loadsim.scheduler.scoring import fitness_score, confidence, classify, clamp


class TestFitnessScore:
    """Fitness combines efficacy and adverse load with bounded jitter."""

    def test_midpoint_draw_has_no_jitter(self, scripted):
        """A draw of 0.5 leaves the weighted base untouched."""
        score = fitness_score(85.5, 2, scripted([0.5]))
        assert score == pytest.approx(0.7 * 0.855 + 0.3 * 0.8)

    def test_jitter_is_bounded(self, scripted):
        """Extreme draws move the score by at most 0.05."""
        low = fitness_score(50, 5, scripted([0.0]))
        high = fitness_score(50, 5, scripted([0.999999]))
        assert low == pytest.approx(0.5 - 0.05)
        assert high == pytest.approx(0.5 + 0.05, abs=1e-6)

    def test_consumes_one_draw(self, scripted):
        source = scripted([0.3, 0.7])
        fitness_score(40, 4, source)
        assert source.calls == 1

    def test_clamped_to_floor(self, scripted):
        assert fitness_score(0, 10, scripted([0.0])) == 0.1

    def test_clamped_to_ceiling(self, scripted):
        assert fitness_score(100, 0, scripted([0.999])) == 1.0

    def test_always_in_range(self):
        """Random inputs never escape [0.1, 1.0]."""
        rng = random.Random(42)
        for _ in range(2000):
            score = fitness_score(rng.uniform(0, 100), rng.randint(1, 10), rng)
            assert 0.1 <= score <= 1.0

    def test_default_source(self):
        assert 0.1 <= fitness_score(70, 3) <= 1.0


class TestConfidence:

    def test_example_is_capped(self):
        """0.75 + 0.3 * 0.7 = 0.96 is capped at 0.95."""
        assert confidence(0.75, 3) == pytest.approx(0.95)

    def test_floor(self):
        assert confidence(0.1, 10) == 0.5

    def test_inside_range(self):
        assert confidence(0.6, 5) == pytest.approx(0.75)

    def test_clamp_helper(self):
        assert clamp(2.0, 0, 1) == 1
        assert clamp(-1.0, 0, 1) == 0
        assert clamp(0.4, 0, 1) == 0.4


class TestClassify:

    def test_above_threshold(self):
        assert classify(0.95, 0.85) is Status.COMPLETED

    def test_equal_to_threshold_completes(self):
        assert classify(0.85, 0.85) is Status.COMPLETED

    def test_below_threshold(self):
        assert classify(0.84, 0.85) is Status.NEEDS_REVIEW

    def test_unreachable_threshold_is_allowed(self):
        """Thresholds outside [0.5, 0.95] are legal; one branch just never fires."""
        assert classify(0.95, 1.5) is Status.NEEDS_REVIEW
        assert classify(0.5, 0.1) is Status.COMPLETED
