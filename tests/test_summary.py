"""
Tests for run summaries and opt-in result retention.
"""

import random
import pytest

from loadsim.analysis.summary import summarize, retain, fitness_band
from loadsim.common.models import SimulationConfig, Status
from loadsim.scheduler.main import run

from conftest import make_jobs


@pytest.fixture
def results(medium_pool):
    return run(make_jobs(40, seed=5), medium_pool, 0.85, 8, rng=random.Random(5))


class TestSummarize:

    def test_counts(self, results, medium_pool):
        summary = summarize(results, medium_pool)
        completed = sum(1 for r in results if r.status is Status.COMPLETED)
        assert summary.total == 40
        assert summary.completed == completed
        assert summary.needs_review == 40 - completed
        assert sum(summary.fitness_buckets.values()) == 40
        assert sum(summary.priority_counts.values()) == 40
        assert sum(summary.worker_counts.values()) == 40

    def test_means(self, results, medium_pool):
        summary = summarize(results, medium_pool)
        assert summary.mean_fitness == pytest.approx(sum(r.fitness for r in results) / 40)
        assert summary.mean_confidence == pytest.approx(sum(r.confidence for r in results) / 40)

    def test_high_priority(self, results, medium_pool):
        summary = summarize(results, medium_pool)
        assert summary.high_priority == sum(1 for r in results if r.job.priority >= 4)

    def test_worker_counts_in_pool_order(self, medium_pool):
        summary = summarize([], medium_pool)
        assert list(summary.worker_counts) == ["1", "2", "3"]
        assert list(summary.worker_counts.values()) == [0, 0, 0]

    def test_empty(self, medium_pool):
        summary = summarize([], medium_pool)
        assert summary.total == 0
        assert summary.mean_fitness == 0.0
        assert summary.mean_confidence == 0.0
        assert summary.priority_counts == {"1": 0, "2": 0, "3": 0, "4": 0, "5": 0}

    def test_config_echo(self, results, medium_pool):
        cfg = SimulationConfig(threshold=0.9, chunk_size=8, tier="medium")
        assert summarize(results, medium_pool, cfg).config == cfg


class TestFitnessBand:

    @pytest.mark.parametrize("value,band", [
        (1.0, "high"), (0.8, "high"), (0.7999, "medium"), (0.6, "medium"),
        (0.4, "low"), (0.39, "very_low"), (0.1, "very_low"),
    ])
    def test_edges(self, value, band):
        assert fitness_band(value) == band


class TestRetain:
    """Truncation only happens when a caller asks for it."""

    def test_default_keeps_everything(self, results):
        assert retain(results) == results

    def test_limit(self, results):
        kept = retain(results, 5)
        assert [r.job.id for r in kept] == [r.job.id for r in results[:5]]

    def test_zero(self, results):
        assert retain(results, 0) == []

    def test_limit_larger_than_results(self, results):
        assert len(retain(results, 500)) == 40
