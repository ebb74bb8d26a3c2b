"""
Pytest configuration and shared fixtures.
"""

import random
import pytest
from typing import List, Sequence

from loadsim.common.models import Job, Worker


class ScriptedSource:
    """Random source that replays a fixed list of draws, cycling when exhausted."""

    def __init__(self, draws: Sequence[float]):
        self.draws = list(draws)
        self.calls = 0

    def random(self) -> float:
        value = self.draws[self.calls % len(self.draws)]
        self.calls += 1
        return value


def make_jobs(n: int, seed: int = 0) -> List[Job]:
    rng = random.Random(seed)
    return [
        Job(
            id=f"job-{i}",
            name=f"Compound-{i}",
            complexity=rng.randint(1, 10),
            priority=rng.randint(1, 5),
            efficacy=rng.uniform(0, 100),
            adverse_load=rng.randint(1, 10),
        )
        for i in range(n)
    ]


@pytest.fixture
def example_job() -> Job:
    return Job(id="1", name="Aspirin", complexity=3, priority=2, efficacy=85.5, adverse_load=2)


@pytest.fixture
def medium_pool() -> List[Worker]:
    return [
        Worker(id="1", capacity=6, label="medium"),
        Worker(id="2", capacity=8, label="medium"),
        Worker(id="3", capacity=4, label="medium"),
    ]


@pytest.fixture
def jobs() -> List[Job]:
    return make_jobs(7)


@pytest.fixture
def scripted():
    return ScriptedSource
