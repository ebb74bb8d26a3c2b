import logging
from typing import List, Optional, Sequence
from prometheus_client import Counter

from ..common.errors import InvalidInput
from ..common.models import Job, Worker, WeightedCandidate, Result
from ..common.random_source import RandomSource, default_source
from .scoring import fitness_score, confidence, classify

logger = logging.getLogger(__name__)

UNIFORM_FALLBACK = Counter("loadsim_uniform_fallback_total", "Weight vectors that summed to zero")


def effective_weight(job: Job, worker: Worker, fitness: float) -> float:
    """capacity * (priority / complexity) * fitness"""
    if job.complexity <= 0:
        raise InvalidInput(f"job {job.id}: complexity must be >= 1, got {job.complexity}")
    return worker.capacity * (job.priority / job.complexity) * fitness


def normalize(weights: Sequence[float]) -> List[float]:
    """
    Turn raw weights into probabilities. An all-zero vector becomes uniform
    (1 / len) instead of dividing by zero.
    """
    total = sum(weights)
    if total > 0:
        return [w / total for w in weights]
    logger.debug("total weight is zero across %d workers, using uniform distribution", len(weights))
    UNIFORM_FALLBACK.inc()
    return [1.0 / len(weights)] * len(weights)


def weigh_candidates(job: Job, workers: Sequence[Worker], fitness: float) -> List[WeightedCandidate]:
    if not workers:
        raise InvalidInput("worker pool is empty")
    weights = [effective_weight(job, w, fitness) for w in workers]
    probs = normalize(weights)
    return [
        WeightedCandidate(worker_id=w.id, weight=wt, capacity=w.capacity, probability=p)
        for w, wt, p in zip(workers, weights, probs)
    ]


def select(candidates: Sequence[WeightedCandidate], rng: Optional[RandomSource] = None) -> WeightedCandidate:
    """
    Weighted random pick over candidate probabilities.

    Walks candidates in pool order subtracting each probability from a draw in
    [0, total); the first candidate that brings the remainder to <= 0 wins.
    Falls back to the first candidate if rounding leaves a positive remainder.
    """
    if not candidates:
        raise InvalidInput("no candidates to select from")
    rng = rng or default_source()
    total = sum(c.probability for c in candidates)
    remainder = rng.random() * total
    for c in candidates:
        remainder -= c.probability
        if remainder <= 0:
            return c
    return candidates[0]


def score_job(job: Job, workers: Sequence[Worker], threshold: float,
              rng: Optional[RandomSource] = None) -> Result:
    """Full per-job pass: fitness, weights, probabilities, pick, confidence, status."""
    rng = rng or default_source()
    fitness = fitness_score(job.efficacy, job.adverse_load, rng)
    candidates = weigh_candidates(job, workers, fitness)
    assigned = select(candidates, rng)
    conf = confidence(fitness, job.complexity)
    return Result(
        job=job,
        fitness=fitness,
        confidence=conf,
        candidates=candidates,
        assigned=assigned,
        status=classify(conf, threshold),
    )
