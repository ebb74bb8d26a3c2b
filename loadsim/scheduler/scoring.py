from typing import Optional
from ..common.models import Status
from ..common.random_source import RandomSource, default_source

FITNESS_MIN, FITNESS_MAX = 0.1, 1.0
CONFIDENCE_MIN, CONFIDENCE_MAX = 0.5, 0.95
EFFICACY_WEIGHT = 0.7
ADVERSE_WEIGHT = 0.3
JITTER = 0.1  # total width, i.e. +/- 0.05
COMPLEXITY_BONUS = 0.3


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def fitness_score(efficacy: float, adverse_load: float, rng: Optional[RandomSource] = None) -> float:
    """
    Bounded quality score of a job: 70% efficacy, 30% absence of adverse load,
    plus uniform jitter in [-0.05, 0.05]. Consumes exactly one draw from ``rng``.
    """
    rng = rng or default_source()
    efficacy_norm = efficacy / 100.0
    adverse_norm = adverse_load / 10.0
    base = EFFICACY_WEIGHT * efficacy_norm + ADVERSE_WEIGHT * (1 - adverse_norm)
    jitter = (rng.random() - 0.5) * JITTER
    return clamp(base + jitter, FITNESS_MIN, FITNESS_MAX)


def confidence(fitness: float, complexity: int) -> float:
    # simpler jobs get up to +0.3
    return clamp(fitness + COMPLEXITY_BONUS * (1 - complexity / 10.0), CONFIDENCE_MIN, CONFIDENCE_MAX)


def classify(conf: float, threshold: float) -> Status:
    return Status.COMPLETED if conf >= threshold else Status.NEEDS_REVIEW
