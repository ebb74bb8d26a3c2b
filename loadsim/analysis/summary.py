"""
Aggregate statistics over a finished run, the numbers a dashboard or report
would show: outcome counts, score means, and distributions by fitness band,
priority and assigned worker.
"""

from typing import Dict, List, Optional, Sequence

import numpy as np

from ..common.models import Result, RunSummary, SimulationConfig, Status, Worker

# lower edges, checked high to low
FITNESS_BANDS = (("high", 0.8), ("medium", 0.6), ("low", 0.4), ("very_low", float("-inf")))
HIGH_PRIORITY = 4


def fitness_band(fitness: float) -> str:
    for name, edge in FITNESS_BANDS:
        if fitness >= edge:
            return name
    return FITNESS_BANDS[-1][0]


def summarize(results: Sequence[Result], workers: Sequence[Worker],
              config: Optional[SimulationConfig] = None) -> RunSummary:
    fitness = np.array([r.fitness for r in results], dtype=float)
    conf = np.array([r.confidence for r in results], dtype=float)
    priorities = np.array([r.job.priority for r in results], dtype=int)

    buckets: Dict[str, int] = {name: 0 for name, _ in FITNESS_BANDS}
    for f in fitness:
        buckets[fitness_band(float(f))] += 1

    # unknown ids (custom pools not passed in) are appended after pool order
    worker_counts: Dict[str, int] = {w.id: 0 for w in workers}
    for r in results:
        worker_counts[r.assigned.worker_id] = worker_counts.get(r.assigned.worker_id, 0) + 1

    completed = sum(1 for r in results if r.status == Status.COMPLETED)
    return RunSummary(
        total=len(results),
        completed=completed,
        needs_review=len(results) - completed,
        mean_fitness=float(fitness.mean()) if fitness.size else 0.0,
        mean_confidence=float(conf.mean()) if conf.size else 0.0,
        fitness_buckets=buckets,
        priority_counts={str(p): int(np.count_nonzero(priorities == p)) for p in range(1, 6)},
        worker_counts=worker_counts,
        high_priority=int(np.count_nonzero(priorities >= HIGH_PRIORITY)),
        config=config,
    )


def retain(results: Sequence[Result], limit: Optional[int] = None) -> List[Result]:
    """Prefix of ``results`` when a limit is given; the full list otherwise."""
    if limit is None:
        return list(results)
    return list(results[:limit])
