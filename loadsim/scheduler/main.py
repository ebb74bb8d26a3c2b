import os, sys, json, math, time, logging, argparse
from typing import Callable, Iterator, List, Optional, Sequence, Tuple
from prometheus_client import Counter, Histogram, start_http_server

from ..common.errors import InvalidInput, SimulationCancelled
from ..common.log import configure_logging
from ..common.models import Job, Worker, Result, ProgressEvent, SimulationConfig
from ..common.pool import build_pool, is_preset
from ..common.random_source import RandomSource, default_source, seeded_source
from ..analysis.summary import summarize, retain
from .weights import score_job

logger = logging.getLogger(__name__)

# 0 keeps the one-shot CLI from binding a port
METRICS_PORT = int(os.getenv("LOADSIM_METRICS_PORT", "0"))

ASSIGNMENTS = Counter("loadsim_assignments_total", "Jobs assigned per preset worker, \"custom\" for caller pools", ["worker"])
JOBS = Counter("loadsim_jobs_total", "Jobs scored by outcome", ["status"])
RUN_SECONDS = Histogram("loadsim_run_seconds", "Wall time of a full simulation run (sec)",
                        buckets=(0.01, 0.05, 0.1, 0.5, 1, 2, 5, 10, 30))

JOB_RANGES = {
    "complexity": (1, 10),
    "priority": (1, 5),
    "efficacy": (0, 100),
    "adverse_load": (1, 10),
}

Chunk = Tuple[ProgressEvent, List[Result]]


def validate_inputs(jobs: Sequence[Job], workers: Sequence[Worker], chunk_size: int) -> None:
    """Reject the whole batch up front; nothing is scored if any check fails."""
    if isinstance(chunk_size, bool) or not isinstance(chunk_size, int) or chunk_size <= 0:
        raise InvalidInput(f"chunk size must be a positive integer, got {chunk_size!r}")
    if not workers:
        raise InvalidInput("worker pool is empty")

    seen = set()
    for w in workers:
        if not math.isfinite(w.capacity) or w.capacity <= 0:
            raise InvalidInput(f"worker {w.id}: capacity must be > 0, got {w.capacity}")
        if w.id in seen:
            raise InvalidInput(f"duplicate worker id {w.id}")
        seen.add(w.id)

    seen = set()
    for job in jobs:
        for field, (low, high) in JOB_RANGES.items():
            value = getattr(job, field)
            if not (low <= value <= high):
                raise InvalidInput(f"job {job.id}: {field} must be in [{low}, {high}], got {value}")
        if job.id in seen:
            raise InvalidInput(f"duplicate job id {job.id}")
        seen.add(job.id)


def iter_chunks(items: Sequence, size: int) -> Iterator[Tuple[int, Sequence]]:
    """Contiguous (offset, slice) pairs; the last slice may be shorter."""
    for start in range(0, len(items), size):
        yield start, items[start:start + size]


def simulate(jobs: Sequence[Job], workers: Sequence[Worker], threshold: float, chunk_size: int,
             rng: Optional[RandomSource] = None, cancel=None) -> Iterator[Chunk]:
    """
    Validate, then return a generator that scores one chunk per step and
    yields ``(progress, chunk_results)``.

    ``cancel`` is anything with ``is_set()`` (e.g. ``threading.Event``). It is
    checked before each chunk, never inside one.
    """
    try:
        validate_inputs(jobs, workers, chunk_size)
    except InvalidInput as e:
        logger.warning("rejected batch: %s", e)
        raise
    return _score_chunks(list(jobs), list(workers), threshold, chunk_size, rng or default_source(), cancel)


def _score_chunks(jobs: List[Job], workers: List[Worker], threshold: float, chunk_size: int,
                  rng: RandomSource, cancel) -> Iterator[Chunk]:
    total = len(jobs)
    # caller-chosen ids would add unbounded series to the registry
    preset = is_preset(workers)
    for start, chunk in iter_chunks(jobs, chunk_size):
        if cancel is not None and cancel.is_set():
            raise SimulationCancelled(f"run cancelled after {start} of {total} jobs")

        results = [score_job(job, workers, threshold, rng) for job in chunk]
        for res in results:
            ASSIGNMENTS.labels(res.assigned.worker_id if preset else "custom").inc()
            JOBS.labels(res.status.value).inc()

        end = start + len(chunk)
        event = ProgressEvent(
            message=f"Processed jobs {start + 1}-{end} of {total}",
            percent=end / total * 100,
            processed=end,
            total=total,
        )
        logger.debug(event.message)
        yield event, results


class Deadline:
    """Cancel token that trips once ``seconds`` have passed since construction."""

    def __init__(self, seconds: float):
        self.expires_at = time.monotonic() + seconds

    def is_set(self) -> bool:
        return time.monotonic() >= self.expires_at


def run(jobs: Sequence[Job], workers: Sequence[Worker], threshold: float = 0.85, chunk_size: int = 50,
        rng: Optional[RandomSource] = None,
        on_progress: Optional[Callable[[ProgressEvent], None]] = None,
        cancel=None) -> List[Result]:
    """
    Score and assign every job, in input order.

    Raises:
        InvalidInput: before any chunk runs, if jobs, workers or chunk_size are malformed.
        SimulationCancelled: if ``cancel`` is set between chunks. No partial results are returned.
    """
    chunks = simulate(jobs, workers, threshold, chunk_size, rng, cancel)
    logger.info("simulation started: %d jobs, %d workers, chunk size %d", len(jobs), len(workers), chunk_size)
    t0 = time.time()
    out: List[Result] = []
    for event, results in chunks:
        out.extend(results)
        if on_progress:
            on_progress(event)
    elapsed = time.time() - t0
    RUN_SECONDS.observe(elapsed)
    logger.info("simulation finished: %d results in %.3fs", len(out), elapsed)
    return out


def load_jobs(path: str) -> List[Job]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("jobs", [data])
    return [Job.model_validate(item) for item in data]


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="loadsim", description="Weighted probabilistic load-balancing simulator")
    p.add_argument("jobs", help="JSON file with a list of jobs")
    p.add_argument("--tier", choices=["small", "medium", "large"], help="worker pool preset")
    p.add_argument("--threshold", type=float, help="confidence needed for Completed")
    p.add_argument("--chunk-size", type=int)
    p.add_argument("--seed", type=int)
    p.add_argument("--retain", type=int, help="write only the first N results to --output")
    p.add_argument("--output", help="write results as JSON to this file")
    p.add_argument("--metrics-port", type=int, default=METRICS_PORT, help="0 disables the metrics endpoint")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging()

    overrides = {
        "tier": args.tier, "threshold": args.threshold, "chunk_size": args.chunk_size,
        "seed": args.seed, "retain_limit": args.retain,
    }
    try:
        base = SimulationConfig.from_env().model_dump()
        base.update({k: v for k, v in overrides.items() if v is not None})
        cfg = SimulationConfig(**base)
        jobs = load_jobs(args.jobs)
        workers = build_pool(cfg.tier)
    except (OSError, ValueError) as e:
        # ValueError covers JSONDecodeError, ValidationError and InvalidInput
        logger.error("invalid input: %s", e)
        return 2

    if args.metrics_port:
        try:
            start_http_server(args.metrics_port)
        except OSError as e:
            logger.error("cannot serve metrics on port %d: %s", args.metrics_port, e)
            return 1

    try:
        results = run(jobs, workers, cfg.threshold, cfg.chunk_size, rng=seeded_source(cfg.seed),
                      on_progress=lambda e: logger.info("%s (%.0f%%)", e.message, e.percent))
    except InvalidInput as e:
        logger.error("invalid input: %s", e)
        return 2

    summary = summarize(results, workers, cfg)
    print(summary.model_dump_json(indent=2))
    if args.output:
        kept = retain(results, cfg.retain_limit)
        with open(args.output, "w", encoding="utf-8") as f:
            json.dump([r.model_dump(mode="json") for r in kept], f, indent=2)
        logger.info("wrote %d of %d results to %s", len(kept), len(results), args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
