import os
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Dict, List, Tuple


class Status(str, Enum):
    COMPLETED = "Completed"
    NEEDS_REVIEW = "NeedsReview"


class Job(BaseModel):
    """One unit of work to route. Never mutated by the simulator."""
    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    id: str
    name: str
    complexity: int = Field(description="1..10, used as a divisor")
    priority: int = Field(description="1..5")
    efficacy: float = Field(description="0..100")
    adverse_load: int = Field(description="1..10")
    description: str = ""


class Worker(BaseModel):
    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    id: str
    capacity: float = Field(description="relative throughput weight, > 0")
    label: str = Field(default="", description="free-form class, e.g. small | medium | large")


class WeightedCandidate(BaseModel):
    model_config = ConfigDict(frozen=True)

    worker_id: str
    weight: float
    capacity: float
    probability: float = 0.0


class Result(BaseModel):
    model_config = ConfigDict(frozen=True)

    job: Job
    fitness: float
    confidence: float
    candidates: Tuple[WeightedCandidate, ...]
    assigned: WeightedCandidate
    status: Status


class ProgressEvent(BaseModel):
    message: str
    percent: float = Field(ge=0, le=100)
    processed: int
    total: int


def _env_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    return int(raw) if raw not in (None, "") else None


class SimulationConfig(BaseModel):
    threshold: float = Field(default=0.85, description="confidence needed for Completed; not range-checked")
    chunk_size: int = Field(default=50, ge=1)
    tier: str = Field(default="medium", pattern="^(small|medium|large)$")
    seed: Optional[int] = None
    retain_limit: Optional[int] = Field(default=None, ge=0, description="opt-in truncation of returned results")

    @classmethod
    def from_env(cls) -> "SimulationConfig":
        return cls(
            threshold=float(os.getenv("LOADSIM_CONFIDENCE_THRESHOLD", "0.85")),
            chunk_size=int(os.getenv("LOADSIM_CHUNK_SIZE", "50")),
            tier=os.getenv("LOADSIM_CAPACITY_TIER", "medium"),
            seed=_env_int("LOADSIM_SEED"),
            retain_limit=_env_int("LOADSIM_RETAIN_LIMIT"),
        )


class SimulateRequest(BaseModel):
    jobs: List[Job]
    workers: Optional[List[Worker]] = Field(default=None, description="defaults to the preset pool for tier")
    tier: Optional[str] = Field(default=None, pattern="^(small|medium|large)$")
    threshold: Optional[float] = None
    chunk_size: Optional[int] = Field(default=None, ge=1)
    seed: Optional[int] = None
    retain: Optional[int] = Field(default=None, ge=0)
    deadline_sec: Optional[float] = Field(default=None, ge=0, description="cancel the run between chunks once exceeded")


class RunSummary(BaseModel):
    total: int
    completed: int
    needs_review: int
    mean_fitness: float
    mean_confidence: float
    fitness_buckets: Dict[str, int]
    priority_counts: Dict[str, int]
    worker_counts: Dict[str, int]
    high_priority: int
    config: Optional[SimulationConfig] = None
