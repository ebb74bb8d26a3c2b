import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from prometheus_client import Counter, generate_latest, CONTENT_TYPE_LATEST
from typing import Dict, Any, List

from ..common.errors import InvalidInput, SimulationCancelled
from ..common.log import configure_logging
from ..common.models import SimulateRequest, SimulationConfig, ProgressEvent, Worker
from ..common.pool import build_pool
from ..common.random_source import seeded_source
from ..analysis.summary import summarize, retain
from ..scheduler.main import Deadline, run

logger = logging.getLogger(__name__)

app = FastAPI(title="loadsim API")

RUNS_REQUESTED = Counter("loadsim_runs_requested_total", "Simulation runs requested over HTTP")
RUNS_REJECTED = Counter("loadsim_runs_rejected_total", "Simulation runs rejected as invalid")


@app.exception_handler(InvalidInput)
async def invalid_input_handler(request: Request, exc: InvalidInput) -> JSONResponse:
    RUNS_REJECTED.inc()
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(SimulationCancelled)
async def cancelled_handler(request: Request, exc: SimulationCancelled) -> JSONResponse:
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.get("/healthz")
def health():
    return {"ok": True}


@app.get("/pools/{tier}")
def pool(tier: str) -> List[Worker]:
    return build_pool(tier)


@app.post("/simulate")
def simulate(req: SimulateRequest) -> Dict[str, Any]:
    RUNS_REQUESTED.inc()
    defaults = SimulationConfig.from_env()
    cfg = SimulationConfig(
        threshold=req.threshold if req.threshold is not None else defaults.threshold,
        chunk_size=req.chunk_size or defaults.chunk_size,
        tier=req.tier or defaults.tier,
        seed=req.seed if req.seed is not None else defaults.seed,
        retain_limit=req.retain if req.retain is not None else defaults.retain_limit,
    )
    workers = req.workers if req.workers is not None else build_pool(cfg.tier)

    cancel = Deadline(req.deadline_sec) if req.deadline_sec is not None else None

    progress: List[ProgressEvent] = []
    results = run(req.jobs, workers, cfg.threshold, cfg.chunk_size,
                  rng=seeded_source(cfg.seed), on_progress=progress.append, cancel=cancel)
    return {
        "summary": summarize(results, workers, cfg).model_dump(mode="json"),
        "results": [r.model_dump(mode="json") for r in retain(results, cfg.retain_limit)],
        "progress": [p.model_dump() for p in progress],
    }


@app.get("/metrics")
def metrics():
    return PlainTextResponse(generate_latest().decode("utf-8"), media_type=CONTENT_TYPE_LATEST)


if __name__ == "__main__":
    import uvicorn
    configure_logging()
    uvicorn.run(app, host="0.0.0.0", port=8000)
