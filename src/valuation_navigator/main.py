from __future__ import annotations

import logging
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException, Response
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .models.benchmarks import STAGE_BENCHMARKS, BenchmarkMetric
from .models.inputs import ValuationInput
from .models.saved import SavedValuation, SharedValuationView
from .models.stage import STAGE_PROFILES, StageKey, StageProfile
from .schemas import (
    BenchmarkStatusResponse,
    StageBenchmarksResponse,
    ValuationComputeResponse,
    ValuationCreateRequest,
    ValuationDeleteResponse,
    ValuationImportRequest,
    ValuationImportResponse,
    ValuationListResponse,
    ValuationUpdateRequest,
    ValuationVerifyResponse,
)
from .services.benchmarks import METHODOLOGY, format_benchmark_hint, get_benchmark_status
from .services.calculator import compute_valuation
from .services.insights import compute_insights
from .services.store import InvalidImportError, ValuationNotFoundError, ValuationStore

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.PROJECT_NAME, version=settings.VERSION, debug=settings.DEBUG)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

store = ValuationStore()


def _get_or_404(valuation_id: str) -> SavedValuation:
    try:
        return store.get(valuation_id)
    except ValuationNotFoundError:
        logger.warning("Valuation %s not found", valuation_id)
        raise HTTPException(status_code=404, detail="Valuation not found")


@app.get("/stages", response_model=List[StageProfile])
def list_stages() -> List[StageProfile]:
    return list(STAGE_PROFILES.values())


@app.post("/valuations/compute", response_model=ValuationComputeResponse)
def compute(payload: ValuationInput) -> ValuationComputeResponse:
    snapshot = compute_valuation(payload)
    return ValuationComputeResponse(snapshot=snapshot, insights=compute_insights(payload, snapshot))


@app.post("/valuations", response_model=SavedValuation)
def create_valuation(payload: ValuationCreateRequest) -> SavedValuation:
    return store.create(payload.owner_id, payload.inputs)


@app.get("/valuations", response_model=ValuationListResponse)
def list_valuations(owner_id: str) -> ValuationListResponse:
    return ValuationListResponse(valuations=store.list_by_owner(owner_id))


@app.get("/valuations/export")
def export_valuations(owner_id: Optional[str] = None) -> Response:
    return Response(content=store.export_json(owner_id), media_type="application/json")


@app.post("/valuations/import", response_model=ValuationImportResponse)
def import_valuations(payload: ValuationImportRequest) -> ValuationImportResponse:
    try:
        imported = store.import_json(payload.payload)
    except InvalidImportError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return ValuationImportResponse(imported=imported)


@app.get("/valuations/{valuation_id}", response_model=SavedValuation)
def get_valuation(valuation_id: str) -> SavedValuation:
    return _get_or_404(valuation_id)


@app.put("/valuations/{valuation_id}", response_model=SavedValuation)
def update_valuation(valuation_id: str, payload: ValuationUpdateRequest) -> SavedValuation:
    _get_or_404(valuation_id)
    return store.update(valuation_id, payload.inputs)


@app.delete("/valuations/{valuation_id}", response_model=ValuationDeleteResponse)
def delete_valuation(valuation_id: str) -> ValuationDeleteResponse:
    if not store.delete(valuation_id):
        raise HTTPException(status_code=404, detail="Valuation not found")
    return ValuationDeleteResponse(deleted=True)


@app.get("/valuations/{valuation_id}/verify", response_model=ValuationVerifyResponse)
def verify_valuation(valuation_id: str) -> ValuationVerifyResponse:
    record = _get_or_404(valuation_id)
    return ValuationVerifyResponse(valuation_id=valuation_id, consistent=store.verify(record))


@app.get("/shared/{valuation_id}", response_model=SharedValuationView)
def shared_valuation(valuation_id: str) -> SharedValuationView:
    _get_or_404(valuation_id)
    return store.share(valuation_id)


@app.get("/benchmarks/{stage}", response_model=StageBenchmarksResponse)
def stage_benchmarks(stage: StageKey) -> StageBenchmarksResponse:
    hints = {metric: format_benchmark_hint(stage, metric) for metric in BenchmarkMetric}
    return StageBenchmarksResponse(stage=stage, benchmarks=STAGE_BENCHMARKS[stage], hints=hints)


@app.get("/benchmarks/{stage}/{metric}", response_model=BenchmarkStatusResponse)
def benchmark_status(stage: StageKey, metric: str, value: float) -> BenchmarkStatusResponse:
    try:
        benchmark_metric = BenchmarkMetric(metric)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown metric {metric}")
    return BenchmarkStatusResponse(
        stage=stage,
        metric=benchmark_metric,
        value=value,
        status=get_benchmark_status(stage, benchmark_metric, value),
        hint=format_benchmark_hint(stage, benchmark_metric),
    )


@app.get("/methodology")
def methodology() -> Dict[str, dict]:
    return METHODOLOGY


@app.get("/health")
def healthcheck() -> Dict[str, str]:
    return {"status": "ok"}
