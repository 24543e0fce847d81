from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, Field

from .models.benchmarks import BenchmarkMetric, BenchmarkStatus, StageBenchmarks
from .models.inputs import ValuationInput
from .models.saved import SavedValuation
from .models.snapshot import ValuationSnapshot
from .models.stage import StageKey


class ValuationComputeResponse(BaseModel):
    snapshot: ValuationSnapshot
    insights: List[str]


class ValuationCreateRequest(BaseModel):
    owner_id: str = Field(..., description="Opaque owner identifier supplied by the caller")
    inputs: ValuationInput


class ValuationUpdateRequest(BaseModel):
    inputs: ValuationInput


class ValuationListResponse(BaseModel):
    valuations: List[SavedValuation]


class ValuationDeleteResponse(BaseModel):
    deleted: bool


class ValuationVerifyResponse(BaseModel):
    valuation_id: str
    consistent: bool


class ValuationImportRequest(BaseModel):
    payload: str = Field(..., description="JSON array produced by the export endpoint")


class ValuationImportResponse(BaseModel):
    imported: int


class StageBenchmarksResponse(BaseModel):
    stage: StageKey
    benchmarks: StageBenchmarks
    hints: Dict[BenchmarkMetric, str]


class BenchmarkStatusResponse(BaseModel):
    stage: StageKey
    metric: BenchmarkMetric
    value: float
    status: BenchmarkStatus
    hint: str
