from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class ValuationMethod(str, Enum):
    BERKUS = "berkus"
    REVENUE_MULTIPLE = "revenue_multiple"


class ValuationLifts(BaseModel):
    model_config = ConfigDict(frozen=True)

    growth: float
    margin: float
    retention: float
    burn: float
    qualitative: float


class ValuationSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    bear: float
    base: float
    bull: float
    revenue_multiple: float
    confidence: float
    forward_arr: float
    market_potential: float
    stage_label: str
    method: ValuationMethod
    lifts: ValuationLifts
