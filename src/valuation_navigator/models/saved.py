from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from .inputs import ValuationInput
from .snapshot import ValuationSnapshot
from .stage import StageKey


class SavedValuation(BaseModel):
    id: str
    owner_id: str
    company_name: str
    stage: StageKey
    created_at: datetime
    updated_at: Optional[datetime] = None
    inputs: ValuationInput
    snapshot: ValuationSnapshot
    insights: List[str] = Field(default_factory=list)


class SharedValuationView(BaseModel):
    id: str
    company_name: str
    stage: StageKey
    created_at: datetime
    inputs: ValuationInput
    snapshot: ValuationSnapshot
    insights: List[str]
