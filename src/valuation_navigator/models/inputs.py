from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from .stage import StageKey


class ValuationInput(BaseModel):
    """Raw calculator inputs. Numeric fields are normalized by the engine, not validated here."""

    name: str = Field("", description="Company name, may be empty")
    stage: StageKey
    arr: Optional[float] = Field(None, description="Annual recurring revenue in USD millions")
    monthly_growth: Optional[float] = Field(None, description="Month-over-month revenue growth in percent")
    tam: Optional[float] = Field(None, description="Total addressable market in USD billions")
    gross_margin: Optional[float] = Field(None, description="Gross margin in percent")
    net_retention: Optional[float] = Field(None, description="Net revenue retention in percent")
    burn_multiple: Optional[float] = Field(None, description="Net burn divided by net new ARR, 0 when profitable")
    team_strength: Optional[float] = Field(None, description="Team score from 1 to 5")
    differentiation: Optional[float] = Field(None, description="Product moat score from 1 to 5")
