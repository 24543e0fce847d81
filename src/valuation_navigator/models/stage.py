from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field


class StageKey(str, Enum):
    CONCEPT = "concept"
    SEED = "seed"
    SERIES_A = "seriesA"
    SERIES_B = "seriesB"
    SERIES_C = "seriesC"


class StageProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: StageKey
    label: str
    floor: float = Field(..., description="Minimum base valuation in USD")
    ceiling: float = Field(..., description="Maximum base valuation in USD")
    multiple_min: float = Field(0.0, description="Lower bound of the ARR multiple range")
    multiple_max: float = Field(0.0, description="Upper bound of the ARR multiple range")
    typical_range: str
    tam_capture_rate: float = Field(0.0002, description="Share of TAM credited as market potential")


STAGE_PROFILES: Mapping[StageKey, StageProfile] = MappingProxyType(
    {
        StageKey.CONCEPT: StageProfile(
            key=StageKey.CONCEPT,
            label="Concept / Pre-seed",
            floor=250_000,
            ceiling=2_500_000,
            multiple_min=0,
            multiple_max=0,
            typical_range="$250K - $2M",
        ),
        StageKey.SEED: StageProfile(
            key=StageKey.SEED,
            label="Seed / MVP",
            floor=1_000_000,
            ceiling=10_000_000,
            multiple_min=8,
            multiple_max=15,
            typical_range="$2M - $10M",
        ),
        StageKey.SERIES_A: StageProfile(
            key=StageKey.SERIES_A,
            label="Series A",
            floor=10_000_000,
            ceiling=80_000_000,
            multiple_min=10,
            multiple_max=25,
            typical_range="$15M - $60M",
        ),
        StageKey.SERIES_B: StageProfile(
            key=StageKey.SERIES_B,
            label="Series B",
            floor=40_000_000,
            ceiling=250_000_000,
            multiple_min=8,
            multiple_max=18,
            typical_range="$50M - $200M",
            tam_capture_rate=0.0005,
        ),
        StageKey.SERIES_C: StageProfile(
            key=StageKey.SERIES_C,
            label="Series C+",
            floor=100_000_000,
            ceiling=1_000_000_000,
            multiple_min=6,
            multiple_max=15,
            typical_range="$150M+",
            tam_capture_rate=0.001,
        ),
    }
)
