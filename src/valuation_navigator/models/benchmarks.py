from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .stage import StageKey


class BenchmarkMetric(str, Enum):
    ARR = "arr"
    MONTHLY_GROWTH = "monthly_growth"
    GROSS_MARGIN = "gross_margin"
    NET_RETENTION = "net_retention"
    BURN_MULTIPLE = "burn_multiple"
    TAM = "tam"


class BenchmarkStatus(str, Enum):
    GOOD = "good"
    TYPICAL = "typical"
    WARNING = "warning"
    NEUTRAL = "neutral"


class MetricBenchmark(BaseModel):
    model_config = ConfigDict(frozen=True)

    typical: Tuple[float, float] = Field(..., description="Typical (min, max) range")
    good: float = Field(..., description="Positive signal threshold")
    warning: float = Field(..., description="Concern threshold, negative when not applicable")
    unit: str
    description: str


class StageBenchmarks(BaseModel):
    model_config = ConfigDict(frozen=True)

    arr: MetricBenchmark
    monthly_growth: MetricBenchmark
    gross_margin: MetricBenchmark
    net_retention: MetricBenchmark
    burn_multiple: MetricBenchmark
    tam: MetricBenchmark

    def for_metric(self, metric: BenchmarkMetric) -> MetricBenchmark:
        return getattr(self, metric.value)


STAGE_BENCHMARKS: Mapping[StageKey, StageBenchmarks] = MappingProxyType(
    {
        StageKey.CONCEPT: StageBenchmarks(
            arr=MetricBenchmark(typical=(0, 0.05), good=0, warning=-1, unit="$M", description="Pre-revenue; focus on MVP and validation"),
            monthly_growth=MetricBenchmark(typical=(0, 0), good=0, warning=-1, unit="%", description="N/A for pre-revenue stage"),
            gross_margin=MetricBenchmark(typical=(60, 85), good=70, warning=50, unit="%", description="Target SaaS margins even at concept"),
            net_retention=MetricBenchmark(typical=(80, 100), good=100, warning=80, unit="%", description="Early customer retention assumptions"),
            burn_multiple=MetricBenchmark(typical=(0, 3), good=1.5, warning=3, unit="x", description="Pre-revenue burn is expected"),
            tam=MetricBenchmark(typical=(0.5, 10), good=1, warning=0.3, unit="$B", description="Minimum viable market size"),
        ),
        StageKey.SEED: StageBenchmarks(
            arr=MetricBenchmark(typical=(0, 0.5), good=0.1, warning=0, unit="$M", description="Early revenue traction"),
            monthly_growth=MetricBenchmark(typical=(10, 25), good=15, warning=5, unit="%", description="T2D3 pace: ~15% MoM"),
            gross_margin=MetricBenchmark(typical=(60, 80), good=70, warning=50, unit="%", description="Standard SaaS: 70%+"),
            net_retention=MetricBenchmark(typical=(85, 110), good=100, warning=85, unit="%", description="Early retention signals"),
            burn_multiple=MetricBenchmark(typical=(1, 3), good=1.5, warning=2.5, unit="x", description="<1.5x = efficient growth"),
            tam=MetricBenchmark(typical=(1, 20), good=5, warning=0.5, unit="$B", description="Addressable market potential"),
        ),
        StageKey.SERIES_A: StageBenchmarks(
            arr=MetricBenchmark(typical=(1, 5), good=2, warning=0.5, unit="$M", description="Series A typically requires $1M+ ARR"),
            monthly_growth=MetricBenchmark(typical=(8, 20), good=15, warning=5, unit="%", description="Sustained growth momentum"),
            gross_margin=MetricBenchmark(typical=(65, 85), good=75, warning=60, unit="%", description="Healthy unit economics"),
            net_retention=MetricBenchmark(typical=(100, 130), good=110, warning=90, unit="%", description="Net expansion expected"),
            burn_multiple=MetricBenchmark(typical=(0.5, 2), good=1, warning=2, unit="x", description="<1x = very efficient"),
            tam=MetricBenchmark(typical=(5, 50), good=10, warning=2, unit="$B", description="Large addressable market"),
        ),
        StageKey.SERIES_B: StageBenchmarks(
            arr=MetricBenchmark(typical=(5, 20), good=10, warning=3, unit="$M", description="Scale-up revenue targets"),
            monthly_growth=MetricBenchmark(typical=(5, 15), good=10, warning=3, unit="%", description="Sustainable growth rate"),
            gross_margin=MetricBenchmark(typical=(70, 90), good=80, warning=65, unit="%", description="Mature unit economics"),
            net_retention=MetricBenchmark(typical=(110, 150), good=120, warning=100, unit="%", description="Strong expansion revenue"),
            burn_multiple=MetricBenchmark(typical=(0, 1.5), good=0.8, warning=1.5, unit="x", description="Path to efficiency"),
            tam=MetricBenchmark(typical=(10, 100), good=20, warning=5, unit="$B", description="Proven market opportunity"),
        ),
        StageKey.SERIES_C: StageBenchmarks(
            arr=MetricBenchmark(typical=(20, 100), good=50, warning=15, unit="$M", description="Pre-IPO revenue scale"),
            monthly_growth=MetricBenchmark(typical=(3, 10), good=6, warning=2, unit="%", description="Sustainable at scale"),
            gross_margin=MetricBenchmark(typical=(75, 95), good=85, warning=70, unit="%", description="Best-in-class margins"),
            net_retention=MetricBenchmark(typical=(115, 160), good=130, warning=105, unit="%", description="Enterprise-grade retention"),
            burn_multiple=MetricBenchmark(typical=(0, 1), good=0.5, warning=1, unit="x", description="Near profitability expected"),
            tam=MetricBenchmark(typical=(20, 200), good=50, warning=10, unit="$B", description="Large market validation"),
        ),
    }
)
