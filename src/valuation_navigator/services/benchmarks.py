from __future__ import annotations

from typing import Dict

from ..models.benchmarks import STAGE_BENCHMARKS, BenchmarkMetric, BenchmarkStatus
from ..models.stage import StageKey

_HINT_LABELS: Dict[StageKey, str] = {
    StageKey.CONCEPT: "Pre-seed",
    StageKey.SEED: "Seed",
    StageKey.SERIES_A: "Series A",
    StageKey.SERIES_B: "Series B",
    StageKey.SERIES_C: "Series C+",
}


def _number(value: float) -> str:
    return f"{value:g}"


def get_benchmark_status(stage: StageKey, metric: BenchmarkMetric, value: float) -> BenchmarkStatus:
    benchmarks = STAGE_BENCHMARKS.get(stage)
    if benchmarks is None:
        return BenchmarkStatus.NEUTRAL
    benchmark = benchmarks.for_metric(metric)

    # burn multiple is the only metric where lower is better
    if metric == BenchmarkMetric.BURN_MULTIPLE:
        if value <= benchmark.good:
            return BenchmarkStatus.GOOD
        if value >= benchmark.warning:
            return BenchmarkStatus.WARNING
        return BenchmarkStatus.TYPICAL

    if value >= benchmark.good:
        return BenchmarkStatus.GOOD
    if value <= benchmark.warning and benchmark.warning > 0:
        return BenchmarkStatus.WARNING
    low, high = benchmark.typical
    if low <= value <= high:
        return BenchmarkStatus.TYPICAL
    return BenchmarkStatus.NEUTRAL


def format_benchmark_hint(stage: StageKey, metric: BenchmarkMetric) -> str:
    benchmarks = STAGE_BENCHMARKS.get(stage)
    if benchmarks is None:
        return ""
    benchmark = benchmarks.for_metric(metric)
    label = _HINT_LABELS[stage]
    low, high = (_number(bound) for bound in benchmark.typical)

    if metric == BenchmarkMetric.ARR:
        if stage == StageKey.CONCEPT:
            return f"{label}: Pre-revenue typical"
        return f"Typical {label}: ${low}M-${high}M ARR"
    if metric == BenchmarkMetric.MONTHLY_GROWTH:
        if stage == StageKey.CONCEPT:
            return f"{label}: Focus on validation"
        return f"Typical {label}: {low}-{high}% MoM"
    if metric == BenchmarkMetric.BURN_MULTIPLE:
        return f"{label}: {low}-{high}x typical, <{_number(benchmark.good)}x = efficient"
    return f"Typical {label}: {low}-{high}{benchmark.unit}"


METHODOLOGY = {
    "berkus": {
        "name": "Berkus Method",
        "stages": ["concept", "seed (pre-revenue)"],
        "description": (
            "The Berkus Method assigns value to five key risk-reduction factors for pre-revenue startups. "
            "Each factor can add up to $500K to the valuation, with a maximum of ~$2.5M for exceptional "
            "early-stage companies."
        ),
        "factors": [
            {"name": "Sound Idea / IP", "max_value": "$500K", "driver": "Product Moat score"},
            {"name": "Prototype / MVP", "max_value": "$500K", "driver": "Stage & early traction"},
            {"name": "Quality Team", "max_value": "$500K", "driver": "Team Strength score"},
            {"name": "Strategic Relationships", "max_value": "$300K", "driver": "Team + Moat combined"},
            {"name": "Market Timing", "max_value": "$200K", "driver": "TAM size"},
        ],
        "formula": "Valuation = Idea + Prototype + Team + Strategic + Timing (each capped)",
    },
    "revenue_multiple": {
        "name": "Revenue Multiple Method",
        "stages": ["seed (with revenue)", "seriesA", "seriesB", "seriesC"],
        "description": (
            "For revenue-generating startups, valuation is primarily driven by ARR x a growth-adjusted multiple. "
            "The multiple is calibrated based on growth rate, margins, retention, and burn efficiency."
        ),
        "factors": [
            {"name": "Base Multiple", "driver": "Stage-specific range (e.g., 10-25x for Series A)"},
            {"name": "Growth Adjustment", "driver": "Annual growth rate (from MoM)"},
            {"name": "Margin Adjustment", "driver": "Gross margin vs. 70% SaaS benchmark"},
            {"name": "Retention Adjustment", "driver": "NRR vs. 100% baseline"},
            {"name": "Burn Adjustment", "driver": "Burn multiple (0 = profitable = premium)"},
            {"name": "Qualitative Adjustment", "driver": "Team + Moat scores (±15%)"},
        ],
        "formula": "Valuation = ARR x (Base Multiple x Adjustments)",
    },
}
