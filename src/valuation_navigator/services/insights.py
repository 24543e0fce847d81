from __future__ import annotations

import math
from typing import List, Mapping

from ..models.inputs import ValuationInput
from ..models.snapshot import ValuationMethod, ValuationSnapshot
from ..models.stage import STAGE_PROFILES, StageKey, StageProfile
from .calculator import NormalizedMetrics, normalize_inputs

MAX_INSIGHTS = 4
SERIES_A_ARR_TARGET = 1_000_000

_COMPACT_UNITS = [(1e12, "T"), (1e9, "B"), (1e6, "M"), (1e3, "K")]
_MAX_GROUPED_TRILLIONS = 1e6


def _round_half_up(value: float, digits: int = 0) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def _trim(value: float) -> str:
    if value >= _MAX_GROUPED_TRILLIONS:
        return f"{value:.2g}"
    return f"{value:,.1f}".rstrip("0").rstrip(".")


def format_compact_currency(value: float) -> str:
    """Render USD in US compact notation, e.g. ``$62.1M``. Negative values render as ``$0``."""
    if not math.isfinite(value):
        return "$∞" if value > 0 else "$0"
    amount = _round_half_up(max(value, 0.0))
    for index, (scale, suffix) in enumerate(_COMPACT_UNITS):
        if amount < scale:
            continue
        scaled = _round_half_up(amount / scale, 1)
        if scaled >= 1000 and index > 0:
            scale, suffix = _COMPACT_UNITS[index - 1]
            scaled = _round_half_up(amount / scale, 1)
        return f"${_trim(scaled)}{suffix}"
    return f"${amount:.0f}"


def _context_insight(name: str, metrics: NormalizedMetrics, snapshot: ValuationSnapshot, stage: StageProfile) -> str:
    if snapshot.method == ValuationMethod.BERKUS:
        return (
            f"{name} at {snapshot.stage_label} stage is valued using the Berkus Method. "
            f"Team strength ({metrics.team_strength:.1f}/5) and product moat ({metrics.differentiation:.1f}/5) "
            f"are the primary value drivers at this pre-revenue stage. Typical range: {stage.typical_range}."
        )
    return (
        f"{name} commands a {snapshot.revenue_multiple:.1f}x ARR multiple, "
        f"reflecting {metrics.annual_growth * 100:.0f}% annual growth and {metrics.gross_margin:.0f}% gross margins. "
        f"Typical {snapshot.stage_label} range: {stage.typical_range}."
    )


def _growth_insight(name: str, metrics: NormalizedMetrics, snapshot: ValuationSnapshot) -> str:
    if metrics.arr_usd > 0:
        return (
            f"At {metrics.monthly_growth:.1f}% MoM growth, {name} projects "
            f"{format_compact_currency(snapshot.forward_arr)} ARR in 12 months, a "
            f"{metrics.annual_growth * 100:.0f}% year-over-year increase."
        )
    return (
        f"Without recurring revenue, {name} should focus on achieving product-market fit "
        f"and first revenue milestones to unlock higher valuations in subsequent rounds."
    )


def _efficiency_insight(metrics: NormalizedMetrics, snapshot: ValuationSnapshot) -> str:
    burn = metrics.burn_multiple
    if burn == 0:
        return (
            "✅ Profitable or cash-flow positive status is highly attractive to investors, "
            "providing optionality and reducing dilution risk. This adds a ~20% valuation premium."
        )
    if burn > 3:
        return (
            f"⚠️ Burn multiple of {burn:.1f}x signals capital inefficiency. "
            f"Reducing to <2x could improve valuation by 15-25% and extend runway significantly."
        )
    if burn < 1.5 and metrics.arr_usd > 0:
        return (
            f"✅ Efficient burn multiple of {burn:.1f}x demonstrates strong unit economics, "
            f"positively impacting the valuation multiple and investor confidence."
        )
    if metrics.net_retention < 90:
        return (
            f"⚠️ Net retention at {metrics.net_retention:.0f}% indicates significant churn concerns. "
            f"Best-in-class SaaS targets 110%+ NRR. Focus on customer success and product stickiness."
        )
    if metrics.gross_margin < 50:
        return (
            f"⚠️ Gross margin of {metrics.gross_margin:.0f}% is below SaaS benchmarks (70%+). "
            f"Consider pricing optimization or cost structure improvements to improve unit economics."
        )
    downside = max(0.0, 1 - snapshot.bear / max(snapshot.base, 1))
    return (
        f"Bear case of {format_compact_currency(snapshot.bear)} reflects {downside * 100:.0f}% downside risk, "
        f"accounting for execution risk and market conditions."
    )


def _advancement_insight(stage: StageKey, metrics: NormalizedMetrics) -> str | None:
    if stage == StageKey.CONCEPT:
        return (
            "To progress to Seed, focus on: MVP development, initial customer discovery, "
            "and demonstrating founder-market fit. Target: $50K-$500K in early revenue signals."
        )
    if stage == StageKey.SEED and metrics.arr_usd < 500_000:
        gap = max(0.0, SERIES_A_ARR_TARGET - metrics.arr_usd)
        return (
            f"Series A readiness typically requires $1M+ ARR with 15%+ MoM growth. "
            f"Current gap: {format_compact_currency(gap)} in ARR."
        )
    if stage == StageKey.SERIES_A and metrics.net_retention > 110:
        return (
            f"Strong NRR of {metrics.net_retention:.0f}% supports expansion-driven growth, a key "
            f"Series B readiness indicator alongside $5M+ ARR target."
        )
    return None


def compute_insights(
    inputs: ValuationInput,
    snapshot: ValuationSnapshot,
    stage_profiles: Mapping[StageKey, StageProfile] = STAGE_PROFILES,
) -> List[str]:
    stage = stage_profiles[inputs.stage]
    metrics = normalize_inputs(inputs)
    name = inputs.name.strip() or "This startup"

    insights = [
        _context_insight(name, metrics, snapshot, stage),
        _growth_insight(name, metrics, snapshot),
        _efficiency_insight(metrics, snapshot),
    ]
    advancement = _advancement_insight(inputs.stage, metrics)
    if advancement is not None:
        insights.append(advancement)
    return insights[:MAX_INSIGHTS]
