from __future__ import annotations

import logging
import math
import sys
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from ..models.inputs import ValuationInput
from ..models.snapshot import ValuationLifts, ValuationMethod, ValuationSnapshot
from ..models.stage import STAGE_PROFILES, StageKey, StageProfile

logger = logging.getLogger(__name__)

USD_PER_MILLION = 1_000_000
USD_PER_BILLION = 1_000_000_000

BERKUS_PRE_REVENUE_ARR = 100_000
BERKUS_FACTOR_CAP = 500_000
BERKUS_STRATEGIC_CAP = 300_000
BERKUS_TIMING_CAP = 200_000
BERKUS_LARGE_TAM = 10_000_000_000

MARKET_POTENTIAL_SHARE = 0.05
ARR_SANITY_MULTIPLE = 50


def clamp(value: float, lower: float, upper: float) -> float:
    return min(max(value, lower), upper)


def safe_number(value: Optional[float], fallback: float = 0.0) -> float:
    if value is None or not math.isfinite(value):
        return fallback
    return float(value)


def finite_dollars(value: float) -> float:
    """Cap an overflowed dollar amount at the largest float so snapshots stay JSON-safe."""
    return min(value, sys.float_info.max)


@dataclass(frozen=True)
class NormalizedMetrics:
    arr: float
    arr_usd: float
    tam_usd: float
    monthly_growth: float
    annual_growth: float
    gross_margin: float
    net_retention: float
    burn_multiple: float
    team_strength: float
    differentiation: float

    @property
    def qualitative_score(self) -> float:
        return (self.team_strength + self.differentiation) / 10


def normalize_inputs(inputs: ValuationInput) -> NormalizedMetrics:
    arr = max(safe_number(inputs.arr), 0.0)
    monthly_growth = clamp(safe_number(inputs.monthly_growth), 0, 50)
    return NormalizedMetrics(
        arr=arr,
        arr_usd=arr * USD_PER_MILLION,
        tam_usd=max(safe_number(inputs.tam), 0.1) * USD_PER_BILLION,
        monthly_growth=monthly_growth,
        annual_growth=(1 + monthly_growth / 100) ** 12 - 1,
        gross_margin=clamp(safe_number(inputs.gross_margin), 20, 95),
        net_retention=clamp(safe_number(inputs.net_retention), 50, 180),
        burn_multiple=clamp(safe_number(inputs.burn_multiple), 0, 5),
        team_strength=clamp(safe_number(inputs.team_strength), 1, 5),
        differentiation=clamp(safe_number(inputs.differentiation), 1, 5),
    )


def select_method(stage: StageKey, arr_usd: float) -> ValuationMethod:
    if stage == StageKey.CONCEPT or (stage == StageKey.SEED and arr_usd < BERKUS_PRE_REVENUE_ARR):
        return ValuationMethod.BERKUS
    return ValuationMethod.REVENUE_MULTIPLE


def margin_adjustment(gross_margin: float) -> float:
    if gross_margin < 60:
        return 0.8
    if gross_margin > 80:
        return 1.1
    return 1.0


def retention_adjustment(net_retention: float) -> float:
    if net_retention < 90:
        return 0.85
    if net_retention > 120:
        return 1.15
    return 1.0


def burn_adjustment(burn_multiple: float) -> float:
    if burn_multiple == 0:
        return 1.2
    if burn_multiple < 1:
        return 1.15
    if burn_multiple < 1.5:
        return 1.1
    if burn_multiple < 2:
        return 1.0
    if burn_multiple < 3:
        return 0.9
    return 0.75


def qualitative_adjustment(metrics: NormalizedMetrics) -> float:
    return 0.85 + metrics.qualitative_score * 0.3


@dataclass(frozen=True)
class BranchResult:
    base: float
    revenue_multiple: float
    forward_arr: float
    market_potential: float


class ValuationCalculator:
    def __init__(self, stage_profiles: Mapping[StageKey, StageProfile] = STAGE_PROFILES) -> None:
        self.stage_profiles = stage_profiles

    def run(self, inputs: ValuationInput) -> ValuationSnapshot:
        stage = self.stage_profiles[inputs.stage]
        metrics = normalize_inputs(inputs)
        method = select_method(inputs.stage, metrics.arr_usd)
        logger.debug("Valuing %r at %s using %s", inputs.name, inputs.stage.value, method.value)

        if method == ValuationMethod.BERKUS:
            branch = self._compute_berkus(metrics, stage)
        else:
            branch = self._compute_revenue_multiple(metrics, stage)

        upside, downside = self._compute_spread(metrics)
        return ValuationSnapshot(
            bear=branch.base * (1 - downside),
            base=branch.base,
            bull=branch.base * (1 + upside),
            revenue_multiple=branch.revenue_multiple,
            confidence=self._compute_confidence(metrics),
            forward_arr=branch.forward_arr,
            market_potential=branch.market_potential,
            stage_label=stage.label,
            method=method,
            lifts=ValuationLifts(
                growth=1 + metrics.annual_growth,
                margin=metrics.gross_margin / 100,
                retention=metrics.net_retention / 100,
                burn=metrics.burn_multiple,
                qualitative=metrics.qualitative_score,
            ),
        )

    def _compute_berkus(self, metrics: NormalizedMetrics, stage: StageProfile) -> BranchResult:
        if metrics.arr_usd > 0:
            prototype_share = 0.8
        elif metrics.monthly_growth > 0:
            prototype_share = 0.5
        else:
            prototype_share = 0.2

        idea_value = (metrics.differentiation / 5) * BERKUS_FACTOR_CAP
        prototype_value = prototype_share * BERKUS_FACTOR_CAP
        team_value = (metrics.team_strength / 5) * BERKUS_FACTOR_CAP
        strategic_value = metrics.qualitative_score * BERKUS_STRATEGIC_CAP
        timing_value = (0.7 if metrics.tam_usd > BERKUS_LARGE_TAM else 0.4) * BERKUS_TIMING_CAP

        berkus_total = idea_value + prototype_value + team_value + strategic_value + timing_value
        return BranchResult(
            base=clamp(berkus_total, stage.floor, stage.ceiling),
            revenue_multiple=0.0,
            forward_arr=0.0,
            market_potential=berkus_total * 0.1,
        )

    def _compute_revenue_multiple(self, metrics: NormalizedMetrics, stage: StageProfile) -> BranchResult:
        min_multiple, max_multiple = stage.multiple_min, stage.multiple_max
        growth_score = clamp(metrics.annual_growth / 1.0, 0, 1)
        base_multiple = min_multiple + (max_multiple - min_multiple) * growth_score

        qualitative = qualitative_adjustment(metrics)
        revenue_multiple = clamp(
            base_multiple
            * margin_adjustment(metrics.gross_margin)
            * retention_adjustment(metrics.net_retention)
            * burn_adjustment(metrics.burn_multiple)
            * qualitative,
            min_multiple * 0.5,
            max_multiple * 1.2,
        )

        revenue_valuation = metrics.arr_usd * revenue_multiple
        market_potential = min(
            metrics.tam_usd * stage.tam_capture_rate * qualitative,
            revenue_valuation * MARKET_POTENTIAL_SHARE,
        )

        base = clamp(revenue_valuation + market_potential, stage.floor, stage.ceiling)
        base = min(base, metrics.arr_usd * ARR_SANITY_MULTIPLE)
        return BranchResult(
            base=base,
            revenue_multiple=revenue_multiple,
            forward_arr=finite_dollars(metrics.arr_usd * (1 + metrics.annual_growth)),
            market_potential=market_potential,
        )

    def _compute_spread(self, metrics: NormalizedMetrics) -> Tuple[float, float]:
        upside = clamp(
            0.15 + metrics.annual_growth * 0.15 + ((metrics.differentiation - 3) / 5) * 0.1,
            0.10,
            0.40,
        )
        excess_burn = (metrics.burn_multiple - 2) * 0.08 if metrics.burn_multiple > 2 else 0
        downside = clamp(
            0.15 + excess_burn + ((5 - metrics.team_strength) / 5) * 0.1,
            0.10,
            0.35,
        )
        return upside, downside

    def _compute_confidence(self, metrics: NormalizedMetrics) -> float:
        if metrics.arr_usd > 500_000:
            revenue_bonus = 0.25
        elif metrics.arr_usd > 0:
            revenue_bonus = 0.15
        else:
            revenue_bonus = 0.0
        return clamp(
            0.30
            + revenue_bonus
            + 0.15 * (metrics.net_retention / 150)
            + 0.10 * (metrics.team_strength / 5)
            + 0.10 * (1 - min(metrics.burn_multiple, 3) / 4)
            + 0.10 * (metrics.differentiation / 5),
            0.25,
            0.90,
        )


def compute_valuation(
    inputs: ValuationInput,
    stage_profiles: Mapping[StageKey, StageProfile] = STAGE_PROFILES,
) -> ValuationSnapshot:
    """Value a startup under its stage heuristics.

    Pure and total over numeric inputs: missing, non-finite and out-of-range
    metrics are coerced before use. A stage missing from ``stage_profiles``
    raises ``KeyError``.
    """
    return ValuationCalculator(stage_profiles).run(inputs)
