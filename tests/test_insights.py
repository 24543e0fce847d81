from __future__ import annotations

import sys

import pytest

from valuation_navigator.models.inputs import ValuationInput
from valuation_navigator.models.stage import StageKey
from valuation_navigator.sample_data import build_sample_concept, build_sample_series_a
from valuation_navigator.services.calculator import compute_valuation
from valuation_navigator.services.insights import compute_insights, format_compact_currency


def _insights_for(inputs: ValuationInput):
    return compute_insights(inputs, compute_valuation(inputs))


def _series_b(**overrides) -> ValuationInput:
    values = dict(
        name="Scale Co",
        stage=StageKey.SERIES_B,
        arr=10,
        monthly_growth=5,
        tam=20,
        gross_margin=70,
        net_retention=100,
        burn_multiple=2,
        team_strength=3,
        differentiation=3,
    )
    values.update(overrides)
    return ValuationInput(**values)


@pytest.mark.parametrize(
    "value, expected",
    [
        (62_130_000, "$62.1M"),
        (1_000_000, "$1M"),
        (500_000, "$500K"),
        (999_960, "$1M"),
        (2_500_000_000, "$2.5B"),
        (950, "$950"),
        (-5, "$0"),
        (1e15, "$1,000T"),
        (sys.float_info.max, "$1.8e+296T"),
        (float("inf"), "$∞"),
        (float("nan"), "$0"),
    ],
)
def test_format_compact_currency(value, expected):
    assert format_compact_currency(value) == expected


def test_concept_insights_cover_all_four_slots():
    insights = _insights_for(build_sample_concept())

    assert len(insights) == 4
    assert insights[0].startswith("Moonshot Labs at Concept / Pre-seed stage is valued using the Berkus Method.")
    assert "Team strength (5.0/5)" in insights[0]
    assert "Typical range: $250K - $2M." in insights[0]
    assert insights[1].startswith("Without recurring revenue, Moonshot Labs")
    assert insights[2] == (
        "Bear case of $1.3M reflects 15% downside risk, accounting for execution risk and market conditions."
    )
    assert insights[3].startswith("To progress to Seed")


def test_series_a_insights_describe_multiple_and_growth():
    insights = _insights_for(build_sample_series_a())

    assert len(insights) == 3
    assert insights[0].startswith("Acme Analytics commands a 30.0x ARR multiple, reflecting 435% annual growth")
    assert "75% gross margins" in insights[0]
    assert "$10.7M ARR in 12 months" in insights[1]
    assert insights[2].startswith("✅ Efficient burn multiple of 1.0x")


def test_blank_name_falls_back_to_generic_subject():
    insights = _insights_for(_series_b(name="   "))

    assert insights[0].startswith("This startup commands")


def test_profitable_observation_takes_priority():
    insights = _insights_for(_series_b(burn_multiple=0, net_retention=60, gross_margin=30))

    assert insights[2].startswith("✅ Profitable or cash-flow positive status")


def test_high_burn_warning_precedes_retention_warning():
    insights = _insights_for(_series_b(burn_multiple=4, net_retention=60))

    assert insights[2].startswith("⚠️ Burn multiple of 4.0x signals capital inefficiency.")


def test_efficient_burn_requires_revenue():
    inputs = ValuationInput(
        stage=StageKey.CONCEPT, burn_multiple=1, net_retention=80, gross_margin=70, team_strength=3, differentiation=3
    )
    insights = _insights_for(inputs)

    assert insights[2].startswith("⚠️ Net retention at 80% indicates significant churn concerns.")


def test_low_margin_warning():
    insights = _insights_for(_series_b(gross_margin=40))

    assert insights[2].startswith("⚠️ Gross margin of 40% is below SaaS benchmarks (70%+).")


def test_seed_with_little_revenue_gets_series_a_gap():
    inputs = ValuationInput(
        stage=StageKey.SEED, arr=0.2, monthly_growth=10, tam=5, gross_margin=70, net_retention=100,
        burn_multiple=2, team_strength=3, differentiation=3,
    )
    insights = _insights_for(inputs)

    assert len(insights) == 4
    assert insights[3].endswith("Current gap: $800K in ARR.")


def test_series_a_with_strong_retention_gets_readiness_note():
    inputs = build_sample_series_a().model_copy(update={"net_retention": 120})
    insights = _insights_for(inputs)

    assert len(insights) == 4
    assert insights[3].startswith("Strong NRR of 120% supports expansion-driven growth")


def test_late_stage_has_no_advancement_note():
    assert len(_insights_for(_series_b())) == 3


def test_overflowing_forward_arr_still_renders():
    inputs = _series_b(arr=1e304, monthly_growth=5)
    snapshot = compute_valuation(inputs)
    insights = compute_insights(inputs, snapshot)

    assert snapshot.forward_arr == sys.float_info.max
    assert "$1.8e+296T ARR in 12 months" in insights[1]
