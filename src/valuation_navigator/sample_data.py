from __future__ import annotations

from .models.inputs import ValuationInput
from .models.stage import StageKey


def build_default_inputs() -> ValuationInput:
    return ValuationInput(
        name="",
        stage=StageKey.SEED,
        arr=0,
        monthly_growth=0,
        tam=1,
        gross_margin=70,
        net_retention=100,
        burn_multiple=2,
        team_strength=3,
        differentiation=3,
    )


def build_sample_series_a() -> ValuationInput:
    return ValuationInput(
        name="Acme Analytics",
        stage=StageKey.SERIES_A,
        arr=2,
        monthly_growth=15,
        tam=10,
        gross_margin=75,
        net_retention=110,
        burn_multiple=1,
        team_strength=4,
        differentiation=4,
    )


def build_sample_concept() -> ValuationInput:
    return ValuationInput(
        name="Moonshot Labs",
        stage=StageKey.CONCEPT,
        arr=0,
        monthly_growth=0,
        tam=20,
        gross_margin=70,
        net_retention=100,
        burn_multiple=2,
        team_strength=5,
        differentiation=5,
    )
