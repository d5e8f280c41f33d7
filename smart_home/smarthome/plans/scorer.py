"""Plan comparison and recommendation scoring. Pure, no I/O."""

from __future__ import annotations

import math

from smarthome.engine.errors import InvalidUsageValue, PlanNotFound
from smarthome.numeric import round_half_up
from smarthome.plans.models import (
    ElectricityPlan,
    PlanComparison,
    PlanPreferences,
    PlanStatistics,
    SwitchingSavings,
)

DEFAULT_MONTHLY_USAGE_KWH = 400.0
# SP Group regulated tariff
DEFAULT_CURRENT_RATE = 0.3242
RECOMMENDATION_LIMIT = 5
SWITCHING_COST = 50.0

BASE_SCORE = 50.0
MAX_SAVINGS_BONUS = 30.0
# Savings percentage that earns the full savings bonus
FULL_BONUS_SAVINGS_PCT = 20.0
MAX_RENEWABLE_BONUS = 20.0
CONTRACT_FIT_BONUS = 20.0
CONTRACT_MISFIT_PENALTY = 10.0
NO_TERMINATION_FEE_BONUS = 10.0
NO_TERMINATION_FEE_MARKER = "no early termination"


def _validate_positive(value: float, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidUsageValue(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value) or value <= 0:
        raise InvalidUsageValue(f"{name} must be a finite positive number, got {value!r}")
    return float(value)


def score_plan(
    plan: ElectricityPlan,
    savings_vs_current: float,
    savings_percentage: float,
    preferences: PlanPreferences,
) -> int:
    """Return the clamped 0-100 recommendation score for one plan."""
    score = BASE_SCORE

    if savings_vs_current > 0:
        score += min(
            MAX_SAVINGS_BONUS,
            savings_percentage / FULL_BONUS_SAVINGS_PCT * MAX_SAVINGS_BONUS,
        )

    if preferences.prefer_renewable:
        score += plan.renewable_percentage / 100 * MAX_RENEWABLE_BONUS

    if preferences.max_contract_length is not None:
        if plan.contract_length <= preferences.max_contract_length:
            score += CONTRACT_FIT_BONUS
        else:
            score -= CONTRACT_MISFIT_PENALTY

    if NO_TERMINATION_FEE_MARKER in plan.additional_fees.lower():
        score += NO_TERMINATION_FEE_BONUS

    return int(min(100.0, max(0.0, round_half_up(score))))


def _sort_key(comparison: PlanComparison) -> tuple[int, float, int]:
    # Highest score first; ties go to the cheaper rate, then the lower id.
    return (-comparison.recommendation_score, comparison.rate_per_kwh, comparison.id)


def compare_plans(
    plans: list[ElectricityPlan],
    monthly_usage_kwh: float = DEFAULT_MONTHLY_USAGE_KWH,
    current_rate: float = DEFAULT_CURRENT_RATE,
    preferences: PlanPreferences | None = None,
) -> list[PlanComparison]:
    """Project costs for every plan and rank them by recommendation score."""
    usage = _validate_positive(monthly_usage_kwh, "monthly_usage_kwh")
    rate = _validate_positive(current_rate, "current_rate")
    prefs = preferences or PlanPreferences()

    current_monthly_cost = usage * rate
    comparisons: list[PlanComparison] = []
    for plan in plans:
        monthly_cost = usage * plan.rate_per_kwh
        # Annual is twelve of the reported (rounded) monthly figures.
        rounded_monthly = round_half_up(monthly_cost, 2)
        annual_cost = round_half_up(rounded_monthly * 12, 2)
        savings_vs_current = current_monthly_cost - monthly_cost
        if current_monthly_cost == 0:
            savings_percentage = 0.0
        else:
            savings_percentage = savings_vs_current / current_monthly_cost * 100

        comparisons.append(
            PlanComparison(
                **plan.model_dump(),
                monthly_cost=rounded_monthly,
                annual_cost=annual_cost,
                savings_vs_current=round_half_up(savings_vs_current, 2),
                savings_percentage=round_half_up(savings_percentage, 1),
                recommendation_score=score_plan(
                    plan, savings_vs_current, savings_percentage, prefs,
                ),
            )
        )

    comparisons.sort(key=_sort_key)
    return comparisons


def recommend_plans(
    plans: list[ElectricityPlan],
    monthly_usage_kwh: float = DEFAULT_MONTHLY_USAGE_KWH,
    preferences: PlanPreferences | None = None,
    limit: int = RECOMMENDATION_LIMIT,
) -> list[PlanComparison]:
    """Top plans against the regulated tariff."""
    return compare_plans(
        plans, monthly_usage_kwh, DEFAULT_CURRENT_RATE, preferences,
    )[:limit]


def switching_savings(
    plans: list[ElectricityPlan],
    monthly_usage_kwh: float,
    current_rate: float,
    plan_id: int,
    switching_cost: float = SWITCHING_COST,
) -> SwitchingSavings:
    """Annual savings and payback period for moving to *plan_id*."""
    usage = _validate_positive(monthly_usage_kwh, "monthly_usage_kwh")
    rate = _validate_positive(current_rate, "current_rate")

    plan = next((p for p in plans if p.id == plan_id), None)
    if plan is None:
        raise PlanNotFound(plan_id)

    current_annual_cost = usage * rate * 12
    new_annual_cost = usage * plan.rate_per_kwh * 12
    annual_savings = current_annual_cost - new_annual_cost

    payback_months = 0
    if annual_savings > 0:
        payback_months = math.ceil(switching_cost / (annual_savings / 12))

    return SwitchingSavings(
        current_annual_cost=round_half_up(current_annual_cost, 2),
        new_annual_cost=round_half_up(new_annual_cost, 2),
        annual_savings=round_half_up(annual_savings, 2),
        payback_period_months=payback_months,
    )


def plan_statistics(plans: list[ElectricityPlan]) -> PlanStatistics:
    """Summary figures over the catalog."""
    if not plans:
        return PlanStatistics()

    rates = [p.rate_per_kwh for p in plans]
    return PlanStatistics(
        total_plans=len(plans),
        providers=len({p.provider for p in plans}),
        average_rate=round_half_up(sum(rates) / len(rates), 4),
        min_rate=min(rates),
        max_rate=max(rates),
        renewable_plans=sum(1 for p in plans if p.renewable_percentage > 0),
        no_contract_plans=sum(1 for p in plans if p.contract_length == 0),
        contract_lengths=sorted({p.contract_length for p in plans}),
    )
