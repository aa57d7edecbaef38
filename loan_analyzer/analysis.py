"""Savings analysis over a computed scenario set.

Everything here works on finished ``ScheduleResult`` totals and entries; the
engine is never called again.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, List, Optional

from .data_models import (
    BASE,
    PREPAY,
    SAVINGS_LINKED,
    PrepaymentPlan,
    SavingsAnalysis,
    SavingsInsight,
    SavingsOffsetPlan,
    ScenarioSet,
    ScheduleResult,
)
from .errors import InvalidInputError
from .utils import frequency_name, round_money


def _insight(name: str, base: ScheduleResult, scenario: ScheduleResult) -> SavingsInsight:
    interest_saved = base.total_interest - scenario.total_interest
    if base.total_interest == 0:
        percent_saved = Decimal("0")
    else:
        percent_saved = round_money(interest_saved / base.total_interest * 100)
    return SavingsInsight(
        scenario_name=name,
        interest_saved=interest_saved,
        percent_saved=percent_saved,
        months_saved=base.months - scenario.months,
    )


def analyze_scenarios(scenario_set: ScenarioSet, base_name: str = BASE) -> SavingsAnalysis:
    """Compare every scenario in ``scenario_set`` with the base scenario.

    ``interest_saved`` and ``months_saved`` may be negative when a scenario
    costs more than the base. The best scenario is the one with the largest
    ``interest_saved``; the base competes with zero savings and ties keep the
    earlier scenario, so the base is picked when nothing saves interest.
    """
    if base_name not in scenario_set:
        raise InvalidInputError(f"Unknown base scenario: {base_name}")
    base = scenario_set[base_name]

    insights = tuple(
        _insight(name, base, result) for name, result in scenario_set.items() if name != base_name
    )
    best = SavingsInsight(
        scenario_name=base_name,
        interest_saved=Decimal("0"),
        percent_saved=Decimal("0"),
        months_saved=0,
    )
    for insight in insights:
        if insight.interest_saved > best.interest_saved:
            best = insight
    return SavingsAnalysis(base_name=base_name, insights=insights, best=best)


def _amount(value: Decimal) -> str:
    return f"{value:,.0f}"


def build_recommendations(
    scenario_set: ScenarioSet,
    prepayment_plan: Optional[PrepaymentPlan] = None,
    savings_plan: Optional[SavingsOffsetPlan] = None,
) -> List[str]:
    """Return short advisory lines describing what each policy achieves."""
    base = scenario_set[BASE]
    recs: List[str] = []

    if savings_plan is not None and savings_plan.enabled and SAVINGS_LINKED in scenario_set:
        linked = scenario_set[SAVINGS_LINKED]
        saved = max(Decimal("0"), base.total_interest - linked.total_interest)
        months = base.months - linked.months
        recs.append(
            f"Linking savings of {_amount(savings_plan.initial_balance)} saves approx "
            f"{_amount(saved)} in interest and may shorten tenure by {months} months."
        )

    plan = prepayment_plan or PrepaymentPlan()
    if PREPAY in scenario_set:
        prepay_saved = base.total_interest - scenario_set[PREPAY].total_interest
        if plan.one_time is not None and plan.one_time.amount > 0:
            recs.append(
                f"One-time prepayment of {_amount(plan.one_time.amount)} saves approx "
                f"{_amount(prepay_saved)} in interest."
            )
        if plan.recurring is not None and plan.recurring.amount > 0:
            recs.append(
                f"Recurring prepayment of {_amount(plan.recurring.amount)} "
                f"({frequency_name(plan.recurring.frequency_months)}) saves approx "
                f"{_amount(prepay_saved)} in interest."
            )

    for name, result in scenario_set.items():
        if not result.fully_amortized:
            recs.append(
                f"{name}: the loan does not fully amortize within {result.terms.term_months} "
                f"months; {_amount(result.residual_balance)} remains outstanding."
            )

    recs.append(
        "Consider increasing prepayments or linking more savings to accelerate payoff. "
        "Verify tax and liquidity needs before sweeping savings."
    )
    return recs


def balance_timeline(scenario_set: ScenarioSet) -> List[Dict[str, object]]:
    """Return month-aligned balances and cumulative interest for every scenario.

    Rows run up to the longest schedule. A scenario that has already been paid
    off reports a zero balance and its final cumulative interest.
    """
    length = max((result.months for _, result in scenario_set.items()), default=0)
    cumulative = {name: Decimal("0") for name in scenario_set}
    base = scenario_set[BASE] if BASE in scenario_set else None
    rows: List[Dict[str, object]] = []
    for index in range(length):
        row: Dict[str, object] = {"month": index + 1}
        for name, result in scenario_set.items():
            if index < result.months:
                entry = result.entries[index]
                cumulative[name] += entry.interest_paid
                row[f"{name}Balance"] = entry.outstanding_balance
            else:
                row[f"{name}Balance"] = Decimal("0")
            row[f"{name}InterestCumulative"] = cumulative[name]
        if base is not None and index < base.months:
            row["principalComponent"] = base.entries[index].principal_paid
            row["interestComponent"] = base.entries[index].interest_paid
        else:
            row["principalComponent"] = Decimal("0")
            row["interestComponent"] = Decimal("0")
        rows.append(row)
    return rows
