"""Output helpers for the loan analyzer.

This module provides simple functions to render schedules, scenario
comparisons and tenure sweeps in a tabular text format using built-in
printing and string formatting.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence

from .data_models import (
    SCENARIO_NAMES,
    SavingsAnalysis,
    ScenarioSet,
    ScheduleEntry,
    ScheduleResult,
    TenureComparisonRow,
)


def print_summary(result: ScheduleResult, name: str = "") -> None:
    """Print the totals of a single schedule in a human-readable format."""
    title = f"Summary ({name})" if name else "Summary"
    terms = result.terms
    print(title)
    print("-" * 72)
    print(f"Principal          : {terms.principal:.2f}")
    print(f"Annual rate        : {terms.annual_rate_percent}%")
    print(f"Term               : {terms.term_months} months")
    print(f"EMI                : {result.emi:.2f}")
    print(f"Total interest     : {result.total_interest:.2f}")
    print(f"Total paid         : {result.total_paid:.2f}")
    if result.total_prepaid:
        print(f"Total prepaid      : {result.total_prepaid:.2f}")
    print(f"Months to payoff   : {result.months}")
    if result.fully_amortized:
        payoff = result.payoff_date
        print(f"Payoff date        : {payoff.isoformat() if payoff else '-'}")
    else:
        print(f"Residual balance   : {result.residual_balance:.2f} (not fully amortized)")
    print("-" * 72)


def print_schedule(schedule: Iterable[ScheduleEntry]) -> None:
    """Print the amortization schedule as a simple table."""
    headers = ["Month", "Date", "Payment", "Principal", "Interest", "Balance", "Savings"]
    print("\t".join(headers))
    for entry in schedule:
        row = [
            str(entry.month),
            entry.date.isoformat(),
            f"{entry.payment:.2f}",
            f"{entry.principal_paid:.2f}",
            f"{entry.interest_paid:.2f}",
            f"{entry.outstanding_balance:.2f}",
            f"{entry.linked_savings_balance:.2f}",
        ]
        print("\t".join(row))


def print_scenarios(scenario_set: ScenarioSet) -> None:
    """Print one line of totals per scenario."""
    print("Scenarios")
    print("=" * 72)
    print(f"{'Scenario':20s} {'EMI':>12s} {'Interest':>15s} {'Total paid':>15s} {'Months':>7s}")
    for name, result in scenario_set.items():
        flag = "" if result.fully_amortized else " *"
        print(
            f"{name:20s} {result.emi:12.2f} {result.total_interest:15.2f} "
            f"{result.total_paid:15.2f} {result.months:7d}{flag}"
        )
    print("=" * 72)


def print_insights(analysis: SavingsAnalysis) -> None:
    print(f"Savings vs {analysis.base_name}")
    print("-" * 72)
    print(f"{'Scenario':20s} {'Interest saved':>16s} {'Saved %':>9s} {'Months saved':>13s}")
    for insight in analysis.insights:
        print(
            f"{insight.scenario_name:20s} {insight.interest_saved:16.2f} "
            f"{insight.percent_saved:9.2f} {insight.months_saved:13d}"
        )
    print(f"Best scenario      : {analysis.best.scenario_name}")
    print("-" * 72)


def print_recommendations(recommendations: Sequence[str]) -> None:
    print("Recommendations")
    for line in recommendations:
        print(f"  - {line}")


def print_tenure_comparison(rows: List[TenureComparisonRow]) -> None:
    """Print total interest and months to payoff per tenure and scenario."""
    print("Tenure comparison")
    print("=" * 72)
    header = f"{'Years':>5s} {'EMI':>12s}"
    for name in SCENARIO_NAMES:
        header += f" {name:>18s}"
    print(header)
    for row in rows:
        base = row.scenarios[SCENARIO_NAMES[0]]
        line = f"{row.tenure_years:5d} {base.emi:12.2f}"
        for name in SCENARIO_NAMES:
            result = row.scenarios[name]
            cell = f"{result.total_interest:,.0f}/{result.months}m"
            line += f" {cell:>18s}"
        print(line)
    print("=" * 72)
    print("Cells show total interest / months to payoff.")
