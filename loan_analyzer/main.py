"""Command-line interface for the loan analyzer.

This module uses the ``click`` library to implement a multi-command
interface. Users can compute a single amortization schedule, compare the four
prepayment/savings scenarios, or sweep several loan tenures. Schedules can be
printed to the terminal or exported to JSON/CSV files.
"""

from __future__ import annotations

import csv
import json
import logging
from decimal import Decimal
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

import click

from .analysis import analyze_scenarios, balance_timeline, build_recommendations
from .config import Settings, load_settings
from .data_models import (
    CSV_HEADER,
    EXPORT_FIELDS,
    SCENARIO_NAMES,
    LoanTerms,
    OneTimePrepayment,
    PrepaymentPlan,
    RecurringPrepayment,
    SavingsOffsetPlan,
    ScenarioSet,
    ScheduleResult,
)
from .errors import InvalidInputError
from .formatter import (
    print_insights,
    print_recommendations,
    print_scenarios,
    print_schedule,
    print_summary,
    print_tenure_comparison,
)
from .scenarios import build_scenario_set, compare_tenures
from .utils import (
    FREQUENCY_MONTHS,
    decimal_from_str,
    frequency_from_name,
    months_from_tenure,
    parse_date,
    resolve_with_fallback,
)

logger = logging.getLogger(__name__)

AMOUNT_SUFFIXES = (
    ("cr", Decimal("10000000")),
    ("k", Decimal("1000")),
    ("m", Decimal("1000000")),
    ("l", Decimal("100000")),
)


def parse_amount(value: str) -> Decimal:
    """Parse a numeric string with optional suffixes.

    Accepts plain numbers ("500000") and shorthand with ``k``/``m`` suffixes
    (e.g., "500k" meaning 500_000) as well as ``l`` (lakh, 100_000) and
    ``cr`` (crore, 10_000_000). Returns a Decimal.
    """
    cleaned = value.strip().lower().replace(",", "")
    factor = Decimal("1")
    for suffix, multiplier in AMOUNT_SUFFIXES:
        if cleaned.endswith(suffix):
            factor = multiplier
            cleaned = cleaned[: -len(suffix)]
            break
    try:
        return decimal_from_str(cleaned) * factor
    except InvalidInputError:
        raise click.BadParameter(f"Invalid amount: {value}")


def _optional_amount(value: Optional[str]) -> Optional[Decimal]:
    return parse_amount(value) if value is not None else None


def build_terms_from_options(
    principal: str,
    rate: float,
    years: int,
    months: int,
    start_date: str,
) -> LoanTerms:
    try:
        term_months = months_from_tenure(years, months)
        start = parse_date(start_date)
        annual_rate_percent = decimal_from_str(str(rate))
    except InvalidInputError as exc:
        raise click.BadParameter(str(exc))
    return LoanTerms(
        principal=parse_amount(principal),
        annual_rate_percent=annual_rate_percent,
        term_months=term_months,
        start_date=start,
    )


def build_prepayment_plan_from_options(
    one_time: Optional[str],
    one_time_date: Optional[str],
    what_if_one_time: Optional[str],
    recurring: Optional[str],
    frequency: str,
    recurring_start: int,
) -> PrepaymentPlan:
    """Resolve the prepayment options into a ``PrepaymentPlan``.

    An explicit ``--one-time`` amount wins over ``--what-if-one-time``.
    """
    one_time_amount = resolve_with_fallback(
        _optional_amount(one_time), _optional_amount(what_if_one_time)
    )
    one_time_plan = None
    if one_time_amount is not None:
        if not one_time_date:
            raise click.BadParameter("A one-time prepayment requires --one-time-date")
        try:
            one_time_plan = OneTimePrepayment(amount=one_time_amount, date=parse_date(one_time_date))
        except InvalidInputError as exc:
            raise click.BadParameter(str(exc))

    recurring_plan = None
    if recurring is not None:
        recurring_plan = RecurringPrepayment(
            amount=parse_amount(recurring),
            frequency_months=frequency_from_name(frequency),
            start_month=recurring_start,
        )
    return PrepaymentPlan(one_time=one_time_plan, recurring=recurring_plan)


def build_savings_plan_from_options(
    savings: Optional[str],
    what_if_savings: Optional[str],
    savings_drift: Optional[str],
    link_savings: bool,
) -> Optional[SavingsOffsetPlan]:
    """Resolve the savings options into a ``SavingsOffsetPlan`` (or None)."""
    balance = resolve_with_fallback(_optional_amount(savings), _optional_amount(what_if_savings))
    if balance is None:
        return None
    drift = _optional_amount(savings_drift)
    return SavingsOffsetPlan(
        enabled=link_savings,
        initial_balance=balance,
        monthly_drift=drift if drift is not None else Decimal("0"),
    )


def _csv_cell(value: object) -> object:
    # Money columns are written with exactly two decimals.
    if isinstance(value, float):
        return f"{value:.2f}"
    return value


def export_to_csv(path: Path, result: ScheduleResult) -> None:
    """Export a schedule to a CSV file."""
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(CSV_HEADER)
        for row in result.export_rows():
            writer.writerow([_csv_cell(row[field]) for field in EXPORT_FIELDS])


def _summary_dict(result: ScheduleResult) -> Dict[str, Any]:
    return {
        "emi": float(result.emi),
        "total_interest": float(result.total_interest),
        "total_paid": float(result.total_paid),
        "total_prepaid": float(result.total_prepaid),
        "months": result.months,
        "fully_amortized": result.fully_amortized,
        "residual_balance": float(result.residual_balance),
    }


def export_to_json(path: Path, result: ScheduleResult) -> None:
    """Export a schedule and its summary to a JSON file."""
    data = {"summary": _summary_dict(result), "schedule": result.export_rows()}
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def export_scenarios_to_json(path: Path, scenario_set: ScenarioSet) -> None:
    """Export every scenario's summary and schedule to one JSON file."""
    analysis = analyze_scenarios(scenario_set)
    data = {
        "scenarios": {
            name: {"summary": _summary_dict(result), "schedule": result.export_rows()}
            for name, result in scenario_set.items()
        },
        "insights": [
            {
                "scenario": insight.scenario_name,
                "interest_saved": float(insight.interest_saved),
                "percent_saved": float(insight.percent_saved),
                "months_saved": insight.months_saved,
            }
            for insight in analysis.insights
        ],
        "best": analysis.best.scenario_name,
        "timeline": [
            {key: float(value) if isinstance(value, Decimal) else value for key, value in row.items()}
            for row in balance_timeline(scenario_set)
        ],
    }
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def loan_options(func: Callable) -> Callable:
    """Attach the loan, prepayment and savings options shared by every command."""
    options = [
        click.option("--principal", "-p", "principal", required=True, help="Loan amount (accepts k, m, l, cr suffixes)"),
        click.option("--rate", "-r", "rate", required=True, type=float, help="Annual interest rate (percent)"),
        click.option("--years", "-y", "years", type=int, default=20, show_default=True, help="Tenure in years"),
        click.option("--months", "-m", "months", type=int, default=0, show_default=True, help="Additional tenure months"),
        click.option("--start-date", "-s", "start_date", required=True, help="First EMI date (YYYY-MM-DD or YYYY-MM)"),
        click.option("--one-time", "one_time", help="One-time prepayment amount"),
        click.option("--one-time-date", "one_time_date", help="One-time prepayment date (YYYY-MM-DD or YYYY-MM)"),
        click.option("--what-if-one-time", "what_if_one_time", help="One-time amount used when --one-time is not given"),
        click.option("--recurring", "recurring", help="Recurring prepayment amount"),
        click.option(
            "--frequency",
            "frequency",
            type=click.Choice(list(FREQUENCY_MONTHS)),
            default="yearly",
            show_default=True,
            help="Recurring prepayment frequency",
        ),
        click.option("--recurring-start", "recurring_start", type=int, default=1, show_default=True, help="First installment eligible for the recurring prepayment"),
        click.option("--savings", "savings", help="Linked savings balance"),
        click.option("--what-if-savings", "what_if_savings", help="Savings balance used when --savings is not given"),
        click.option("--savings-drift", "savings_drift", help="Monthly change of the savings balance (may be negative)"),
        click.option("--link-savings/--no-link-savings", "link_savings", default=True, show_default=True, help="Offset interest with the savings balance"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _build_inputs(params: Dict[str, Any]) -> Tuple[LoanTerms, PrepaymentPlan, Optional[SavingsOffsetPlan]]:
    terms = build_terms_from_options(
        params["principal"], params["rate"], params["years"], params["months"], params["start_date"]
    )
    try:
        plan = build_prepayment_plan_from_options(
            params["one_time"],
            params["one_time_date"],
            params["what_if_one_time"],
            params["recurring"],
            params["frequency"],
            params["recurring_start"],
        )
    except InvalidInputError as exc:
        raise click.BadParameter(str(exc))
    savings_plan = build_savings_plan_from_options(
        params["savings"], params["what_if_savings"], params["savings_drift"], params["link_savings"]
    )
    return terms, plan, savings_plan


def _scenario_set(terms: LoanTerms, plan: PrepaymentPlan, savings_plan: Optional[SavingsOffsetPlan]) -> ScenarioSet:
    logger.debug(f"Running scenarios for {terms.term_months} months from {terms.start_date}")
    try:
        return build_scenario_set(terms, plan.one_time, plan.recurring, savings_plan)
    except InvalidInputError as exc:
        raise click.ClickException(str(exc))


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """A command-line home loan analyzer with prepayment and savings scenarios."""
    try:
        settings = load_settings()
    except InvalidInputError as exc:
        raise click.ClickException(str(exc))
    logging.basicConfig(level=settings.log_level_value, format="%(levelname)s %(name)s: %(message)s")
    ctx.obj = settings


@cli.command()
@loan_options
@click.option(
    "--scenario",
    "scenario",
    type=click.Choice(list(SCENARIO_NAMES)),
    default=SCENARIO_NAMES[-1],
    show_default=True,
    help="Scenario to print",
)
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
@click.pass_obj
def schedule(settings: Settings, scenario: str, output: Optional[str], **params: Any) -> None:
    """Compute and print the full amortization schedule of one scenario."""
    terms, plan, savings_plan = _build_inputs(params)
    result = _scenario_set(terms, plan, savings_plan)[scenario]
    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            export_to_json(path, result)
        elif path.suffix.lower() == ".csv":
            export_to_csv(path, result)
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv")
        click.echo(f"Schedule exported to {path}")
        return

    print_summary(result, scenario)
    max_rows = settings.max_rows
    if result.months > max_rows:
        click.echo(f"Schedule has {result.months} rows; showing first {max_rows} rows.")
        print_schedule(result.entries[:max_rows])
    else:
        print_schedule(result.entries)


@cli.command()
@loan_options
@click.option("--output", "output", type=str, help="Output file path (.json)")
def scenarios(output: Optional[str], **params: Any) -> None:
    """Compare the Base, Prepay, SavingsLinked and PrepayPlusSavings scenarios."""
    terms, plan, savings_plan = _build_inputs(params)
    scenario_set = _scenario_set(terms, plan, savings_plan)
    if output:
        path = Path(output)
        if path.suffix.lower() != ".json":
            raise click.BadParameter("Scenario export must use .json extension")
        export_scenarios_to_json(path, scenario_set)
        click.echo(f"Scenarios exported to {path}")
        return

    print_scenarios(scenario_set)
    print_insights(analyze_scenarios(scenario_set))
    print_recommendations(build_recommendations(scenario_set, plan, savings_plan))


@cli.command()
@loan_options
@click.option("--tenure", "tenure", type=int, multiple=True, help="Tenure in years to compare (repeatable)")
@click.pass_obj
def tenures(settings: Settings, tenure: Tuple[int, ...], **params: Any) -> None:
    """Compare total interest and payoff time across several tenures."""
    terms, plan, savings_plan = _build_inputs(params)
    tenure_years = tenure or settings.tenure_years
    try:
        rows = compare_tenures(terms, tenure_years, plan, savings_plan)
    except InvalidInputError as exc:
        raise click.ClickException(str(exc))
    print_tenure_comparison(rows)


if __name__ == "__main__":
    cli()
