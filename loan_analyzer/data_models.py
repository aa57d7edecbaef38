"""Data models for the loan analyzer.

This module defines dataclasses representing the entities used by the
analyzer: the loan terms, prepayment and savings-offset plans, individual
schedule entries and the results built from them. Every model is a frozen
dataclass, so a computed schedule can be shared freely without anyone being
able to change it afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

# Scenario names, in the order they are computed and reported.
BASE = "Base"
PREPAY = "Prepay"
SAVINGS_LINKED = "SavingsLinked"
PREPAY_PLUS_SAVINGS = "PrepayPlusSavings"
SCENARIO_NAMES: Tuple[str, ...] = (BASE, PREPAY, SAVINGS_LINKED, PREPAY_PLUS_SAVINGS)

# Export record shape consumed by CSV/JSON export. Order and names are stable.
EXPORT_FIELDS: Tuple[str, ...] = (
    "month",
    "date",
    "payment",
    "principalPaid",
    "interestPaid",
    "balance",
    "savingsLinked",
)
CSV_HEADER: Tuple[str, ...] = (
    "Month",
    "Date",
    "Payment",
    "PrincipalPaid",
    "InterestPaid",
    "Balance",
    "SavingsLinked",
)


@dataclass(frozen=True)
class LoanTerms:
    """Terms of a loan.

    Attributes
    ----------
    principal: Decimal
        The amount borrowed.
    annual_rate_percent: Decimal
        Annual nominal interest rate in percent (``Decimal("7.7")`` is 7.7 %).
    term_months: int
        Number of monthly installments.
    start_date: date
        Date of the first installment. Later installments fall on the same
        day of each following month, clamped to the month length.
    """

    principal: Decimal
    annual_rate_percent: Decimal
    term_months: int
    start_date: date

    def with_term(self, term_months: int) -> "LoanTerms":
        """Return a copy of these terms with a different number of months."""
        return replace(self, term_months=term_months)


@dataclass(frozen=True)
class OneTimePrepayment:
    """A lump sum applied to the principal in the month containing ``date``."""

    amount: Decimal
    date: date


@dataclass(frozen=True)
class RecurringPrepayment:
    """An extra principal payment repeated every ``frequency_months``.

    The first eligible installment is ``start_month`` (1-indexed); after that
    the prepayment applies every ``frequency_months`` installments until the
    balance is exhausted.
    """

    amount: Decimal
    frequency_months: int  # 1, 3 or 12
    start_month: int = 1


@dataclass(frozen=True)
class PrepaymentPlan:
    one_time: Optional[OneTimePrepayment] = None
    recurring: Optional[RecurringPrepayment] = None

    @property
    def is_empty(self) -> bool:
        return self.one_time is None and self.recurring is None


@dataclass(frozen=True)
class SavingsOffsetPlan:
    """A savings balance linked to the loan.

    While ``enabled``, the linked balance is subtracted from the outstanding
    principal before interest is charged. The debt itself is never reduced.
    ``monthly_drift`` is added to the balance after each installment (it may be
    negative); the balance never drops below zero.
    """

    enabled: bool
    initial_balance: Decimal
    monthly_drift: Decimal = Decimal("0")


@dataclass(frozen=True)
class ScheduleEntry:
    """An entry in the amortization schedule, one per paid month.

    Money fields are rounded to cents. ``payment`` is always the sum of
    ``principal_paid`` and ``interest_paid``. ``linked_savings_balance`` is the
    linked balance after this month's drift, i.e. the one used next month.
    """

    month: int
    date: date
    payment: Decimal
    principal_paid: Decimal
    interest_paid: Decimal
    outstanding_balance: Decimal
    linked_savings_balance: Decimal

    def to_export_row(self) -> Dict[str, object]:
        """Return the entry in the stable export record shape."""
        return {
            "month": self.month,
            "date": self.date.isoformat(),
            "payment": float(self.payment),
            "principalPaid": float(self.principal_paid),
            "interestPaid": float(self.interest_paid),
            "balance": float(self.outstanding_balance),
            "savingsLinked": float(self.linked_savings_balance),
        }


@dataclass(frozen=True)
class ScheduleResult:
    """A complete amortization schedule with its aggregate totals.

    ``fully_amortized`` is False when the balance was not cleared within
    ``terms.term_months``; ``residual_balance`` then holds what is left.
    """

    terms: LoanTerms
    entries: Tuple[ScheduleEntry, ...]
    emi: Decimal
    total_interest: Decimal
    total_paid: Decimal
    total_prepaid: Decimal
    residual_balance: Decimal
    fully_amortized: bool

    @property
    def months(self) -> int:
        return len(self.entries)

    @property
    def payoff_date(self) -> Optional[date]:
        if not self.entries or not self.fully_amortized:
            return None
        return self.entries[-1].date

    def export_rows(self) -> List[Dict[str, object]]:
        return [entry.to_export_row() for entry in self.entries]


class ScenarioSet:
    """Schedules for the named scenarios, all built from the same loan terms.

    Behaves like a read-only mapping from scenario name to ``ScheduleResult``;
    iteration follows ``SCENARIO_NAMES`` order.
    """

    __slots__ = ("_terms", "_results")

    def __init__(self, terms: LoanTerms, results: Mapping[str, ScheduleResult]) -> None:
        ordered = {name: results[name] for name in SCENARIO_NAMES if name in results}
        ordered.update({k: v for k, v in results.items() if k not in ordered})
        self._terms = terms
        self._results = MappingProxyType(ordered)

    @property
    def terms(self) -> LoanTerms:
        return self._terms

    @property
    def results(self) -> Mapping[str, ScheduleResult]:
        return self._results

    def __getitem__(self, name: str) -> ScheduleResult:
        return self._results[name]

    def __contains__(self, name: object) -> bool:
        return name in self._results

    def __iter__(self) -> Iterator[str]:
        return iter(self._results)

    def __len__(self) -> int:
        return len(self._results)

    def names(self) -> List[str]:
        return list(self._results)

    def items(self) -> List[Tuple[str, ScheduleResult]]:
        return list(self._results.items())

    def __repr__(self) -> str:
        return f"ScenarioSet(terms={self._terms!r}, scenarios={self.names()!r})"


@dataclass(frozen=True)
class TenureComparisonRow:
    tenure_years: int
    term_months: int
    scenarios: ScenarioSet


@dataclass(frozen=True)
class SavingsInsight:
    """How much a scenario saves compared to the base scenario."""

    scenario_name: str
    interest_saved: Decimal
    percent_saved: Decimal
    months_saved: int


@dataclass(frozen=True)
class SavingsAnalysis:
    base_name: str
    insights: Tuple[SavingsInsight, ...]
    best: SavingsInsight
