"""Core calculation engine for the loan analyzer.

This module implements the financial logic required to build amortization
schedules for equal-installment (EMI) loans. It supports one-time and
recurring prepayments and a linked savings balance that offsets the
interest-bearing principal. Results are returned as ``ScheduleResult``
objects holding the entries along with their totals.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal, getcontext
from typing import List, Optional

from .data_models import (
    LoanTerms,
    OneTimePrepayment,
    PrepaymentPlan,
    RecurringPrepayment,
    SavingsOffsetPlan,
    ScheduleEntry,
    ScheduleResult,
)
from .errors import InvalidInputError
from .utils import FREQUENCY_MONTHS, add_months, round_money, same_month, to_decimal

getcontext().prec = 28  # increase precision for financial calculations

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

# Balances below half a cent are treated as paid off.
PAYOFF_EPSILON = Decimal("0.005")


def monthly_rate(annual_rate_percent: Decimal) -> Decimal:
    return annual_rate_percent / Decimal(12) / Decimal(100)


def compute_emi(principal, annual_rate_percent, term_months: int) -> Decimal:
    """Return the equated monthly installment for a loan.

    The formula is:

        emi = P * i * (1 + i)^n / ((1 + i)^n - 1)

    where ``P`` is the principal, ``i`` is the monthly interest rate
    (``annual_rate_percent / 12 / 100``) and ``n`` is the number of payments.
    When the interest rate is zero, the installment simplifies to ``P / n``.

    The value is returned unrounded; callers round for display only.

    Raises
    ------
    InvalidInputError
        If the principal or rate is negative, or the term is not a positive
        whole number of months.
    """
    principal = to_decimal(principal)
    annual_rate_percent = to_decimal(annual_rate_percent)
    _check_term(term_months)
    if principal < 0:
        raise InvalidInputError("Principal must not be negative")
    if annual_rate_percent < 0:
        raise InvalidInputError("Annual rate must not be negative")

    rate_per_month = monthly_rate(annual_rate_percent)
    if rate_per_month == 0:
        return principal / Decimal(term_months)
    factor = (1 + rate_per_month) ** term_months
    return principal * rate_per_month * factor / (factor - 1)


def _check_term(term_months: object) -> None:
    if isinstance(term_months, bool) or not isinstance(term_months, int):
        raise InvalidInputError(f"Term must be a whole number of months; got {term_months!r}")
    if term_months <= 0:
        raise InvalidInputError("Term must be positive")


def _normalize_terms(terms: LoanTerms) -> LoanTerms:
    if not isinstance(terms.start_date, date):
        raise InvalidInputError(f"Invalid start date: {terms.start_date!r}")
    _check_term(terms.term_months)
    principal = to_decimal(terms.principal)
    rate = to_decimal(terms.annual_rate_percent)
    if principal <= 0:
        raise InvalidInputError("Principal must be positive")
    if rate < 0:
        raise InvalidInputError("Annual rate must not be negative")
    return LoanTerms(
        principal=principal,
        annual_rate_percent=rate,
        term_months=terms.term_months,
        start_date=terms.start_date,
    )


def _normalize_one_time(one_time: Optional[OneTimePrepayment]) -> Optional[OneTimePrepayment]:
    if one_time is None:
        return None
    amount = to_decimal(one_time.amount)
    if amount < 0:
        raise InvalidInputError("One-time prepayment amount must not be negative")
    if not isinstance(one_time.date, date):
        raise InvalidInputError(f"Invalid prepayment date: {one_time.date!r}")
    return OneTimePrepayment(amount=amount, date=one_time.date)


def _normalize_recurring(recurring: Optional[RecurringPrepayment]) -> Optional[RecurringPrepayment]:
    if recurring is None:
        return None
    amount = to_decimal(recurring.amount)
    if amount < 0:
        raise InvalidInputError("Recurring prepayment amount must not be negative")
    if recurring.frequency_months not in FREQUENCY_MONTHS.values():
        raise InvalidInputError(
            f"Recurring frequency must be 1, 3 or 12 months; got {recurring.frequency_months!r}"
        )
    start = recurring.start_month
    if isinstance(start, bool) or not isinstance(start, int) or start < 1:
        raise InvalidInputError(f"Recurring start month must be at least 1; got {start!r}")
    return RecurringPrepayment(amount=amount, frequency_months=recurring.frequency_months, start_month=start)


def _normalize_savings(plan: Optional[SavingsOffsetPlan]) -> Optional[SavingsOffsetPlan]:
    if plan is None:
        return None
    balance = to_decimal(plan.initial_balance)
    if balance < 0:
        raise InvalidInputError("Savings balance must not be negative")
    return SavingsOffsetPlan(
        enabled=bool(plan.enabled),
        initial_balance=balance,
        monthly_drift=to_decimal(plan.monthly_drift),
    )


def _recurring_due(recurring: Optional[RecurringPrepayment], month: int) -> bool:
    if recurring is None or recurring.amount == 0 or month < recurring.start_month:
        return False
    return (month - recurring.start_month) % recurring.frequency_months == 0


def build_schedule(
    terms: LoanTerms,
    prepayment_plan: Optional[PrepaymentPlan] = None,
    savings_plan: Optional[SavingsOffsetPlan] = None,
) -> ScheduleResult:
    """Compute the amortization schedule for a loan.

    Parameters
    ----------
    terms: LoanTerms
        Principal, annual rate, term and first installment date.
    prepayment_plan: PrepaymentPlan, optional
        One-time and/or recurring extra principal payments. Prepayments are
        applied at the start of the month, before interest accrues.
    savings_plan: SavingsOffsetPlan, optional
        A linked savings balance. When enabled, interest is charged on the
        outstanding balance minus the savings balance.

    Returns
    -------
    ScheduleResult
        The entries (at most ``terms.term_months``) and totals. The EMI is
        fixed at the start from the original principal and term. If the loan
        is not paid off within the term, the result is flagged with
        ``fully_amortized=False`` and carries the residual balance.

    Raises
    ------
    InvalidInputError
        If any of the inputs violates the input contract.
    """
    terms = _normalize_terms(terms)
    plan = prepayment_plan or PrepaymentPlan()
    one_time = _normalize_one_time(plan.one_time)
    recurring = _normalize_recurring(plan.recurring)
    savings = _normalize_savings(savings_plan)

    rate_per_month = monthly_rate(terms.annual_rate_percent)
    emi = compute_emi(terms.principal, terms.annual_rate_percent, terms.term_months)
    offset_enabled = savings is not None and savings.enabled
    current_savings = savings.initial_balance if savings is not None else ZERO
    drift = savings.monthly_drift if savings is not None else ZERO

    logger.debug(
        f"Building schedule: principal={terms.principal} rate={terms.annual_rate_percent}% "
        f"term={terms.term_months} offset={offset_enabled}"
    )

    entries: List[ScheduleEntry] = []
    outstanding = terms.principal
    one_time_applied = False
    total_prepaid = ZERO
    total_interest = ZERO
    total_paid = ZERO

    for month in range(1, terms.term_months + 1):
        if outstanding <= PAYOFF_EPSILON:
            break
        current_date = add_months(terms.start_date, month - 1)

        # Prepayments reduce the balance before this month's interest accrues.
        if one_time is not None and not one_time_applied and same_month(one_time.date, current_date):
            applied = min(one_time.amount, outstanding)
            outstanding -= applied
            total_prepaid += applied
            one_time_applied = True
        if _recurring_due(recurring, month):
            applied = min(recurring.amount, outstanding)
            outstanding -= applied
            total_prepaid += applied

        # Linked savings only shrink the interest-bearing principal.
        effective_principal = outstanding
        if offset_enabled:
            effective_principal = max(ZERO, outstanding - current_savings)
        interest_payment = effective_principal * rate_per_month

        principal_payment = emi - interest_payment
        if principal_payment > outstanding:
            principal_payment = outstanding
        if principal_payment < 0:
            principal_payment = ZERO

        outstanding = max(ZERO, outstanding - principal_payment)
        if outstanding < PAYOFF_EPSILON:
            outstanding = ZERO

        current_savings = max(ZERO, current_savings + drift)

        principal_paid = round_money(principal_payment)
        interest_paid = round_money(interest_payment)
        entry = ScheduleEntry(
            month=month,
            date=current_date,
            payment=principal_paid + interest_paid,
            principal_paid=principal_paid,
            interest_paid=interest_paid,
            outstanding_balance=round_money(outstanding),
            linked_savings_balance=round_money(current_savings),
        )
        entries.append(entry)
        total_interest += entry.interest_paid
        total_paid += entry.payment

    fully_amortized = outstanding <= PAYOFF_EPSILON
    residual = ZERO if fully_amortized else round_money(outstanding)
    if not fully_amortized:
        logger.warning(
            f"Loan of {terms.principal} does not amortize within {terms.term_months} months; "
            f"residual balance {residual}"
        )

    return ScheduleResult(
        terms=terms,
        entries=tuple(entries),
        emi=round_money(emi),
        total_interest=total_interest,
        total_paid=total_paid,
        total_prepaid=round_money(total_prepaid),
        residual_balance=residual,
        fully_amortized=fully_amortized,
    )
