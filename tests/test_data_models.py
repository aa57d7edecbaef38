"""Tests for the export record shape."""

from datetime import date
from decimal import Decimal

from loan_analyzer.data_models import (
    CSV_HEADER,
    EXPORT_FIELDS,
    PrepaymentPlan,
    RecurringPrepayment,
    ScheduleEntry,
)
from loan_analyzer.engine import build_schedule


def test_export_row_shape():
    entry = ScheduleEntry(
        month=3,
        date=date(2025, 3, 15),
        payment=Decimal("43050.12"),
        principal_paid=Decimal("12000.00"),
        interest_paid=Decimal("31050.12"),
        outstanding_balance=Decimal("4976000.00"),
        linked_savings_balance=Decimal("200000.00"),
    )
    row = entry.to_export_row()
    assert tuple(row) == EXPORT_FIELDS
    assert row == {
        "month": 3,
        "date": "2025-03-15",
        "payment": 43050.12,
        "principalPaid": 12000.0,
        "interestPaid": 31050.12,
        "balance": 4976000.0,
        "savingsLinked": 200000.0,
    }


def test_csv_header_is_stable():
    assert CSV_HEADER == (
        "Month",
        "Date",
        "Payment",
        "PrincipalPaid",
        "InterestPaid",
        "Balance",
        "SavingsLinked",
    )
    assert len(CSV_HEADER) == len(EXPORT_FIELDS)


def test_result_export_rows(terms):
    result = build_schedule(terms)
    rows = result.export_rows()
    assert len(rows) == result.months
    assert rows[0]["date"] == "2025-01-15"


def test_prepayment_plan_is_empty():
    assert PrepaymentPlan().is_empty
    plan = PrepaymentPlan(recurring=RecurringPrepayment(amount=Decimal("1"), frequency_months=1))
    assert not plan.is_empty
