"""
Pytest configuration and shared fixtures for the loan analyzer tests.
"""

from datetime import date
from decimal import Decimal

import pytest

from loan_analyzer.data_models import (
    LoanTerms,
    OneTimePrepayment,
    PrepaymentPlan,
    RecurringPrepayment,
    SavingsOffsetPlan,
)


@pytest.fixture
def terms():
    """A 20 year home loan of 50 lakh at 7.4%."""
    return LoanTerms(
        principal=Decimal("5000000"),
        annual_rate_percent=Decimal("7.4"),
        term_months=240,
        start_date=date(2025, 1, 15),
    )


@pytest.fixture
def one_time():
    return OneTimePrepayment(amount=Decimal("500000"), date=date(2026, 6, 1))


@pytest.fixture
def recurring():
    return RecurringPrepayment(amount=Decimal("100000"), frequency_months=12, start_month=1)


@pytest.fixture
def prepayment_plan(one_time, recurring):
    return PrepaymentPlan(one_time=one_time, recurring=recurring)


@pytest.fixture
def savings_plan():
    return SavingsOffsetPlan(
        enabled=True, initial_balance=Decimal("200000"), monthly_drift=Decimal("0")
    )
