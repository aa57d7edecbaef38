"""Utility functions for the loan analyzer.

This module provides helpers for turning user input into Python data types and
for handling dates, including adding calendar months and normalizing
year-month strings to ``datetime.date`` instances. Money helpers convert
arbitrary numeric input to ``Decimal`` and round it to cents.
"""

from __future__ import annotations

import calendar
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, getcontext
from typing import Optional, TypeVar

from .errors import InvalidInputError

getcontext().prec = 28  # increase decimal precision to avoid rounding errors

CENT = Decimal("0.01")

# Recurring prepayment frequencies accepted by the engine, by name.
FREQUENCY_MONTHS = {
    "monthly": 1,
    "quarterly": 3,
    "yearly": 12,
}

T = TypeVar("T")


def parse_year_month(ym: str) -> date:
    """Parse a YYYY-MM string into a ``date`` object (first day of month).

    Parameters
    ----------
    ym: str
        A string in the form ``"YYYY-MM"``. The day component, if present,
        will be ignored.

    Returns
    -------
    date
        A date object representing the first day of the specified month.

    Raises
    ------
    InvalidInputError
        If the string is not a valid year-month.
    """
    try:
        parts = ym.strip().split("-")
        if len(parts) < 2:
            raise ValueError
        year = int(parts[0])
        month = int(parts[1])
        return date(year, month, 1)
    except Exception as exc:
        raise InvalidInputError(f"Invalid year-month string: {ym}") from exc


def parse_date(value: str) -> date:
    """Parse an ISO ``YYYY-MM-DD`` date, or ``YYYY-MM`` meaning the first day."""
    parts = value.strip().split("-")
    if len(parts) == 2:
        return parse_year_month(value)
    try:
        return date.fromisoformat(value.strip())
    except ValueError as exc:
        raise InvalidInputError(f"Invalid date string: {value}") from exc


def add_months(dt: date, months: int) -> date:
    """Return a new date a number of months after ``dt``.

    The day of the month is clamped to the last valid day if needed (e.g.,
    adding one month to Jan 31 yields Feb 28 or 29).
    """
    year = dt.year + (dt.month - 1 + months) // 12
    month = (dt.month - 1 + months) % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def same_month(a: date, b: date) -> bool:
    return (a.year, a.month) == (b.year, b.month)


def decimal_from_str(value: str) -> Decimal:
    """Convert a numeric string into a ``Decimal``.

    The function strips any commas and handles both integer and float-like
    strings. It raises ``InvalidInputError`` if conversion fails.
    """
    try:
        cleaned = value.replace(",", "").strip()
        result = Decimal(cleaned)
    except (InvalidOperation, AttributeError) as exc:
        raise InvalidInputError(f"Invalid numeric value: {value}") from exc
    if not result.is_finite():
        raise InvalidInputError(f"Invalid numeric value: {value}")
    return result


def to_decimal(value: object) -> Decimal:
    """Convert an int, float, string or Decimal into a finite ``Decimal``.

    Floats go through ``str`` so that ``7.7`` becomes ``Decimal("7.7")`` rather
    than its binary expansion.
    """
    if isinstance(value, bool):
        raise InvalidInputError(f"Invalid numeric value: {value!r}")
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise InvalidInputError(f"Invalid numeric value: {value}")
        return value
    if isinstance(value, (int, float)):
        return decimal_from_str(str(value))
    if isinstance(value, str):
        return decimal_from_str(value)
    raise InvalidInputError(f"Invalid numeric value: {value!r}")


def round_money(value: Decimal) -> Decimal:
    """Round a money amount to cents, half away from zero."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def months_from_tenure(years: int, months: int = 0) -> int:
    """Return the total number of months for a tenure of ``years`` and ``months``."""
    if years < 0 or months < 0:
        raise InvalidInputError("Tenure years and months must not be negative")
    total = years * 12 + months
    if total <= 0:
        raise InvalidInputError("Tenure must be at least one month")
    return total


def frequency_from_name(name: str) -> int:
    """Map ``monthly``/``quarterly``/``yearly`` to a frequency in months."""
    try:
        return FREQUENCY_MONTHS[name.strip().lower()]
    except KeyError as exc:
        raise InvalidInputError(
            f"Frequency must be one of {', '.join(FREQUENCY_MONTHS)}; got {name}"
        ) from exc


def frequency_name(months: int) -> str:
    for name, value in FREQUENCY_MONTHS.items():
        if value == months:
            return name
    return f"every {months} months"


def resolve_with_fallback(value: Optional[T], fallback: Optional[T]) -> Optional[T]:
    """Return ``value`` when it was explicitly set, otherwise ``fallback``.

    Only ``None`` counts as unset: an explicit zero is kept. Callers use this
    to resolve "what-if" inputs before building plans, so the engine itself
    only ever receives fully resolved values.
    """
    return fallback if value is None else value
