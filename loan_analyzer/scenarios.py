"""Scenario composition and tenure comparison.

A scenario is a named combination of prepayment and savings-offset policy
applied to the same loan terms. ``build_scenario_set`` produces the four
standard scenarios; ``compare_tenures`` repeats that for several loan tenures
so the effect of a shorter or longer term can be compared side by side.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

from .data_models import (
    BASE,
    PREPAY,
    PREPAY_PLUS_SAVINGS,
    SAVINGS_LINKED,
    LoanTerms,
    OneTimePrepayment,
    PrepaymentPlan,
    RecurringPrepayment,
    SavingsOffsetPlan,
    ScenarioSet,
    TenureComparisonRow,
)
from .engine import build_schedule
from .errors import InvalidInputError

logger = logging.getLogger(__name__)

DEFAULT_TENURE_YEARS: Sequence[int] = (18, 20, 22, 25, 30)


def build_scenario_set(
    terms: LoanTerms,
    one_time: Optional[OneTimePrepayment] = None,
    recurring: Optional[RecurringPrepayment] = None,
    savings_plan: Optional[SavingsOffsetPlan] = None,
) -> ScenarioSet:
    """Build the Base, Prepay, SavingsLinked and PrepayPlusSavings schedules.

    Each scenario is an independent engine run on the same terms:

    * ``Base``: no prepayment, no savings offset.
    * ``Prepay``: the prepayments, no savings offset.
    * ``SavingsLinked``: the savings offset, no prepayment.
    * ``PrepayPlusSavings``: both.

    A savings plan that is missing or disabled makes the savings scenarios
    identical to their counterparts without it.
    """
    prepayments = PrepaymentPlan(one_time=one_time, recurring=recurring)
    results = {
        BASE: build_schedule(terms),
        PREPAY: build_schedule(terms, prepayments),
        SAVINGS_LINKED: build_schedule(terms, None, savings_plan),
        PREPAY_PLUS_SAVINGS: build_schedule(terms, prepayments, savings_plan),
    }
    return ScenarioSet(results[BASE].terms, results)


def _check_tenures(tenure_years: Iterable[int]) -> List[int]:
    tenures = list(tenure_years)
    if not tenures:
        raise InvalidInputError("At least one tenure is required")
    for years in tenures:
        if isinstance(years, bool) or not isinstance(years, int) or years <= 0:
            raise InvalidInputError(f"Tenure must be a positive number of years; got {years!r}")
    return tenures


def compare_tenures(
    base_terms: LoanTerms,
    tenure_years: Iterable[int] = DEFAULT_TENURE_YEARS,
    prepayment_plan: Optional[PrepaymentPlan] = None,
    savings_plan: Optional[SavingsOffsetPlan] = None,
) -> List[TenureComparisonRow]:
    """Build a scenario set for every tenure in ``tenure_years``.

    Only the term changes between rows; principal, rate, start date and the
    plans are shared. Rows follow the order of ``tenure_years``.
    """
    tenures = _check_tenures(tenure_years)
    plan = prepayment_plan or PrepaymentPlan()
    logger.debug(f"Comparing tenures {tenures} for principal {base_terms.principal}")

    rows: List[TenureComparisonRow] = []
    for years in tenures:
        terms = base_terms.with_term(years * 12)
        scenarios = build_scenario_set(terms, plan.one_time, plan.recurring, savings_plan)
        rows.append(TenureComparisonRow(tenure_years=years, term_months=years * 12, scenarios=scenarios))
    return rows
