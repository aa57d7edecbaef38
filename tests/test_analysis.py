"""
Tests for savings analysis, recommendations and the balance timeline.
"""

from datetime import date
from decimal import Decimal

import pytest

from loan_analyzer import engine
from loan_analyzer.analysis import analyze_scenarios, balance_timeline, build_recommendations
from loan_analyzer.data_models import (
    BASE,
    PREPAY,
    PREPAY_PLUS_SAVINGS,
    SAVINGS_LINKED,
    LoanTerms,
    OneTimePrepayment,
    PrepaymentPlan,
    ScenarioSet,
)
from loan_analyzer.engine import build_schedule
from loan_analyzer.errors import InvalidInputError
from loan_analyzer.scenarios import build_scenario_set


@pytest.fixture
def scenario_set(terms, one_time, recurring, savings_plan):
    return build_scenario_set(terms, one_time, recurring, savings_plan)


class TestAnalyzeScenarios:
    """Test cases for analyze_scenarios."""

    def test_insights_for_non_base_scenarios(self, scenario_set):
        analysis = analyze_scenarios(scenario_set)
        assert analysis.base_name == BASE
        assert [i.scenario_name for i in analysis.insights] == [
            PREPAY,
            SAVINGS_LINKED,
            PREPAY_PLUS_SAVINGS,
        ]

    def test_insight_values(self, scenario_set):
        base = scenario_set[BASE]
        analysis = analyze_scenarios(scenario_set)
        for insight in analysis.insights:
            scenario = scenario_set[insight.scenario_name]
            assert insight.interest_saved == base.total_interest - scenario.total_interest
            assert insight.months_saved == base.months - scenario.months
            expected = insight.interest_saved / base.total_interest * 100
            assert abs(insight.percent_saved - expected) <= Decimal("0.005")
            assert insight.interest_saved > 0

    def test_best_is_largest_interest_saved(self, scenario_set):
        analysis = analyze_scenarios(scenario_set)
        assert analysis.best.scenario_name == PREPAY_PLUS_SAVINGS
        assert analysis.best.interest_saved == max(i.interest_saved for i in analysis.insights)

    def test_base_wins_when_nothing_saves(self, terms):
        analysis = analyze_scenarios(build_scenario_set(terms))
        assert analysis.best.scenario_name == BASE
        assert all(i.interest_saved == 0 for i in analysis.insights)

    def test_zero_base_interest_gives_zero_percent(self):
        terms = LoanTerms(
            principal=Decimal("120000"),
            annual_rate_percent=Decimal("0"),
            term_months=12,
            start_date=date(2025, 1, 1),
        )
        one_time = OneTimePrepayment(amount=Decimal("20000"), date=date(2025, 2, 1))
        analysis = analyze_scenarios(build_scenario_set(terms, one_time))
        prepay = analysis.insights[0]
        assert prepay.percent_saved == 0
        assert prepay.interest_saved == 0
        assert prepay.months_saved > 0

    def test_negative_savings_are_reported(self, terms):
        short = build_schedule(terms.with_term(120))
        long = build_schedule(terms.with_term(360))
        scenario_set = ScenarioSet(terms, {BASE: short, PREPAY: long})
        analysis = analyze_scenarios(scenario_set)
        assert analysis.insights[0].interest_saved < 0
        assert analysis.insights[0].months_saved == -240
        assert analysis.best.scenario_name == BASE

    def test_custom_base_name(self, scenario_set):
        analysis = analyze_scenarios(scenario_set, PREPAY)
        assert PREPAY not in [i.scenario_name for i in analysis.insights]
        assert BASE in [i.scenario_name for i in analysis.insights]

    def test_unknown_base_rejected(self, scenario_set):
        with pytest.raises(InvalidInputError):
            analyze_scenarios(scenario_set, "Nope")


class TestBuildRecommendations:
    """Test cases for build_recommendations."""

    def test_lines_for_each_policy(self, scenario_set, prepayment_plan, savings_plan):
        recs = build_recommendations(scenario_set, prepayment_plan, savings_plan)
        assert recs[0].startswith("Linking savings of 200,000 saves approx")
        assert any(r.startswith("One-time prepayment of 500,000") for r in recs)
        assert any("(yearly)" in r for r in recs)
        assert recs[-1].startswith("Consider increasing prepayments")

    def test_only_generic_line_without_plans(self, terms):
        recs = build_recommendations(build_scenario_set(terms))
        assert len(recs) == 1

    def test_non_amortizing_warning(self, terms, monkeypatch):
        monkeypatch.setattr(engine, "compute_emi", lambda *args: Decimal("1"))
        recs = build_recommendations(build_scenario_set(terms.with_term(12)))
        assert any("does not fully amortize within 12 months" in r for r in recs)


class TestBalanceTimeline:
    """Test cases for balance_timeline."""

    def test_rows_cover_longest_schedule(self, scenario_set):
        rows = balance_timeline(scenario_set)
        assert len(rows) == scenario_set[BASE].months
        assert rows[0]["month"] == 1
        assert rows[-1]["month"] == len(rows)

    def test_paid_off_scenarios_report_zero_balance(self, scenario_set):
        rows = balance_timeline(scenario_set)
        combined = scenario_set[PREPAY_PLUS_SAVINGS]
        assert rows[-1][f"{PREPAY_PLUS_SAVINGS}Balance"] == 0
        assert rows[-1][f"{PREPAY_PLUS_SAVINGS}InterestCumulative"] == combined.total_interest
        assert rows[-1][f"{BASE}InterestCumulative"] == scenario_set[BASE].total_interest

    def test_base_components(self, scenario_set):
        rows = balance_timeline(scenario_set)
        first = scenario_set[BASE].entries[0]
        assert rows[0]["principalComponent"] == first.principal_paid
        assert rows[0]["interestComponent"] == first.interest_paid


def test_prepayment_plan_with_zero_one_time_has_no_line(scenario_set, savings_plan):
    plan = PrepaymentPlan(one_time=OneTimePrepayment(amount=Decimal("0"), date=date(2026, 1, 1)))
    recs = build_recommendations(scenario_set, plan, savings_plan)
    assert not any(r.startswith("One-time") for r in recs)
