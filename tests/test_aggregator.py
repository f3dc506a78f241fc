"""Tests for earnings aggregation."""

import pytest
from datetime import date, timedelta

from piawe.aggregator import EarningsAggregator
from piawe.jurisdictions import get_rules
from piawe.models import Jurisdiction


def overtime_history(make_payslip, weeks, overtime_weeks):
    """Weeks indexed from most recent; overtime in the listed positions."""
    start = date(2024, 1, 7)
    return [
        make_payslip(
            start - timedelta(weeks=i),
            index=i,
            overtime_hours=4.0 if i in overtime_weeks else 0.0,
            overtime_rate=42.75,
        )
        for i in range(weeks)
    ]


def test_regular_overtime_threshold(make_payslip):
    """Overtime in half of the last 8 weeks is regular."""
    aggregator = EarningsAggregator()

    assert aggregator.is_regular_overtime(overtime_history(make_payslip, 8, {0, 2, 4, 6})) == True
    assert aggregator.is_regular_overtime(overtime_history(make_payslip, 8, {0, 2, 4})) == False


def test_regular_overtime_only_looks_at_recent_weeks(make_payslip):
    aggregator = EarningsAggregator()

    # Overtime only in weeks 9-20: none in the most recent 8
    payslips = overtime_history(make_payslip, 20, set(range(8, 20)))
    assert aggregator.is_regular_overtime(payslips) == False


def test_consistent_overtime_threshold(make_payslip):
    """Overtime in 40% of the last 12 weeks is consistent."""
    aggregator = EarningsAggregator()

    assert aggregator.is_consistent_overtime(overtime_history(make_payslip, 12, {0, 3, 6, 9, 11})) == True
    assert aggregator.is_consistent_overtime(overtime_history(make_payslip, 12, {0, 3, 6, 9})) == False


def test_regular_bonus_needs_three_recent_occurrences(make_payslip):
    aggregator = EarningsAggregator()
    start = date(2024, 1, 7)

    def history(bonus_weeks):
        return [
            make_payslip(start - timedelta(weeks=i), index=i, bonuses=200.0 if i in bonus_weeks else 0.0)
            for i in range(20)
        ]

    assert aggregator.is_regular_bonus(history({1, 5, 11})) == True
    assert aggregator.is_regular_bonus(history({1, 5})) == False
    # Third bonus falls outside the 12-week window
    assert aggregator.is_regular_bonus(history({1, 5, 12})) == False


def test_nsw_excludes_irregular_overtime(make_payslip):
    aggregator = EarningsAggregator()
    payslips = overtime_history(make_payslip, 8, {0})

    totals = aggregator.aggregate(payslips, Jurisdiction.NSW, get_rules("NSW"))

    assert totals.overtime_earnings == 0.0
    assert totals.ordinary_earnings == pytest.approx(8 * 38 * 28.50)


def test_nsw_includes_regular_overtime(make_payslip):
    aggregator = EarningsAggregator()
    payslips = overtime_history(make_payslip, 8, {0, 1, 2, 3})

    totals = aggregator.aggregate(payslips, Jurisdiction.NSW, get_rules("NSW"))

    assert totals.overtime_earnings == pytest.approx(4 * 4.0 * 42.75)


def test_tas_includes_all_overtime(make_payslip):
    aggregator = EarningsAggregator()
    payslips = overtime_history(make_payslip, 8, {0})

    totals = aggregator.aggregate(payslips, Jurisdiction.TAS, get_rules("TAS"))

    assert totals.overtime_earnings == pytest.approx(4.0 * 42.75)


def test_nsw_bonus_regularity(make_payslip):
    aggregator = EarningsAggregator()
    start = date(2024, 1, 7)
    one_off = [
        make_payslip(start - timedelta(weeks=i), index=i, bonuses=500.0 if i == 2 else 0.0)
        for i in range(10)
    ]

    nsw = aggregator.aggregate(one_off, Jurisdiction.NSW, get_rules("NSW"))
    vic = aggregator.aggregate(one_off, Jurisdiction.VIC, get_rules("VIC"))

    assert nsw.bonuses_total == 0.0
    assert vic.bonuses_total == 500.0


def test_allowances_gate(make_payslip):
    """Allowances count only when the jurisdiction lists allowance inclusions."""
    aggregator = EarningsAggregator()
    payslips = [make_payslip(date(2024, 1, 7), allowances=120.0)]
    rules = get_rules("QLD")

    included = aggregator.aggregate(payslips, Jurisdiction.QLD, rules)
    excluded = aggregator.aggregate(
        payslips, Jurisdiction.QLD, rules.model_copy(update={"allowance_inclusions": ()})
    )

    assert included.allowances_total == 120.0
    assert excluded.allowances_total == 0.0


def test_commissions_and_other_income_always_included(make_payslip):
    aggregator = EarningsAggregator()
    payslips = [make_payslip(date(2024, 1, 7), commissions=300.0, other_income=75.0)]

    for code in Jurisdiction:
        totals = aggregator.aggregate(payslips, code, get_rules(code))
        assert totals.commissions_total == 300.0
        assert totals.other_income_total == 75.0


def test_unpaid_leave_weeks_not_summed(make_payslip):
    aggregator = EarningsAggregator()
    payslips = [
        make_payslip(date(2024, 1, 7), index=0),
        make_payslip(date(2023, 12, 31), index=1, unpaid_leave=True),
    ]

    totals = aggregator.aggregate(payslips, Jurisdiction.VIC, get_rules("VIC"))

    assert totals.ordinary_earnings == pytest.approx(38 * 28.50)
    assert len(totals.weekly_totals) == 1


@pytest.mark.parametrize("code", list(Jurisdiction))
def test_total_equals_sum_of_components(make_payslip, code):
    aggregator = EarningsAggregator()
    start = date(2024, 1, 7)
    payslips = [
        make_payslip(
            start - timedelta(weeks=i),
            index=i,
            overtime_hours=3.0 if i % 2 == 0 else 0.0,
            overtime_rate=40.0,
            allowances=55.5,
            bonuses=100.0 if i % 3 == 0 else 0.0,
            commissions=12.25,
            other_income=7.0,
        )
        for i in range(14)
    ]

    totals = aggregator.aggregate(payslips, code, get_rules(code))

    components = (
        totals.ordinary_earnings + totals.overtime_earnings + totals.allowances_total
        + totals.bonuses_total + totals.commissions_total + totals.other_income_total
    )
    assert totals.total_earnings == pytest.approx(components)
    assert sum(totals.weekly_totals) == pytest.approx(totals.total_earnings)
