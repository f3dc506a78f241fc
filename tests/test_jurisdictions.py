"""Tests for the jurisdiction rule table."""

import pytest
from pydantic import ValidationError

from piawe.jurisdictions import get_rules, rule_table
from piawe.models import AverageBasis, Jurisdiction, OvertimeInclusion


def test_one_rule_set_per_jurisdiction():
    """Every jurisdiction code has exactly one rule set keyed by its own code."""
    table = rule_table()

    assert set(table.keys()) == set(Jurisdiction)
    for code, rules in table.items():
        assert rules.jurisdiction == code
        assert rules.default_reference_period == 52


def test_get_rules_accepts_string_codes():
    assert get_rules("VIC") is get_rules(Jurisdiction.VIC)


def test_get_rules_unknown_code():
    """Unknown jurisdiction codes are rejected."""
    with pytest.raises(ValueError):
        get_rules("XYZ")


def test_rule_table_is_read_only():
    table = rule_table()

    with pytest.raises(TypeError):
        table[Jurisdiction.NSW] = table[Jurisdiction.VIC]

    with pytest.raises(ValidationError):
        table[Jurisdiction.NSW].minimum_weeks_required = 10


def test_capping_rules():
    """Only NSW and VIC carry a weekly cap."""
    assert get_rules("NSW").max_weekly_amount == 2500
    assert get_rules("VIC").max_weekly_amount == 2400
    assert get_rules("VIC").capping_rules.max_annual_amount == 124800

    for code in ("QLD", "WA", "SA", "TAS", "NT", "ACT"):
        assert get_rules(code).max_weekly_amount is None


def test_overtime_and_bonus_tests_by_jurisdiction():
    assert get_rules("NSW").overtime_inclusion == OvertimeInclusion.REGULAR
    assert get_rules("VIC").overtime_inclusion == OvertimeInclusion.REGULAR
    for code in ("QLD", "WA", "SA"):
        assert get_rules(code).overtime_inclusion == OvertimeInclusion.CONSISTENT
    for code in ("TAS", "NT", "ACT"):
        assert get_rules(code).overtime_inclusion == OvertimeInclusion.ALL

    assert get_rules("NSW").bonus_regularity_required == True
    assert not any(
        get_rules(code).bonus_regularity_required
        for code in ("VIC", "QLD", "WA", "SA", "TAS", "NT", "ACT")
    )


def test_only_nsw_averages_ordinary_earnings():
    for code in Jurisdiction:
        expected = AverageBasis.ORDINARY if code == Jurisdiction.NSW else AverageBasis.TOTAL
        assert get_rules(code).average_basis == expected


@pytest.mark.parametrize("code,primary,fallback", [
    ("NSW", 26, 4),
    ("VIC", 20, 4),
    ("QLD", 26, 8),
    ("WA", 26, None),
    ("SA", 26, 8),
    ("TAS", 1, None),
    ("NT", 1, None),
    ("ACT", 1, None),
])
def test_reference_policy_thresholds(code, primary, fallback):
    rules = get_rules(code)
    assert rules.primary_min_weeks == primary
    assert rules.reference_policy.fallback_min_weeks == fallback


def test_alternative_reference_periods():
    assert get_rules("NSW").alternative_reference_periods == (13,)
    assert get_rules("VIC").alternative_reference_periods == (13,)
    assert get_rules("QLD").alternative_reference_periods == (26, 13)


def test_legislative_reference_present():
    for rules in rule_table().values():
        assert rules.legislative_reference
        assert rules.formula
    assert "1987 (NSW)" in get_rules("NSW").legislative_reference
