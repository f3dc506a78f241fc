"""Test configuration and shared fixtures."""

import pytest
import tempfile
import shutil
from pathlib import Path
from datetime import date, timedelta

from piawe.config import Config, CalculationConfig, OutputConfig
from piawe.models import PayslipEntry, PIAWEResult


FIRST_WEEK = date(2023, 6, 4)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_dir = tempfile.mkdtemp()
    yield Path(temp_dir)
    shutil.rmtree(temp_dir)


@pytest.fixture
def sample_config(temp_dir):
    """Create a sample configuration for testing."""
    return Config(
        calculation=CalculationConfig(default_jurisdiction="NSW"),
        output=OutputConfig(
            log_level="INFO",
            output_folder=str(temp_dir / "output"),
            json_indent=2,
            console_summary=True,
            log_file="",
        ),
    )


def build_payslip(week_ending, index=0, **fields):
    """Build a payslip whose gross equals its components unless given."""
    values = {
        "ordinary_hours": 38.0,
        "ordinary_rate": 28.50,
    }
    values.update(fields)
    if "total_gross" not in values:
        values["total_gross"] = (
            values.get("ordinary_hours", 0) * values.get("ordinary_rate", 0)
            + values.get("overtime_hours", 0) * values.get("overtime_rate", 0)
            + values.get("allowances", 0)
            + values.get("bonuses", 0)
            + values.get("commissions", 0)
            + values.get("other_income", 0)
        )
    return PayslipEntry(id=f"entry-{index:03d}", week_ending=week_ending, **values)


@pytest.fixture
def make_payslip():
    """Factory for single payslips."""
    return build_payslip


@pytest.fixture
def make_history():
    """Factory for consecutive weekly payslips, oldest first.

    Returns (payslips, injury_date) where the injury falls one week after
    the last payslip.
    """
    def _make(weeks, start=FIRST_WEEK, **fields):
        payslips = [
            build_payslip(start + timedelta(weeks=i), index=i, **fields)
            for i in range(weeks)
        ]
        return payslips, start + timedelta(weeks=weeks)
    return _make


@pytest.fixture
def uniform_history(make_history):
    """30 weeks of 38 ordinary hours at $28.50, injury 30 weeks after the first entry."""
    return make_history(30)


@pytest.fixture
def make_result():
    """Factory for period results with a given number of included weeks."""
    def _make(included_weeks, average_weekly=1000.0, total_weeks=52, fluctuation=0.0):
        total = average_weekly * included_weeks
        return PIAWEResult(
            total_earnings=total,
            total_weeks=total_weeks,
            average_weekly=average_weekly,
            ordinary_earnings=total,
            overtime_earnings=0.0,
            allowances_total=0.0,
            bonuses_total=0.0,
            commissions_total=0.0,
            other_income_total=0.0,
            excluded_weeks=0,
            included_weeks=included_weeks,
            fluctuation=fluctuation,
        )
    return _make
