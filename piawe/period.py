"""Reference-period PIAWE calculation."""

import logging
import math
from datetime import date
from typing import Optional, Sequence, Tuple
from dateutil.relativedelta import relativedelta

from .aggregator import EarningsAggregator
from .models import (
    AverageBasis,
    Jurisdiction,
    JurisdictionRules,
    PayslipEntry,
    PIAWEResult,
)

logger = logging.getLogger(__name__)


def reference_window(injury_date: date, period_weeks: int) -> Tuple[date, date]:
    """Return the (start, end) of a reference window; start inclusive, end exclusive."""
    return injury_date - relativedelta(weeks=period_weeks), injury_date


def in_window(payslip: PayslipEntry, start: date, end: date) -> bool:
    return start <= payslip.week_ending < end


def coefficient_of_variation(values: Sequence[float]) -> float:
    """Population standard deviation over mean; 0 for fewer than two values or a zero mean."""
    if len(values) < 2:
        return 0.0

    mean = sum(values) / len(values)
    if mean == 0:
        return 0.0

    variance = sum((x - mean) ** 2 for x in values) / len(values)
    return math.sqrt(variance) / mean


class PeriodCalculator:
    """Computes a PIAWEResult for one reference-period window."""

    def __init__(self, aggregator: Optional[EarningsAggregator] = None):
        self.aggregator = aggregator or EarningsAggregator()

    def calculate_for_period(
        self,
        payslips: Sequence[PayslipEntry],
        injury_date: date,
        period_weeks: int,
        rules: JurisdictionRules,
        jurisdiction: Jurisdiction,
    ) -> PIAWEResult:
        start, end = reference_window(injury_date, period_weeks)
        relevant = [p for p in payslips if in_window(p, start, end)]
        working = [p for p in relevant if not p.unpaid_leave]

        earnings = self.aggregator.aggregate(working, jurisdiction, rules)

        included_weeks = len(working)
        excluded_weeks = len(relevant) - included_weeks

        average_weekly = 0.0
        if included_weeks > 0:
            if rules.average_basis == AverageBasis.ORDINARY:
                average_weekly = earnings.ordinary_earnings / included_weeks
            else:
                average_weekly = earnings.total_earnings / included_weeks

        logger.debug(
            f"{period_weeks}-week window {start} to {end}: "
            f"{included_weeks} included, {excluded_weeks} excluded, average {average_weekly:.2f}"
        )

        return PIAWEResult(
            total_earnings=earnings.total_earnings,
            total_weeks=period_weeks,
            average_weekly=average_weekly,
            ordinary_earnings=earnings.ordinary_earnings,
            overtime_earnings=earnings.overtime_earnings,
            allowances_total=earnings.allowances_total,
            bonuses_total=earnings.bonuses_total,
            commissions_total=earnings.commissions_total,
            other_income_total=earnings.other_income_total,
            excluded_weeks=excluded_weeks,
            included_weeks=included_weeks,
            fluctuation=coefficient_of_variation(earnings.weekly_totals),
        )
