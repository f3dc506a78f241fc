"""Earnings aggregation with jurisdiction-specific inclusion rules."""

import logging
from typing import Sequence

from .models import (
    EarningsTotals,
    Jurisdiction,
    JurisdictionRules,
    OvertimeInclusion,
    PayslipEntry,
)

logger = logging.getLogger(__name__)

# Regularity heuristics are window-presence counts over the most recent
# payslips, not statistical tests.
REGULAR_OVERTIME_WINDOW = 8
REGULAR_OVERTIME_RATIO = 0.5
CONSISTENT_OVERTIME_WINDOW = 12
CONSISTENT_OVERTIME_RATIO = 0.4
REGULAR_BONUS_WINDOW = 12
REGULAR_BONUS_MIN_OCCURRENCES = 3


class EarningsAggregator:
    """Sums working weeks into categorised earnings totals.

    Payslips are expected most recent first; the regularity tests look at
    the head of the sequence passed in.
    """

    def is_regular_overtime(self, payslips: Sequence[PayslipEntry]) -> bool:
        """Overtime in at least half of the most recent 8 weeks (NSW/VIC)."""
        recent = payslips[:REGULAR_OVERTIME_WINDOW]
        with_overtime = sum(1 for p in recent if p.overtime_hours > 0)
        return with_overtime >= len(recent) * REGULAR_OVERTIME_RATIO

    def is_consistent_overtime(self, payslips: Sequence[PayslipEntry]) -> bool:
        """Overtime in at least 40% of the most recent 12 weeks (QLD/WA/SA)."""
        recent = payslips[:CONSISTENT_OVERTIME_WINDOW]
        with_overtime = sum(1 for p in recent if p.overtime_hours > 0)
        return with_overtime >= len(recent) * CONSISTENT_OVERTIME_RATIO

    def is_regular_bonus(self, payslips: Sequence[PayslipEntry]) -> bool:
        """At least 3 non-zero bonuses within the most recent 12 weeks."""
        recent = payslips[:REGULAR_BONUS_WINDOW]
        return sum(1 for p in recent if p.bonuses > 0) >= REGULAR_BONUS_MIN_OCCURRENCES

    def include_overtime(self, payslips: Sequence[PayslipEntry], rules: JurisdictionRules) -> bool:
        if rules.overtime_inclusion == OvertimeInclusion.REGULAR:
            return self.is_regular_overtime(payslips)
        if rules.overtime_inclusion == OvertimeInclusion.CONSISTENT:
            return self.is_consistent_overtime(payslips)
        return True

    def include_bonuses(self, payslips: Sequence[PayslipEntry], rules: JurisdictionRules) -> bool:
        if rules.bonus_regularity_required:
            return self.is_regular_bonus(payslips)
        return True

    def aggregate(
        self,
        payslips: Sequence[PayslipEntry],
        jurisdiction: Jurisdiction,
        rules: JurisdictionRules,
    ) -> EarningsTotals:
        """Aggregate working weeks into categorised totals."""
        working = [p for p in payslips if not p.unpaid_leave]

        overtime_included = self.include_overtime(working, rules)
        bonuses_included = self.include_bonuses(working, rules)
        allowances_included = len(rules.allowance_inclusions) > 0

        ordinary = overtime = allowances = bonuses = commissions = other = 0.0
        weekly_totals = []

        for payslip in working:
            week_ordinary = payslip.ordinary_pay
            week_overtime = payslip.overtime_pay if overtime_included else 0.0
            week_allowances = payslip.allowances if allowances_included else 0.0
            week_bonuses = payslip.bonuses if bonuses_included else 0.0

            ordinary += week_ordinary
            overtime += week_overtime
            allowances += week_allowances
            bonuses += week_bonuses
            commissions += payslip.commissions
            other += payslip.other_income

            weekly_totals.append(
                week_ordinary
                + week_overtime
                + week_allowances
                + week_bonuses
                + payslip.commissions
                + payslip.other_income
            )

        logger.debug(
            f"{rules.jurisdiction.value}: aggregated {len(working)} weeks "
            f"(overtime included={overtime_included}, bonuses included={bonuses_included})"
        )

        return EarningsTotals(
            ordinary_earnings=ordinary,
            overtime_earnings=overtime,
            allowances_total=allowances,
            bonuses_total=bonuses,
            commissions_total=commissions,
            other_income_total=other,
            total_earnings=ordinary + overtime + allowances + bonuses + commissions + other,
            weekly_totals=tuple(weekly_totals),
        )
