"""Validation heuristics over a worker's payslip history."""

import logging
from datetime import date, timedelta
from typing import List, Optional, Sequence

from .models import (
    IssueSeverity,
    IssueType,
    Jurisdiction,
    JurisdictionRules,
    PayslipEntry,
    ValidationIssue,
)
from .period import in_window, reference_window

logger = logging.getLogger(__name__)

EXTREME_FLUCTUATION_THRESHOLD = 0.6
FLUCTUATION_MIN_PAYSLIPS = 5
EXPECTED_WEEK_DAYS = 7
GAP_TOLERANCE_DAYS = 3
SUPERANNUATION_TOLERANCE = 1.1


class PIAWEValidator:
    """Runs every applicable check and collects findings.

    Findings annotate the calculation; none of them stop it.
    """

    def check_data_sufficiency(
        self,
        payslips: Sequence[PayslipEntry],
        injury_date: date,
        rules: JurisdictionRules,
    ) -> List[ValidationIssue]:
        """Compare worked weeks in the 52-week window to the jurisdiction minimum."""
        start, end = reference_window(injury_date, rules.default_reference_period)
        worked = sum(1 for p in payslips if in_window(p, start, end) and not p.unpaid_leave)

        if worked >= rules.primary_min_weeks:
            return []

        return [
            ValidationIssue(
                type=IssueType.INSUFFICIENT_DATA,
                severity=IssueSeverity.WARNING,
                message=rules.insufficient_data_message.format(weeks=worked),
                suggested_action=rules.insufficient_data_action,
            )
        ]

    def _most_deviant(
        self, payslips: Sequence[PayslipEntry], threshold: float
    ) -> Optional[PayslipEntry]:
        """Return the week furthest from the mean gross if any exceeds the threshold."""
        if len(payslips) < FLUCTUATION_MIN_PAYSLIPS:
            return None

        mean = sum(p.total_gross for p in payslips) / len(payslips)
        outliers = [p for p in payslips if abs(p.total_gross - mean) > mean * threshold]
        if not outliers:
            return None

        return max(outliers, key=lambda p: abs(p.total_gross - mean))

    def check_jurisdiction_fluctuation(
        self, payslips: Sequence[PayslipEntry], rules: JurisdictionRules
    ) -> List[ValidationIssue]:
        if rules.fluctuation_warning_threshold is None:
            return []

        outlier = self._most_deviant(payslips, rules.fluctuation_warning_threshold)
        if outlier is None:
            return []

        code = rules.jurisdiction.value
        return [
            ValidationIssue(
                type=IssueType.EXTREME_FLUCTUATION,
                severity=IssueSeverity.WARNING,
                message=f"{code}: Significant earnings fluctuation detected - may require negotiated PIAWE",
                suggested_action="Consider negotiating PIAWE due to fluctuating earnings pattern",
                week_ending=outlier.week_ending,
            )
        ]

    def check_extreme_fluctuation(
        self, payslips: Sequence[PayslipEntry], jurisdiction: Jurisdiction
    ) -> List[ValidationIssue]:
        outlier = self._most_deviant(payslips, EXTREME_FLUCTUATION_THRESHOLD)
        if outlier is None:
            return []

        return [
            ValidationIssue(
                type=IssueType.EXTREME_FLUCTUATION,
                severity=IssueSeverity.WARNING,
                message="Extreme variations in weekly earnings detected",
                suggested_action=(
                    f"Review payslips for accuracy and consider {jurisdiction.value}-specific "
                    "provisions for irregular earnings"
                ),
                week_ending=outlier.week_ending,
            )
        ]

    def _gap_issue(self, previous: date, gap_days: int, until: str, week_ending: date) -> ValidationIssue:
        missing = round(gap_days / EXPECTED_WEEK_DAYS) - 1
        return ValidationIssue(
            type=IssueType.MISSING_WEEKS,
            severity=IssueSeverity.WARNING,
            message=(
                f"No payslip recorded for about {max(missing, 1)} week(s) "
                f"between {previous.isoformat()} and {until}"
            ),
            suggested_action="Obtain the missing payslips or record the weeks as unpaid leave",
            week_ending=week_ending,
        )

    def check_missing_weeks(
        self,
        payslips: Sequence[PayslipEntry],
        injury_date: date,
        rules: JurisdictionRules,
    ) -> List[ValidationIssue]:
        """Flag gaps between consecutive payslips in the 52-week window and before the injury."""
        start, end = reference_window(injury_date, rules.default_reference_period)
        dates = sorted({p.week_ending for p in payslips if in_window(p, start, end)})
        max_gap = EXPECTED_WEEK_DAYS + GAP_TOLERANCE_DAYS

        issues = []
        for previous, current in zip(dates, dates[1:]):
            gap_days = (current - previous).days
            if gap_days > max_gap:
                issues.append(self._gap_issue(previous, gap_days, current.isoformat(), current))

        # Weeks between the last payslip and the injury itself
        if dates and (injury_date - dates[-1]).days > max_gap:
            last = dates[-1]
            issues.append(
                self._gap_issue(
                    last,
                    (injury_date - last).days,
                    f"the injury date {injury_date.isoformat()}",
                    last + timedelta(days=EXPECTED_WEEK_DAYS),
                )
            )
        return issues

    def check_superannuation(self, payslips: Sequence[PayslipEntry]) -> List[ValidationIssue]:
        """Flag gross figures more than 10% above their declared components."""
        suspect = [
            p for p in payslips
            if p.total_gross > p.declared_components * SUPERANNUATION_TOLERANCE
        ]
        if not suspect:
            return []

        return [
            ValidationIssue(
                type=IssueType.INCONSISTENT_RATES,
                severity=IssueSeverity.ERROR,
                message=(
                    "Possible superannuation inclusion detected in gross earnings "
                    f"({len(suspect)} payslip(s) affected)"
                ),
                suggested_action=(
                    "Verify that superannuation is excluded from PIAWE calculation as per legislation"
                ),
                week_ending=suspect[0].week_ending,
            )
        ]

    def validate(
        self,
        payslips: Sequence[PayslipEntry],
        injury_date: date,
        rules: JurisdictionRules,
        jurisdiction: Jurisdiction,
    ) -> List[ValidationIssue]:
        issues = []
        issues.extend(self.check_data_sufficiency(payslips, injury_date, rules))
        issues.extend(self.check_jurisdiction_fluctuation(payslips, rules))
        issues.extend(self.check_extreme_fluctuation(payslips, jurisdiction))
        issues.extend(self.check_missing_weeks(payslips, injury_date, rules))
        issues.extend(self.check_superannuation(payslips))

        logger.info(f"{jurisdiction.value}: validation produced {len(issues)} issue(s)")
        return issues
