"""Final PIAWE selection, capping and manual adjustments."""

import logging
from typing import Sequence, Tuple

from .models import (
    AdjustmentType,
    Jurisdiction,
    JurisdictionRules,
    PIAWEAdjustment,
    PIAWEResolution,
    PIAWEResult,
)

logger = logging.getLogger(__name__)


class FinalPIAWEResolver:
    """Chooses between reference periods and applies caps and adjustments.

    Selection follows the jurisdiction's reference policy, first match wins:
    1) 52-week average when enough weeks were worked in the 52-week window
    2) 13-week average when the jurisdiction has a fallback and enough weeks
       were worked in the 13-week window
    3) otherwise the period with more included weeks, labelled as
       insufficient data
    """

    def select(
        self,
        period_52: PIAWEResult,
        period_13: PIAWEResult,
        rules: JurisdictionRules,
        jurisdiction: Jurisdiction,
    ) -> Tuple[float, str]:
        """Pick the average weekly figure and describe how it was chosen."""
        policy = rules.reference_policy

        if period_52.included_weeks >= rules.primary_min_weeks:
            if (
                policy.fluctuation_flag_threshold is not None
                and period_52.fluctuation > policy.fluctuation_flag_threshold
            ):
                return period_52.average_weekly, policy.fluctuation_method
            return period_52.average_weekly, policy.primary_method

        if policy.fallback_min_weeks is not None and period_13.included_weeks >= policy.fallback_min_weeks:
            return period_13.average_weekly, policy.fallback_method

        best = period_52 if period_52.included_weeks > period_13.included_weeks else period_13
        logger.info(
            f"{rules.jurisdiction.value}: falling back to {best.total_weeks}-week window "
            f"with {best.included_weeks} included weeks"
        )
        return best.average_weekly, f"{best.included_weeks}-week average (insufficient data)"

    def apply_capping(self, piawe: float, rules: JurisdictionRules) -> float:
        """Clamp to the jurisdiction's weekly maximum, if it has one."""
        cap = rules.max_weekly_amount
        if cap is not None and piawe > cap:
            logger.info(f"{rules.jurisdiction.value}: PIAWE {piawe:.2f} capped at {cap:.2f}")
            return cap
        return piawe

    def apply_adjustments(self, piawe: float, adjustments: Sequence[PIAWEAdjustment]) -> float:
        """Fold adjustments in order; a manual override replaces the running value."""
        adjusted = piawe
        for adjustment in adjustments:
            if adjustment.type == AdjustmentType.MANUAL_OVERRIDE:
                adjusted = adjustment.amount
            else:
                adjusted += adjustment.amount
            logger.debug(f"Applied {adjustment.type.value} adjustment {adjustment.amount:+.2f} -> {adjusted:.2f}")
        return adjusted

    def resolve(
        self,
        period_52: PIAWEResult,
        period_13: PIAWEResult,
        rules: JurisdictionRules,
        jurisdiction: Jurisdiction,
        adjustments: Sequence[PIAWEAdjustment] = (),
    ) -> PIAWEResolution:
        selected, method_used = self.select(period_52, period_13, rules, jurisdiction)
        capped = self.apply_capping(selected, rules)
        final = self.apply_adjustments(capped, adjustments)

        return PIAWEResolution(
            selected_piawe=selected,
            capped_piawe=capped,
            final_piawe=final,
            method_used=method_used,
            capped=capped != selected,
        )
