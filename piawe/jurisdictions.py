"""Per-jurisdiction PIAWE rule table.

Each Australian state and territory has exactly one rule set. The table is
built on first use and exposed read-only; nothing in the engine derives or
alters rules at runtime.
"""

import logging
from functools import lru_cache
from types import MappingProxyType
from typing import Mapping, Union

from .models import (
    AdjustmentRules,
    AverageBasis,
    BonusInclusions,
    CappingRules,
    Jurisdiction,
    JurisdictionRules,
    OvertimeInclusion,
    ReferencePolicy,
)

logger = logging.getLogger(__name__)


def _build_rules() -> Mapping[Jurisdiction, JurisdictionRules]:
    rules = [
        JurisdictionRules(
            jurisdiction=Jurisdiction.NSW,
            alternative_reference_periods=(13,),
            minimum_weeks_required=1,
            allowance_inclusions=("shift", "piece-rates", "bonuses"),
            bonus_inclusions=BonusInclusions(
                regular_bonus=True, performance_bonus=False, annual_bonus=False
            ),
            adjustment_rules=AdjustmentRules(
                base_rate_increase=True, industrial_agreement=True, inflation_adjustment=False
            ),
            capping_rules=CappingRules(max_weekly_amount=2500, max_annual_amount=130000),
            overtime_inclusion=OvertimeInclusion.REGULAR,
            bonus_regularity_required=True,
            average_basis=AverageBasis.ORDINARY,
            reference_policy=ReferencePolicy(
                primary_min_weeks=26,
                primary_method="52-week average (NSW standard)",
                fallback_min_weeks=4,
                fallback_method="13-week average (insufficient 52-week data)",
            ),
            insufficient_data_message="NSW requires substantial payslip data. Only {weeks} weeks available.",
            insufficient_data_action="Obtain additional payslips to meet NSW requirements",
            formula=(
                "PIAWE = Total ordinary earnings in 52 weeks pre-injury / Number of weeks worked\n"
                "Includes: Base wages, regular overtime, piece rates, bonuses, shift allowances\n"
                "Excludes: Superannuation, non-cash benefits, one-off bonuses"
            ),
            legislative_reference="Workers Compensation Act 1987 (NSW) - icare/SIRA",
        ),
        JurisdictionRules(
            jurisdiction=Jurisdiction.VIC,
            alternative_reference_periods=(13,),
            minimum_weeks_required=1,
            allowance_inclusions=("shift", "commissions", "bonuses"),
            bonus_inclusions=BonusInclusions(
                regular_bonus=True, performance_bonus=True, annual_bonus=False
            ),
            adjustment_rules=AdjustmentRules(
                base_rate_increase=True, industrial_agreement=True, inflation_adjustment=False
            ),
            capping_rules=CappingRules(max_weekly_amount=2400, max_annual_amount=124800),
            overtime_inclusion=OvertimeInclusion.REGULAR,
            reference_policy=ReferencePolicy(
                primary_min_weeks=20,
                primary_method="52-week average (VIC standard)",
                fallback_min_weeks=4,
                fallback_method="13-week average (insufficient 52-week data)",
            ),
            insufficient_data_message="VIC requires adequate payslip data. Only {weeks} weeks available.",
            insufficient_data_action="Consider apprentice/trainee provisions if applicable",
            formula=(
                "PIAWE = Gross earnings (excluding super) over 52 weeks / Number of weeks worked\n"
                "Includes: Regular overtime, shift penalties, commissions, bonuses\n"
                "Excludes: Super, occasional/irregular overtime, non-cash benefits"
            ),
            legislative_reference=(
                "Workplace Injury Rehabilitation and Compensation Act 2013 (VIC) - WorkSafe Victoria"
            ),
        ),
        JurisdictionRules(
            jurisdiction=Jurisdiction.QLD,
            alternative_reference_periods=(26, 13),
            minimum_weeks_required=1,
            allowance_inclusions=("allowances", "penalties"),
            bonus_inclusions=BonusInclusions(
                regular_bonus=True, performance_bonus=True, annual_bonus=False
            ),
            adjustment_rules=AdjustmentRules(
                base_rate_increase=True, industrial_agreement=True, inflation_adjustment=False
            ),
            overtime_inclusion=OvertimeInclusion.CONSISTENT,
            reference_policy=ReferencePolicy(
                primary_min_weeks=26,
                primary_method="52-week average (QLD 12-month standard)",
                fallback_min_weeks=8,
                fallback_method="13-week average (seasonal/part-time adjustment)",
            ),
            insufficient_data_message=(
                "QLD prefers 12 months of data. Only {weeks} weeks available; "
                "consider seasonal worker provisions."
            ),
            insufficient_data_action="Review if shorter reference period is appropriate for this worker",
            formula=(
                "PIAWE = Total earnings (excluding super) over last 12 months / Number of weeks worked\n"
                "Includes: Consistent overtime, allowances, penalties\n"
                "Note: Shorter reference period may apply for seasonal/part-time workers"
            ),
            legislative_reference=(
                "Workers' Compensation and Rehabilitation Act 2003 (QLD) - WorkCover QLD"
            ),
        ),
        JurisdictionRules(
            jurisdiction=Jurisdiction.WA,
            alternative_reference_periods=(26, 13),
            minimum_weeks_required=1,
            allowance_inclusions=("bonuses", "allowances", "incentive-payments"),
            bonus_inclusions=BonusInclusions(
                regular_bonus=True, performance_bonus=True, annual_bonus=True
            ),
            adjustment_rules=AdjustmentRules(
                base_rate_increase=True, industrial_agreement=True, inflation_adjustment=False
            ),
            overtime_inclusion=OvertimeInclusion.CONSISTENT,
            reference_policy=ReferencePolicy(
                primary_min_weeks=26,
                primary_method="52-week average (WA 12-month standard)",
                fluctuation_flag_threshold=0.3,
                fluctuation_method="52-week average (high fluctuation - may require negotiation)",
            ),
            fluctuation_warning_threshold=0.4,
            insufficient_data_message="WA uses a 12 month average. Only {weeks} weeks available.",
            insufficient_data_action="Obtain additional payslips or negotiate PIAWE with the insurer",
            formula=(
                "PIAWE = Average gross weekly earnings in 12 months pre-injury\n"
                "Includes: Bonuses, allowances, incentive payments\n"
                "Note: Can be negotiated for fluctuating earnings patterns"
            ),
            legislative_reference=(
                "Workers' Compensation and Injury Management Act 1981 (WA) - WorkCover WA"
            ),
        ),
        JurisdictionRules(
            jurisdiction=Jurisdiction.SA,
            alternative_reference_periods=(26, 13),
            minimum_weeks_required=1,
            allowance_inclusions=("overtime", "penalties", "loadings"),
            bonus_inclusions=BonusInclusions(
                regular_bonus=True, performance_bonus=True, annual_bonus=False
            ),
            adjustment_rules=AdjustmentRules(
                base_rate_increase=True, industrial_agreement=True, inflation_adjustment=False
            ),
            overtime_inclusion=OvertimeInclusion.CONSISTENT,
            reference_policy=ReferencePolicy(
                primary_min_weeks=26,
                primary_method="52-week average (SA 12-month standard)",
                fallback_min_weeks=8,
                fallback_method="13-week average (insufficient 12-month data)",
            ),
            insufficient_data_message="SA requires 12 months average. Only {weeks} weeks available.",
            insufficient_data_action="Obtain additional payslip records for accurate SA calculation",
            formula=(
                "PIAWE = Average weekly earnings over 12 months prior to injury\n"
                "Includes: Regular overtime, penalties, loadings\n"
                "Note: Superannuation paid separately by insurer after 52 weeks"
            ),
            legislative_reference="Return to Work Act 2014 (SA) - ReturnToWorkSA",
        ),
    ]

    # TAS, NT and ACT share the generic rule shape
    for code, reference in (
        (Jurisdiction.TAS, "Workers Rehabilitation and Compensation Act 1988 (TAS)"),
        (Jurisdiction.NT, "Return to Work Act 1986 (NT)"),
        (Jurisdiction.ACT, "Workers Compensation Act 1951 (ACT)"),
    ):
        rules.append(
            JurisdictionRules(
                jurisdiction=code,
                alternative_reference_periods=(26, 13),
                minimum_weeks_required=1,
                allowance_inclusions=("shift", "overtime", "allowances"),
                bonus_inclusions=BonusInclusions(
                    regular_bonus=True, performance_bonus=False, annual_bonus=False
                ),
                adjustment_rules=AdjustmentRules(
                    base_rate_increase=True, industrial_agreement=False, inflation_adjustment=False
                ),
                overtime_inclusion=OvertimeInclusion.ALL,
                reference_policy=ReferencePolicy(primary_method="52-week average"),
                insufficient_data_message=(
                    f"{code.value} requires at least one week of payslip data. "
                    "Only {weeks} weeks available."
                ),
                insufficient_data_action="Obtain payslip records covering the 52 weeks before injury",
                formula="Standard PIAWE calculation based on average weekly earnings",
                legislative_reference=reference,
            )
        )

    return MappingProxyType({r.jurisdiction: r for r in rules})


@lru_cache(maxsize=1)
def rule_table() -> Mapping[Jurisdiction, JurisdictionRules]:
    """Return the read-only jurisdiction rule table."""
    table = _build_rules()
    logger.debug(f"Loaded PIAWE rules for {len(table)} jurisdictions")
    return table


def get_rules(jurisdiction: Union[Jurisdiction, str]) -> JurisdictionRules:
    """Look up the rule set for a jurisdiction code.

    Raises:
        ValueError: If the code is not one of the eight jurisdictions.
    """
    return rule_table()[Jurisdiction(jurisdiction)]
