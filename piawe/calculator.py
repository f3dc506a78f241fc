"""PIAWE calculation orchestrator - public entry point."""

import logging
import uuid
from datetime import date, datetime
from typing import Any, Iterable, List, Mapping, Optional, Union
from dateutil.parser import isoparse

from .jurisdictions import get_rules
from .models import (
    EmploymentType,
    Jurisdiction,
    PayslipEntry,
    PeriodCalculations,
    PIAWEAdjustment,
    PIAWECalculation,
)
from .period import PeriodCalculator
from .resolver import FinalPIAWEResolver
from .validator import PIAWEValidator

logger = logging.getLogger(__name__)

SHORT_REFERENCE_PERIOD = 13

PayslipInput = Union[PayslipEntry, Mapping[str, Any]]
AdjustmentInput = Union[PIAWEAdjustment, Mapping[str, Any]]


def parse_injury_date(value: Union[str, date]) -> date:
    """Parse an ISO-8601 injury date.

    Raises:
        ValueError: If the value is not a valid ISO-8601 date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return isoparse(value).date()
    except (TypeError, ValueError) as e:
        raise ValueError(f"Malformed injury date {value!r}: {e}") from e


def sort_payslips(payslips: Iterable[PayslipEntry]) -> List[PayslipEntry]:
    """Most recent week first; ties broken by id so input order never matters."""
    return sorted(payslips, key=lambda p: (p.week_ending, p.id), reverse=True)


class PIAWECalculator:
    """Wires the rule table, period calculator, resolver and validator together.

    Pipeline (stable order):
    1) Look up jurisdiction rules
    2) Sort payslips most recent first
    3) Compute the 52-week and 13-week period results
    4) Select, cap and adjust the final PIAWE
    5) Run validation heuristics
    6) Assemble the calculation record
    """

    def __init__(
        self,
        period_calculator: Optional[PeriodCalculator] = None,
        resolver: Optional[FinalPIAWEResolver] = None,
        validator: Optional[PIAWEValidator] = None,
    ):
        self.period_calculator = period_calculator or PeriodCalculator()
        self.resolver = resolver or FinalPIAWEResolver()
        self.validator = validator or PIAWEValidator()

    def calculate(
        self,
        payslips: Iterable[PayslipInput],
        injury_date: Union[str, date],
        jurisdiction: Union[Jurisdiction, str],
        adjustments: Iterable[AdjustmentInput] = (),
        case_id: Optional[str] = None,
        worker_id: Optional[str] = None,
        employment_type: EmploymentType = EmploymentType.FULL_TIME,
    ) -> PIAWECalculation:
        """Calculate PIAWE for one worker.

        Raises:
            ValueError: On an unknown jurisdiction, a malformed injury date or
                payslip/adjustment records that fail validation (e.g. negative
                hours, rates or amounts).
        """
        code = Jurisdiction(jurisdiction)
        rules = get_rules(code)
        injury = parse_injury_date(injury_date)

        entries = [
            PayslipEntry.model_validate(p) if not isinstance(p, PayslipEntry) else p
            for p in payslips
        ]
        applied = [
            PIAWEAdjustment.model_validate(a) if not isinstance(a, PIAWEAdjustment) else a
            for a in adjustments
        ]

        logger.info(
            f"Calculating PIAWE for {code.value}: {len(entries)} payslips, "
            f"injury date {injury.isoformat()}, {len(applied)} adjustments"
        )

        ordered = sort_payslips(entries)

        period_52 = self.period_calculator.calculate_for_period(
            ordered, injury, rules.default_reference_period, rules, code
        )
        period_13 = self.period_calculator.calculate_for_period(
            ordered, injury, SHORT_REFERENCE_PERIOD, rules, code
        )

        resolution = self.resolver.resolve(period_52, period_13, rules, code, applied)
        issues = self.validator.validate(ordered, injury, rules, code)

        now = datetime.now()
        calculation = PIAWECalculation(
            id=f"piawe-{uuid.uuid4().hex}",
            case_id=case_id,
            worker_id=worker_id,
            jurisdiction=code,
            employment_type=employment_type,
            injury_date=injury,
            calculation_date=now,
            payslips=tuple(ordered),
            calculations=PeriodCalculations(period_52_week=period_52, period_13_week=period_13),
            pre_adjustment_piawe=resolution.capped_piawe,
            final_piawe=resolution.final_piawe,
            method_used=resolution.method_used,
            adjustments=tuple(applied),
            validation_issues=tuple(issues),
            created_at=now,
            updated_at=now,
        )

        logger.info(
            f"{code.value} PIAWE {calculation.final_piawe:.2f} via {calculation.method_used} "
            f"({len(calculation.errors)} errors, {len(calculation.warnings)} warnings)"
        )
        return calculation


def calculate_piawe(
    payslips: Iterable[PayslipInput],
    injury_date: Union[str, date],
    jurisdiction: Union[Jurisdiction, str],
    adjustments: Iterable[AdjustmentInput] = (),
    **kwargs: Any,
) -> PIAWECalculation:
    """Calculate PIAWE with the default engine components."""
    return PIAWECalculator().calculate(payslips, injury_date, jurisdiction, adjustments, **kwargs)
