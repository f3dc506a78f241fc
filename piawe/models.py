"""Data models for the PIAWE calculation engine."""

from datetime import datetime, date
from enum import Enum
from typing import Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Jurisdiction(str, Enum):
    NSW = "NSW"
    VIC = "VIC"
    QLD = "QLD"
    WA = "WA"
    SA = "SA"
    TAS = "TAS"
    NT = "NT"
    ACT = "ACT"


class OvertimeInclusion(str, Enum):
    REGULAR = "regular"
    CONSISTENT = "consistent"
    ALL = "all"


class AverageBasis(str, Enum):
    ORDINARY = "ordinary"
    TOTAL = "total"


class AdjustmentType(str, Enum):
    BASE_RATE_INCREASE = "base-rate-increase"
    INDUSTRIAL_AGREEMENT = "industrial-agreement"
    MANUAL_OVERRIDE = "manual-override"
    JURISDICTION_RULE = "jurisdiction-rule"


class IssueType(str, Enum):
    INSUFFICIENT_DATA = "insufficient-data"
    EXTREME_FLUCTUATION = "extreme-fluctuation"
    INCONSISTENT_RATES = "inconsistent-rates"
    MISSING_WEEKS = "missing-weeks"


class IssueSeverity(str, Enum):
    WARNING = "warning"
    ERROR = "error"


class EmploymentType(str, Enum):
    FULL_TIME = "full-time"
    PART_TIME = "part-time"
    CASUAL = "casual"


class PIAWEModel(BaseModel):
    """Immutable base model; accepts and emits camelCase field names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class PayslipEntry(PIAWEModel):
    id: str
    week_ending: date
    ordinary_hours: float = Field(default=0.0, ge=0.0)
    ordinary_rate: float = Field(default=0.0, ge=0.0)
    overtime_hours: float = Field(default=0.0, ge=0.0)
    overtime_rate: float = Field(default=0.0, ge=0.0)
    allowances: float = Field(default=0.0, ge=0.0)
    bonuses: float = Field(default=0.0, ge=0.0)
    commissions: float = Field(default=0.0, ge=0.0)
    other_income: float = Field(default=0.0, ge=0.0)
    total_gross: float = Field(default=0.0, ge=0.0)
    unpaid_leave: bool = False
    notes: Optional[str] = None

    @property
    def ordinary_pay(self) -> float:
        return self.ordinary_hours * self.ordinary_rate

    @property
    def overtime_pay(self) -> float:
        return self.overtime_hours * self.overtime_rate

    @property
    def declared_components(self) -> float:
        """Sum of every declared earnings category for the week."""
        return (
            self.ordinary_pay
            + self.overtime_pay
            + self.allowances
            + self.bonuses
            + self.commissions
            + self.other_income
        )


class BonusInclusions(PIAWEModel):
    regular_bonus: bool
    performance_bonus: bool
    annual_bonus: bool


class AdjustmentRules(PIAWEModel):
    base_rate_increase: bool
    industrial_agreement: bool
    inflation_adjustment: bool


class CappingRules(PIAWEModel):
    max_weekly_amount: Optional[float] = None
    max_annual_amount: Optional[float] = None


class ReferencePolicy(PIAWEModel):
    """One row of the final-PIAWE decision table.

    A ``primary_min_weeks`` of None means the jurisdiction's
    ``minimum_weeks_required`` applies.
    """

    primary_min_weeks: Optional[int] = None
    primary_method: str
    fallback_min_weeks: Optional[int] = None
    fallback_method: Optional[str] = None
    fluctuation_flag_threshold: Optional[float] = None
    fluctuation_method: Optional[str] = None


class JurisdictionRules(PIAWEModel):
    jurisdiction: Jurisdiction
    default_reference_period: int = 52
    alternative_reference_periods: Tuple[int, ...]
    minimum_weeks_required: int
    allowance_inclusions: Tuple[str, ...]
    bonus_inclusions: BonusInclusions
    adjustment_rules: AdjustmentRules
    capping_rules: Optional[CappingRules] = None
    overtime_inclusion: OvertimeInclusion
    bonus_regularity_required: bool = False
    average_basis: AverageBasis = AverageBasis.TOTAL
    reference_policy: ReferencePolicy
    fluctuation_warning_threshold: Optional[float] = None
    insufficient_data_message: str
    insufficient_data_action: str
    formula: str
    legislative_reference: str

    @property
    def primary_min_weeks(self) -> int:
        if self.reference_policy.primary_min_weeks is None:
            return self.minimum_weeks_required
        return self.reference_policy.primary_min_weeks

    @property
    def max_weekly_amount(self) -> Optional[float]:
        if self.capping_rules is None:
            return None
        return self.capping_rules.max_weekly_amount


class EarningsTotals(PIAWEModel):
    """Categorised totals for a set of working weeks."""

    ordinary_earnings: float = 0.0
    overtime_earnings: float = 0.0
    allowances_total: float = 0.0
    bonuses_total: float = 0.0
    commissions_total: float = 0.0
    other_income_total: float = 0.0
    total_earnings: float = 0.0
    weekly_totals: Tuple[float, ...] = ()


class PIAWEResult(PIAWEModel):
    total_earnings: float
    total_weeks: int
    average_weekly: float
    ordinary_earnings: float
    overtime_earnings: float
    allowances_total: float
    bonuses_total: float
    commissions_total: float
    other_income_total: float
    excluded_weeks: int
    included_weeks: int
    fluctuation: float = 0.0

    @property
    def components_total(self) -> float:
        return (
            self.ordinary_earnings
            + self.overtime_earnings
            + self.allowances_total
            + self.bonuses_total
            + self.commissions_total
            + self.other_income_total
        )


class PIAWEAdjustment(PIAWEModel):
    id: Optional[str] = None
    type: AdjustmentType
    amount: float
    description: str = ""
    reason: str = ""
    percentage: Optional[float] = None
    applied_date: Optional[date] = None


class ValidationIssue(PIAWEModel):
    type: IssueType
    severity: IssueSeverity
    message: str
    suggested_action: Optional[str] = None
    week_ending: Optional[date] = None


class PIAWEResolution(PIAWEModel):
    selected_piawe: float
    capped_piawe: float
    final_piawe: float
    method_used: str
    capped: bool = False


class PeriodCalculations(PIAWEModel):
    period_52_week: PIAWEResult
    period_13_week: PIAWEResult


class PIAWECalculation(PIAWEModel):
    id: str
    case_id: Optional[str] = None
    worker_id: Optional[str] = None
    jurisdiction: Jurisdiction
    employment_type: EmploymentType = EmploymentType.FULL_TIME
    injury_date: date
    calculation_date: datetime
    reference_periods_used: Tuple[str, ...] = ("52-week", "13-week")
    payslips: Tuple[PayslipEntry, ...]
    calculations: PeriodCalculations
    pre_adjustment_piawe: float
    final_piawe: float
    method_used: str
    adjustments: Tuple[PIAWEAdjustment, ...] = ()
    validation_issues: Tuple[ValidationIssue, ...] = ()
    created_by: str = "System"
    created_at: datetime
    updated_at: datetime

    @property
    def period_52_week(self) -> PIAWEResult:
        return self.calculations.period_52_week

    @property
    def period_13_week(self) -> PIAWEResult:
        return self.calculations.period_13_week

    @property
    def errors(self) -> Tuple[ValidationIssue, ...]:
        return tuple(i for i in self.validation_issues if i.severity == IssueSeverity.ERROR)

    @property
    def warnings(self) -> Tuple[ValidationIssue, ...]:
        return tuple(i for i in self.validation_issues if i.severity == IssueSeverity.WARNING)

    @property
    def has_errors(self) -> bool:
        return len(self.errors) > 0
