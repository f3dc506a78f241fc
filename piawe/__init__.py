"""Pre-Injury Average Weekly Earnings (PIAWE) calculation engine."""

from .calculator import PIAWECalculator, calculate_piawe
from .jurisdictions import get_rules, rule_table
from .models import (
    AdjustmentType,
    IssueSeverity,
    IssueType,
    Jurisdiction,
    JurisdictionRules,
    PayslipEntry,
    PIAWEAdjustment,
    PIAWECalculation,
    PIAWEResult,
    ValidationIssue,
)

__version__ = "1.0.0"

__all__ = [
    "PIAWECalculator",
    "calculate_piawe",
    "get_rules",
    "rule_table",
    "AdjustmentType",
    "IssueSeverity",
    "IssueType",
    "Jurisdiction",
    "JurisdictionRules",
    "PayslipEntry",
    "PIAWEAdjustment",
    "PIAWECalculation",
    "PIAWEResult",
    "ValidationIssue",
]
