"""
Timesheet Validation Engine.

Provides rule-based validation for parsed work items.

Usage:
    from timesheet_csv.core.parser import parse_timesheet
    from timesheet_csv.core.rules import WorkItemValidator, validate_import

    report = validate_import(open("hours.csv", "rb"))
    for warning in report.warnings:
        print(f"{warning.type}: {warning.message}")
"""

from __future__ import annotations

from .checks import (
    check_date_span,
    check_rate_consistency,
    check_total_hours,
    standard_rules,
)
from .loader import LIMITS_ENV_VAR, LimitsConfigError, load_limits, resolve_limits
from .models import (
    DEFAULT_GENERIC_DESCRIPTIONS,
    ImportWarning,
    ItemCheck,
    RowCheck,
    RuleViolation,
    ValidationLimits,
    ValidationReport,
    ValidationRule,
)
from .report import import_suggestions, import_warnings, validate_import
from .validator import WorkItemValidator

__all__ = [
    "DEFAULT_GENERIC_DESCRIPTIONS",
    "LIMITS_ENV_VAR",
    "ImportWarning",
    "ItemCheck",
    "LimitsConfigError",
    "RowCheck",
    "RuleViolation",
    # Models
    "ValidationLimits",
    "ValidationReport",
    "ValidationRule",
    # Validator
    "WorkItemValidator",
    "check_date_span",
    "check_rate_consistency",
    "check_total_hours",
    "import_suggestions",
    "import_warnings",
    "load_limits",
    "resolve_limits",
    "standard_rules",
    # Main function
    "validate_import",
]
