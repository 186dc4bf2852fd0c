"""
Standard validation rules and batch checks.

Every check raises RuleViolation with a user-displayable message; "flag"
thresholds (very high hours or rates, many distinct rates) are only logged.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import TYPE_CHECKING

from timesheet_csv.core.parser.dates import add_months

from .models import RuleViolation, ValidationLimits, ValidationRule

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from timesheet_csv.core.parser.models import WorkItem


def standard_rules(
    limits: ValidationLimits | None = None,
    clock: Callable[[], datetime] = datetime.now,
    logger: logging.Logger | None = None,
) -> list[ValidationRule]:
    """
    Build the standard rule set, in application order.

    Args:
        limits: Thresholds (defaults to ValidationLimits())
        clock: Current time for the date window
        logger: Receives the "flag, don't fail" notices
    """
    limits = limits or ValidationLimits()
    log = logger or logging.getLogger(__name__)

    return [
        ValidationRule(
            name="date",
            description="Work dates are set and within the accepted window",
            item_validator=date_check(limits, clock),
        ),
        ValidationRule(
            name="hours",
            description="Hours are positive, at most a day and in hundredths",
            item_validator=hours_check(limits, log),
        ),
        ValidationRule(
            name="rate",
            description="Hourly rates are within a plausible range",
            item_validator=rate_check(limits, log),
        ),
        ValidationRule(
            name="description",
            description="Work descriptions are specific",
            item_validator=description_check(limits),
        ),
        ValidationRule(
            name="total",
            description="Totals match hours times rate",
            item_validator=total_check(limits),
        ),
        ValidationRule(
            name="row_format",
            description="Raw rows have a plausible number of fields",
            row_validator=row_format_check(limits),
        ),
    ]


# =============================================================================
# Item Checks
# =============================================================================


def date_check(
    limits: ValidationLimits, clock: Callable[[], datetime]
) -> Callable[[WorkItem], None]:
    def check(item: WorkItem) -> None:
        if item.date == date.min:
            raise RuleViolation("work date cannot be empty")

        now = clock()
        start_of_day = datetime.combine(item.date, time.min, tzinfo=now.tzinfo)

        if start_of_day > now + timedelta(days=limits.future_days):
            raise RuleViolation(
                f"work date is too far in the future "
                f"(more than {limits.future_days} days from now): {item.date.isoformat()}"
            )

        if start_of_day < add_months(now, -12 * limits.past_years):
            raise RuleViolation(
                f"work date is too far in the past "
                f"(more than {limits.past_years} years ago): {item.date.isoformat()}"
            )

    return check


def hours_check(
    limits: ValidationLimits, logger: logging.Logger
) -> Callable[[WorkItem], None]:
    step = Decimal(1).scaleb(-limits.max_hours_decimals)

    def check(item: WorkItem) -> None:
        if item.hours <= 0:
            raise RuleViolation(f"hours must be positive, got {item.hours}")

        if item.hours > limits.max_hours:
            raise RuleViolation(
                f"hours cannot exceed {limits.max_hours} per day, got {item.hours}"
            )

        if item.hours > limits.warn_hours:
            logger.debug("unusually high hours detected: %s on %s", item.hours, item.date)

        if item.hours.quantize(step) != item.hours:
            raise RuleViolation(
                f"hours should not have more than {limits.max_hours_decimals} "
                f"decimal places, got {item.hours}"
            )

    return check


def rate_check(
    limits: ValidationLimits, logger: logging.Logger
) -> Callable[[WorkItem], None]:
    def check(item: WorkItem) -> None:
        if item.rate <= 0:
            raise RuleViolation(f"hourly rate must be positive, got {item.rate}")

        if item.rate < limits.min_rate:
            raise RuleViolation(f"hourly rate seems too low: {item.rate} per hour")

        if item.rate > limits.max_rate:
            raise RuleViolation(f"hourly rate seems too high: {item.rate} per hour")

        if item.rate > limits.warn_rate:
            logger.debug("unusually high rate detected: %s on %s", item.rate, item.date)

    return check


def description_check(limits: ValidationLimits) -> Callable[[WorkItem], None]:
    generic = frozenset(word.lower() for word in limits.generic_descriptions)

    def check(item: WorkItem) -> None:
        description = item.description.strip()

        if not description:
            raise RuleViolation("work description cannot be empty")

        if len(description) < limits.min_description_length:
            raise RuleViolation(
                f"work description too short: '{description}' "
                f"(minimum {limits.min_description_length} characters)"
            )

        if len(description) > limits.max_description_length:
            raise RuleViolation(
                f"work description too long: {len(description)} characters "
                f"(maximum {limits.max_description_length})"
            )

        if description.lower() in generic:
            raise RuleViolation(
                f"work description too generic: '{description}' (please be more specific)"
            )

    return check


def total_check(limits: ValidationLimits) -> Callable[[WorkItem], None]:
    def check(item: WorkItem) -> None:
        expected = item.hours * item.rate
        if abs(item.total - expected) > limits.total_tolerance:
            raise RuleViolation(
                f"total amount does not match calculated value {item.total} vs {expected} "
                f"(hours: {item.hours}, rate: {item.rate})"
            )

    return check


# =============================================================================
# Row Checks
# =============================================================================


def row_format_check(limits: ValidationLimits) -> Callable[[Sequence[str], int], None]:
    def check(row: Sequence[str], line: int) -> None:
        if len(row) < limits.min_row_fields:
            raise RuleViolation(
                f"row has invalid number of fields: has {len(row)} fields, expected at "
                f"least {limits.min_row_fields} (date, hours, rate, description)"
            )

        if len(row) > limits.max_row_fields:
            raise RuleViolation(
                f"row has too many fields: has {len(row)} fields, which seems excessive "
                f"(maximum expected: {limits.max_row_fields})"
            )

    return check


# =============================================================================
# Batch Checks
# =============================================================================


def check_date_span(items: Sequence[WorkItem], limits: ValidationLimits) -> None:
    """Fail if the items span more than ``max_date_span_days``."""
    if len(items) <= 1:
        return

    first = min(item.date for item in items)
    last = max(item.date for item in items)
    if (last - first).days > limits.max_date_span_days:
        raise RuleViolation(
            f"work item date range is too large: {first.isoformat()} to {last.isoformat()} "
            f"(more than {limits.max_date_span_days} days)"
        )


def check_rate_consistency(
    items: Sequence[WorkItem], limits: ValidationLimits, logger: logging.Logger
) -> None:
    """Log when a batch mixes many different rates. Never fails."""
    if len(items) <= 1:
        return

    distinct = {item.rate for item in items}
    if len(distinct) > limits.distinct_rate_warning:
        logger.warning("multiple different rates detected: %d unique rates", len(distinct))


def check_total_hours(
    items: Sequence[WorkItem], limits: ValidationLimits, logger: logging.Logger
) -> None:
    """Fail if the batch has no hours at all."""
    total_hours = sum((item.hours for item in items), Decimal("0"))

    if total_hours > limits.total_hours_notice:
        logger.debug("large total hours detected: %s", total_hours)

    if total_hours == 0:
        raise RuleViolation("total hours cannot be zero")
