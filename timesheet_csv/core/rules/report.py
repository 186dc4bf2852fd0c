"""
Import validation report.

Dry-run of an import: parse every row, validate the batch, and collect
warnings and suggestions without stopping at the first bad row.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from timesheet_csv.core.parser import ParseOptions, TimesheetError, TimesheetParser

from .models import ImportWarning, ValidationLimits, ValidationReport
from .validator import WorkItemValidator

if TYPE_CHECKING:
    from collections.abc import Sequence

    from timesheet_csv.core.cancel import CancelToken
    from timesheet_csv.core.parser import ParseResult, Source, WorkItem

logger = logging.getLogger(__name__)

FORMAT_SUGGESTION = "Check file format and field mappings"

ROW_ERROR_SUGGESTIONS: tuple[str, ...] = (
    "Check data format in rows with errors",
    "Ensure dates are in YYYY-MM-DD format",
    "Verify numeric fields (hours, rates) contain valid numbers",
)

BATCH_ERROR_SUGGESTIONS: tuple[str, ...] = (
    "Review work item validation rules",
    "Check for unusual values (very high hours, extreme rates)",
)

EMPTY_FILE_SUGGESTIONS: tuple[str, ...] = (
    "File appears to be empty or header-only",
    "Ensure CSV contains data rows after header",
)

WEEKEND = (5, 6)


def validate_import(
    source: Source,
    options: ParseOptions | None = None,
    *,
    parser: TimesheetParser | None = None,
    validator: WorkItemValidator | None = None,
    cancel: CancelToken | None = None,
    max_bytes: int | None = None,
) -> ValidationReport:
    """
    Validate a timesheet without importing it.

    ``continue_on_error`` is forced on whatever ``options`` says, so a bad row
    is reported in ``parse_result.errors`` instead of aborting the check.

    Args:
        source: Text, bytes or a text/binary stream
        options: Parse options
        parser: Parser to use (defaults to one sharing ``validator``)
        validator: Validator for the batch check (defaults to the parser's)
        cancel: Optional cancellation token
        max_bytes: Maximum input size in bytes (None = unlimited)

    Returns:
        ValidationReport; ``valid`` only when no row failed and the batch passed

    Raises:
        OperationCancelled: If ``cancel`` fires
    """
    options = (options or ParseOptions()).model_copy(update={"continue_on_error": True})

    if parser is None:
        parser = TimesheetParser(validator=validator)
    if validator is None:
        validator = parser.validator

    logger.info("starting import validation (format=%s)", options.format or "auto")

    try:
        result = parser.parse_timesheet(source, options, cancel=cancel, max_bytes=max_bytes)
    except TimesheetError as e:
        logger.info("import validation failed: %s", e.message)
        return ValidationReport(
            valid=False,
            error=f"failed to parse data: {e.message}",
            suggestions=[FORMAT_SUGGESTION],
        )

    batch_error: str | None = None
    try:
        validator.validate_batch(result.work_items, cancel=cancel)
    except TimesheetError as e:
        batch_error = e.message

    valid = result.error_rows == 0 and batch_error is None

    report = ValidationReport(
        valid=valid,
        parse_result=result,
        batch_error=batch_error,
        warnings=import_warnings(result.work_items, validator.limits),
        suggestions=import_suggestions(result, batch_error),
        estimated_total=result.total_amount,
    )

    logger.info(
        "import validation completed: valid=%s work_items=%d", valid, len(result.work_items)
    )
    return report


def import_suggestions(result: ParseResult, batch_error: str | None) -> list[str]:
    """Suggest fixes for row errors, batch errors and empty files."""
    suggestions: list[str] = []

    if result.error_rows > 0:
        suggestions.extend(ROW_ERROR_SUGGESTIONS)

    if batch_error is not None:
        suggestions.extend(BATCH_ERROR_SUGGESTIONS)

    if not result.work_items:
        suggestions.extend(EMPTY_FILE_SUGGESTIONS)

    return suggestions


def import_warnings(
    items: Sequence[WorkItem], limits: ValidationLimits | None = None
) -> list[ImportWarning]:
    """Flag weekend work and unusually long days. Weekend warnings come first."""
    limits = limits or ValidationLimits()
    warnings: list[ImportWarning] = []

    for item in items:
        if item.date.weekday() in WEEKEND:
            warnings.append(
                ImportWarning(
                    type="weekend_work",
                    message=f"Work item on weekend: {item.date.isoformat()}",
                    item_id=item.id,
                )
            )

    for item in items:
        if item.hours > limits.high_hours_warning:
            warnings.append(
                ImportWarning(
                    type="high_hours",
                    message=f"High hours on {item.date.isoformat()}: {item.hours} hours",
                    item_id=item.id,
                )
            )

    return warnings
