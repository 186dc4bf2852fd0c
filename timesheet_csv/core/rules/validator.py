"""
Work item validator.

Applies an ordered list of rules to work items, raw rows and batches.
The rule list is plain mutable state: add or remove rules while no
validation is running.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING

from timesheet_csv.core.cancel import check_cancelled
from timesheet_csv.core.parser.errors import ErrorKind, TimesheetError

from .checks import check_date_span, check_rate_consistency, check_total_hours, standard_rules
from .models import ValidationLimits, ValidationRule

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from timesheet_csv.core.cancel import CancelToken
    from timesheet_csv.core.parser.models import WorkItem


class WorkItemValidator:
    """
    Validates work items against an ordered rule list.

    Rules run in registration order; the first failing rule stops the
    check and is named in the error.
    """

    def __init__(
        self,
        limits: ValidationLimits | None = None,
        clock: Callable[[], datetime] | None = None,
        logger: logging.Logger | None = None,
        rules: Sequence[ValidationRule] | None = None,
    ) -> None:
        self.limits = limits or ValidationLimits()
        self.clock = clock or datetime.now
        self.logger = logger or logging.getLogger(__name__)
        if rules is None:
            rules = standard_rules(self.limits, self.clock, self.logger)
        self._rules: list[ValidationRule] = list(rules)

    # -------------------------------------------------------------------------
    # Rule management
    # -------------------------------------------------------------------------

    def add_rule(self, rule: ValidationRule) -> None:
        """Append a rule; it runs after all existing rules."""
        self._rules.append(rule)

    def remove_rule(self, name: str) -> bool:
        """Remove the first rule called ``name``. Returns whether one was removed."""
        for index, rule in enumerate(self._rules):
            if rule.name == name:
                del self._rules[index]
                return True
        return False

    def get_rules(self) -> list[ValidationRule]:
        """Get a copy of the rule list, in application order."""
        return list(self._rules)

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate_item(self, item: WorkItem, *, cancel: CancelToken | None = None) -> None:
        """
        Apply every item-level rule to ``item``.

        Raises:
            TimesheetError: RULE_VIOLATION naming the first failing rule
            OperationCancelled: If ``cancel`` has fired
        """
        check_cancelled(cancel)

        for rule in self._rules:
            if rule.item_validator is None:
                continue
            try:
                rule.item_validator(item)
            except ValueError as e:
                raise TimesheetError(
                    ErrorKind.RULE_VIOLATION,
                    f"validation rule '{rule.name}' failed: {e}",
                    field=rule.name,
                ) from e

    def validate_row(
        self, row: Sequence[str], line: int, *, cancel: CancelToken | None = None
    ) -> None:
        """
        Check a raw row before it is parsed.

        Raises:
            TimesheetError: For empty rows, rows without data, or the first
                failing row-level rule
            OperationCancelled: If ``cancel`` has fired
        """
        check_cancelled(cancel)

        if not row:
            raise TimesheetError(ErrorKind.EMPTY_ROW, "row is empty", line=line)

        if not any(field.strip() for field in row):
            raise TimesheetError(ErrorKind.ROW_NO_DATA, "row contains no data", line=line)

        for rule in self._rules:
            if rule.row_validator is None:
                continue
            try:
                rule.row_validator(row, line)
            except ValueError as e:
                raise TimesheetError(
                    ErrorKind.RULE_VIOLATION,
                    f"row validation rule '{rule.name}' failed: {e}",
                    line=line,
                    field=rule.name,
                ) from e

    def validate_batch(
        self, items: Sequence[WorkItem], *, cancel: CancelToken | None = None
    ) -> None:
        """
        Validate a batch: every item, then the cross-item checks.

        Raises:
            TimesheetError: RULE_VIOLATION for the first bad item (1-based
                index in the message), BATCH_VIOLATION for batch checks
            OperationCancelled: If ``cancel`` fires between items
        """
        check_cancelled(cancel)

        if not items:
            raise TimesheetError(ErrorKind.BATCH_VIOLATION, "no work items to validate")

        self.logger.debug("validating work items batch: count=%d", len(items))

        for index, item in enumerate(items, start=1):
            check_cancelled(cancel)
            try:
                self.validate_item(item)
            except TimesheetError as e:
                raise TimesheetError(
                    e.kind,
                    f"work item {index} validation failed: {e.message}",
                    field=e.field,
                ) from e

        try:
            check_date_span(items, self.limits)
        except ValueError as e:
            raise TimesheetError(
                ErrorKind.BATCH_VIOLATION, f"date range validation failed: {e}"
            ) from e

        check_rate_consistency(items, self.limits, self.logger)

        try:
            check_total_hours(items, self.limits, self.logger)
        except ValueError as e:
            raise TimesheetError(
                ErrorKind.BATCH_VIOLATION, f"total hours validation failed: {e}"
            ) from e

        self.logger.debug("batch validation completed successfully: items=%d", len(items))
