"""
Parse orchestration.

Start -> read all records -> header -> for each data row: parse, validate,
collect -> summarize. Linear, no retries. The whole input is buffered before
the first row is processed.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING

from timesheet_csv.core.cancel import check_cancelled

from .dates import find_layout
from .detector import analyze_format, is_supported_format
from .encoding import read_source
from .errors import ErrorKind, ParseError, TimesheetError
from .header import build_header_map
from .models import Dialect, FormatInfo, ParseOptions, ParseResult, WorkItem
from .rows import UuidGenerator, parse_row
from .tokenizer import TokenizerError, tokenize_stream

if TYPE_CHECKING:
    from collections.abc import Callable

    from timesheet_csv.core.cancel import CancelToken
    from timesheet_csv.core.rules.validator import WorkItemValidator

    from .encoding import Source
    from .rows import IdGenerator


class TimesheetParser:
    """
    Timesheet parser with injected collaborators.

    Args:
        validator: Per-item validator (defaults to the standard rule set)
        id_generator: Supplies work item IDs (defaults to UUID4)
        clock: Returns the current time (defaults to datetime.now)
        logger: Side-channel logger (defaults to this module's logger)
    """

    def __init__(
        self,
        validator: WorkItemValidator | None = None,
        id_generator: IdGenerator | None = None,
        clock: Callable[[], datetime] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.clock = clock or datetime.now
        self.logger = logger or logging.getLogger(__name__)
        self.id_generator = id_generator or UuidGenerator()

        if validator is None:
            from timesheet_csv.core.rules.validator import WorkItemValidator

            validator = WorkItemValidator(clock=self.clock, logger=self.logger)
        self.validator = validator

    def parse_timesheet(
        self,
        source: Source,
        options: ParseOptions | None = None,
        *,
        cancel: CancelToken | None = None,
        max_bytes: int | None = None,
    ) -> ParseResult:
        """
        Parse a timesheet into work items.

        Args:
            source: Text, bytes or a text/binary stream
            options: Parse options (defaults: detect format, stop on first error)
            cancel: Optional cancellation token
            max_bytes: Maximum input size in bytes (None = unlimited)

        Returns:
            ParseResult with one work item per good row and one ParseError
            per bad row

        Raises:
            TimesheetError: On structural failure, or on the first bad row
                when ``continue_on_error`` is off (no partial result)
            OperationCancelled: If ``cancel`` fires before the parse finishes
        """
        if options is None:
            options = ParseOptions()

        check_cancelled(cancel)
        self.logger.info(
            "starting timesheet parsing (format=%s)", options.format or "auto"
        )

        text, encoding = read_source(source, max_bytes=max_bytes)

        if options.format is None:
            format_name = analyze_format(text, encoding).name
            self.logger.debug("detected format %s", format_name)
        else:
            format_name = options.format

        records = self._read_records(text, Dialect.for_format(format_name))
        if not records:
            raise TimesheetError(ErrorKind.EMPTY_INPUT, "CSV file is empty")

        header_fields, _, _ = records[0]
        try:
            header_map = build_header_map(header_fields)
        except TimesheetError as e:
            raise TimesheetError(
                e.kind, f"header processing failed: {e.message}", line=1, field=e.field
            ) from e

        check_cancelled(cancel)

        date_format = options.date_format
        if date_format and find_layout(date_format) is None:
            self.logger.warning("unknown date format hint %r ignored", date_format)
            date_format = None

        work_items: list[WorkItem] = []
        errors: list[ParseError] = []
        total_rows = 0

        for fields, line, _ in records[1:]:
            check_cancelled(cancel)

            if options.skip_empty_rows and not any(f.strip() for f in fields):
                self.logger.debug("skipping empty row at line %d", line)
                continue

            total_rows += 1

            try:
                item = parse_row(
                    fields,
                    header_map,
                    line,
                    id_generator=self.id_generator,
                    clock=self.clock,
                    date_format=date_format,
                    cancel=cancel,
                )
            except TimesheetError as e:
                errors.append(ParseError.from_error(e, line=line, row=fields))
                if not options.continue_on_error:
                    raise self._abort("parsing failed", line, e) from e
                continue

            try:
                self.validator.validate_item(item, cancel=cancel)
            except TimesheetError as e:
                errors.append(
                    ParseError.from_error(
                        e, line=line, row=fields, message=f"validation failed: {e.message}"
                    )
                )
                if not options.continue_on_error:
                    raise self._abort("validation failed", line, e) from e
                continue

            work_items.append(item)

        result = ParseResult(
            work_items=work_items,
            total_rows=total_rows,
            success_rows=len(work_items),
            error_rows=len(errors),
            errors=errors,
            header_map=header_map,
            format=format_name,
            encoding=encoding,
        )

        self.logger.info(
            "timesheet parsing completed: total_rows=%d success_rows=%d error_rows=%d",
            result.total_rows,
            result.success_rows,
            result.error_rows,
        )
        return result

    def detect_format(
        self,
        source: Source,
        *,
        cancel: CancelToken | None = None,
        max_bytes: int | None = None,
    ) -> FormatInfo:
        """
        Detect the format of a timesheet source.

        Raises:
            TimesheetError: If the content is empty or the format is unclear
        """
        check_cancelled(cancel)

        text, encoding = read_source(source, max_bytes=max_bytes)
        try:
            info = analyze_format(text, encoding)
        except TimesheetError as e:
            raise TimesheetError(e.kind, f"format detection failed: {e.message}") from e

        self.logger.debug(
            "format detection completed: format=%s delimiter=%r", info.name, info.delimiter
        )
        return info

    def validate_format(
        self,
        source: Source,
        *,
        cancel: CancelToken | None = None,
        max_bytes: int | None = None,
    ) -> None:
        """
        Check that a source is in a supported format.

        Raises:
            TimesheetError: If detection fails or the format is unsupported
        """
        check_cancelled(cancel)

        info = self.detect_format(source, cancel=cancel, max_bytes=max_bytes)
        if not is_supported_format(info):
            raise TimesheetError(
                ErrorKind.UNSUPPORTED_FORMAT, f"unsupported CSV format: {info.name}"
            )

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    @staticmethod
    def _read_records(text: str, dialect: Dialect) -> list[tuple[list[str], int, int]]:
        try:
            return list(tokenize_stream(text, dialect))
        except TokenizerError as e:
            raise TimesheetError(
                ErrorKind.READ_FAILED, f"failed to read CSV data: {e}", line=e.line
            ) from e

    @staticmethod
    def _abort(stage: str, line: int, cause: TimesheetError) -> TimesheetError:
        return TimesheetError(
            ErrorKind.ROW_FAILED,
            f"{stage} at line {line}: {cause.message}",
            line=line,
            field=cause.field,
            value=cause.value,
        )
