"""
Main CLI application.

Entry point for the timesheet-csv command.
"""

from __future__ import annotations

import os
from pathlib import Path  # noqa: TC003
from typing import TYPE_CHECKING, Annotated

import typer

import timesheet_csv
from timesheet_csv.cli.context import CliContext, ExitCode, get_exit_code
from timesheet_csv.cli.log import setup_logging
from timesheet_csv.cli.output import OutputFormat, get_output_adapter

if TYPE_CHECKING:
    from timesheet_csv.cli.output import OutputAdapter
    from timesheet_csv.core.parser import FormatName

# Default input size limit for CLI usage (can be overridden via flag/env).
_DEFAULT_MAX_BYTES = 100 * 1024 * 1024  # 100 MiB

MAX_BYTES_ENV_VAR = "TIMESHEET_CSV_MAX_BYTES"


def _resolve_max_bytes(max_bytes: int | None) -> int | None:
    if max_bytes is not None:
        return None if max_bytes <= 0 else max_bytes

    env_value = os.environ.get(MAX_BYTES_ENV_VAR)
    if env_value:
        try:
            parsed = int(env_value)
        except ValueError:
            raise typer.BadParameter(f"{MAX_BYTES_ENV_VAR} must be an integer") from None
        return None if parsed <= 0 else parsed

    return _DEFAULT_MAX_BYTES


def _resolve_input_format(value: str | None) -> FormatName | None:
    from timesheet_csv.core.parser import FormatName

    if value is None:
        return None
    try:
        return FormatName(value.strip().lower())
    except ValueError:
        choices = ", ".join(f.value for f in FormatName)
        typer.echo(f"Unknown input format: {value}", err=True)
        typer.echo(f"Available formats: {choices}", err=True)
        raise typer.Exit(ExitCode.USAGE) from None


def _get_adapter(ctx: CliContext) -> OutputAdapter:
    try:
        return get_output_adapter(OutputFormat(ctx.output), color=ctx.color)
    except ValueError:
        typer.echo(f"Unknown output format: {ctx.output}", err=True)
        typer.echo("Available formats: terminal, json", err=True)
        raise typer.Exit(ExitCode.USAGE) from None


def _emit(ctx: CliContext, rendered: str) -> None:
    """Write rendered output to the output file or stdout."""
    if ctx.output_file:
        ctx.output_file.write_text(rendered, encoding="utf-8")
        if not ctx.quiet:
            typer.echo(f"Output written to {ctx.output_file}")
    else:
        typer.echo(rendered)


# Create main app
app = typer.Typer(
    name="timesheet-csv",
    help="Timesheet CSV parser and validator",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"timesheet-csv {timesheet_csv.__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """Timesheet CSV parser and validator."""
    pass


# =============================================================================
# Parse Command
# =============================================================================


@app.command()
def parse(
    file: Annotated[Path, typer.Argument(help="Timesheet file to parse", exists=True)],
    input_format: Annotated[
        str | None,
        typer.Option(
            "--format",
            "-f",
            help="Input format: standard, tab, semicolon, excel, rfc4180, tsv (default: detect)",
        ),
    ] = None,
    continue_on_error: Annotated[
        bool,
        typer.Option("--continue-on-error", help="Collect bad rows instead of stopping"),
    ] = False,
    skip_empty_rows: Annotated[
        bool,
        typer.Option("--skip-empty-rows", help="Ignore rows whose fields are all blank"),
    ] = False,
    date_format: Annotated[
        str | None,
        typer.Option("--date-format", help="Preferred date layout, e.g. DD/MM/YYYY"),
    ] = None,
    output: Annotated[
        str,
        typer.Option("--output", help="Output format: terminal, json"),
    ] = "terminal",
    out: Annotated[
        Path | None,
        typer.Option("--out", help="Write output to file"),
    ] = None,
    color: Annotated[
        bool,
        typer.Option("--color/--no-color", help="Enable/disable colored output"),
    ] = True,
    max_bytes: Annotated[
        int | None,
        typer.Option(
            "--max-bytes",
            help="Maximum input size in bytes (0 = unlimited). Defaults to TIMESHEET_CSV_MAX_BYTES or 100MiB.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging"),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Suppress non-error output"),
    ] = False,
) -> None:
    """Parse a timesheet file into work items."""
    from timesheet_csv.core.parser import ParseOptions, TimesheetError, parse_timesheet

    ctx = CliContext(
        output=output,
        output_file=out,
        color=color,
        quiet=quiet,
        verbose=verbose,
        max_bytes=_resolve_max_bytes(max_bytes),
    )
    setup_logging(verbose=ctx.verbose, quiet=ctx.quiet)
    adapter = _get_adapter(ctx)

    options = ParseOptions(
        format=_resolve_input_format(input_format),
        continue_on_error=continue_on_error,
        skip_empty_rows=skip_empty_rows,
        date_format=date_format,
    )

    try:
        with file.open("rb") as f:
            result = parse_timesheet(f, options, max_bytes=ctx.max_bytes)
    except TimesheetError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(get_exit_code(e.kind.structural, True)) from None
    except OSError as e:
        typer.echo(f"Error reading file: {e}", err=True)
        raise typer.Exit(ExitCode.FATAL) from None

    _emit(ctx, adapter.render_result(result))
    raise typer.Exit(get_exit_code(False, result.has_errors))


# =============================================================================
# Detect Command
# =============================================================================


@app.command()
def detect(
    file: Annotated[Path, typer.Argument(help="Timesheet file to inspect", exists=True)],
    output: Annotated[
        str,
        typer.Option("--output", help="Output format: terminal, json"),
    ] = "terminal",
    color: Annotated[
        bool,
        typer.Option("--color/--no-color", help="Enable/disable colored output"),
    ] = True,
    max_bytes: Annotated[
        int | None,
        typer.Option(
            "--max-bytes",
            help="Maximum input size in bytes (0 = unlimited). Defaults to TIMESHEET_CSV_MAX_BYTES or 100MiB.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging"),
    ] = False,
) -> None:
    """Detect the delimiter and shape of a timesheet file."""
    from timesheet_csv.core.parser import TimesheetError, detect_format, is_supported_format

    ctx = CliContext(
        output=output, color=color, verbose=verbose, max_bytes=_resolve_max_bytes(max_bytes)
    )
    setup_logging(verbose=ctx.verbose)
    adapter = _get_adapter(ctx)

    try:
        with file.open("rb") as f:
            info = detect_format(f, max_bytes=ctx.max_bytes)
    except TimesheetError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(ExitCode.FATAL) from None
    except OSError as e:
        typer.echo(f"Error reading file: {e}", err=True)
        raise typer.Exit(ExitCode.FATAL) from None

    _emit(ctx, adapter.render_format(info))
    if not is_supported_format(info):
        raise typer.Exit(ExitCode.FATAL)
    raise typer.Exit(ExitCode.SUCCESS)


# =============================================================================
# Check Command
# =============================================================================


@app.command()
def check(
    file: Annotated[Path, typer.Argument(help="Timesheet file to validate", exists=True)],
    input_format: Annotated[
        str | None,
        typer.Option(
            "--format",
            "-f",
            help="Input format: standard, tab, semicolon, excel, rfc4180, tsv (default: detect)",
        ),
    ] = None,
    skip_empty_rows: Annotated[
        bool,
        typer.Option("--skip-empty-rows", help="Ignore rows whose fields are all blank"),
    ] = False,
    date_format: Annotated[
        str | None,
        typer.Option("--date-format", help="Preferred date layout, e.g. DD/MM/YYYY"),
    ] = None,
    limits: Annotated[
        Path | None,
        typer.Option(
            "--limits",
            help="YAML file with validation limits. Defaults to TIMESHEET_CSV_LIMITS.",
        ),
    ] = None,
    output: Annotated[
        str,
        typer.Option("--output", help="Output format: terminal, json"),
    ] = "terminal",
    out: Annotated[
        Path | None,
        typer.Option("--out", help="Write output to file"),
    ] = None,
    color: Annotated[
        bool,
        typer.Option("--color/--no-color", help="Enable/disable colored output"),
    ] = True,
    max_bytes: Annotated[
        int | None,
        typer.Option(
            "--max-bytes",
            help="Maximum input size in bytes (0 = unlimited). Defaults to TIMESHEET_CSV_MAX_BYTES or 100MiB.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging"),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Suppress non-error output"),
    ] = False,
) -> None:
    """Validate a timesheet for import without importing it."""
    from timesheet_csv.core.parser import ParseOptions, TimesheetParser
    from timesheet_csv.core.rules import (
        LimitsConfigError,
        WorkItemValidator,
        resolve_limits,
        validate_import,
    )

    ctx = CliContext(
        output=output,
        output_file=out,
        color=color,
        quiet=quiet,
        verbose=verbose,
        max_bytes=_resolve_max_bytes(max_bytes),
        limits_file=limits,
    )
    setup_logging(verbose=ctx.verbose, quiet=ctx.quiet)
    adapter = _get_adapter(ctx)

    try:
        validation_limits = resolve_limits(ctx.limits_file)
    except LimitsConfigError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(ExitCode.CONFIG) from None

    options = ParseOptions(
        format=_resolve_input_format(input_format),
        skip_empty_rows=skip_empty_rows,
        date_format=date_format,
    )
    validator = WorkItemValidator(limits=validation_limits)

    try:
        with file.open("rb") as f:
            report = validate_import(
                f,
                options,
                parser=TimesheetParser(validator=validator),
                max_bytes=ctx.max_bytes,
            )
    except OSError as e:
        typer.echo(f"Error reading file: {e}", err=True)
        raise typer.Exit(ExitCode.FATAL) from None

    _emit(ctx, adapter.render_report(report))
    raise typer.Exit(get_exit_code(report.error is not None, not report.valid))


# =============================================================================
# CLI Entry Point
# =============================================================================


def run() -> None:
    """Run the CLI application."""
    app()


if __name__ == "__main__":
    run()
