"""Optional integration tests against real-world timesheet exports.

These tests are skipped by default and only run when `TIMESHEET_CSV_INTEGRATION_DIR`
is set to a directory containing `.csv` files.
"""

from __future__ import annotations

import json
import os
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path

import pytest
from typer.testing import CliRunner

from timesheet_csv.cli.main import app

runner = CliRunner()


def _get_integration_dir() -> Path:
    value = os.environ.get("TIMESHEET_CSV_INTEGRATION_DIR")
    if not value:
        pytest.skip("Set TIMESHEET_CSV_INTEGRATION_DIR to run integration tests.")

    path = Path(value)
    if not path.exists() or not path.is_dir():
        pytest.skip(f"TIMESHEET_CSV_INTEGRATION_DIR is not a directory: {path}")

    return path


def _get_limit() -> int:
    raw = os.environ.get("TIMESHEET_CSV_INTEGRATION_LIMIT", "10").strip()
    if not raw:
        return 10
    try:
        value = int(raw)
    except ValueError:
        pytest.skip("TIMESHEET_CSV_INTEGRATION_LIMIT must be an integer.")
    return value


def _files() -> list[Path]:
    integration_dir = _get_integration_dir()
    limit = _get_limit()

    files = sorted(
        p for p in integration_dir.rglob("*.csv") if p.is_file() and not p.name.startswith(".")
    )
    if not files:
        pytest.skip(f"No .csv files found under: {integration_dir}")

    return files if limit <= 0 else files[:limit]


def test_check_real_exports_as_json() -> None:
    for file_path in _files():
        result = runner.invoke(app, ["check", str(file_path), "--output", "json"])

        assert result.exit_code in (0, 1, 2), (file_path, result.exit_code, result.output)
        report = json.loads(result.stdout)
        assert (result.exit_code == 0) == report["valid"]

        parsed = report["parse_result"]
        if parsed is None:
            assert report["error"].startswith("failed to parse data:")
            continue
        assert Decimal(report["estimated_total"]) == Decimal(parsed["summary"]["total_amount"])


def test_parse_real_exports_keeps_row_counts() -> None:
    for file_path in _files():
        result = runner.invoke(
            app, ["parse", str(file_path), "--continue-on-error", "--output", "json"]
        )
        if result.exit_code == 2:
            # Structural failure: nothing to count
            continue

        data = json.loads(result.stdout)
        summary = data["summary"]
        assert summary["success_rows"] + summary["error_rows"] == summary["total_rows"]
        assert len(data["work_items"]) == summary["success_rows"]
        assert len(data["errors"]) == summary["error_rows"]
        assert all(error["line"] >= 1 for error in data["errors"])

        for item in data["work_items"]:
            expected = (Decimal(item["hours"]) * Decimal(item["rate"])).quantize(
                Decimal("0.01"), rounding=ROUND_HALF_UP
            )
            assert Decimal(item["total"]) == expected, (file_path, item["id"])
