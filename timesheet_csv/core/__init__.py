"""
timesheet-csv core library.

This package contains the core functionality:
- parser: format detection, header mapping, date and row parsing
- rules: validation rules, limits and import reports
"""

__all__: list[str] = []
