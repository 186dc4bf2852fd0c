"""
timesheet-csv: timesheet CSV parser and validator.

A library and CLI tool for turning delimiter-separated timesheet exports
into validated work items ready for invoicing.

Usage:
    from timesheet_csv.core.parser import parse_timesheet
    result = parse_timesheet(open("hours.csv", "rb"))
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
