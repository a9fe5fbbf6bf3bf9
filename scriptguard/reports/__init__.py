"""
reports package for scriptguard

This package contains reporting functionality for presenting findings and
their patches on the console or as JSON.
"""

from .console import (
    format_console_report,
    format_remediation,
    format_summary,
    print_console_report,
)
from .json import generate_json_report, remediation_to_dict, save_json_report

__all__ = [
    "format_console_report",
    "format_remediation",
    "format_summary",
    "print_console_report",
    "generate_json_report",
    "remediation_to_dict",
    "save_json_report",
]
