"""
test_console_report.py - Tests for console output formatting
"""

import io
import os
from unittest.mock import patch

import click
import pytest

from scriptguard.core import Finding
from scriptguard.patch.batch import Remediation
from scriptguard.reports.console import (
    colorize,
    colorize_patch,
    format_console_report,
    format_remediation,
    format_summary,
    get_severity_symbol,
    print_console_report,
)

PATCH = "--- a/ci.yml\n+++ b/ci.yml\n@@ -1 +1 @@\n-old\n+new\n"


@pytest.fixture
def remediations():
    fixed = Finding(path="ci.yml", snippet="github.head_ref", offset=5)
    unfixed = Finding(path="ci.yml", snippet="github.event.discussion.title", offset=9)
    return [
        Remediation(finding=fixed, patch=PATCH, envvar_name="HEAD_REF"),
        Remediation(finding=unfixed, patch=""),
    ]


@pytest.fixture
def stats():
    return {
        "start_time": "2026-01-01T10:00:00",
        "end_time": "2026-01-01T10:00:02.500000",
        "total_files": 1,
        "total_findings": 2,
        "severity_counts": {"LOW": 0, "MEDIUM": 0, "HIGH": 2, "CRITICAL": 0},
    }


@pytest.fixture
def no_color():
    with patch.dict(os.environ, {"NO_COLOR": "1"}):
        yield


def test_get_severity_symbol():
    assert get_severity_symbol("CRITICAL") == "🚨"
    assert get_severity_symbol("HIGH") == "❗"
    assert get_severity_symbol("UNKNOWN") == "✓"


def test_colorize():
    with patch.dict(os.environ, {"NO_COLOR": ""}):
        assert colorize("Test", "red") == click.style("Test", fg="red")

    with patch.dict(os.environ, {"NO_COLOR": "1"}):
        assert colorize("Test", "red") == "Test"


def test_colorize_patch(no_color):
    assert colorize_patch(PATCH) == PATCH

    with patch.dict(os.environ, {"NO_COLOR": ""}):
        colored = colorize_patch(PATCH)
    assert click.style("+new", fg="green") in colored
    assert click.style("-old", fg="red") in colored


def test_format_remediation(no_color, remediations):
    fixed, unfixed = (format_remediation(r) for r in remediations)

    assert "HIGH: Untrusted input 'github.head_ref' used directly in a run command" in fixed
    assert "File: ci.yml:5" in fixed
    assert "env variable HEAD_REF" in fixed
    assert PATCH in fixed

    assert "File: ci.yml:9" in unfixed
    assert "no automated patch available" in unfixed


def test_format_remediation_without_patch(no_color, remediations):
    formatted = format_remediation(remediations[0], show_patch=False)
    assert "env variable HEAD_REF" in formatted
    assert "+new" not in formatted


def test_format_summary(no_color, remediations, stats):
    summary = format_summary(stats, remediations)

    assert "Total files scanned: 1" in summary
    assert "Total issues found: 2" in summary
    assert "Patches generated: 1" in summary
    assert "HIGH: 2" in summary
    assert "MEDIUM" not in summary
    assert "Scan duration: 2.50 seconds" in summary


def test_format_console_report(no_color, remediations, stats):
    report = format_console_report(remediations, stats)

    assert report.count(click.style("File: ci.yml", bold=True)) == 1
    assert "Scan Summary" in report

    no_summary = format_console_report(remediations, stats, show_summary=False)
    assert "Scan Summary" not in no_summary


def test_format_console_report_empty(stats):
    report = format_console_report([], stats, show_summary=False)
    assert report == "No script injections found.\n"


def test_print_console_report(no_color, remediations, stats):
    stream = io.StringIO()
    print_console_report(remediations, stats, output_stream=stream)
    assert stream.getvalue() == format_console_report(remediations, stats)
