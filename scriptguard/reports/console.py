"""
console.py - Console/terminal reporting for scriptguard

This module formats findings and their patches for terminal output.
"""

import os
import sys
from datetime import datetime
from typing import Any, Dict, List, Optional, TextIO

import click

from ..core import SEVERITY_LEVELS
from ..patch.batch import Remediation

COLORS = {
    "CRITICAL": "bright_red",
    "HIGH": "red",
    "MEDIUM": "yellow",
    "LOW": "blue",
}


def get_severity_symbol(severity: str) -> str:
    """Get a symbol representing the severity level"""
    if severity == "CRITICAL":
        return "🚨"
    elif severity == "HIGH":
        return "❗"
    elif severity == "MEDIUM":
        return "⚠️"
    elif severity == "LOW":
        return "ℹ️"
    else:
        return "✓"


def colorize(text: str, color: str) -> str:
    """Apply a click color unless NO_COLOR is set"""
    if os.environ.get("NO_COLOR"):
        return text

    return click.style(text, fg=color)


def colorize_patch(patch: str) -> str:
    """Color added lines green and removed lines red, leaving headers alone"""
    lines = []
    for line in patch.splitlines():
        if line.startswith(("+++", "---")):
            lines.append(colorize(line, "white"))
        elif line.startswith("+"):
            lines.append(colorize(line, "green"))
        elif line.startswith("-"):
            lines.append(colorize(line, "red"))
        elif line.startswith("@@"):
            lines.append(colorize(line, "cyan"))
        else:
            lines.append(line)
    return "\n".join(lines) + "\n"


def format_remediation(remediation: Remediation, show_patch: bool = True) -> str:
    """
    Format a single finding and its patch for console output

    Args:
        remediation: Finding with its patch
        show_patch: Whether to include the diff itself

    Returns:
        Formatted finding as string
    """
    finding = remediation.finding
    severity = str(finding.severity)
    symbol = get_severity_symbol(severity)

    formatted = f"{symbol} {colorize(severity, COLORS.get(severity, 'white'))}: {finding.message}\n"
    formatted += f"  File: {finding.path}:{finding.offset}\n"

    if remediation.can_fix:
        formatted += f"  Fix: move the expression to the env variable {remediation.envvar_name}\n"
        if show_patch:
            formatted += "\n" + colorize_patch(remediation.patch)
    else:
        formatted += "  Fix: no automated patch available\n"

    return formatted


def format_summary(stats: Dict[str, Any], remediations: List[Remediation]) -> str:
    """
    Format summary statistics

    Args:
        stats: Statistics dictionary from the scan
        remediations: Remediations produced for the findings

    Returns:
        Formatted summary as string
    """
    output = f"\n{click.style('Scan Summary', bold=True)}\n"
    output += "=" * 50 + "\n"

    output += f"Total files scanned: {stats.get('total_files', 0)}\n"
    output += f"Total issues found: {stats.get('total_findings', 0)}\n"
    output += f"Patches generated: {sum(1 for r in remediations if r.can_fix)}\n"

    severity_counts = stats.get("severity_counts", {})
    if any(severity_counts.get(level, 0) for level in SEVERITY_LEVELS):
        output += "\nIssues by severity:\n"
        for level in SEVERITY_LEVELS:
            count = severity_counts.get(level, 0)
            if count > 0:
                output += f"  {colorize(level, COLORS.get(level, 'white'))}: {count}\n"

    start_time = stats.get("start_time")
    end_time = stats.get("end_time")
    if start_time and end_time:
        try:
            start = datetime.fromisoformat(start_time)
            end = datetime.fromisoformat(end_time)
            duration = (end - start).total_seconds()
            output += f"\nScan duration: {duration:.2f} seconds\n"
        except (ValueError, TypeError):
            pass

    return output


def format_console_report(
    remediations: List[Remediation],
    stats: Dict[str, Any],
    show_patches: bool = True,
    show_summary: bool = True,
) -> str:
    """
    Generate a complete console report

    Args:
        remediations: Findings with their patches
        stats: Statistics dictionary
        show_patches: Whether to print the diffs
        show_summary: Whether to include summary statistics

    Returns:
        Complete formatted report as string
    """
    if not remediations:
        output = "No script injections found.\n"
    else:
        output = ""
        current_path = None
        for remediation in remediations:
            if remediation.finding.path != current_path:
                current_path = remediation.finding.path
                output += f"\n{click.style('File: ' + current_path, bold=True)}\n"
            output += format_remediation(remediation, show_patches) + "\n"

    if show_summary:
        output += format_summary(stats, remediations)

    return output


def print_console_report(
    remediations: List[Remediation],
    stats: Dict[str, Any],
    show_patches: bool = True,
    show_summary: bool = True,
    output_stream: Optional[TextIO] = None,
) -> None:
    """Print the console report, to stdout unless another stream is given"""
    report = format_console_report(
        remediations, stats, show_patches=show_patches, show_summary=show_summary
    )

    if output_stream is None:
        output_stream = sys.stdout

    output_stream.write(report)
    output_stream.flush()
