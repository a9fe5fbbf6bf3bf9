"""
json.py - JSON reporting for scriptguard

This module formats findings and their patches as JSON, suitable for machine
processing or integration with other tools.
"""

import json
from datetime import datetime
from typing import Any, Dict, List

from ..patch.batch import Remediation
from ..utils.version import __version__


def remediation_to_dict(remediation: Remediation) -> Dict[str, Any]:
    """
    Convert a Remediation to a dictionary suitable for JSON serialization

    Args:
        remediation: Finding with its patch

    Returns:
        Dictionary representation; ``patch`` is omitted when there is none
    """
    result = remediation.finding.to_dict()
    result["can_fix"] = remediation.can_fix

    if remediation.envvar_name:
        result["envvar_name"] = remediation.envvar_name
    if remediation.patch:
        result["patch"] = remediation.patch

    return result


def generate_json_report(
    remediations: List[Remediation], stats: Dict[str, Any], include_stats: bool = True
) -> str:
    """
    Generate a JSON report of findings, patches and statistics

    Args:
        remediations: Findings with their patches
        stats: Statistics dictionary
        include_stats: Whether to include statistics in the output

    Returns:
        JSON string representation of the report
    """
    report: Dict[str, Any] = {
        "scriptguard_version": __version__,
        "generated_at": datetime.now().isoformat(),
        "findings": [remediation_to_dict(r) for r in remediations],
    }

    if include_stats:
        clean_stats: Dict[str, Any] = {}
        for key, value in stats.items():
            if isinstance(value, (str, int, float, bool, list, dict)) or value is None:
                clean_stats[key] = value
        clean_stats["patches_generated"] = sum(1 for r in remediations if r.can_fix)

        report["stats"] = clean_stats

    return json.dumps(report, indent=2)


def save_json_report(
    remediations: List[Remediation],
    stats: Dict[str, Any],
    output_path: str,
    include_stats: bool = True,
) -> None:
    """
    Generate a JSON report and save it to a file

    Raises:
        IOError: If the file cannot be written
    """
    report = generate_json_report(remediations, stats, include_stats)

    with open(output_path, "w", encoding="utf-8") as f:
        f.write(report)
