"""
scanner.py - Repository scanning for scriptguard

This module discovers workflow files, runs the script injection detector over
them and keeps the original contents around for patch generation. YAML files
without both ``on`` and ``jobs`` keys are not workflows and are skipped.
"""

import logging
import os
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

import yaml

from ..utils.file_handler import list_workflow_files, read_text, relative_path
from ..utils.yaml_handler import is_github_actions_workflow, load_yaml
from .detector import ScriptInjectionDetector
from .finding import SEVERITY_LEVELS, Finding

logger = logging.getLogger(__name__)


@dataclass
class ScanResult:
    """Findings of a scan plus the workflow contents they refer to"""

    findings: List[Finding] = field(default_factory=list)
    contents: Dict[str, str] = field(default_factory=dict)
    stats: Dict[str, Any] = field(default_factory=dict)


class WorkflowScanner:
    """Scans GitHub Actions workflow files for script injections"""

    def __init__(self, config: Optional[Dict[str, Any]] = None) -> None:
        """
        Initialize the scanner

        Args:
            config: Configuration dictionary, see core.config
        """
        self.config = config or {}
        extra = self.config.get("detector", {}).get("extra_untrusted_patterns", [])
        self.detector = ScriptInjectionDetector(extra)

    def scan_file(self, file_path: str, root: Optional[str] = None) -> ScanResult:
        """
        Scan a single workflow file

        Args:
            file_path: Path to the workflow file
            root: Directory the reported paths are made relative to

        Returns:
            ScanResult for this file. Files that cannot be read or are not
            workflows yield no findings and count as zero files.
        """
        display_path = relative_path(file_path, root) if root else file_path.replace(os.sep, "/")
        result = ScanResult(stats=_empty_stats(root or os.path.dirname(file_path)))

        try:
            content = read_text(file_path)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read %s: %s", file_path, e)
            return result

        result.stats["end_time"] = datetime.now().isoformat()
        try:
            workflow = load_yaml(content)
        except yaml.YAMLError as e:
            logger.warning("Skipping %s: invalid YAML (%s)", display_path, e)
            return result

        if not is_github_actions_workflow(workflow):
            logger.debug("Skipping %s: not a GitHub Actions workflow", display_path)
            return result

        findings = self.detector.detect(content, display_path)
        result.findings.extend(findings)
        result.contents[display_path] = content
        _count(result.stats, findings)
        result.stats["total_files"] = 1
        return result

    def scan_repository(self, repo_path: str) -> ScanResult:
        """
        Scan every workflow under ``.github/workflows``

        Args:
            repo_path: Path to the repository

        Returns:
            ScanResult with paths relative to the repository root
        """
        result = ScanResult(stats=_empty_stats(repo_path))

        for workflow_file in list_workflow_files(repo_path):
            file_result = self.scan_file(workflow_file, root=repo_path)
            result.findings.extend(file_result.findings)
            result.contents.update(file_result.contents)
            result.stats["total_files"] += file_result.stats["total_files"]
            _count(result.stats, file_result.findings)

        result.stats["end_time"] = datetime.now().isoformat()
        return result


def _empty_stats(repo_path: str) -> Dict[str, Any]:
    return {
        "start_time": datetime.now().isoformat(),
        "repo_path": repo_path,
        "total_files": 0,
        "total_findings": 0,
        "severity_counts": {level: 0 for level in SEVERITY_LEVELS},
    }


def _count(stats: Dict[str, Any], findings: List[Finding]) -> None:
    for finding in findings:
        stats["total_findings"] += 1
        stats["severity_counts"][finding.severity] = (
            stats["severity_counts"].get(finding.severity, 0) + 1
        )


def scan_repository(repo_path: str, config: Optional[Dict[str, Any]] = None) -> ScanResult:
    """
    Scan a repository, or a single workflow file, for script injections

    Args:
        repo_path: Path to the repository root or to a workflow file
        config: Configuration dictionary

    Returns:
        ScanResult
    """
    scanner = WorkflowScanner(config=config)
    if os.path.isfile(repo_path):
        return scanner.scan_file(repo_path)
    return scanner.scan_repository(repo_path)
