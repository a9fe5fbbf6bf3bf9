"""
scriptguard - GitHub Actions script injection fixer

Detects untrusted ``${{ github.event... }}`` expressions used directly in
workflow ``run:`` commands and generates unified diffs that move each one
into a workflow-level environment variable.
"""

from scriptguard.utils.version import __version__, get_version, get_version_info

from .core import (
    ConfigurationError,
    Finding,
    ScanResult,
    ScriptInjectionDetector,
    Severity,
    WorkflowScanner,
    detect_script_injections,
    generate_default_config,
    load_config,
    scan_repository,
)
from .patch import (
    FailureReason,
    PatchResult,
    Remediation,
    UnsafePattern,
    classify,
    generate_patch,
    patch_workflow,
    remediate,
)

__all__ = [
    "__version__",
    "get_version",
    "get_version_info",
    "ConfigurationError",
    "Finding",
    "ScanResult",
    "ScriptInjectionDetector",
    "Severity",
    "WorkflowScanner",
    "detect_script_injections",
    "generate_default_config",
    "load_config",
    "scan_repository",
    "FailureReason",
    "PatchResult",
    "Remediation",
    "UnsafePattern",
    "classify",
    "generate_patch",
    "patch_workflow",
    "remediate",
]


def main() -> None:
    """Main entry point for the scriptguard CLI tool"""
    from .cli import cli

    cli()
