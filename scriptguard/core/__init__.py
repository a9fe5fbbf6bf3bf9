"""
core package for scriptguard

This package contains findings, configuration, and the detection and
scanning functionality.
"""

from .finding import Finding, Severity, SEVERITY_LEVELS
from .config import (
    DEFAULT_CONFIG,
    ConfigurationError,
    generate_default_config,
    load_config,
)
from .detector import ScriptInjectionDetector, detect_script_injections
from .scanner import ScanResult, WorkflowScanner, scan_repository

__all__ = [
    "Finding",
    "Severity",
    "SEVERITY_LEVELS",
    "DEFAULT_CONFIG",
    "ConfigurationError",
    "generate_default_config",
    "load_config",
    "ScriptInjectionDetector",
    "detect_script_injections",
    "ScanResult",
    "WorkflowScanner",
    "scan_repository",
]
