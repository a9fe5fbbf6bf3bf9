"""
patch package for scriptguard

This package turns script injection findings into unified diffs that move the
dangerous expression into a workflow-level environment variable.
"""

from .batch import Remediation, remediate
from .diff import render
from .generator import generate_patch, generate_patch_result, patch_workflow
from .injector import inject
from .patterns import UNSAFE_PATTERNS, UnsafePattern, classify, list_patterns
from .result import FailureReason, PatchResult

__all__ = [
    "Remediation",
    "remediate",
    "generate_patch",
    "generate_patch_result",
    "patch_workflow",
    "inject",
    "render",
    "classify",
    "list_patterns",
    "UnsafePattern",
    "UNSAFE_PATTERNS",
    "FailureReason",
    "PatchResult",
]
