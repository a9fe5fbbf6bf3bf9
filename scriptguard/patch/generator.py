"""
generator.py - Patch generation for script injection findings

Entry point of the remediation pipeline: classify the finding's expression,
edit the workflow, and render the edit as a unified diff. Remediation is
advisory, so any failure results in an empty patch rather than an error.
"""

import logging

from ..core.finding import Finding
from .diff import render
from .injector import inject
from .patterns import classify
from .result import FailureReason, PatchResult

logger = logging.getLogger(__name__)


def patch_workflow(finding: Finding, content: str) -> PatchResult[str]:
    """
    Return a patched version of the workflow without the script injection

    Args:
        finding: The script injection finding
        content: Original workflow contents

    Returns:
        PatchResult holding the patched contents, or the failure reason
    """
    pattern = classify(finding.snippet)
    if pattern is None:
        return PatchResult.failure(FailureReason.UNCLASSIFIABLE)

    lines = content.split("\n")
    injected = inject(lines, finding, pattern)
    if not injected.ok or injected.value is None:
        return PatchResult.failure(injected.reason or FailureReason.MALFORMED_DOCUMENT)

    return PatchResult.success("\n".join(injected.value))


def generate_patch_result(
    finding: Finding, content: str, context_lines: int = 3
) -> PatchResult[str]:
    """Like generate_patch, but keeps the failure reason"""
    patched = patch_workflow(finding, content)
    if not patched.ok or patched.value is None:
        return patched

    return render(finding.path, content, patched.value, context_lines=context_lines)


def generate_patch(finding: Finding, content: str, context_lines: int = 3) -> str:
    """
    Fix the script injection identified by the finding

    The result is a unified diff users can apply (with ``git apply`` or
    ``patch``) to fix the workflow themselves. Should anything go wrong, an
    empty string is returned.

    Args:
        finding: The script injection finding
        content: Original workflow contents
        context_lines: Number of unchanged lines around each hunk

    Returns:
        Unified diff, or "" if no automated remediation is available
    """
    try:
        result = generate_patch_result(finding, content, context_lines=context_lines)
    except Exception as e:
        logger.warning("Error generating patch for %s:%d: %s", finding.path, finding.offset, e)
        return ""

    if not result.ok:
        logger.debug(
            "No patch for %r at %s:%d: %s",
            finding.snippet,
            finding.path,
            finding.offset,
            result.reason.value if result.reason else "unknown",
        )
        return ""

    return result.value or ""
