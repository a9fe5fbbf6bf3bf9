"""
batch.py - Patch generation for many findings at once

Patch generation is stateless, so findings are spread over a fixed-size
thread pool. Each call gets its own timeout; a call that runs out of time
counts as "no patch available", like any other failure.
"""

import concurrent.futures
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..core.finding import Finding
from .generator import generate_patch
from .patterns import classify

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Remediation:
    """A finding and the patch that fixes it ("" if none)"""

    finding: Finding
    patch: str
    envvar_name: Optional[str] = None

    @property
    def can_fix(self) -> bool:
        return bool(self.patch)


def remediate(
    findings: List[Finding],
    contents: Dict[str, str],
    config: Optional[Dict[str, Any]] = None,
) -> List[Remediation]:
    """
    Generate a patch for every finding

    Every patch is computed against the original contents of its file, so
    each one can be reviewed and applied on its own.

    Args:
        findings: Findings to remediate
        contents: Original workflow contents keyed by finding path
        config: Configuration dictionary, see core.config

    Returns:
        One Remediation per finding, in the same order
    """
    config = config or {}
    concurrency = config.get("concurrency", {})
    max_workers = concurrency.get("max_workers", 4)
    timeout = concurrency.get("timeout_seconds", 30)
    context_lines = config.get("diff", {}).get("context_lines", 3)

    if not findings:
        return []

    remediations: List[Remediation] = []
    with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as pool:
        futures = [
            pool.submit(generate_patch, finding, contents.get(finding.path, ""), context_lines)
            for finding in findings
        ]

        for finding, future in zip(findings, futures):
            try:
                patch = future.result(timeout=timeout)
            except concurrent.futures.TimeoutError:
                logger.warning(
                    "Patch generation for %s:%d timed out after %ss",
                    finding.path,
                    finding.offset,
                    timeout,
                )
                future.cancel()
                patch = ""

            pattern = classify(finding.snippet)
            remediations.append(
                Remediation(
                    finding=finding,
                    patch=patch,
                    envvar_name=pattern.envvar_name if pattern else None,
                )
            )

    return remediations
