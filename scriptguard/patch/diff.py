"""
diff.py - Unified diff rendering

Turns the original and patched workflow into a unified diff that can be
applied with ``git apply`` or ``patch -p1``. Only the ``---``/``+++`` headers
are written; there are no ``diff --git`` or ``index`` lines.
"""

import difflib
import logging
from typing import Iterable, Iterator, List

from .result import FailureReason, PatchResult

logger = logging.getLogger(__name__)

NO_NEWLINE_MARKER = "\\ No newline at end of file\n"


def _split_lines(text: str) -> List[str]:
    """Split on ``\\n`` only, keeping line endings, as patch(1) sees the file"""
    if not text:
        return []
    lines = [line + "\n" for line in text.split("\n")]
    if text.endswith("\n"):
        lines.pop()
    else:
        lines[-1] = lines[-1][:-1]
    return lines


def _terminate(diff_lines: Iterable[str]) -> Iterator[str]:
    """Close lines that lack a trailing newline with the standard marker"""
    for line in diff_lines:
        if line.endswith("\n"):
            yield line
        else:
            yield line + "\n"
            yield NO_NEWLINE_MARKER


def render(path: str, original: str, patched: str, context_lines: int = 3) -> PatchResult[str]:
    """
    Render the changes between two versions of a file as a unified diff

    Args:
        path: Path of the file, used for the ``a/`` and ``b/`` headers
        original: Original file contents
        patched: Patched file contents
        context_lines: Number of unchanged lines around each hunk

    Returns:
        PatchResult holding the diff text ("" when nothing changed)
    """
    if context_lines < 0:
        logger.debug("Negative context size %d", context_lines)
        return PatchResult.failure(FailureReason.RENDER_FAILED)

    name = path.replace("\\", "/").lstrip("/")
    try:
        diff_lines = difflib.unified_diff(
            _split_lines(original),
            _split_lines(patched),
            fromfile=f"a/{name}",
            tofile=f"b/{name}",
            n=context_lines,
        )
        return PatchResult.success("".join(_terminate(diff_lines)))
    except (TypeError, ValueError) as e:
        logger.debug("Could not render diff for %s: %s", path, e)
        return PatchResult.failure(FailureReason.RENDER_FAILED)
