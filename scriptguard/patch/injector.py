"""
injector.py - Move a dangerous expression out of a run command into env

The injector performs the two text edits behind a script injection fix:

1. every occurrence of the expression inside the affected ``run:`` block is
   replaced by a reference to a new environment variable, and
2. the variable is declared in the workflow-level ``env:`` block, which is
   created right above ``jobs:`` when the workflow has none.

Both edits are made on a copy of the lines; a failure in either leaves the
caller's document untouched.
"""

import logging
import re
from typing import List

from ..core.finding import Finding
from .indentation import get_indent, is_parent_level_indent
from .locator import (
    ASSUMED_INDENT,
    find_declaration,
    find_existing_env,
    find_global_indentation,
    find_new_env_pos,
)
from .patterns import UnsafePattern
from .result import FailureReason, PatchResult

logger = logging.getLogger(__name__)


def _line_ending(line: str) -> str:
    """The carriage return of a CRLF line, so inserted lines match it"""
    return "\r" if line.endswith("\r") else ""


def _squeeze(line: str) -> str:
    return re.sub(r"\s+", "", line)


def replace_unsafe_var_with_envvar(
    lines: List[str], pattern: UnsafePattern, run_index: int
) -> List[str]:
    """
    Replace the expression with the environment variable inside a run block

    The block starts at ``run_index`` and continues while lines are indented
    at least as deep as that line. It stops at the first blank or comment
    line, even if the same block resumes after it.

    Args:
        lines: Workflow lines, modified in place
        pattern: Catalog entry for the expression
        run_index: 0-based index of the ``run:`` line

    Returns:
        The same list, for chaining
    """
    run_indent = get_indent(lines[run_index])
    i = run_index
    while i < len(lines) and is_parent_level_indent(lines[i], run_indent):
        lines[i] = pattern.replace_regex.sub(pattern.envvar_name, lines[i])
        i += 1

    return lines


def add_new_global_env(lines: List[str], global_indent: int) -> PatchResult[int]:
    """
    Add an empty ``env:`` block above ``jobs:``, followed by a blank line

    Returns:
        PatchResult holding the index of the new ``env:`` label
    """
    env_pos = find_new_env_pos(lines, global_indent)
    if env_pos is None:
        logger.debug("No 'jobs:' label at indentation %d", global_indent)
        return PatchResult.failure(FailureReason.MALFORMED_DOCUMENT)

    eol = _line_ending(lines[env_pos])
    lines[env_pos:env_pos] = [" " * global_indent + "env:" + eol, eol]
    return PatchResult.success(env_pos)


def add_envvar_to_global_env(
    lines: List[str], pattern: UnsafePattern, unsafe_var: str
) -> PatchResult[List[str]]:
    """
    Declare the pattern's variable in the workflow-level ``env:`` block

    Args:
        lines: Workflow lines, modified in place
        pattern: Catalog entry providing the variable name
        unsafe_var: Expression text without padding

    Returns:
        PatchResult holding the edited lines
    """
    global_indent = find_global_indentation(lines)
    if global_indent is None:
        logger.debug("Could not determine global indentation: no 'on:' key")
        return PatchResult.failure(FailureReason.MALFORMED_DOCUMENT)

    location = find_existing_env(lines, global_indent)
    definition = f"{pattern.envvar_name}: ${{{{ {unsafe_var} }}}}"

    declared = find_declaration(lines, location, pattern.envvar_name)
    if declared is not None:
        if _squeeze(lines[declared]) == _squeeze(definition):
            # the same variable is already set up, only the run block changes
            return PatchResult.success(lines)
        logger.debug(
            "%s is already declared with another value at line %d",
            pattern.envvar_name,
            declared + 1,
        )
        return PatchResult.failure(FailureReason.ENVVAR_CONFLICT)

    if location.exists:
        env_pos = location.insert_index
        envvar_indent = location.envvar_indent
    elif location.label_index is not None:
        logger.debug("Global 'env:' at line %d has no room", location.label_index + 1)
        return PatchResult.failure(FailureReason.NO_INSERTION_ROOM)
    else:
        created = add_new_global_env(lines, global_indent)
        if not created.ok:
            return PatchResult.failure(created.reason or FailureReason.MALFORMED_DOCUMENT)
        # position points to `env:`, variables go below it
        env_pos = (created.value or 0) + 1
        envvar_indent = global_indent + ASSUMED_INDENT

    eol = _line_ending(lines[env_pos - 1])
    lines.insert(env_pos, " " * envvar_indent + definition + eol)
    return PatchResult.success(lines)


def inject(lines: List[str], finding: Finding, pattern: UnsafePattern) -> PatchResult[List[str]]:
    """
    Apply both edits for a finding

    Args:
        lines: Original workflow lines (not modified)
        finding: The script injection finding
        pattern: Catalog entry matching the finding's snippet

    Returns:
        PatchResult holding a new, edited list of lines
    """
    run_index = finding.offset - 1
    if run_index < 0 or run_index >= len(lines):
        logger.debug("Offset %d outside of %s (%d lines)", finding.offset, finding.path, len(lines))
        return PatchResult.failure(FailureReason.INVALID_OFFSET)

    patched = list(lines)
    replace_unsafe_var_with_envvar(patched, pattern, run_index)
    return add_envvar_to_global_env(patched, pattern, finding.unsafe_var)
