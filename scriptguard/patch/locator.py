"""
locator.py - Find where workflow-level env declarations live

These helpers locate the workflow's top-level sections without parsing the
YAML. Anchors are matched with regular expressions at the workflow's
"global" indentation, which is taken from the mandatory ``on:`` key.
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Pattern

from .indentation import get_indent, is_blank_or_comment

ASSUMED_INDENT = 2

GLOBAL_ANCHOR_RE = re.compile(r"^\s*on:")


@dataclass(frozen=True)
class GlobalBlockLocation:
    """Where a new workflow-level env variable should be written"""

    insert_index: int
    envvar_indent: int
    exists: bool
    # index of the ``env:`` label, when there is one
    label_index: Optional[int] = None


def _label_regex(global_indent: int, label: str) -> Pattern[str]:
    return re.compile("^" + " " * global_indent + re.escape(label) + ":")


def find_global_indentation(lines: List[str]) -> Optional[int]:
    """
    Identify the "global" indentation of the workflow

    This is the indentation of the required ``on:`` block and equals 0 in
    almost all cases.

    Returns:
        The indentation, or None if the workflow has no ``on:`` key
    """
    for line in lines:
        if GLOBAL_ANCHOR_RE.match(line):
            return get_indent(line)
    return None


def find_existing_env(lines: List[str], global_indent: int) -> GlobalBlockLocation:
    """
    Detect whether a global ``env:`` block already exists

    The block ends at the first line that is a comment or is not indented
    deeper than the global indentation. A comment in the middle of the block
    therefore ends it early; new variables are inserted above the comment.

    Args:
        lines: Workflow lines
        global_indent: Indentation of the top-level keys

    Returns:
        GlobalBlockLocation. ``exists`` is False when no block was found or
        when the label has no room under it (last line of the file, or an
        inline mapping); ``label_index`` tells the two cases apart.
    """
    num_lines = len(lines)
    label_re = _label_regex(global_indent, "env")

    label_index = next((i for i, line in enumerate(lines) if label_re.match(line)), None)
    if label_index is None:
        return GlobalBlockLocation(insert_index=-1, envvar_indent=-1, exists=False)

    if label_index >= num_lines - 1:
        # there must be at least one more line
        return GlobalBlockLocation(
            insert_index=-1, envvar_indent=-1, exists=False, label_index=label_index
        )

    inline_value = lines[label_index][global_indent + len("env:") :].split("#", 1)[0]
    if inline_value.strip():
        # ``env: {FOO: bar}`` cannot take a block-style entry
        return GlobalBlockLocation(
            insert_index=-1, envvar_indent=-1, exists=False, label_index=label_index
        )

    i = label_index + 1
    if is_blank_or_comment(lines[i]) or get_indent(lines[i]) <= global_indent:
        # empty block, declare directly under the label
        return GlobalBlockLocation(
            insert_index=i,
            envvar_indent=global_indent + ASSUMED_INDENT,
            exists=True,
            label_index=label_index,
        )

    envvar_indent = get_indent(lines[i])
    while i < num_lines:
        line = lines[i]
        if is_blank_or_comment(line) or get_indent(line) <= global_indent:
            # no longer declaring envvars
            break
        i += 1

    return GlobalBlockLocation(
        insert_index=i, envvar_indent=envvar_indent, exists=True, label_index=label_index
    )


def find_declaration(
    lines: List[str], location: GlobalBlockLocation, envvar_name: str
) -> Optional[int]:
    """
    Find an existing declaration of a variable in the global ``env:`` block

    Only the part of the block located by find_existing_env is searched.

    Returns:
        Index of the declaration line, or None
    """
    if not location.exists or location.label_index is None:
        return None

    name_re = _label_regex(location.envvar_indent, envvar_name)
    for i in range(location.label_index + 1, location.insert_index):
        if name_re.match(lines[i]):
            return i
    return None


def find_new_env_pos(lines: List[str], global_indent: int) -> Optional[int]:
    """
    Find where a new ``env:`` block should go: right above ``jobs:``

    Returns:
        Index of the ``jobs:`` line, or None if the workflow has none
    """
    jobs_re = _label_regex(global_indent, "jobs")
    for i, line in enumerate(lines):
        if jobs_re.match(line):
            return i
    return None
