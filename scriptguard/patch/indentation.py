"""
indentation.py - Line classification for indentation-based block detection

Workflows are edited as plain text, so block membership is decided by
indentation alone. List markers count as indentation: the ``-`` in
``- run: ...`` belongs to the step's nesting, not to its content.
"""

import re

BLANK_RE = re.compile(r"^\s*$")
COMMENT_RE = re.compile(r"^\s*#")


def get_indent(line: str) -> int:
    """Number of leading spaces and dashes before a key or value"""
    return len(line) - len(line.lstrip(" -"))


def is_blank(line: str) -> bool:
    return bool(BLANK_RE.match(line))


def is_comment(line: str) -> bool:
    return bool(COMMENT_RE.match(line))


def is_blank_or_comment(line: str) -> bool:
    return is_blank(line) or is_comment(line)


def is_parent_level_indent(line: str, parent_indent: int) -> bool:
    """
    Check whether a line is nested at or below a parent's indentation

    Blank lines and pure comment lines never count as nested.

    Args:
        line: Line to check
        parent_indent: Indentation of the reference line

    Returns:
        True if the line is content indented at least as deep as the parent
    """
    if is_blank_or_comment(line):
        return False
    return get_indent(line) >= parent_indent
