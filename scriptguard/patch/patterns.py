"""
patterns.py - Catalog of remediable script injection expressions

Each entry maps a family of untrusted GitHub context expressions to the
environment variable that replaces it. Several entries may share a variable
name. The catalog is searched in declaration order and the first match wins,
so the order below is part of the public behaviour: reordering or renaming
entries changes the patches that get generated.
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Pattern, Tuple

# Expression text up to, but never across, a closing ``}}``. Single braces
# (``format('{0}', ...)``) are allowed.
_WITHIN = r"(?:(?!\}\}).)*?"


@dataclass(frozen=True)
class UnsafePattern:
    """A dangerous expression family and its safe replacement variable"""

    envvar_name: str
    id_regex: Pattern[str]
    replace_regex: Pattern[str]

    @property
    def pattern(self) -> str:
        return self.id_regex.pattern


def new_unsafe_pattern(envvar_name: str, pattern: str) -> UnsafePattern:
    """
    Build a catalog entry

    Args:
        envvar_name: Environment variable the expression is moved to
        pattern: Regular expression identifying the raw expression

    Returns:
        UnsafePattern whose replace_regex matches the whole ``{{ ... }}``
        occurrence of the expression inside command text
    """
    return UnsafePattern(
        envvar_name=envvar_name,
        id_regex=re.compile(pattern),
        replace_regex=re.compile(r"\{\{" + _WITHIN + pattern + _WITHIN + r"\}\}"),
    )


UNSAFE_PATTERNS: Tuple[UnsafePattern, ...] = (
    new_unsafe_pattern("AUTHOR_EMAIL", r"github\.event\.commits.*?\.author\.email"),
    new_unsafe_pattern("AUTHOR_EMAIL", r"github\.event\.head_commit\.author\.email"),
    new_unsafe_pattern("AUTHOR_NAME", r"github\.event\.commits.*?\.author\.name"),
    new_unsafe_pattern("AUTHOR_NAME", r"github\.event\.head_commit\.author\.name"),
    new_unsafe_pattern("COMMENT_BODY", r"github\.event\.comment\.body"),
    new_unsafe_pattern("COMMIT_MESSAGE", r"github\.event\.commits.*?\.message"),
    new_unsafe_pattern("COMMIT_MESSAGE", r"github\.event\.head_commit\.message"),
    new_unsafe_pattern("ISSUE_BODY", r"github\.event\.issue\.body"),
    new_unsafe_pattern("ISSUE_TITLE", r"github\.event\.issue\.title"),
    new_unsafe_pattern("PAGE_NAME", r"github\.event\.pages.*?\.page_name"),
    new_unsafe_pattern("PR_BODY", r"github\.event\.pull_request\.body"),
    new_unsafe_pattern(
        "PR_DEFAULT_BRANCH", r"github\.event\.pull_request\.head\.repo\.default_branch"
    ),
    new_unsafe_pattern("PR_HEAD_LABEL", r"github\.event\.pull_request\.head\.label"),
    new_unsafe_pattern("PR_HEAD_REF", r"github\.event\.pull_request\.head\.ref"),
    new_unsafe_pattern("PR_TITLE", r"github\.event\.pull_request\.title"),
    new_unsafe_pattern("REVIEW_BODY", r"github\.event\.review\.body"),
    new_unsafe_pattern("REVIEW_COMMENT_BODY", r"github\.event\.review_comment\.body"),
    new_unsafe_pattern("HEAD_REF", r"github\.head_ref"),
)


def classify(snippet: str) -> Optional[UnsafePattern]:
    """
    Find the catalog entry for a dangerous expression

    Args:
        snippet: Expression text as reported by the detector, padding allowed

    Returns:
        The first matching UnsafePattern, or None if the expression is not
        one we know how to remediate
    """
    unsafe_var = snippet.strip()
    for unsafe_pattern in UNSAFE_PATTERNS:
        if unsafe_pattern.id_regex.search(unsafe_var):
            return unsafe_pattern
    return None


def list_patterns() -> List[Tuple[str, str]]:
    """Return (envvar_name, expression pattern) rows in catalog order"""
    return [(p.envvar_name, p.pattern) for p in UNSAFE_PATTERNS]
