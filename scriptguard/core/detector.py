"""
detector.py - Script injection detection

Finds ``${{ ... }}`` expressions that interpolate attacker-controlled event
data directly into ``run:`` commands. The workflow is composed with PyYAML so
every finding can point at the exact line of its ``run:`` key.
"""

import logging
import re
from typing import Iterable, List, Optional, Pattern, Set, Tuple

import yaml
from yaml.nodes import ScalarNode

from ..utils.yaml_handler import compose_yaml, iter_mapping_pairs
from .finding import Finding, Severity

logger = logging.getLogger(__name__)

EXPRESSION_RE = re.compile(r"\$\{\{(.*?)\}\}", re.DOTALL)

# Expressions that carry text an outside contributor can choose
UNTRUSTED_INPUT_PATTERNS: Tuple[str, ...] = (
    r"github\.event\.issue\.title",
    r"github\.event\.issue\.body",
    r"github\.event\.pull_request\.title",
    r"github\.event\.pull_request\.body",
    r"github\.event\.comment\.body",
    r"github\.event\.review\.body",
    r"github\.event\.review_comment\.body",
    r"github\.event\.pages.*?\.page_name",
    r"github\.event\.commits.*?\.message",
    r"github\.event\.head_commit\.message",
    r"github\.event\.head_commit\.author\.email",
    r"github\.event\.head_commit\.author\.name",
    r"github\.event\.commits.*?\.author\.email",
    r"github\.event\.commits.*?\.author\.name",
    r"github\.event\.pull_request\.head\.ref",
    r"github\.event\.pull_request\.head\.label",
    r"github\.event\.pull_request\.head\.repo\.default_branch",
    r"github\.event\.discussion\.title",
    r"github\.event\.discussion\.body",
    r"github\.event\.workflow_run\.head_branch",
    r"github\.event\.workflow_run\.head_commit\.message",
    r"github\.head_ref",
)


class ScriptInjectionDetector:
    """Detects untrusted expressions in run commands"""

    def __init__(self, extra_patterns: Optional[Iterable[str]] = None) -> None:
        """
        Initialize the detector

        Args:
            extra_patterns: Additional regular expressions for untrusted input
        """
        patterns = list(UNTRUSTED_INPUT_PATTERNS) + list(extra_patterns or [])
        self.patterns: List[Pattern[str]] = [re.compile(p) for p in patterns]

    def is_untrusted(self, expression: str) -> bool:
        return any(p.search(expression) for p in self.patterns)

    def detect(self, content: str, path: str) -> List[Finding]:
        """
        Find script injections in a workflow

        Args:
            content: Workflow contents
            path: Path reported in the findings

        Returns:
            Findings in document order. Files that are not valid YAML yield
            no findings.
        """
        try:
            root = compose_yaml(content)
        except yaml.YAMLError as e:
            logger.warning("Skipping %s: invalid YAML (%s)", path, e)
            return []

        findings: List[Finding] = []
        seen: Set[Tuple[int, str]] = set()

        for key, value in iter_mapping_pairs(root):
            if key.value != "run" or not isinstance(value, ScalarNode):
                continue

            offset = key.start_mark.line + 1
            for match in EXPRESSION_RE.finditer(str(value.value)):
                snippet = match.group(1)
                if not self.is_untrusted(snippet) or (offset, snippet) in seen:
                    continue
                seen.add((offset, snippet))
                findings.append(
                    Finding(
                        path=path,
                        snippet=snippet,
                        offset=offset,
                        severity=Severity.HIGH,
                    )
                )

        logger.debug("Found %d script injection(s) in %s", len(findings), path)
        return findings


def detect_script_injections(
    content: str, path: str, extra_patterns: Optional[Iterable[str]] = None
) -> List[Finding]:
    """Convenience wrapper around ScriptInjectionDetector.detect"""
    return ScriptInjectionDetector(extra_patterns).detect(content, path)
