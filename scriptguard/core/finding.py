"""
finding.py - Script injection findings

A Finding records one dangerous expression used inside a ``run:`` command.
It is produced by the detector and consumed by the patch generator.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Union


class Severity(Enum):
    """Enumeration of finding severity levels."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


SEVERITY_LEVELS = [level.value for level in Severity]


@dataclass(frozen=True)
class Finding:
    """A dangerous expression in a workflow's run command

    Attributes:
        path: Path of the workflow file
        snippet: Expression text between ``${{`` and ``}}``, padding included
        offset: 1-based line number of the ``run:`` key containing it
    """

    path: str
    snippet: str
    offset: int
    rule_id: str = "script_injection"
    severity: Union[str, Severity] = Severity.HIGH
    message: str = ""

    def __post_init__(self) -> None:
        """Validate severity level"""
        if isinstance(self.severity, Severity):
            object.__setattr__(self, "severity", self.severity.value)
        if self.severity not in SEVERITY_LEVELS:
            raise ValueError(f"Invalid severity level: {self.severity}")
        if not self.message:
            object.__setattr__(
                self,
                "message",
                f"Untrusted input '{self.unsafe_var}' used directly in a run command",
            )

    @property
    def unsafe_var(self) -> str:
        """The expression without surrounding whitespace"""
        return self.snippet.strip()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rule_id": self.rule_id,
            "severity": self.severity,
            "message": self.message,
            "path": self.path,
            "snippet": self.snippet,
            "line_number": self.offset,
        }
