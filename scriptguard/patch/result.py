"""
result.py - Result type threaded through the patch pipeline

Every stage of patch generation returns a PatchResult instead of raising, so
the reason a remediation could not be produced stays inspectable right up to
the public entry point, where it is collapsed to an empty patch.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class FailureReason(Enum):
    """Why a patch could not be generated."""

    UNCLASSIFIABLE = "UNCLASSIFIABLE"
    INVALID_OFFSET = "INVALID_OFFSET"
    MALFORMED_DOCUMENT = "MALFORMED_DOCUMENT"
    NO_INSERTION_ROOM = "NO_INSERTION_ROOM"
    ENVVAR_CONFLICT = "ENVVAR_CONFLICT"
    RENDER_FAILED = "RENDER_FAILED"


@dataclass(frozen=True)
class PatchResult(Generic[T]):
    """Either a value or the reason there is none"""

    value: Optional[T] = None
    reason: Optional[FailureReason] = None

    @property
    def ok(self) -> bool:
        return self.reason is None

    @classmethod
    def success(cls, value: T) -> "PatchResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, reason: FailureReason) -> "PatchResult[T]":
        return cls(reason=reason)
