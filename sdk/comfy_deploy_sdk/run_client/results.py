"""Result container returned by every client operation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class FailureKind(str, Enum):
    """Category of a failed client call."""

    NETWORK = "network"
    DECODE = "decode"
    VALIDATION = "validation"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class CallError:
    """Why a call produced no value."""

    kind: FailureKind
    message: str
    status_code: Optional[int] = None

    @property
    def transient(self) -> bool:
        """Whether retrying the same call could plausibly succeed."""

        if self.kind is not FailureKind.NETWORK:
            return False
        return self.status_code is None or self.status_code >= 500


@dataclass(frozen=True)
class CallResult(Generic[T]):
    """Either a validated value or the error that prevented one."""

    value: Optional[T] = None
    error: Optional[CallError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "CallResult[T]":
        return cls(value=value)

    @classmethod
    def failure(
        cls, kind: FailureKind, message: str, status_code: Optional[int] = None
    ) -> "CallResult[T]":
        return cls(error=CallError(kind=kind, message=message, status_code=status_code))
