"""
Explicit outcome values returned by the blueprint store.

Store operations never raise for expected outcomes. They return ``Ok`` with
the value, or ``Failure`` tagged with a ``FailureKind`` so callers handle
not-found, conflict and storage faults separately.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class FailureKind(str, Enum):
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    STORAGE_ERROR = "storage_error"


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    kind: FailureKind
    message: str

    @property
    def ok(self) -> bool:
        return False

    @classmethod
    def not_found(cls, message: str) -> "Failure":
        return cls(FailureKind.NOT_FOUND, message)

    @classmethod
    def conflict(cls, message: str) -> "Failure":
        return cls(FailureKind.CONFLICT, message)

    @classmethod
    def storage_error(cls, message: str) -> "Failure":
        return cls(FailureKind.STORAGE_ERROR, message)


Result = Union[Ok[T], Failure]
