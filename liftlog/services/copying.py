from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(slots=True)
class CopyFailure:
    kind: str
    source_id: int
    reason: str


@dataclass(slots=True)
class CopyReport:
    """Per-child results of a deep copy. Failed children are skipped, not fatal."""

    days: int = 0
    exercises: int = 0
    sets: int = 0
    failures: list[CopyFailure] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.failures)

    @property
    def complete(self) -> bool:
        return not self.failures

    def record_failure(self, kind: str, source_id: int, error: Exception) -> None:
        self.failures.append(CopyFailure(kind=kind, source_id=source_id, reason=str(error)))


@dataclass(slots=True)
class CopyOutcome(Generic[T]):
    row: T
    report: CopyReport
