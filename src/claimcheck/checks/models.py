"""Data models for check results and reports."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from claimcheck.services.base import ServiceDescriptor


@dataclass(frozen=True)
class CheckResult:
    """Outcome of checking one name against one service."""

    descriptor: ServiceDescriptor
    name: str
    available: bool | None = None
    error: BaseException | None = None
    detail: str | None = None

    def __post_init__(self) -> None:
        if self.error is not None and self.available is not None:
            raise ValueError("A failed check cannot carry an availability verdict")

    @property
    def failed(self) -> bool:
        return self.error is not None

    @property
    def status_label(self) -> str:
        if self.error is not None:
            return "failed"
        if self.available is None:
            return "unknown"
        return "available" if self.available else "taken"

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.descriptor.to_dict(),
            "name": self.name,
            "available": self.available,
            "error": str(self.error) if self.error is not None else None,
            "detail": self.detail,
        }


@dataclass(frozen=True)
class ReportStats:
    total: int = 0
    passed: int = 0
    failed: int = 0
    available: int = 0
    unavailable: int = 0
    unknown: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "passed": self.passed,
            "failed": self.failed,
            "available": self.available,
            "unavailable": self.unavailable,
            "unknown": self.unknown,
        }


@dataclass(frozen=True)
class Report:
    """Consolidated availability of a name across every checked service."""

    name: str
    results: tuple[CheckResult, ...] = ()
    stats: ReportStats = field(default_factory=ReportStats)
    unique: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "results": [r.to_dict() for r in self.results],
            "stats": self.stats.to_dict(),
            "unique": self.unique,
        }
