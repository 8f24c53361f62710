"""Aggregates check results into report statistics."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from claimcheck.checks.models import CheckResult, Report, ReportStats

logger = logging.getLogger(__name__)


def compute_stats(results: Iterable[CheckResult]) -> ReportStats:
    """Count outcomes.

    An inconclusive verdict still counts as a passed check. It is tallied as
    unavailable, since availability cannot be claimed, and also in ``unknown``.
    """
    total = passed = failed = available = unavailable = unknown = 0
    for result in results:
        total += 1
        if result.error is not None:
            failed += 1
            continue
        passed += 1
        if result.available:
            available += 1
        else:
            unavailable += 1
            if result.available is None:
                unknown += 1

    return ReportStats(
        total=total,
        passed=passed,
        failed=failed,
        available=available,
        unavailable=unavailable,
        unknown=unknown,
    )


def is_unique(stats: ReportStats) -> bool | None:
    if stats.failed:
        return None
    return stats.available == stats.passed


def build_report(name: str, results: Iterable[CheckResult]) -> Report:
    ordered = tuple(results)
    stats = compute_stats(ordered)
    report = Report(name=name, results=ordered, stats=stats, unique=is_unique(stats))
    logger.debug("Report generated for %r: %s (unique=%s)", name, stats, report.unique)
    return report
