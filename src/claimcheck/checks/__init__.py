"""Name checks: orchestration, results and reports."""

from claimcheck.checks.models import CheckResult, Report, ReportStats
from claimcheck.checks.orchestrator import NameChecker, normalize_name
from claimcheck.checks.report import build_report

__all__ = [
    "CheckResult",
    "NameChecker",
    "Report",
    "ReportStats",
    "build_report",
    "normalize_name",
]
