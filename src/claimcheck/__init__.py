"""claimcheck: check whether a name is still free across online services."""

from __future__ import annotations

from claimcheck.checks import CheckResult, NameChecker, Report, ReportStats
from claimcheck.events import EventEmitter
from claimcheck.registry import ServiceFilter, create_filter
from claimcheck.services import ServiceDescriptor

__version__ = "0.1.0"


async def check_name(
    name: str,
    filter: ServiceFilter | None = None,
    timeout: float | None = None,
    emitter: EventEmitter | None = None,
) -> Report:
    """Check *name* on every matching service using the shared registry."""
    return await NameChecker(emitter=emitter).check(name, filter=filter, timeout=timeout)


async def list_services(filter: ServiceFilter | None = None) -> list[ServiceDescriptor]:
    return await NameChecker().list_services(filter)


__all__ = [
    "CheckResult",
    "EventEmitter",
    "NameChecker",
    "Report",
    "ReportStats",
    "ServiceDescriptor",
    "check_name",
    "create_filter",
    "list_services",
]
