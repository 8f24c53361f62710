"""Runs a name through every resolved service, one at a time, in registry order."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from claimcheck.checks.models import CheckResult, Report
from claimcheck.checks.report import build_report
from claimcheck.errors import EmptyNameError, NoServicesFoundError
from claimcheck.events.emitter import (
    CHECK_STARTED,
    REPORT_COMPLETED,
    SERVICE_CHECKING,
    SERVICE_RESULT,
    CheckEvent,
    EventEmitter,
)
from claimcheck.registry.registry import ServiceFilter, ServiceRegistry, get_registry
from claimcheck.services.base import HttpService, ServiceDescriptor

logger = logging.getLogger(__name__)


def normalize_name(name: str) -> str:
    return name.strip().lower()


class NameChecker:
    """Checks name availability across the registry's services and reports on it."""

    def __init__(
        self,
        registry: ServiceRegistry | None = None,
        emitter: EventEmitter | None = None,
    ) -> None:
        self._registry = registry or get_registry()
        self._emitter = emitter

    async def _emit(self, event_type: str, name: str, **data: Any) -> None:
        """Emit an event if an emitter is configured."""
        if self._emitter is not None:
            await self._emitter.emit(CheckEvent(
                event_type=event_type,
                timestamp=datetime.now(UTC),
                name=name,
                data=data,
            ))

    async def _check_service(
        self,
        name: str,
        service: HttpService,
        timeout: float | None,
    ) -> CheckResult:
        descriptor = service.descriptor
        logger.debug(
            "Checking %r using %s service under %s category",
            name,
            descriptor.title,
            descriptor.category,
        )
        await self._emit(SERVICE_CHECKING, name, descriptor=descriptor)

        try:
            outcome = await service.check(name, timeout=timeout)
        except Exception as exc:
            result = CheckResult(descriptor=descriptor, name=name, error=exc)
            logger.debug("Check failed for %r using %s service: %s", name, descriptor.title, exc)
        else:
            result = CheckResult(
                descriptor=descriptor,
                name=name,
                available=outcome.available,
                detail=outcome.detail,
            )
            logger.debug("Check succeeded for %r using %s service: %s", name, descriptor.title, result.status_label)

        await self._emit(SERVICE_RESULT, name, result=result)
        return result

    async def check(
        self,
        name: str,
        filter: ServiceFilter | None = None,
        timeout: float | None = None,
    ) -> Report:
        """Check *name* against every service matching *filter*.

        *timeout* (milliseconds) bounds each request, not the run. Raises a
        ``StructuralError`` when the name is blank, when no service matches, or
        when the registry cannot be loaded. Failures of single services are
        recorded in their results instead.
        """
        name = normalize_name(name)
        if not name:
            raise EmptyNameError()

        logger.debug("Checking %r (timeout=%s)", name, timeout)
        services = self._registry.get(filter)
        if not services:
            raise NoServicesFoundError()

        await self._emit(CHECK_STARTED, name, services=[s.descriptor for s in services])

        results: list[CheckResult] = []
        for service in services:
            results.append(await self._check_service(name, service, timeout))

        report = build_report(name, results)
        await self._emit(REPORT_COMPLETED, name, report=report)
        return report

    async def list_services(self, filter: ServiceFilter | None = None) -> list[ServiceDescriptor]:
        return [s.descriptor for s in self._registry.get(filter)]
