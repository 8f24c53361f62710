"""Tests for the check orchestrator and the package entry points."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import httpx
import pytest

import claimcheck
from claimcheck.checks.orchestrator import NameChecker, normalize_name
from claimcheck.errors import (
    EmptyNameError,
    NoServicesFoundError,
    RegistryLoadError,
    ServiceTransportError,
    StructuralError,
)
from claimcheck.events.emitter import (
    CHECK_STARTED,
    REPORT_COMPLETED,
    SERVICE_CHECKING,
    SERVICE_RESULT,
    CheckEvent,
    EventEmitter,
)
from claimcheck.registry.filters import create_filter
from claimcheck.registry.registry import ServiceRegistry
from claimcheck.services.base import AvailabilityOutcome, ServiceDescriptor
from claimcheck.services.tech import GitHubStrategy

from conftest import STUB_CATALOG


class Recorder:
    """Collects events in arrival order. Implements EventListener protocol."""

    def __init__(self, timeline: list[str] | None = None) -> None:
        self.events: list[CheckEvent] = []
        self.timeline = timeline if timeline is not None else []

    async def on_event(self, event: CheckEvent) -> None:
        self.events.append(event)
        descriptor = event.data.get("descriptor") or getattr(event.data.get("result"), "descriptor", None)
        self.timeline.append(f"{event.event_type}:{descriptor.title}" if descriptor else event.event_type)

    @property
    def types(self) -> list[str]:
        return [e.event_type for e in self.events]


def recording_emitter(timeline: list[str] | None = None) -> tuple[EventEmitter, Recorder]:
    emitter = EventEmitter()
    recorder = Recorder(timeline)
    emitter.add_listener(recorder)
    return emitter, recorder


def github_registry() -> ServiceRegistry:
    return ServiceRegistry({"tech": [GitHubStrategy]})


# ─── Name normalization ───


class TestNormalizeName:
    def test_trims_and_lowercases(self):
        assert normalize_name("  ZZ9xQ7\t") == "zz9xq7"

    def test_whitespace_only(self):
        assert normalize_name(" \n ") == ""


# ─── GitHub scenarios ───


class TestGitHubScenarios:
    @pytest.mark.asyncio
    async def test_not_found_is_available(self, mock_http):
        with mock_http(httpx.Response(404)) as (_, client):
            report = await NameChecker(github_registry()).check("zz9xQ7")
        assert client.request.call_args.args == ("HEAD", "https://github.com/zz9xq7")
        assert report.name == "zz9xq7"
        assert report.stats.to_dict() == {
            "total": 1, "passed": 1, "failed": 0, "available": 1, "unavailable": 0, "unknown": 0,
        }
        assert report.unique is True
        assert report.results[0].descriptor == ServiceDescriptor("tech", "GitHub")

    @pytest.mark.asyncio
    async def test_ok_is_taken(self, mock_http):
        with mock_http(httpx.Response(200)):
            report = await NameChecker(github_registry()).check("zz9xQ7")
        stats = report.stats
        assert (stats.total, stats.passed, stats.failed, stats.available, stats.unavailable) == (1, 1, 0, 0, 1)
        assert report.unique is False

    @pytest.mark.asyncio
    async def test_timeout_is_failure(self, mock_http):
        def slow(method, url, **kwargs):
            raise httpx.ConnectTimeout("timed out")

        with mock_http(handler=slow):
            report = await NameChecker(github_registry()).check("zz9xQ7", timeout=50)
        result = report.results[0]
        assert result.available is None
        assert isinstance(result.error, ServiceTransportError)
        stats = report.stats
        assert (stats.total, stats.passed, stats.failed, stats.available, stats.unavailable) == (1, 0, 1, 0, 0)
        assert report.unique is None


# ─── Structural failures ───


class TestStructuralFailures:
    @pytest.mark.asyncio
    async def test_blank_name(self, mock_http, registry: ServiceRegistry):
        emitter, recorder = recording_emitter()
        with mock_http(httpx.Response(404)) as (mock_cls, _):
            with pytest.raises(EmptyNameError) as exc_info:
                await NameChecker(registry, emitter).check("   \t ")
        assert isinstance(exc_info.value, StructuralError)
        mock_cls.assert_not_called()
        assert recorder.events == []
        assert not registry.is_loaded

    @pytest.mark.asyncio
    async def test_no_services_found(self, mock_http, registry: ServiceRegistry):
        emitter, recorder = recording_emitter()
        with mock_http(httpx.Response(404)) as (mock_cls, _):
            with pytest.raises(NoServicesFoundError, match="No services found"):
                await NameChecker(registry, emitter).check(
                    "zz9xq7", filter=create_filter(categories=["games"])
                )
        mock_cls.assert_not_called()
        assert recorder.events == []

    @pytest.mark.asyncio
    async def test_registry_failure(self):
        def explode():
            raise ImportError("missing dependency")

        emitter, recorder = recording_emitter()
        checker = NameChecker(ServiceRegistry({"tech": [explode]}), emitter)
        with pytest.raises(RegistryLoadError):
            await checker.check("zz9xq7")
        assert recorder.events == []


# ─── Sequential execution and notifications ───


class TestNotifications:
    @pytest.mark.asyncio
    async def test_event_sequence(self, mock_http, registry: ServiceRegistry):
        emitter, recorder = recording_emitter()
        with mock_http(httpx.Response(404)):
            report = await NameChecker(registry, emitter).check("zz9xq7")

        assert recorder.types == [
            CHECK_STARTED,
            *[SERVICE_CHECKING, SERVICE_RESULT] * 4,
            REPORT_COMPLETED,
        ]
        started = recorder.events[0]
        assert started.name == "zz9xq7"
        assert [d.title for d in started.data["services"]] == ["WordPress", "mastodon", "bitbucket", "GitHub"]
        assert recorder.events[-1].data["report"] is report

    @pytest.mark.asyncio
    async def test_results_follow_registry_order(self, mock_http, registry: ServiceRegistry):
        emitter, recorder = recording_emitter()
        with mock_http(httpx.Response(404)):
            report = await NameChecker(registry, emitter).check(
                "zz9xq7", filter=create_filter(services=["github", "wordpress", "bitbucket"])
            )
        order = [r.descriptor.title for r in report.results]
        assert order == ["WordPress", "bitbucket", "GitHub"]
        notified = [e.data["result"] for e in recorder.events if e.event_type == SERVICE_RESULT]
        assert notified == list(report.results)
        checking = [e.data["descriptor"].title for e in recorder.events if e.event_type == SERVICE_CHECKING]
        assert checking == order

    @pytest.mark.asyncio
    async def test_one_check_at_a_time(self, registry: ServiceRegistry):
        timeline: list[str] = []
        emitter, _ = recording_emitter(timeline)
        services = registry.load()
        for service in services:
            async def fake_check(name, timeout=None, _title=service.title):
                timeline.append(f"request:{_title}")
                return AvailabilityOutcome(True)

            service.check = fake_check  # type: ignore[method-assign]

        await NameChecker(registry, emitter).check("zz9xq7")
        assert timeline[1:4] == [
            "service.checking:WordPress",
            "request:WordPress",
            "service.result:WordPress",
        ]
        assert timeline[4:7] == [
            "service.checking:mastodon",
            "request:mastodon",
            "service.result:mastodon",
        ]
        assert timeline[-1] == REPORT_COMPLETED

    @pytest.mark.asyncio
    async def test_listener_errors_do_not_break_run(self, mock_http, registry: ServiceRegistry):
        emitter = EventEmitter()
        bad = AsyncMock()
        bad.on_event.side_effect = RuntimeError("listener crash")
        emitter.add_listener(bad)
        with mock_http(httpx.Response(404)):
            report = await NameChecker(registry, emitter).check("zz9xq7")
        assert report.stats.total == 4
        assert bad.on_event.await_count == 10

    @pytest.mark.asyncio
    async def test_without_emitter(self, mock_http, registry: ServiceRegistry):
        with mock_http(httpx.Response(200)):
            report = await NameChecker(registry).check("zz9xq7")
        assert report.unique is False


# ─── Per-service failure containment ───


class TestFailureContainment:
    @pytest.mark.asyncio
    async def test_failures_recorded_per_service(self, mock_http, registry: ServiceRegistry):
        def respond(method, url, **kwargs):
            if "bitbucket" in url:
                raise httpx.ConnectError("Connection refused")
            if "mastodon" in url:
                return httpx.Response(500)
            return httpx.Response(404)

        with mock_http(handler=respond):
            report = await NameChecker(registry).check("zz9xq7")

        by_title = {r.descriptor.title: r for r in report.results}
        assert isinstance(by_title["bitbucket"].error, ServiceTransportError)
        assert "500" in str(by_title["mastodon"].error)
        assert by_title["GitHub"].available is True
        assert report.stats.total == 4
        assert report.stats.failed == 2
        assert report.stats.available == 2
        assert report.unique is None

    @pytest.mark.asyncio
    async def test_unexpected_exception_captured(self, registry: ServiceRegistry):
        services = registry.load()
        services[0].check = AsyncMock(side_effect=KeyError("odd"))  # type: ignore[method-assign]
        for service in services[1:]:
            service.check = AsyncMock(return_value=AvailabilityOutcome(True))  # type: ignore[method-assign]

        report = await NameChecker(registry).check("zz9xq7")
        assert isinstance(report.results[0].error, KeyError)
        assert report.results[0].available is None
        assert report.stats.passed == 3

    @pytest.mark.asyncio
    async def test_timeout_forwarded_to_every_service(self, registry: ServiceRegistry):
        services = registry.load()
        for service in services:
            service.check = AsyncMock(return_value=AvailabilityOutcome(None, detail="hmm"))  # type: ignore[method-assign]

        report = await NameChecker(registry).check("ZZ9XQ7", timeout=1500)
        for service in services:
            service.check.assert_awaited_once_with("zz9xq7", timeout=1500)
        assert report.results[0].detail == "hmm"
        assert report.stats.unknown == 4


# ─── Listing and entry points ───


class TestListServices:
    @pytest.mark.asyncio
    async def test_list(self, registry: ServiceRegistry):
        descriptors = await NameChecker(registry).list_services()
        assert descriptors[0] == ServiceDescriptor("blog", "WordPress")
        assert len(descriptors) == 4

    @pytest.mark.asyncio
    async def test_list_filtered(self, registry: ServiceRegistry):
        descriptors = await NameChecker(registry).list_services(create_filter(categories=["social"]))
        assert descriptors == [ServiceDescriptor("Social", "mastodon")]


class TestEntryPoints:
    @pytest.mark.asyncio
    async def test_check_name(self, mock_http):
        emitter, recorder = recording_emitter()
        with (
            patch("claimcheck.registry.registry.SERVICE_CATALOG", STUB_CATALOG),
            mock_http(httpx.Response(404)),
        ):
            report = await claimcheck.check_name(" ZZ9XQ7 ", emitter=emitter)
        assert report.stats.available == 4
        assert report.unique is True
        assert recorder.types[-1] == REPORT_COMPLETED

    @pytest.mark.asyncio
    async def test_check_name_no_match(self):
        with patch("claimcheck.registry.registry.SERVICE_CATALOG", STUB_CATALOG):
            with pytest.raises(NoServicesFoundError):
                await claimcheck.check_name("zz9xq7", filter=lambda d: False)

    @pytest.mark.asyncio
    async def test_list_services(self):
        descriptors = await claimcheck.list_services(create_filter(categories=["tech"]))
        assert [d.title for d in descriptors] == ["Cloud9", "GitHub", "Pastebin"]
