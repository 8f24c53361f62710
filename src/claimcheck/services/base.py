"""HTTP service checks: descriptors, the strategy protocol, and the shared check algorithm."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

import httpx

from claimcheck.errors import (
    RejectedResponseError,
    ResponseInterpretationError,
    ServiceTransportError,
)

logger = logging.getLogger(__name__)

DEFAULT_ACCEPTED_STATUS_CODES: frozenset[int] = frozenset({200, 404})

CACHE_BUSTING_HEADERS: dict[str, str] = {
    "cache-control": "no-cache,no-store,must-revalidate,max-age=-1,private",
    "connection": "keep-alive",
    "expires": "-1",
}

SPOOF_HEADERS: dict[str, str] = {
    "accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "accept-encoding": "gzip, deflate, br",
    "accept-language": "en-US,en;q=0.5",
    "user-agent": (
        "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/59.0.3071.115 Safari/537.36"
    ),
}


@dataclass(frozen=True)
class ServiceDescriptor:
    """Identity of a service, used for filtering and display."""

    category: str
    title: str

    def to_dict(self) -> dict[str, str]:
        return {"category": self.category, "title": self.title}


@dataclass(frozen=True)
class AvailabilityOutcome:
    """Verdict of one check. ``available`` is None when the response was inconclusive."""

    available: bool | None
    detail: str | None = None


@dataclass
class HttpRequest:
    """Everything a strategy needs sent for one check."""

    url: str
    method: str = "HEAD"
    headers: dict[str, str] = field(default_factory=dict)
    params: dict[str, str] | None = None
    content: str | bytes | None = None
    data: dict[str, str] | None = None
    follow_redirects: bool = True
    spoof: bool = False


@runtime_checkable
class ServiceStrategy(Protocol):
    """Knows how to ask one service about a name and how to read its answer."""

    title: str

    def build_request(self, name: str) -> HttpRequest: ...

    def accepted_status_codes(self) -> frozenset[int]: ...

    def interpret_response(
        self, name: str, response: httpx.Response
    ) -> bool | None | AvailabilityOutcome: ...


def available_if_not_found(response: httpx.Response) -> bool:
    """Default interpretation: the name is free when the profile URL 404s."""
    return response.status_code == 404


def _build_headers(request: HttpRequest) -> dict[str, str]:
    headers = dict(CACHE_BUSTING_HEADERS)
    if request.spoof:
        headers.update(SPOOF_HEADERS)
    headers.update({k.lower(): v for k, v in request.headers.items()})
    return headers


def _timeout_seconds(timeout: float | None) -> float | None:
    if timeout is None:
        return None
    return timeout / 1000


class HttpService:
    """A checkable service: a category paired with an HTTP strategy."""

    def __init__(self, category: str, strategy: ServiceStrategy) -> None:
        self.strategy = strategy
        self.descriptor = ServiceDescriptor(category=category, title=strategy.title)

    @property
    def category(self) -> str:
        return self.descriptor.category

    @property
    def title(self) -> str:
        return self.descriptor.title

    def __repr__(self) -> str:
        return f"HttpService({self.category!r}, {self.title!r})"

    async def _send(self, request: HttpRequest, timeout: float | None) -> httpx.Response:
        kwargs: dict[str, Any] = {"headers": _build_headers(request)}
        if request.params is not None:
            kwargs["params"] = request.params
        if request.content is not None:
            kwargs["content"] = request.content
        if request.data is not None:
            kwargs["data"] = request.data

        try:
            async with httpx.AsyncClient(
                timeout=_timeout_seconds(timeout),
                follow_redirects=request.follow_redirects,
            ) as client:
                return await client.request(request.method, request.url, **kwargs)
        except httpx.TimeoutException as exc:
            logger.debug("HTTP request for %s service timed out", self.title)
            raise ServiceTransportError(f"Request timed out: {exc}", self.descriptor) from exc
        except httpx.TransportError as exc:
            logger.debug("HTTP request for %s service failed: %s", self.title, exc)
            raise ServiceTransportError(str(exc) or type(exc).__name__, self.descriptor) from exc

    async def check(self, name: str, timeout: float | None = None) -> AvailabilityOutcome:
        """Check whether *name* is available on this service.

        *timeout* is in milliseconds and bounds only the single request made.
        Raises ``ServiceTransportError`` on network failure,
        ``RejectedResponseError`` for a status code outside the accepted set and
        ``ResponseInterpretationError`` when the body cannot be understood.
        """
        request = self.strategy.build_request(name)
        logger.debug("Sending %s request for %s service: %s", request.method, self.title, request.url)

        response = await self._send(request, timeout)
        status_code = response.status_code
        logger.debug("HTTP request for %s service responded with status code: %d", self.title, status_code)

        if status_code not in self.strategy.accepted_status_codes():
            reason = httpx.codes.get_reason_phrase(status_code)
            logger.debug(
                "%s service rejected HTTP response status code: %d (%s)",
                self.title,
                status_code,
                reason or "?",
            )
            raise RejectedResponseError(status_code, reason, self.descriptor)

        try:
            verdict = self.strategy.interpret_response(name, response)
        except (ValueError, KeyError, TypeError) as exc:
            logger.debug("%s service failed when checking HTTP response", self.title)
            raise ResponseInterpretationError(
                f"Could not interpret response from {self.title}: {exc}", self.descriptor
            ) from exc

        outcome = verdict if isinstance(verdict, AvailabilityOutcome) else AvailabilityOutcome(verdict)
        logger.debug("%s service determined available from HTTP response: %s", self.title, outcome.available)
        return outcome
