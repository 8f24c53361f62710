"""Shared fixtures for claimcheck tests."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
import yaml

from claimcheck.config.loader import CONFIG_ENV
from claimcheck.config.models import ClaimcheckConfig
from claimcheck.registry.registry import ServiceRegistry, reset_registry
from claimcheck.services.base import (
    DEFAULT_ACCEPTED_STATUS_CODES,
    HttpRequest,
    available_if_not_found,
)

SAMPLE_CONFIG: Dict[str, Any] = {
    "check": {"timeout_ms": 2500},
    "filters": {"categories": ["tech", ":mail"], "services": []},
    "webhooks": [
        {
            "url": "https://hooks.example.com/claimcheck",
            "events": ["report.completed"],
            "secret": "",
        },
    ],
}


class StubStrategy:
    """Minimal strategy with the default status handling."""

    def __init__(self, title: str, spoof: bool = False, headers: dict[str, str] | None = None) -> None:
        self.title = title
        self._spoof = spoof
        self._headers = headers or {}

    def build_request(self, name: str) -> HttpRequest:
        slug = "".join(c for c in self.title.lower() if c.isalnum())
        return HttpRequest(url=f"https://{slug}.example.com/{name}", headers=dict(self._headers), spoof=self._spoof)

    def accepted_status_codes(self) -> frozenset[int]:
        return DEFAULT_ACCEPTED_STATUS_CODES

    def interpret_response(self, name: str, response: httpx.Response) -> bool:
        return available_if_not_found(response)


def stub(title: str) -> Callable[[], StubStrategy]:
    return lambda: StubStrategy(title)


# Registry order: blog/WordPress, Social/mastodon, tech/bitbucket, tech/GitHub
STUB_CATALOG = {
    "tech": [stub("GitHub"), stub("bitbucket")],
    "blog": [stub("WordPress")],
    "Social": [stub("mastodon")],
}


@pytest.fixture(autouse=True)
def _fresh_default_registry() -> Iterator[None]:
    reset_registry()
    yield
    reset_registry()


@pytest.fixture(autouse=True)
def _no_config_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(CONFIG_ENV, raising=False)


@pytest.fixture()
def registry() -> ServiceRegistry:
    """Return a registry over the stub catalog."""
    return ServiceRegistry(STUB_CATALOG)


@pytest.fixture()
def mock_http() -> Callable[..., Any]:
    """Patch the httpx client used by service checks.

    Call with ``response=`` for a fixed reply or ``handler=`` for a function of
    ``(method, url, **kwargs)`` that returns a response or raises.
    """

    @contextmanager
    def _patch(
        response: httpx.Response | None = None,
        handler: Callable[..., httpx.Response] | None = None,
    ) -> Iterator[tuple[MagicMock, AsyncMock]]:
        with patch("claimcheck.services.base.httpx.AsyncClient") as mock_cls:
            mock_client = AsyncMock()
            if handler is not None:
                mock_client.request.side_effect = handler
            else:
                mock_client.request.return_value = response
            mock_client.__aenter__ = AsyncMock(return_value=mock_client)
            mock_client.__aexit__ = AsyncMock(return_value=False)
            mock_cls.return_value = mock_client
            yield mock_cls, mock_client

    return _patch


@pytest.fixture()
def sample_config() -> ClaimcheckConfig:
    """Return a parsed ClaimcheckConfig from sample data."""
    return ClaimcheckConfig(**SAMPLE_CONFIG)


@pytest.fixture()
def sample_config_dict() -> Dict[str, Any]:
    """Return raw sample config dict."""
    return dict(SAMPLE_CONFIG)


@pytest.fixture()
def config_file(tmp_path: Path) -> Path:
    """Write sample config to a temp .claimcheck.yaml and return the path."""
    path = tmp_path / ".claimcheck.yaml"
    with path.open("w") as fh:
        yaml.dump(SAMPLE_CONFIG, fh)
    return path
