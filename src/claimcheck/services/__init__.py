"""Bundled service strategies and the registration table the registry loads from."""

from __future__ import annotations

from collections.abc import Callable

from claimcheck.services.base import (
    AvailabilityOutcome,
    HttpRequest,
    HttpService,
    ServiceDescriptor,
    ServiceStrategy,
)
from claimcheck.services.blog import LiveJournalStrategy, WordPressStrategy
from claimcheck.services.bookmark import StumbleUponStrategy
from claimcheck.services.game import XboxStrategy
from claimcheck.services.mail import GmailStrategy
from claimcheck.services.news import FlipboardStrategy
from claimcheck.services.profile import ScrimStrategy
from claimcheck.services.tech import Cloud9Strategy, GitHubStrategy, PastebinStrategy

StrategyFactory = Callable[[], ServiceStrategy]

SERVICE_CATALOG: dict[str, list[StrategyFactory]] = {
    "blog": [LiveJournalStrategy, WordPressStrategy],
    "bookmark": [StumbleUponStrategy],
    "game": [XboxStrategy],
    "mail": [GmailStrategy],
    "news": [FlipboardStrategy],
    "profile": [ScrimStrategy],
    "tech": [Cloud9Strategy, GitHubStrategy, PastebinStrategy],
}

__all__ = [
    "SERVICE_CATALOG",
    "AvailabilityOutcome",
    "HttpRequest",
    "HttpService",
    "ServiceDescriptor",
    "ServiceStrategy",
    "StrategyFactory",
]
