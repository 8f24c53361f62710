"""Check event system for claimcheck."""

from __future__ import annotations

from claimcheck.events.emitter import (
    CHECK_STARTED,
    EVENT_TYPES,
    REPORT_COMPLETED,
    SERVICE_CHECKING,
    SERVICE_RESULT,
    CheckEvent,
    EventEmitter,
    EventListener,
    create_cli_emitter,
)
from claimcheck.events.webhook import WebhookListener

__all__ = [
    "CHECK_STARTED",
    "EVENT_TYPES",
    "REPORT_COMPLETED",
    "SERVICE_CHECKING",
    "SERVICE_RESULT",
    "CheckEvent",
    "EventEmitter",
    "EventListener",
    "WebhookListener",
    "create_cli_emitter",
]
