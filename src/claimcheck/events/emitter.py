"""Event emitter, listener protocol, and check event dataclass."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from claimcheck.config.models import ClaimcheckConfig

logger = logging.getLogger(__name__)

CHECK_STARTED = "check.started"
SERVICE_CHECKING = "service.checking"
SERVICE_RESULT = "service.result"
REPORT_COMPLETED = "report.completed"

EVENT_TYPES = frozenset({CHECK_STARTED, SERVICE_CHECKING, SERVICE_RESULT, REPORT_COMPLETED})


def _serialize(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [_serialize(v) for v in value]
    return value


@dataclass
class CheckEvent:
    """A notification emitted while a name is being checked."""

    event_type: str  # "check.started", "service.result", etc.
    timestamp: datetime
    name: str
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "event_type": self.event_type,
            "timestamp": self.timestamp.isoformat(),
            "name": self.name,
            "data": {k: _serialize(v) for k, v in self.data.items()},
        }


class EventListener(Protocol):
    """Protocol for consuming check events."""

    async def on_event(self, event: CheckEvent) -> None: ...


class EventEmitter:
    """Dispatches events to listeners, in order, one listener at a time."""

    def __init__(self) -> None:
        self._listeners: list[EventListener] = []

    def add_listener(self, listener: EventListener) -> None:
        self._listeners.append(listener)

    async def emit(self, event: CheckEvent) -> None:
        for listener in self._listeners:
            try:
                await listener.on_event(event)
            except Exception:
                logger.exception("Event listener error")

    async def aclose(self) -> None:
        """Let listeners with background work finish it."""
        for listener in self._listeners:
            close = getattr(listener, "aclose", None)
            if close is not None:
                await close()


def create_cli_emitter(config: ClaimcheckConfig) -> EventEmitter | None:
    """Create an emitter for CLI usage: webhooks only."""
    if not config.webhooks:
        return None
    from claimcheck.events.webhook import WebhookListener

    emitter = EventEmitter()
    emitter.add_listener(WebhookListener(config.webhooks))
    return emitter
