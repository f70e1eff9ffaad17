"""Event builder and the builder-helper hook."""

from __future__ import annotations

import socket
import uuid
from datetime import UTC, datetime
from typing import Any, Protocol

from .models import Event, EventLevel, SentryInterface, StackFrame


class EventBuilderHelper(Protocol):
    """Hook allowed to mutate an event builder before the event is built."""

    def help_building_event(self, builder: EventBuilder) -> None:
        ...


class EventBuilder:
    """Collects event fields; ``build()`` fills defaults and freezes the event."""

    def __init__(self, event_id: str | None = None) -> None:
        self._fields: dict[str, Any] = {"event_id": event_id or uuid.uuid4().hex}
        self._extra: dict[str, str] = {}
        self._interfaces: dict[str, SentryInterface] = {}
        self._built = False

    def set_level(self, level: EventLevel | None) -> EventBuilder:
        self._fields["level"] = level
        return self

    def set_timestamp(self, timestamp: datetime) -> EventBuilder:
        self._fields["timestamp"] = timestamp
        return self

    def set_logger(self, logger: str | None) -> EventBuilder:
        self._fields["logger"] = logger
        return self

    def set_culprit(self, culprit: StackFrame | str | None) -> EventBuilder:
        if isinstance(culprit, StackFrame):
            culprit = culprit.culprit()
        self._fields["culprit"] = culprit
        return self

    def set_message(self, message: str | None) -> EventBuilder:
        self._fields["message"] = message
        return self

    def set_server_name(self, server_name: str) -> EventBuilder:
        self._fields["server_name"] = server_name
        return self

    def set_platform(self, platform: str) -> EventBuilder:
        self._fields["platform"] = platform
        return self

    def add_extra(self, key: str, value: Any) -> EventBuilder:
        self._extra[key] = str(value)
        return self

    def add_interface(self, interface: SentryInterface) -> EventBuilder:
        """Attach an interface; a second interface of the same kind replaces the first."""
        self._interfaces[interface.interface_name] = interface
        return self

    def build(self) -> Event:
        if self._built:
            raise RuntimeError("EventBuilder.build() may only be called once")
        self._built = True

        fields = dict(self._fields)
        fields.setdefault("timestamp", datetime.now(UTC))
        fields.setdefault("server_name", socket.gethostname())
        return Event(**fields, extra=self._extra, interfaces=self._interfaces)
