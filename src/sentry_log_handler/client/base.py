"""Event client and the connection contract it delegates transport to."""

from __future__ import annotations

import threading
from typing import Protocol

from ..core.builder import EventBuilder, EventBuilderHelper
from ..core.models import Event


class Connection(Protocol):
    """Transport for events. Delivery, batching and retries live here."""

    def send(self, event: Event) -> None:
        """Hand an event over for delivery."""
        ...

    def close(self) -> None:
        """Release transport resources; may raise OSError."""
        ...


class EventClient:
    """Sends events through a connection after running builder helpers."""

    def __init__(self, connection: Connection) -> None:
        self._connection = connection
        self._helpers: list[EventBuilderHelper] = []
        self._helpers_lock = threading.Lock()

    @property
    def connection(self) -> Connection:
        return self._connection

    def add_builder_helper(self, helper: EventBuilderHelper) -> None:
        with self._helpers_lock:
            self._helpers.append(helper)

    def remove_builder_helper(self, helper: EventBuilderHelper) -> None:
        with self._helpers_lock:
            self._helpers.remove(helper)

    def run_builder_helpers(self, builder: EventBuilder) -> None:
        with self._helpers_lock:
            helpers = list(self._helpers)
        for helper in helpers:
            helper.help_building_event(builder)

    def send_event(self, event: Event) -> None:
        self._connection.send(event)

    def close_connection(self) -> None:
        self._connection.close()
