"""Forward stdlib ``logging`` records to an error-tracking service."""

from __future__ import annotations

from .client import Connection, EventClient, register_factory, resolve_client, unregister_factory
from .config import HandlerConfig
from .core import (
    Dsn,
    ErrorCode,
    ErrorManager,
    Event,
    EventBuilder,
    EventBuilderHelper,
    EventLevel,
)
from .handler import SentryHandler, StartState

__all__ = [
    "Connection",
    "Dsn",
    "ErrorCode",
    "ErrorManager",
    "Event",
    "EventBuilder",
    "EventBuilderHelper",
    "EventClient",
    "EventLevel",
    "HandlerConfig",
    "SentryHandler",
    "StartState",
    "register_factory",
    "resolve_client",
    "unregister_factory",
]
