"""Event client contract and factory resolution."""

from __future__ import annotations

from .base import Connection, EventClient
from .factory import (
    ENTRY_POINT_GROUP,
    ClientFactory,
    register_factory,
    registered_factories,
    resolve_client,
    unregister_factory,
)

__all__ = [
    "ENTRY_POINT_GROUP",
    "ClientFactory",
    "Connection",
    "EventClient",
    "register_factory",
    "registered_factories",
    "resolve_client",
    "unregister_factory",
]
