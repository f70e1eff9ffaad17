"""Client factory registry and resolution.

A factory turns a DSN into an ``EventClient``. Factories come from three
places, tried in this order when no factory is named:

- ``register_factory(name, factory)`` calls;
- installed ``sentry_log_handler.factories`` entry points;
- an explicit ``"package.module:attr"`` import path (only when named).
"""

from __future__ import annotations

import importlib
import logging
import threading
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from importlib.metadata import entry_points
from typing import Any, Protocol

from ..core.dsn import Dsn
from ..core.errors import ClientFactoryError
from .base import EventClient

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "sentry_log_handler.factories"


class ClientFactory(Protocol):
    def create_client(self, dsn: Dsn) -> EventClient:
        ...


@dataclass(frozen=True, slots=True)
class _CallableFactory:
    """Adapts a plain ``dsn -> EventClient`` callable."""

    func: Callable[[Dsn], EventClient]

    def create_client(self, dsn: Dsn) -> EventClient:
        return self.func(dsn)


_registry: dict[str, ClientFactory] = {}
_registry_lock = threading.Lock()


def _as_factory(obj: Any) -> ClientFactory:
    """Normalize a class, factory instance, or callable into a factory."""
    if isinstance(obj, type):
        obj = obj()
    if hasattr(obj, "create_client"):
        return obj
    if callable(obj):
        return _CallableFactory(obj)
    raise ClientFactoryError(f"{obj!r} is not a client factory")


def register_factory(name: str, factory: Any) -> None:
    """Register a factory under ``name``; re-registering replaces it."""
    with _registry_lock:
        _registry[name] = _as_factory(factory)


def unregister_factory(name: str) -> None:
    with _registry_lock:
        _registry.pop(name, None)


def registered_factories() -> dict[str, ClientFactory]:
    with _registry_lock:
        return dict(_registry)


def _load_import_path(path: str) -> ClientFactory:
    module_name, _, attr = path.partition(":")
    try:
        module = importlib.import_module(module_name)
        obj = getattr(module, attr)
    except (ImportError, AttributeError) as e:
        raise ClientFactoryError(f"Cannot import client factory {path!r}: {e}") from e
    return _as_factory(obj)


def _entry_point_factories() -> Iterator[tuple[str, ClientFactory]]:
    for ep in entry_points(group=ENTRY_POINT_GROUP):
        try:
            yield ep.name, _as_factory(ep.load())
        except Exception as e:
            logger.debug("Skipping client factory entry point %s: %s", ep.name, e)


def _named_factory(factory_id: str) -> ClientFactory:
    factory = registered_factories().get(factory_id)
    if factory is not None:
        return factory
    for name, ep_factory in _entry_point_factories():
        if name == factory_id:
            return ep_factory
    if ":" in factory_id:
        return _load_import_path(factory_id)
    raise ClientFactoryError(f"Unknown client factory {factory_id!r}")


def resolve_client(dsn: Dsn | str, factory_id: str | None = None) -> EventClient:
    """Build an event client for ``dsn``.

    With ``factory_id`` only that factory is used and its errors propagate.
    Without it, every known factory is tried in order and the first client
    produced wins.
    """
    if isinstance(dsn, str):
        dsn = Dsn.parse(dsn)

    if factory_id:
        return _named_factory(factory_id).create_client(dsn)

    def candidates() -> Iterator[tuple[str, ClientFactory]]:
        yield from registered_factories().items()
        yield from _entry_point_factories()

    for name, factory in candidates():
        try:
            return factory.create_client(dsn)
        except Exception as e:
            logger.debug("Client factory %s failed for %s: %s", name, dsn.uri, e)

    raise ClientFactoryError(f"No client factory could create a client for {dsn.uri}")
