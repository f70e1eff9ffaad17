from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import pytest

from sentry_log_handler.client import EventClient, registered_factories, unregister_factory
from sentry_log_handler.core.errors import ErrorCode, ErrorManager
from sentry_log_handler.core.models import Event


class RecordingConnection:
    def __init__(self, close_error: OSError | None = None) -> None:
        self.events: list[Event] = []
        self.closed = 0
        self.close_error = close_error

    def send(self, event: Event) -> None:
        self.events.append(event)

    def close(self) -> None:
        self.closed += 1
        if self.close_error is not None:
            raise self.close_error


class RecordingErrorManager(ErrorManager):
    def __init__(self) -> None:
        super().__init__()
        self.errors: list[tuple[ErrorCode, str, BaseException | None]] = []

    def error(self, msg: str, exc: BaseException | None, code: ErrorCode) -> None:
        self.errors.append((code, msg, exc))

    @property
    def codes(self) -> list[ErrorCode]:
        return [code for code, _, _ in self.errors]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in ("SENTRY_DSN", "SENTRY_CLIENT_FACTORY", "SENTRY_PROPAGATE_CLOSE"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def _clean_registry():
    yield
    for name in list(registered_factories()):
        unregister_factory(name)


@pytest.fixture
def new_connection() -> Callable[..., RecordingConnection]:
    return RecordingConnection


@pytest.fixture
def connection() -> RecordingConnection:
    return RecordingConnection()


@pytest.fixture
def client(connection: RecordingConnection) -> EventClient:
    return EventClient(connection)


@pytest.fixture
def errors() -> RecordingErrorManager:
    return RecordingErrorManager()


@pytest.fixture
def make_record() -> Callable[..., logging.LogRecord]:
    def _make(
        msg: Any = "hello",
        *,
        level: int = logging.ERROR,
        name: str = "app",
        args: Any = (),
        **attrs: Any,
    ) -> logging.LogRecord:
        return logging.makeLogRecord(
            {
                "name": name,
                "msg": msg,
                "args": args,
                "levelno": level,
                "levelname": logging.getLevelName(level),
                **attrs,
            }
        )

    return _make
