"""Logging handler that forwards records to an error-tracking service.

Attach it like any other handler::

    handler = SentryHandler(dsn="https://public@sentry.example.com/1")
    handler.setLevel(logging.WARNING)
    logging.getLogger().addHandler(handler)

or from ``logging.config.dictConfig``::

    "handlers": {
        "sentry": {
            "class": "sentry_log_handler.SentryHandler",
            "level": "WARNING",
            "client_factory": "myapp.sentry:factory",
        }
    }

The event client is built on first use, so a handler declared at import time
costs nothing until something is actually logged.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from datetime import UTC, datetime
from enum import Enum

from .client.base import EventClient
from .client.factory import resolve_client
from .config import HandlerConfig, resolve_handler_config
from .core.builder import EventBuilder
from .core.dsn import dsn_lookup
from .core.errors import ErrorCode, ErrorManager
from .core.interfaces import exception_interface, message_interface
from .core.levels import get_level
from .core.models import StackFrame

# Records from these loggers are never forwarded.
_OWN_LOGGER = __name__.partition(".")[0]

_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class StartState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    FAILED = "failed"


def _formatted_message(record: logging.LogRecord) -> str | None:
    """``record.getMessage()``, or None when the arguments don't fit the template."""
    try:
        return record.getMessage()
    except (TypeError, ValueError, KeyError):
        return None


class SentryHandler(logging.Handler):
    """Translate log records into events and hand them to an event client.

    Parameters
    ----------
    client:
        Ready-made event client. When omitted, a client is resolved from
        ``dsn`` (or ``SENTRY_DSN``) and ``client_factory`` on first use.
    dsn:
        Service endpoint.
    client_factory:
        Registered factory name, entry point name, or ``"module:attr"``.
    propagate_close:
        Close the client's connection when the handler closes. Defaults to
        True for handler-owned clients and False for a provided ``client``.
    level:
        Handler level threshold.
    """

    def __init__(
        self,
        client: EventClient | None = None,
        *,
        dsn: str | None = None,
        client_factory: str | None = None,
        propagate_close: bool | None = None,
        level: int | str = logging.NOTSET,
    ) -> None:
        super().__init__(level)
        explicit = propagate_close is not None or client is not None
        if propagate_close is None:
            propagate_close = client is None

        self.config = resolve_handler_config(
            HandlerConfig(dsn=dsn, client_factory=client_factory, propagate_close=propagate_close),
            propagate_close_explicit=explicit,
        )
        self.error_manager = ErrorManager()

        self._client = client
        self._state = StartState.READY if client is not None else StartState.UNINITIALIZED
        self._start_lock = threading.Lock()
        self._start_owner: int | None = None
        self._sending = threading.local()
        self._connection_closed = False
        self._close_lock = threading.Lock()

    @property
    def client(self) -> EventClient | None:
        return self._client

    @property
    def state(self) -> StartState:
        return self._state

    def set_dsn(self, dsn: str | None) -> None:
        self.config = replace(self.config, dsn=dsn)

    def set_client_factory(self, client_factory: str | None) -> None:
        self.config = replace(self.config, client_factory=client_factory)

    def report_error(self, msg: str, exc: BaseException | None, code: ErrorCode) -> None:
        self.error_manager.error(msg, exc, code)

    def is_loggable(self, record: logging.LogRecord) -> logging.LogRecord | None:
        """Return the record to publish (possibly replaced by a filter), or None."""
        if record.levelno < self.level:
            return None
        name = record.name or ""
        if name == _OWN_LOGGER or name.startswith(_OWN_LOGGER + "."):
            return None
        rv = self.filter(record)
        if isinstance(rv, logging.LogRecord):
            return rv
        return record if rv else None

    def handle(self, record: logging.LogRecord) -> bool:
        # The client owns its own thread safety, so the handler I/O lock is not taken.
        return self.publish(record)

    def publish(self, record: logging.LogRecord) -> bool:
        """Forward ``record`` if it passes ``is_loggable``; never raises.

        Returns True only when an event was handed to the client.
        """
        loggable = self.is_loggable(record)
        if loggable is None:
            return False
        return self._send(loggable)

    def emit(self, record: logging.LogRecord) -> None:
        self._send(record)

    def _send(self, record: logging.LogRecord) -> bool:
        """Build and send the event; False when the record was dropped or sending failed."""
        # Transport code logging from inside send_event lands here again.
        if getattr(self._sending, "active", False):
            return False

        client = self._ensure_client()
        if client is None:
            return False

        self._sending.active = True
        try:
            builder = self.build_event(record)
            client.run_builder_helpers(builder)
            client.send_event(builder.build())
        except Exception as e:
            self.report_error("An exception occurred while sending the event", e, ErrorCode.WRITE_FAILURE)
            return False
        finally:
            self._sending.active = False
        return True

    def build_event(self, record: logging.LogRecord) -> EventBuilder:
        """Translate a record into an event builder (helpers not yet applied)."""
        builder = (
            EventBuilder()
            .set_level(get_level(record.levelno))
            .set_timestamp(datetime.fromtimestamp(record.created, UTC))
            .set_logger(record.name)
        )

        if record.module and record.funcName:
            builder.set_culprit(StackFrame(module=record.module, function=record.funcName))
        else:
            builder.set_culprit(record.name)

        if record.exc_info and record.exc_info[1] is not None:
            builder.add_interface(exception_interface(record.exc_info[1]))

        if record.args:
            builder.add_interface(
                message_interface(str(record.msg), record.args, _formatted_message(record))
            )
        else:
            builder.set_message(str(record.msg))

        for key, value in vars(record).items():
            if key not in _RECORD_ATTRS and not key.startswith("_"):
                builder.add_extra(key, value)

        return builder

    def _ensure_client(self) -> EventClient | None:
        client = self._client
        if client is not None:
            return client

        # Client construction on this thread is logging; drop instead of deadlocking.
        if self._start_owner == threading.get_ident():
            return None

        try:
            return self._start()
        except Exception as e:
            self.report_error(
                "An exception occurred while creating the event client", e, ErrorCode.OPEN_FAILURE
            )
            return None

    def _start(self) -> EventClient:
        with self._start_lock:
            if self._client is not None:
                return self._client

            self._start_owner = threading.get_ident()
            self._state = StartState.INITIALIZING
            try:
                dsn = self.config.dsn or dsn_lookup()
                client = resolve_client(dsn, self.config.client_factory)
            except Exception:
                # FAILED is not terminal: the next publish tries again.
                self._state = StartState.FAILED
                raise
            finally:
                self._start_owner = None

            self._client = client
            self._state = StartState.READY
            return client

    def flush(self) -> None:
        """Nothing is buffered here; delivery belongs to the client."""

    def close(self) -> None:
        try:
            client = self._client
            if not self.config.propagate_close or client is None:
                return
            with self._close_lock:
                if self._connection_closed:
                    return
                self._connection_closed = True
            try:
                client.close_connection()
            except Exception as e:
                self.report_error(
                    "An exception occurred while closing the connection", e, ErrorCode.CLOSE_FAILURE
                )
        finally:
            super().close()
