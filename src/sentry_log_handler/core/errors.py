"""Exceptions and the handler error channel."""

from __future__ import annotations

import logging
import sys
import threading
import traceback
from enum import IntEnum
from typing import TextIO


class SentryHandlerError(Exception):
    """Base class for errors raised by this package."""


class InvalidDsnError(SentryHandlerError, ValueError):
    """The DSN is missing or cannot be parsed."""


class ClientFactoryError(SentryHandlerError, RuntimeError):
    """No client factory could produce an event client."""


class ErrorCode(IntEnum):
    """Failure categories reported through the error channel."""

    GENERIC_FAILURE = 0
    WRITE_FAILURE = 1
    FLUSH_FAILURE = 2
    CLOSE_FAILURE = 3
    OPEN_FAILURE = 4
    FORMAT_FAILURE = 5


class ErrorManager:
    """Receives handler failures instead of letting them reach the caller.

    Only the first error is written out; later ones are dropped so a broken
    client cannot flood stderr on every log call.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream
        self._reported = False
        self._lock = threading.Lock()

    def error(self, msg: str, exc: BaseException | None, code: ErrorCode) -> None:
        with self._lock:
            if self._reported:
                return
            self._reported = True

        if not logging.raiseExceptions:
            return

        stream = self._stream if self._stream is not None else sys.stderr
        try:
            stream.write(f"SentryHandler: {code.name}: {msg}\n")
            if exc is not None:
                traceback.print_exception(type(exc), exc, exc.__traceback__, file=stream)
        except OSError:  # pragma: no cover
            pass  # stderr closed
