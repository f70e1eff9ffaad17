"""Event model, builder and translation helpers."""

from __future__ import annotations

from .builder import EventBuilder, EventBuilderHelper
from .dsn import Dsn, dsn_lookup
from .errors import ClientFactoryError, ErrorCode, ErrorManager, InvalidDsnError, SentryHandlerError
from .interfaces import exception_interface, format_params, message_interface
from .levels import get_level
from .models import (
    Event,
    EventLevel,
    ExceptionInterface,
    ExceptionValue,
    MessageInterface,
    StackFrame,
)

__all__ = [
    "ClientFactoryError",
    "Dsn",
    "ErrorCode",
    "ErrorManager",
    "Event",
    "EventBuilder",
    "EventBuilderHelper",
    "EventLevel",
    "ExceptionInterface",
    "ExceptionValue",
    "InvalidDsnError",
    "MessageInterface",
    "SentryHandlerError",
    "StackFrame",
    "dsn_lookup",
    "exception_interface",
    "format_params",
    "get_level",
    "message_interface",
]
