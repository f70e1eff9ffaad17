"""Event models handed to the event client."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

UNKNOWN_LINE = -1


class EventLevel(str, Enum):
    """Severity levels understood by the error-tracking service."""

    FATAL = "fatal"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    DEBUG = "debug"


class StackFrame(BaseModel):
    model_config = ConfigDict(frozen=True)

    module: str | None = None
    function: str | None = None
    filename: str | None = None
    lineno: int = UNKNOWN_LINE
    context_line: str | None = None

    def culprit(self) -> str:
        """Render the frame as a culprit string (module.function(file:line))."""
        out = f"{self.module}.{self.function}"
        if self.filename is not None:
            out += f"({self.filename}"
            if self.lineno >= 0:
                out += f":{self.lineno}"
            out += ")"
        return out


class ExceptionValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str
    module: str | None = None
    value: str
    stacktrace: list[StackFrame] = Field(default_factory=list)


class ExceptionInterface(BaseModel):
    """Exception chain, root cause first and the raised exception last."""

    model_config = ConfigDict(frozen=True)
    interface_name: ClassVar[str] = "sentry.interfaces.Exception"

    values: list[ExceptionValue]


class MessageInterface(BaseModel):
    """Message template with its stringified parameters."""

    model_config = ConfigDict(frozen=True)
    interface_name: ClassVar[str] = "sentry.interfaces.Message"

    message: str
    params: list[str] | dict[str, str] = Field(default_factory=list)
    formatted: str | None = None


SentryInterface = ExceptionInterface | MessageInterface


class Event(BaseModel):
    """Structured event sent to the error-tracking service."""

    model_config = ConfigDict(frozen=True)

    event_id: str
    timestamp: datetime
    level: EventLevel | None = None
    logger: str | None = None
    platform: str = "python"
    culprit: str | None = None
    message: str | None = None
    server_name: str | None = None
    extra: dict[str, str] = Field(default_factory=dict)
    interfaces: dict[str, SentryInterface] = Field(default_factory=dict)
