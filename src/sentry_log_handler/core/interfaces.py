"""Constructors for the interfaces attached to events."""

from __future__ import annotations

import linecache
import traceback
from collections.abc import Iterable, Mapping
from typing import Any

from .models import ExceptionInterface, ExceptionValue, MessageInterface, StackFrame


def _frames(exc: BaseException) -> list[StackFrame]:
    """Stack frames of an exception's traceback, outermost call first."""
    out: list[StackFrame] = []
    for frame, lineno in traceback.walk_tb(exc.__traceback__):
        filename = frame.f_code.co_filename
        line = linecache.getline(filename, lineno, frame.f_globals).strip()
        out.append(
            StackFrame(
                module=frame.f_globals.get("__name__"),
                function=frame.f_code.co_name,
                filename=filename,
                lineno=lineno,
                context_line=line or None,
            )
        )
    return out


def _chain(exc: BaseException) -> list[BaseException]:
    """Follow __cause__/__context__ links; root cause first."""
    chain: list[BaseException] = []
    seen: set[int] = set()
    cur: BaseException | None = exc
    while cur is not None and id(cur) not in seen:
        seen.add(id(cur))
        chain.append(cur)
        if cur.__cause__ is not None:
            cur = cur.__cause__
        elif not cur.__suppress_context__:
            cur = cur.__context__
        else:
            cur = None
    chain.reverse()
    return chain


def exception_interface(exc: BaseException) -> ExceptionInterface:
    values = [
        ExceptionValue(
            type=type(e).__qualname__,
            module=type(e).__module__,
            value=str(e),
            stacktrace=_frames(e),
        )
        for e in _chain(exc)
    ]
    return ExceptionInterface(values=values)


def format_params(params: Iterable[Any] | Mapping[str, Any]) -> list[str] | dict[str, str]:
    """Stringify each parameter independently, keeping mapping keys."""
    if isinstance(params, Mapping):
        return {str(k): str(v) for k, v in params.items()}
    return [str(p) for p in params]


def message_interface(
    template: str,
    params: Iterable[Any] | Mapping[str, Any],
    formatted: str | None = None,
) -> MessageInterface:
    return MessageInterface(message=template, params=format_params(params), formatted=formatted)
