"""Mapping from stdlib logging levels to event levels."""

from __future__ import annotations

import logging

from .models import EventLevel


def get_level(levelno: int) -> EventLevel | None:
    """Map a ``logging`` level number onto an event level.

    CRITICAL collapses into ERROR. NOTSET is the lowest threshold, so only
    negative (custom) levels come back as ``None``.
    """
    if levelno >= logging.ERROR:
        return EventLevel.ERROR
    if levelno >= logging.WARNING:
        return EventLevel.WARNING
    if levelno >= logging.INFO:
        return EventLevel.INFO
    if levelno >= logging.NOTSET:
        return EventLevel.DEBUG
    return None
