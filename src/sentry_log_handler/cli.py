from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from sentry_log_handler.core.errors import ErrorCode, ErrorManager
from sentry_log_handler.handler import SentryHandler

DEFAULT_MESSAGE = "Test event sent by sentry-log-handler"


class _CollectingErrorManager(ErrorManager):
    """Print every failure (not just the first) and remember them."""

    def __init__(self) -> None:
        super().__init__()
        self.errors: list[tuple[ErrorCode, str, BaseException | None]] = []

    def error(self, msg: str, exc: BaseException | None, code: ErrorCode) -> None:
        self.errors.append((code, msg, exc))
        detail = f": {exc}" if exc is not None else ""
        print(f"Error ({code.name}): {msg}{detail}", file=sys.stderr)


def _parse_level(s: str) -> int:
    name = s.strip().upper()
    levels = {k: v for k, v in logging.getLevelNamesMapping().items() if v >= logging.DEBUG}
    if name not in levels:
        allowed = ", ".join(sorted(levels, key=lambda k: (-levels[k], k)))
        raise argparse.ArgumentTypeError(f"Invalid level. Allowed: {allowed}")
    return levels[name]


def main(argv: Sequence[str] | None = None) -> None:
    p = argparse.ArgumentParser(description="Send one test log record through SentryHandler.")
    p.add_argument("message", nargs="?", default=DEFAULT_MESSAGE)
    p.add_argument("--dsn", default=None, help="Service DSN (default: $SENTRY_DSN)")
    p.add_argument(
        "--factory",
        default=None,
        help="Client factory: registered name, entry point name, or module:attr",
    )
    p.add_argument("--level", type=_parse_level, default=logging.ERROR, help="Record level (default: ERROR)")
    p.add_argument("--logger", default="sentry.test", help="Logger name used for the record")
    p.add_argument("--with-exception", action="store_true", help="Attach a sample exception")

    args = p.parse_args(argv)

    handler = SentryHandler(dsn=args.dsn, client_factory=args.factory)
    errors = _CollectingErrorManager()
    handler.error_manager = errors

    log = logging.getLogger(args.logger)
    exc_info = None
    if args.with_exception:
        try:
            raise RuntimeError("sample exception from sentry-log-handler")
        except RuntimeError:
            exc_info = sys.exc_info()

    # Publish directly so logger levels and propagation cannot swallow the record.
    record = log.makeRecord(log.name, args.level, __file__, 0, args.message, (), exc_info, func="main")
    try:
        sent = handler.publish(record)
    finally:
        handler.close()

    if errors.errors:
        raise SystemExit(2)
    if not sent:
        print("Error: the test record was not sent.", file=sys.stderr)
        raise SystemExit(2)

    print(f"Sent test event to {handler.config.dsn or 'the DSN from $SENTRY_DSN'}.")


if __name__ == "__main__":
    main()
