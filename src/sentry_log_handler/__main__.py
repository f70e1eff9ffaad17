"""Module entrypoint.

Allows:
    python -m sentry_log_handler "something broke" --dsn https://public@host/1
"""

from __future__ import annotations

from sentry_log_handler.cli import main

if __name__ == "__main__":
    main()
