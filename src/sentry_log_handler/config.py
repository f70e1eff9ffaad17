"""Handler configuration and environment overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace

FACTORY_ENV_VAR = "SENTRY_CLIENT_FACTORY"
PROPAGATE_CLOSE_ENV_VAR = "SENTRY_PROPAGATE_CLOSE"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True, slots=True)
class HandlerConfig:
    # None -> looked up from SENTRY_DSN when the client is first needed
    dsn: str | None = None
    # registered name, entry point name, or "module:attr"
    client_factory: str | None = None
    propagate_close: bool = True


def _parse_bool(name: str, value: str) -> bool:
    v = value.strip().lower()
    if v in _TRUE:
        return True
    if v in _FALSE:
        return False
    raise ValueError(f"{name} must be one of: {', '.join(sorted(_TRUE | _FALSE))}")


def resolve_handler_config(
    cfg: HandlerConfig | None = None,
    *,
    propagate_close_explicit: bool = False,
) -> HandlerConfig:
    """Return config with environment overrides applied.

    Environment values only fill settings the caller left unset.
    """
    if cfg is None:
        cfg = HandlerConfig()

    factory = os.getenv(FACTORY_ENV_VAR)
    if cfg.client_factory is None and factory:
        cfg = replace(cfg, client_factory=factory)

    propagate = os.getenv(PROPAGATE_CLOSE_ENV_VAR)
    if not propagate_close_explicit and propagate:
        cfg = replace(cfg, propagate_close=_parse_bool(PROPAGATE_CLOSE_ENV_VAR, propagate))

    return cfg
