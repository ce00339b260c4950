"""Structured logging for the relay.

Every record is one JSON object under the ``relay`` logger hierarchy:

- ``relay`` owns the handlers (stderr, plus an optional rotating file) and
  does not propagate to the root logger.
- ``relay.executor``, ``relay.stream``, ``relay.probe`` and ``relay.cli``
  carry no handlers of their own and propagate to ``relay``.
- ``RELAY_LOG_LEVEL`` selects the level (``INFO`` when unset).

``normalized_log_event`` always emits the keys in
``REQUIRED_NORMALIZED_KEYS`` (``error_code`` only when there is one), so log
consumers can rely on a stable shape across chat, stream and probe events.
Callers never pass credentials as fields.
"""
from __future__ import annotations

import json
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional

from .log_support import JsonFormatter, LogContext

BASE_LOGGER_NAME = "relay"

_MANAGED = "_relay_managed"  # handler attribute: "console" or "file"
_READY = "_relay_ready"
_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
_FILE_MAX_BYTES = 10 * 1024 * 1024
_FILE_BACKUPS = 5

_LEVEL_NAMES = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def _parse_level(value: str | None, default: int = logging.INFO) -> int:
    """Map a level name (any case) to its number, or ``default`` when unknown."""
    if not value:
        return default
    return _LEVEL_NAMES.get(value.strip().upper(), default)


def _formatter(json_mode: bool) -> logging.Formatter:
    return JsonFormatter() if json_mode else logging.Formatter(_PLAIN_FORMAT)


def _managed_handlers(logger: logging.Logger, kind: str | None = None) -> list[logging.Handler]:
    return [
        h
        for h in logger.handlers
        if getattr(h, _MANAGED, None) is not None and (kind is None or getattr(h, _MANAGED) == kind)
    ]


def _base_logger(json_mode: bool = True, level: int = logging.INFO) -> logging.Logger:
    logger = logging.getLogger(BASE_LOGGER_NAME)
    env_level = os.getenv("RELAY_LOG_LEVEL")
    wanted = _parse_level(env_level, default=level)
    if getattr(logger, _READY, False):
        # later calls only follow an explicit override
        if env_level and logger.level != wanted:
            logger.setLevel(wanted)
        return logger
    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(_formatter(json_mode))
    setattr(console, _MANAGED, "console")
    logger.handlers = [console]
    logger.setLevel(wanted)
    console.setLevel(wanted)
    logger.propagate = False
    setattr(logger, _READY, True)
    return logger


def get_logger(name: str = BASE_LOGGER_NAME, json_mode: bool = True, level: int = logging.INFO) -> logging.Logger:
    """Return the ``relay`` logger, or a propagating child such as ``relay.stream``."""
    base = _base_logger(json_mode=json_mode, level=level)
    if name == BASE_LOGGER_NAME:
        return base
    child = logging.getLogger(name)
    child.setLevel(logging.NOTSET)
    child.propagate = True
    return child


def configure_logger(
    *,
    level: int | str | None = None,
    file_path: Optional[str] = None,
    json_mode: bool = True,
) -> logging.Logger:
    """Reconfigure the ``relay`` logger at runtime.

    Parameters
    ----------
    level: int | str | None
        Numeric level or name; ``None`` keeps the current level.
    file_path: Optional[str]
        Attach a rotating file handler at this path (10 MB x 5). ``None``
        detaches any file handler previously attached here.
    json_mode: bool
        JSON or plain-text formatting for the managed handlers.

    Handlers added by callers are left alone.
    """
    logger = _base_logger(json_mode=json_mode)
    if isinstance(level, str):
        logger.setLevel(_parse_level(level, default=logger.level))
    elif level is not None:
        logger.setLevel(level)

    target = os.path.abspath(os.path.expanduser(file_path)) if file_path else None
    for h in _managed_handlers(logger, "file"):
        if getattr(h, "baseFilename", None) != target:
            logger.removeHandler(h)
            h.close()

    if target and not _managed_handlers(logger, "file"):
        os.makedirs(os.path.dirname(target), exist_ok=True)
        fh = RotatingFileHandler(target, maxBytes=_FILE_MAX_BYTES, backupCount=_FILE_BACKUPS, encoding="utf-8")
        setattr(fh, _MANAGED, "file")
        logger.addHandler(fh)

    for h in _managed_handlers(logger):
        h.setLevel(logger.level)
        h.setFormatter(_formatter(json_mode))
    return logger


def log_event(
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    level: int = logging.INFO,
    keep_none: bool = False,
    **fields: Any,
) -> None:
    """Log ``event`` with the context and ``fields`` as one JSON message.

    ``None`` values are dropped unless ``keep_none`` is set.
    """
    if not logger.isEnabledFor(level):
        return
    payload: Dict[str, Any] = {"event": event}
    if ctx is not None:
        payload.update(ctx.to_dict())
    payload.update(fields if keep_none else {k: v for k, v in fields.items() if v is not None})
    logger.log(level, json.dumps(payload, ensure_ascii=False, default=str))


REQUIRED_NORMALIZED_KEYS = (
    "structured",
    "phase",
    "attempt",
    "error_code",
    "emitted",
    "tokens",
)


def normalized_log_event(
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    phase: str,
    attempt: int | None = None,
    error_code: str | None = None,
    emitted: bool | int | None = None,
    tokens: Any = None,
    structured: bool = True,
    level: int = logging.INFO,
    **extra_fields: Any,
) -> None:
    """Log ``event`` with the normalized keys always present.

    ``tokens`` stays ``None``; the relay does no token accounting. Extra
    fields with a ``None`` value are dropped and never replace a normalized key.
    """
    fields: Dict[str, Any] = {
        "structured": structured,
        "phase": phase,
        "attempt": attempt,
        "emitted": emitted,
        "tokens": tokens,
    }
    if error_code is not None:
        fields["error_code"] = error_code
    for key, value in extra_fields.items():
        if value is not None and fields.get(key) is None:
            fields[key] = value
    log_event(logger, event, ctx, level=level, keep_none=True, **fields)


__all__ = [
    "BASE_LOGGER_NAME",
    "LogContext",
    "get_logger",
    "configure_logger",
    "log_event",
    "normalized_log_event",
    "REQUIRED_NORMALIZED_KEYS",
]
