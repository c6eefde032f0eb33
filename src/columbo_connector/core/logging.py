"""
Logging helpers for the Columbo connector.

Modules obtain loggers through :func:`get_logger`, which returns a
:class:`logging.LoggerAdapter` carrying structured metadata. The
:class:`StructuredLogFormatter` renders that metadata as ``key=value`` pairs
after the message so fetches can be followed per account and per request
without a separate telemetry layer. Credential values never reach the output:
extras whose key names a secret are masked before formatting.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from copy import copy
from logging import Logger, LoggerAdapter
from typing import Any, Iterable, Mapping, MutableMapping, Optional, Sequence

DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_LEVEL = "WARNING"
_ENV_LEVEL = "COLUMBO_LOG_LEVEL"
_ENV_COLOR = "COLUMBO_LOG_COLOR"
_MASK = "***"
_SECRET_KEYS = frozenset({"token", "password", "authorization"})
_EXTRA_FOCUS_ORDER: Sequence[str] = (
    "phase",
    "status",
    "account",
    "report_type",
    "fields",
    "rows",
    "method",
    "url",
    "status_code",
    "attempt",
    "tags",
)

_LEVEL_STYLES = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[95m",
}
_RESET = "\033[0m"

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RESERVED_ATTRS = frozenset(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {"message", "asctime"}

_configured = False


def _resolve_level(level: Optional[int | str]) -> int:
    if isinstance(level, int):
        return level
    candidate = (level or os.getenv(_ENV_LEVEL) or DEFAULT_LEVEL).upper()
    resolved = logging.getLevelName(candidate)
    return resolved if isinstance(resolved, int) else logging.WARNING


def _coerce_bool(value: str) -> Optional[bool]:
    lowered = value.strip().lower()
    if lowered in {"1", "true", "yes", "on"}:
        return True
    if lowered in {"0", "false", "no", "off"}:
        return False
    return None


def _supports_color(stream: Any) -> bool:
    preference = os.getenv(_ENV_COLOR)
    if preference:
        resolved = _coerce_bool(preference)
        if resolved is not None:
            return resolved
    return hasattr(stream, "isatty") and bool(stream.isatty())


def _iter_extras(record: logging.LogRecord) -> Iterable[tuple[str, Any]]:
    payload = {key: value for key, value in record.__dict__.items() if key not in _RESERVED_ATTRS and not key.startswith("_") and value is not None}

    for key in _EXTRA_FOCUS_ORDER:
        if key in payload:
            yield key, payload.pop(key)

    for key in sorted(payload):
        yield key, payload[key]


def _format_extra_value(key: str, value: Any) -> str:
    if key.lower() in _SECRET_KEYS:
        return _MASK
    if isinstance(value, (list, tuple, set)):
        return "[" + ", ".join(_format_extra_value("", item) for item in value) + "]"
    if isinstance(value, Mapping):
        masked = {name: (_MASK if str(name).lower() in _SECRET_KEYS else item) for name, item in value.items()}
        try:
            return json.dumps(masked, ensure_ascii=False, default=str)
        except TypeError:
            return repr(masked)
    if isinstance(value, float):
        return f"{value:.4g}"
    return str(value)


class StructuredLogFormatter(logging.Formatter):
    """Formatter that appends structured extras and optionally colours the level."""

    def __init__(self, *, use_color: bool = False) -> None:
        super().__init__(DEFAULT_FORMAT, datefmt=DEFAULT_DATE_FORMAT)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        working = copy(record)
        if self.use_color:
            style = _LEVEL_STYLES.get(working.levelname.upper())
            if style:
                working.levelname = f"{style}{working.levelname}{_RESET}"
        base = super().format(working)
        extras = " ".join(f"{key}={_format_extra_value(key, value)}" for key, value in _iter_extras(record))
        if extras:
            return f"{base} | {extras}"
        return base


def _build_handler(level: Optional[int | str]) -> logging.Handler:
    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setLevel(_resolve_level(level))
    handler.setFormatter(StructuredLogFormatter(use_color=_supports_color(handler.stream)))
    return handler


def configure_logging(level: Optional[int | str] = None, *, force: bool = False) -> None:
    """
    Install the structured stderr handler on the root logger.

    Parameters
    ----------
    level:
        Optional level override. Falls back to ``COLUMBO_LOG_LEVEL`` or ``WARNING``.
    force:
        Reapply the configuration even when it was installed before.
    """

    global _configured
    if _configured and not force:
        return
    logging.basicConfig(level=_resolve_level(level), handlers=[_build_handler(level)], force=force)
    _configured = True


def get_logger(
    name: str,
    *,
    tags: Optional[Sequence[str]] = None,
    extra: Optional[Mapping[str, object]] = None,
) -> LoggerAdapter:
    """
    Return a :class:`logging.LoggerAdapter` bound to ``name``.

    Parameters
    ----------
    name:
        Logger namespace, usually ``__name__``.
    tags:
        Observability tags attached to every entry.
    extra:
        Additional structured metadata recorded with each entry.
    """

    configure_logging()
    payload: MutableMapping[str, object] = {}
    if tags:
        payload["tags"] = tuple(tags)
    if extra:
        payload.update({key: value for key, value in extra.items() if value is not None})
    return LoggerAdapter(logging.getLogger(name), payload)


def log_progress(
    logger: LoggerAdapter | Logger,
    message: str,
    *,
    phase: Optional[str] = None,
    status: Optional[str] = None,
    level: int = logging.INFO,
    extra: Optional[Mapping[str, object]] = None,
) -> None:
    """Emit a log entry tagged with the current phase and status of a fetch."""

    payload: MutableMapping[str, object] = {}
    base = logger
    if isinstance(logger, LoggerAdapter):
        if isinstance(logger.extra, Mapping):
            payload.update({key: value for key, value in logger.extra.items() if value is not None})
        base = logger.logger
    if extra:
        payload.update(extra)
    if phase:
        payload["phase"] = phase
    if status:
        payload["status"] = status
    if payload:
        base.log(level, message, extra=dict(payload))
    else:
        base.log(level, message)
