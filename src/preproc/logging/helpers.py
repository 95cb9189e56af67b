from __future__ import annotations

"""Logger names, handler setup and structured context for preproc.

Every logger lives under the 'preproc' namespace. The base logger gets a
single stderr handler, plain text or one JSON object per line. Build
failures and IO traces attach their fields as a 'context' dict, which the
JSON formatter emits as 'ctx'.
"""

import logging
import os
from typing import Dict, Optional, TextIO

BASE_LOGGER = "preproc"


class JsonLogFormatter(logging.Formatter):
    """Emit logs as compact JSON with a fixed schema.

    Fields:
        - ts: ISO-8601 timestamp in UTC with millisecond precision.
        - level: Log level name.
        - module: Logger name (e.g., 'preproc.deps').
        - msg: Formatted message string.
        - version: preproc.__version__ (fixed per formatter instance).
        - ctx: Optional dictionary attached to the record as 'context'.
    """

    def __init__(self) -> None:
        super().__init__()
        self._version = self._resolve_version()

    @staticmethod
    def _resolve_version() -> str:
        try:
            # Lazy import, the package __init__ imports this module.
            from preproc import __version__ as _v  # type: ignore
            return str(_v)
        except ImportError:
            return os.getenv("PREPROC_VERSION", "unknown")

    def format(self, record: logging.LogRecord) -> str:
        from datetime import datetime, timezone
        import json

        ts = datetime.fromtimestamp(record.created, tz=timezone.utc)
        ts_str = ts.isoformat(timespec="milliseconds").replace("+00:00", "Z")

        payload = {
            "ts": ts_str,
            "level": record.levelname,
            "module": record.name,
            "msg": record.getMessage(),
            "version": self._version,
        }

        ctx = getattr(record, "context", None)
        if isinstance(ctx, dict) and ctx:
            payload["ctx"] = ctx

        return json.dumps(payload, ensure_ascii=False)


def setup_base_logger(
    *, json_logs: bool = False, level: int = logging.INFO, stream: Optional[TextIO] = None
) -> logging.Logger:
    """Configure the base 'preproc' logger once and return it.

    Args:
        json_logs: If True, configure a JSON formatter, else plain text.
        level: Logging level for the base logger.
        stream: Optional stream (stderr by default).

    Returns:
        The configured base logger.
    """
    base = logging.getLogger(BASE_LOGGER)
    if base.handlers:
        base.setLevel(level)
        return base

    import sys as _sys

    base.setLevel(level)
    base.propagate = False

    handler = logging.StreamHandler(stream or _sys.stderr)
    if json_logs:
        handler.setFormatter(JsonLogFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    base.addHandler(handler)

    return base


def reset_base_logger() -> None:
    """Drop every handler installed by `setup_base_logger`."""
    base = logging.getLogger(BASE_LOGGER)
    for handler in list(base.handlers):
        base.removeHandler(handler)
    base.propagate = True


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a namespaced logger under 'preproc'."""
    if not name or name == BASE_LOGGER:
        return logging.getLogger(BASE_LOGGER)
    if name.startswith(BASE_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{BASE_LOGGER}.{name}")


def is_trace_io_enabled() -> bool:
    """Check if IO tracing is enabled via env flag."""
    return os.getenv("PREPROC_TRACE_IO") == "1"


def trace_io(logger: logging.Logger, message: str, **ctx) -> None:
    """Emit debug-verbosity IO trace messages only when enabled.

    Args:
        logger: Target logger.
        message: Human-readable description.
        **ctx: Optional structured context appended in debug format.
    """
    if not is_trace_io_enabled():
        return
    if ctx:
        logger.debug("%s | ctx=%r", message, ctx, extra={"context": ctx})
    else:
        logger.debug("%s", message)


_ERROR_FIELDS = ("identifier", "origin", "reason", "cycle", "source", "lineno", "line", "path", "limit")


def build_error_context(exc: BaseException) -> Dict[str, object]:
    """Collect the structured fields of a build failure (cycle, origin, location...)."""
    ctx: Dict[str, object] = {"error": type(exc).__name__}
    for attr in _ERROR_FIELDS:
        value = getattr(exc, attr, None)
        if value is None:
            continue
        ctx[attr] = list(value) if isinstance(value, tuple) else value
    return ctx


def log_build_error(logger: logging.Logger, exc: BaseException) -> None:
    """Report a failed build, attaching `build_error_context` for JSON logs."""
    logger.error(
        "error while generating/processing dependencies: %s",
        exc,
        extra={"context": build_error_context(exc)},
    )
