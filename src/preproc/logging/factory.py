from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional, TextIO

from preproc.logging.helpers import setup_base_logger, get_logger

if TYPE_CHECKING:
    from preproc.runtime.config import BuildConfig


class DefaultLoggerFactory:
    """Configures the 'preproc' base logger on first use and hands out child loggers.

    The CLI builds one from its BuildConfig; library callers that never
    touch a factory get whatever handlers the host application installed.
    """

    def __init__(self, *, json_logs: bool = False, level: int = logging.INFO, stream: Optional[TextIO] = None) -> None:
        self._json = bool(json_logs)
        self._level = int(level)
        self._stream: Optional[TextIO] = stream
        self._configured = False

    @classmethod
    def from_config(cls, cfg: "BuildConfig", *, stream: Optional[TextIO] = None) -> "DefaultLoggerFactory":
        return cls(json_logs=cfg.json_logs, level=cfg.log_level, stream=stream)

    def _ensure_config(self) -> None:
        if self._configured:
            return
        setup_base_logger(json_logs=self._json, level=self._level, stream=self._stream)
        self._configured = True

    def get_logger(self, name: str) -> logging.Logger:
        self._ensure_config()
        return get_logger(name)
