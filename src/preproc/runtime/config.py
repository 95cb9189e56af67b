from __future__ import annotations

"""
Build configuration assembled from CLI flags and environment variables.

Environment:
    PREPROC_COMMENT      comment prefix when -c is not given
    PREPROC_MAX_DEPTH    include depth limit when --max-depth is not given
    PREPROC_PATH         extra search directories (os.pathsep separated),
                         appended after every -I
    PREPROC_JSON_LOGS=1  same as --json-logs
"""

import argparse
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Tuple

from preproc.constants import DEFAULT_COMMENT, DEFAULT_MAX_DEPTH, DEFAULT_OUTPUT_SUFFIX


class ConfigError(ValueError):
    """Raised when CLI flags or environment values are inconsistent."""


@dataclass(frozen=True)
class BuildConfig:
    """Immutable settings for one preproc invocation."""
    file: str
    output: Path
    search_paths: Tuple[str, ...] = ()
    comment: str = DEFAULT_COMMENT
    depfile: Optional[Path] = None
    report: Optional[Path] = None
    inline: bool = False
    max_depth: int = DEFAULT_MAX_DEPTH
    json_logs: bool = False
    log_level: int = logging.INFO

    @staticmethod
    def default_output(file: str) -> Path:
        return Path(file).with_suffix(DEFAULT_OUTPUT_SUFFIX)

    @classmethod
    def from_namespace(cls, ns: argparse.Namespace, env: Optional[Mapping[str, str]] = None) -> 'BuildConfig':
        env = dict(os.environ if env is None else env)

        comment = ns.comment if ns.comment is not None else env.get('PREPROC_COMMENT') or DEFAULT_COMMENT
        if not comment:
            raise ConfigError('comment prefix must be non-empty')

        max_depth = ns.max_depth
        if max_depth is None:
            raw = (env.get('PREPROC_MAX_DEPTH') or '').strip()
            try:
                max_depth = int(raw) if raw else DEFAULT_MAX_DEPTH
            except ValueError:
                raise ConfigError(f'PREPROC_MAX_DEPTH must be an integer, got {raw!r}') from None
        if max_depth < 0:
            raise ConfigError('max depth must be >= 0')

        extra = [p for p in (env.get('PREPROC_PATH') or '').split(os.pathsep) if p.strip()]

        if ns.verbose:
            level = logging.DEBUG
        elif ns.quiet:
            level = logging.ERROR
        else:
            level = logging.INFO

        return cls(
            file=ns.file,
            output=Path(ns.output) if ns.output else cls.default_output(ns.file),
            search_paths=tuple([*ns.include_path, *extra]),
            comment=comment,
            depfile=Path(ns.depfile) if ns.depfile else None,
            report=Path(ns.report) if ns.report else None,
            inline=bool(ns.inline),
            max_depth=max_depth,
            json_logs=bool(ns.json_logs) or env.get('PREPROC_JSON_LOGS') == '1',
            log_level=level,
        )
