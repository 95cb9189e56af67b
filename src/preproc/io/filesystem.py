from __future__ import annotations

"""
Filesystem-backed file source.

Resolution rules:
  * local request (`"name"`): next to the including file; the root of a
    build is resolved against `base_dir`.
  * global request, absolute path: used as is.
  * global request starting with `./` or `../`: relative to `base_dir`.
  * any other global request: each search path in insertion order, then
    `base_dir`; the first existing file wins.

Resolved names are normalized absolute paths (symlinks are not followed),
so one file reached through different spellings is fetched once.
"""

import logging
import os
from pathlib import Path
from typing import Iterable, List, Optional

from preproc.core.errors import FetchError
from preproc.core.models import FetchedFile, FileName
from preproc.logging.helpers import get_logger, trace_io


def _normalize(path: Path) -> Path:
    return Path(os.path.normpath(os.path.abspath(path)))


class FilesystemFetcher:
    def __init__(
        self,
        search_paths: Iterable[str | Path] = (),
        *,
        base_dir: Optional[str | Path] = None,
        encoding: str = 'utf-8',
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._base_dir = _normalize(Path(base_dir) if base_dir else Path.cwd())
        self._search_order: List[Path] = []
        self._encoding = encoding
        self._log = logger or get_logger('io.filesystem')
        for p in search_paths:
            self.add_path(p)

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    @property
    def search_paths(self) -> List[Path]:
        return list(self._search_order)

    def add_path(self, path: str | Path) -> None:
        """Append a directory to the search order (relative to base_dir)."""
        resolved = _normalize(self._base_dir / Path(path))
        if not resolved.is_dir():
            self._log.warning('⚠  include path %s is not a directory', resolved)
        self._search_order.append(resolved)

    @staticmethod
    def _existing(path: Path) -> Optional[str]:
        norm = _normalize(path)
        return str(norm) if norm.is_file() else None

    def resolve_name(self, name: FileName) -> Optional[str]:
        if name.local:
            base = Path(name.origin).parent if name.origin else self._base_dir
            return self._existing(base / name.name)

        path = Path(name.name)
        if path.is_absolute():
            return self._existing(path)
        if name.name.startswith(('./', '../')) or name.name.startswith(('.' + os.sep, '..' + os.sep)):
            return self._existing(self._base_dir / path)

        for directory in (*self._search_order, self._base_dir):
            hit = self._existing(directory / path)
            if hit is not None:
                return hit
        return None

    def fetch(self, name: FileName) -> Optional[FetchedFile]:
        resolved = self.resolve_name(name)
        if resolved is None:
            return None
        trace_io(self._log, 'read file', path=resolved)
        try:
            content = Path(resolved).read_text(encoding=self._encoding)
        except UnicodeDecodeError as exc:
            raise FetchError(f'{resolved} is not valid {self._encoding} text ({exc.reason})') from exc
        except OSError as exc:
            raise FetchError(f'could not read {resolved}: {exc}') from exc
        return FetchedFile(name=resolved, content=content)
