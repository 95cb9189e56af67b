from __future__ import annotations

import logging
import posixpath
from typing import Dict, Mapping, Optional

from preproc.core.models import FetchedFile, FileName
from preproc.logging.helpers import get_logger, trace_io


class MemoryFetcher:
    """File source backed by a static mapping of name to text.

    Global names must match a key exactly. Local names are joined to the
    directory of the including file with POSIX normalization, so
    `"util.h"` included from `lib/a.h` resolves to `lib/util.h`.
    """

    def __init__(self, files: Optional[Mapping[str, str]] = None, *, logger: Optional[logging.Logger] = None) -> None:
        self._files: Dict[str, str] = dict(files or {})
        self._log = logger or get_logger('io.memory')

    def add_file(self, name: str, data: str) -> None:
        self._files[name] = data

    def _candidate(self, name: FileName) -> str:
        if not name.local:
            return name.name
        base = posixpath.dirname(name.origin) if name.origin else ''
        joined = posixpath.join(base, name.name) if base else name.name
        return posixpath.normpath(joined)

    def resolve_name(self, name: FileName) -> Optional[str]:
        candidate = self._candidate(name)
        return candidate if candidate in self._files else None

    def fetch(self, name: FileName) -> Optional[FetchedFile]:
        resolved = self.resolve_name(name)
        if resolved is None:
            return None
        trace_io(self._log, 'memory fetch', name=resolved)
        return FetchedFile(name=resolved, content=self._files[resolved])
