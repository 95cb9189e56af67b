from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from preproc.core.models import FetchedFile, FileName


@runtime_checkable
class FileSourceProtocol(Protocol):
    """Capability that locates and reads source files by name."""

    def resolve_name(self, name: FileName) -> Optional[str]:
        """Return the unique resolved name for *name*, or None when it cannot be found."""
        ...

    def fetch(self, name: FileName) -> Optional[FetchedFile]:
        """Return the resolved name and full text of *name*.

        Returns None when the file cannot be found; may raise FetchError
        when the file exists but cannot be read.
        """
        ...
