from __future__ import annotations

"""Error taxonomy for dependency-tree construction and linearization.

Every failure is detected while the tree is built and aborts the whole
build; callers never receive a partial tree.
"""

from typing import Iterable, Optional, Sequence


class BuildError(Exception):
    """Base class for every failure surfaced by `generate_deptree`/`build_file`."""


class FetchError(LookupError):
    """Raised by a file source when a resolved file cannot be read."""


class UnresolvedInclude(BuildError):
    """A referenced file could not be located or fetched."""

    def __init__(self, identifier: str, *, origin: Optional[str] = None, reason: Optional[str] = None) -> None:
        self.identifier = identifier
        self.origin = origin
        self.reason = reason
        msg = f"file not found {identifier}"
        if origin:
            msg += f" (included from {origin})"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class CyclicInclude(BuildError):
    """A file transitively includes itself.

    `cycle` holds the chain of identifiers from the root down to the file
    that closed the loop, ending with that file again.
    """

    def __init__(self, cycle: Iterable[str]) -> None:
        self.cycle = tuple(cycle)
        super().__init__("cyclic include: " + " -> ".join(self.cycle))


class MalformedDirective(BuildError, ValueError):
    """A line looks like a directive but cannot be parsed."""

    def __init__(
        self,
        line: str,
        reason: str,
        *,
        source: Optional[str] = None,
        lineno: Optional[int] = None,
    ) -> None:
        self.line = line
        self.reason = reason
        self.source = source
        self.lineno = lineno
        super().__init__(self._format())

    def _format(self) -> str:
        where = []
        if self.source:
            where.append(self.source)
        if self.lineno is not None:
            where.append(f"line {self.lineno}")
        prefix = ":".join(where)
        return f"{prefix}: {self.reason}" if prefix else self.reason

    def located(self, source: str, lineno: int) -> "MalformedDirective":
        """Return a copy carrying the file identifier and 1-based line number."""
        return MalformedDirective(self.line, self.reason, source=source, lineno=lineno)


class IncludeDepthExceeded(BuildError):
    """The include chain nested deeper than the configured limit."""

    def __init__(self, path: Sequence[str], limit: int) -> None:
        self.path = tuple(path)
        self.limit = limit
        super().__init__(
            f"include depth limit {limit} exceeded at {self.path[-1] if self.path else '<root>'}"
        )
