from __future__ import annotations

from typing import Protocol, runtime_checkable

from preproc.core.models import DirectiveResult


@runtime_checkable
class LineClassifierProtocol(Protocol):
    """Protocol for recognizing include directives one line at a time."""

    def is_directive(self, line: str) -> bool:
        """Cheap check: does *line* carry the directive marker at all."""
        ...

    def classify(self, line: str) -> DirectiveResult:
        """Return NOT_A_DIRECTIVE or an Include naming the referenced file.

        Raises MalformedDirective when the line carries the marker but the
        statement cannot be parsed.
        """
        ...
