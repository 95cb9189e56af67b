from __future__ import annotations

"""Public surface for preproc.core: data model, error taxonomy and protocols."""

from preproc.core.errors import (
    BuildError,
    CyclicInclude,
    FetchError,
    IncludeDepthExceeded,
    MalformedDirective,
    UnresolvedInclude,
)
from preproc.core.interfaces import FileSourceProtocol, LineClassifierProtocol
from preproc.core.models import (
    NOT_A_DIRECTIVE,
    DepNode,
    DepTree,
    DirectiveResult,
    FetchedFile,
    FileName,
    Include,
    Line,
    NotADirective,
)

__all__ = [
    'BuildError',
    'CyclicInclude',
    'FetchError',
    'IncludeDepthExceeded',
    'MalformedDirective',
    'UnresolvedInclude',
    'FileSourceProtocol',
    'LineClassifierProtocol',
    'NOT_A_DIRECTIVE',
    'DepNode',
    'DepTree',
    'DirectiveResult',
    'FetchedFile',
    'FileName',
    'Include',
    'Line',
    'NotADirective',
]
