from __future__ import annotations

"""
Dependency-tree construction.

`generate_deptree` walks include directives depth-first from a root file,
fetching each distinct file once and recording, per file, its lines and
the ordered list of files it includes. Cycles, missing files, malformed
directives and over-deep include chains abort the whole build.
"""

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple, Union

from preproc.constants import DEFAULT_MAX_DEPTH
from preproc.core.errors import (
    CyclicInclude,
    FetchError,
    IncludeDepthExceeded,
    MalformedDirective,
    UnresolvedInclude,
)
from preproc.core.interfaces import FileSourceProtocol, LineClassifierProtocol
from preproc.core.models import DepNode, DepTree, FileName, Include, Line
from preproc.core.report import BuildReport
from preproc.logging.helpers import get_logger

_LINE_BREAK_RE = re.compile(r'\r?\n')


class _InProgress:
    def __repr__(self) -> str:
        return '<in progress>'


_IN_PROGRESS = _InProgress()


def _split_lines(content: str) -> List[str]:
    """Split *content* on `\\n` and `\\r\\n` only.

    Form feeds, lone carriage returns and the other characters that
    `str.splitlines` treats as breaks stay inside their line. A trailing
    line break does not start an extra empty line.
    """
    parts = _LINE_BREAK_RE.split(content)
    if parts[-1] == '':
        parts.pop()
    return parts


@dataclass
class _Frame:
    """A file whose lines are still being scanned."""

    name: str
    texts: Iterator[Tuple[int, str]]
    lines: List[Line] = field(default_factory=list)
    children: List[str] = field(default_factory=list)
    pending: Optional[Tuple[int, str]] = None

    def add_include(self, index: int, text: str, target: str) -> None:
        self.lines.append(Line(index, text, include=target))
        if target not in self.children:
            self.children.append(target)


class DepTreeBuilder:
    """Single-use builder holding the visited-state map of one build.

    Nested includes are followed with an explicit stack of open files, so
    the reachable depth is bounded by *max_depth* only. The state map is
    not shared between calls and is not safe for concurrent use.
    """

    def __init__(
        self,
        file_source: FileSourceProtocol,
        line_classifier: LineClassifierProtocol,
        *,
        max_depth: int = DEFAULT_MAX_DEPTH,
        logger: Optional[logging.Logger] = None,
        report: Optional[BuildReport] = None,
    ) -> None:
        if max_depth < 0:
            raise ValueError('max_depth must be >= 0')
        self._source = file_source
        self._classifier = line_classifier
        self._max_depth = max_depth
        self._log = logger or get_logger('deps')
        self._report = report
        self._state: Dict[str, Union[_InProgress, DepNode]] = {}
        self._done: Dict[str, DepNode] = {}
        self._path: List[str] = []

    def build(self, root: str) -> DepTree:
        if self._state:
            raise RuntimeError('DepTreeBuilder instances are single-use')
        root_name, frame = self._open(FileName.root(root))
        stack: List[_Frame] = [frame] if frame is not None else []

        while stack:
            frame = stack[-1]
            for index, text in frame.texts:
                if not self._classifier.is_directive(text):
                    frame.lines.append(Line(index, text))
                    continue
                try:
                    result = self._classifier.classify(text)
                except MalformedDirective as exc:
                    raise exc.located(frame.name, index + 1) from exc
                if not isinstance(result, Include):
                    frame.lines.append(Line(index, text))
                    continue

                target, child = self._open(
                    FileName(result.name, local=result.local, origin=frame.name)
                )
                if child is None:
                    frame.add_include(index, text, target)
                    continue
                frame.pending = (index, text)
                stack.append(child)
                break
            else:
                stack.pop()
                self._close(frame)
                if stack:
                    parent = stack[-1]
                    index, text = parent.pending
                    parent.pending = None
                    parent.add_include(index, text, frame.name)

        return DepTree(root=root_name, nodes=self._done)

    def _open(self, request: FileName) -> Tuple[str, Optional[_Frame]]:
        """Resolve and fetch *request*; no frame is returned for finished files."""
        resolved = self._source.resolve_name(request)
        if resolved is None:
            raise UnresolvedInclude(request.name, origin=request.origin)

        state = self._state.get(resolved)
        if isinstance(state, DepNode):
            self._log.debug('already processed %s', resolved)
            return resolved, None
        if state is _IN_PROGRESS:
            raise CyclicInclude([*self._path, resolved])
        if len(self._path) > self._max_depth:
            raise IncludeDepthExceeded([*self._path, resolved], self._max_depth)

        self._state[resolved] = _IN_PROGRESS
        self._path.append(resolved)

        try:
            fetched = self._source.fetch(request)
        except FetchError as exc:
            raise UnresolvedInclude(resolved, origin=request.origin, reason=str(exc)) from exc
        if fetched is None:
            raise UnresolvedInclude(resolved, origin=request.origin)
        self._log.debug('processing %s', resolved)
        if self._report is not None:
            self._report.add_file(resolved, fetched.content)

        return resolved, _Frame(resolved, enumerate(_split_lines(fetched.content)))

    def _close(self, frame: _Frame) -> None:
        node = DepNode(name=frame.name, lines=tuple(frame.lines), children=tuple(frame.children))
        self._path.pop()
        self._state[frame.name] = node
        self._done[frame.name] = node


def generate_deptree(
    root: str,
    file_source: FileSourceProtocol,
    line_classifier: LineClassifierProtocol,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
    logger: Optional[logging.Logger] = None,
    report: Optional[BuildReport] = None,
) -> Tuple[str, DepTree]:
    """Generate the dependency tree rooted at *root*.

    Args:
        root: Name of the root file, resolved by *file_source* as a local
            request with no including file.
        file_source: Capability used to resolve and read files.
        line_classifier: Capability deciding which lines are includes.
        max_depth: Nested include levels accepted below the root.
        logger: Optional logger, defaults to 'preproc.deps'.
        report: Optional BuildReport receiving every fetched file.

    Returns:
        Tuple of the resolved root name and the finished DepTree.

    Raises:
        UnresolvedInclude: A referenced file could not be found or read.
        CyclicInclude: A file includes itself, directly or transitively.
        MalformedDirective: The classifier rejected a directive line.
        IncludeDepthExceeded: Includes nested deeper than *max_depth*.
    """
    builder = DepTreeBuilder(
        file_source, line_classifier, max_depth=max_depth, logger=logger, report=report
    )
    tree = builder.build(root)
    return tree.root, tree


def _depfile_entry(name: str, root: Optional[Path]) -> str:
    if root is not None and Path(name).is_relative_to(root):
        name = os.path.relpath(name, root)
    return name.replace('\\', '/').replace(' ', '\\ ')


def create_depfile(target: str, tree: DepTree, *, root: Optional[str | Path] = None) -> str:
    """Return a make-style dependency line: `<target>: <dep1> <dep2> ...`.

    Every file of *tree* is listed in tree order. Names under *root* are
    written relative to it.
    """
    base = Path(os.path.abspath(root)) if root is not None else None
    deps = [_depfile_entry(name, base) for name in tree]
    head = target.replace('\\', '/')
    return f"{head}: {' '.join(deps)}".rstrip() + '\n'
