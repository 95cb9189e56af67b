from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Iterator, Optional, Tuple, Union


@dataclass(frozen=True)
class FileName:
    """An include request before it is resolved by a file source.

    Global requests go through the search path, local requests are resolved
    next to `origin` (the resolved name of the including file, or None for
    the root of a build).
    """
    name: str
    local: bool = False
    origin: Optional[str] = None

    @classmethod
    def root(cls, name: str) -> 'FileName':
        return cls(name=name, local=True, origin=None)

    def __str__(self) -> str:
        if not self.local:
            return f"<{self.name}>"
        if self.origin is None:
            return f'"{self.name}"'
        return f'"{self.name}" (local to {self.origin})'


@dataclass(frozen=True)
class FetchedFile:
    name: str
    content: str


@dataclass(frozen=True)
class NotADirective:
    def __bool__(self) -> bool:
        return False


NOT_A_DIRECTIVE = NotADirective()


@dataclass(frozen=True)
class Include:
    name: str
    local: bool = False


DirectiveResult = Union[NotADirective, Include]


@dataclass(frozen=True)
class Line:
    """One line of a file with its 0-based position.

    `include` is the resolved identifier when the line is an include
    directive, None for ordinary content.
    """
    index: int
    text: str
    include: Optional[str] = None

    @property
    def is_directive(self) -> bool:
        return self.include is not None


@dataclass(frozen=True)
class DepNode:
    name: str
    lines: Tuple[Line, ...] = ()
    children: Tuple[str, ...] = ()

    @property
    def content(self) -> Tuple[str, ...]:
        """Non-directive lines in original order."""
        return tuple(ln.text for ln in self.lines if not ln.is_directive)


@dataclass(frozen=True)
class DepTree(Mapping):
    """Read-only mapping of resolved file name to DepNode, plus the root.

    Iteration follows node completion order, so every file is listed
    after all of its dependencies.
    """
    root: str
    nodes: Mapping[str, DepNode] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, 'nodes', dict(self.nodes))

    def __getitem__(self, key: str) -> DepNode:
        return self.nodes[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)

    @property
    def root_node(self) -> DepNode:
        return self.nodes[self.root]
