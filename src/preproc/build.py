from __future__ import annotations

"""
Linearization of a dependency tree into one output text.

The default mode hoists: a file's dependencies, in directive order, are
emitted before any of its own lines. With `inline=True` each dependency
is spliced at the directive line that first includes it instead. In both
modes every file is emitted once, at its first post-order visit, and
directive lines never reach the output.
"""

from typing import Callable, Iterator, List, Optional, Set, Tuple

from preproc.constants import JOIN_SEPARATOR
from preproc.core.errors import BuildError
from preproc.core.models import DepNode, DepTree

# (dependency name, None) or (None, content line)
_Step = Tuple[Optional[str], Optional[str]]


def _hoisted_steps(node: DepNode) -> Iterator[_Step]:
    for child in node.children:
        yield child, None
    for text in node.content:
        yield None, text


def _inline_steps(node: DepNode) -> Iterator[_Step]:
    for line in node.lines:
        if line.is_directive:
            yield line.include, None
        else:
            yield None, line.text


def linearize(tree: DepTree, *, inline: bool = False) -> List[str]:
    """Return the output lines of *tree* in emission order."""
    steps: Callable[[DepNode], Iterator[_Step]] = _inline_steps if inline else _hoisted_steps

    def _node(name: str) -> DepNode:
        try:
            return tree[name]
        except KeyError:
            raise BuildError(f'dependency tree has no entry for {name}') from None

    out: List[str] = []
    entered: Set[str] = {tree.root}
    stack = [steps(_node(tree.root))]
    while stack:
        for dep, text in stack[-1]:
            if dep is None:
                out.append(text)
                continue
            if dep in entered:
                continue
            entered.add(dep)
            stack.append(steps(_node(dep)))
            break
        else:
            stack.pop()
    return out


def build_file(tree: DepTree, *, inline: bool = False, separator: str = JOIN_SEPARATOR) -> str:
    """Generate the concatenated source satisfying every dependency in *tree*."""
    return separator.join(linearize(tree, inline=inline))
