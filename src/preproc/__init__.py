from __future__ import annotations

"""
preproc – a small include-directive preprocessor.

`generate_deptree` follows include directives recursively from a root file
and returns a dependency tree; `build_file` turns that tree into one source
text in which every file comes after all of its dependencies.

Example::

    from preproc import CommentParser, FilesystemFetcher, build_file, generate_deptree

    parser = CommentParser('//')          # `//&include <x>` is an include
    fetcher = FilesystemFetcher(['include_folder'])
    _, tree = generate_deptree('main.file', fetcher, parser)
    source = build_file(tree)
"""

from preproc.build import build_file, linearize
from preproc.cli import Preproc
from preproc.core.errors import (
    BuildError,
    CyclicInclude,
    FetchError,
    IncludeDepthExceeded,
    MalformedDirective,
    UnresolvedInclude,
)
from preproc.core.models import NOT_A_DIRECTIVE, DepNode, DepTree, FileName, Include, Line, NotADirective
from preproc.deps import DepTreeBuilder, create_depfile, generate_deptree
from preproc.io import FilesystemFetcher, MemoryFetcher
from preproc.parsing import CommentParser

__version__ = '0.1.0'

__all__ = [
    'Preproc',
    'build_file',
    'linearize',
    'generate_deptree',
    'create_depfile',
    'DepTreeBuilder',
    'BuildError',
    'CyclicInclude',
    'FetchError',
    'IncludeDepthExceeded',
    'MalformedDirective',
    'UnresolvedInclude',
    'NOT_A_DIRECTIVE',
    'DepNode',
    'DepTree',
    'FileName',
    'Include',
    'Line',
    'NotADirective',
    'FilesystemFetcher',
    'MemoryFetcher',
    'CommentParser',
]
