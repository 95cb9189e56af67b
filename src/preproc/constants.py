from __future__ import annotations

"""Project-wide constants used across modules."""

# Comment prefix recognized by the default CommentParser.
DEFAULT_COMMENT: str = '//'

# Character that turns a comment into a preprocessor statement: `//&include <x>`.
DIRECTIVE_MARKER: str = '&'

INCLUDE_KEYWORD: str = 'include'

JOIN_SEPARATOR: str = '\n'

# Nested include levels accepted before IncludeDepthExceeded is raised.
DEFAULT_MAX_DEPTH: int = 200

DEFAULT_OUTPUT_SUFFIX: str = '.i'
