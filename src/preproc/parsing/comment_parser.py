from __future__ import annotations

import logging
import re
from typing import Optional

from preproc.constants import DEFAULT_COMMENT, DIRECTIVE_MARKER, INCLUDE_KEYWORD
from preproc.core.errors import MalformedDirective
from preproc.core.models import NOT_A_DIRECTIVE, DirectiveResult, Include
from preproc.logging.helpers import get_logger

_BARE_NAME_RE = re.compile(r"^[^\s<>\"]+$")


class CommentParser:
    """Line classifier that finds preprocessor statements inside comments.

    A statement is a line starting with the comment string immediately
    followed by `&`. The only statement understood is `include`:

        <comment>& include <name>     global include, resolved via search path
        <comment>& include "name"     local include, resolved next to the file
        <comment>& include name       bare name, same as <name>

    `//&wrong` or `//&include` without a target raise MalformedDirective.
    """

    def __init__(
        self,
        comment: str = DEFAULT_COMMENT,
        *,
        keyword: str = INCLUDE_KEYWORD,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        if not comment:
            raise ValueError('comment prefix must be non-empty')
        self._prefix = comment + DIRECTIVE_MARKER
        self._keyword = keyword
        self._log = logger or get_logger('parsing.comment')

    def is_directive(self, line: str) -> bool:
        return line.startswith(self._prefix)

    def classify(self, line: str) -> DirectiveResult:
        if not self.is_directive(line):
            return NOT_A_DIRECTIVE

        rem = line[len(self._prefix):]
        stmt = rem.lstrip()
        if not stmt.startswith(self._keyword):
            raise MalformedDirective(line, f'invalid preproc statement `{rem}`')

        target = stmt[len(self._keyword):]
        if target and not target[0].isspace() and target[0] not in '<"':
            # `//&includes x` is a different word, not an include.
            raise MalformedDirective(line, f'invalid preproc statement `{rem}`')
        target = target.strip()

        if len(target) > 2 and target.startswith('<') and target.endswith('>'):
            result = Include(target[1:-1], local=False)
        elif len(target) > 2 and target.startswith('"') and target.endswith('"'):
            result = Include(target[1:-1], local=True)
        elif _BARE_NAME_RE.match(target):
            result = Include(target, local=False)
        else:
            raise MalformedDirective(line, f'invalid include statement `{rem}`')

        self._log.debug('include directive %r -> %r', line, result)
        return result
