# preproc/parsing/parser.py
from __future__ import annotations

import argparse

from preproc.constants import DEFAULT_OUTPUT_SUFFIX


def _build_parser() -> argparse.ArgumentParser:
    """
    Build the CLI argument parser.

    Notes:
        - Short options mirror the usual C preprocessor spelling: `-I DIR`
          (also `-IDIR`), `-o FILE` and `-MF FILE`.
        - `-c` takes the comment prefix that introduces a statement, so
          `-c '#'` makes `#&include <x>` the include syntax.
    """
    p = argparse.ArgumentParser(
        prog="preproc",
        formatter_class=argparse.RawTextHelpFormatter,
        usage="%(prog)s FILE [-I DIR] … [-c COMMENT] [-o OUT] [-MF DEPFILE] [OPTIONS]",
        description=(
            "preproc – resolve include directives and write a single source file\n"
            "in which every file follows all of its dependencies."
        ),
    )

    g_in = p.add_argument_group("Input")
    g_out = p.add_argument_group("Output")
    g_misc = p.add_argument_group("Miscellaneous")

    g_in.add_argument("file", metavar="FILE", help="Root source file.")
    g_in.add_argument(
        "-I",
        "--include-path",
        metavar="DIR",
        action="append",
        dest="include_path",
        default=[],
        help=(
            "Directory searched for global includes (`<name>` or bare names). "
            "Repeatable; searched in order, then the current directory. "
            "PREPROC_PATH adds further directories after these."
        ),
    )
    g_in.add_argument(
        "-c",
        "--comment",
        metavar="COMMENT",
        dest="comment",
        default=None,
        help="Comment prefix introducing a statement (default '//', env PREPROC_COMMENT).",
    )
    g_in.add_argument(
        "--max-depth",
        metavar="N",
        type=int,
        dest="max_depth",
        default=None,
        help="Maximum include nesting depth (default 200, env PREPROC_MAX_DEPTH).",
    )

    g_out.add_argument(
        "-o",
        "--output",
        metavar="OUT",
        dest="output",
        default=None,
        help=f"Output file (default: FILE with suffix {DEFAULT_OUTPUT_SUFFIX!r}).",
    )
    g_out.add_argument(
        "-MF",
        "--depfile",
        metavar="DEPFILE",
        dest="depfile",
        default=None,
        help="Also write a make-style dependency file `OUT: deps...`.",
    )
    g_out.add_argument(
        "--inline",
        action="store_true",
        dest="inline",
        help="Splice each dependency at its directive instead of hoisting it above the file.",
    )
    g_out.add_argument(
        "--report",
        metavar="PATH",
        dest="report",
        default=None,
        help="Write a JSON build report (files, bytes, stage timings).",
    )

    g_misc.add_argument(
        "--json-logs",
        action="store_true",
        dest="json_logs",
        help="Emit logs as JSON lines (env PREPROC_JSON_LOGS=1).",
    )
    verbosity = g_misc.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", dest="verbose", help="Debug logging.")
    verbosity.add_argument("-q", "--quiet", action="store_true", dest="quiet", help="Only log errors.")

    return p
