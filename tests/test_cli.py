#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Functional tests for the `preproc` command: output and depfile writing,
flag handling, environment configuration and failure behaviour.
"""
from __future__ import annotations

import contextlib
import json
import os
import tempfile
import unittest
from pathlib import Path
from typing import Iterator, List
from unittest.mock import patch

from build_fixtures import populate

from preproc import CyclicInclude, IncludeDepthExceeded, MalformedDirective, Preproc, UnresolvedInclude
from preproc.cli import main
from preproc.logging.helpers import reset_base_logger


@contextlib.contextmanager
def _inside(path: Path) -> Iterator[None]:
    """Temporarily switch CWD to *path*."""
    cwd = Path.cwd()
    os.chdir(path)
    try:
        yield
    finally:
        os.chdir(cwd)


class CliBaseTest(unittest.TestCase):
    def setUp(self) -> None:
        self._td = tempfile.TemporaryDirectory()
        self.root = Path(self._td.name)
        populate(self.root)
        self._cwd = _inside(self.root)
        self._cwd.__enter__()

    def tearDown(self) -> None:
        self._cwd.__exit__(None, None, None)
        self._td.cleanup()
        reset_base_logger()

    def _run(self, args: List[str], env=None) -> str:
        return Preproc.run(["-q", *args], env=env or {})


class OutputTests(CliBaseTest):
    def test_default_output_path(self) -> None:
        text = self._run(["main.c", "-I", "inc1"])
        out = self.root / "main.i"
        self.assertTrue(out.exists())
        self.assertEqual(out.read_text(encoding="utf-8"), text)
        self.assertEqual(text.split("\n"), ["COMMON_1", "SIB", "LOCAL", "int main() { return 0; }"])

    def test_explicit_output_and_attached_include_path(self) -> None:
        self._run(["main.c", "-Iinc2", "-o", "build/out.c"])
        self.assertEqual((self.root / "build/out.c").read_text(encoding="utf-8").split("\n")[0], "COMMON_2")

    def test_comment_flag(self) -> None:
        text = self._run(["script.py", "-I", "inc1", "-c", "#"])
        self.assertEqual(
            text.split("\n"),
            ["def helper():", "    return 1", "# plain comment", "print(helper())"],
        )

    def test_inline_flag(self) -> None:
        text = self._run(["script.py", "-I", "inc1", "-c", "#", "--inline"])
        self.assertEqual(text.split("\n")[0], "# plain comment")

    def test_depfile(self) -> None:
        self._run(["main.c", "-I", "inc1", "-MF", "main.d"])
        dep = (self.root / "main.d").read_text(encoding="utf-8")
        self.assertEqual(dep, "main.i: inc1/common.h local/sib.h local/l.h main.c\n")

    def test_report(self) -> None:
        self._run(["main.c", "-I", "inc1", "--report", "report.json"])
        data = json.loads((self.root / "report.json").read_text(encoding="utf-8"))
        self.assertEqual(data["files_total"], 4)
        self.assertEqual(data["lines_emitted"], 4)
        self.assertEqual(data["errors"], [])
        self.assertEqual(set(data["time_by_stage"]), {"deptree", "build", "write"})

    def test_env_configuration(self) -> None:
        env = {"PREPROC_PATH": os.pathsep.join(["inc2", "inc1"]), "PREPROC_COMMENT": "//"}
        text = self._run(["main.c"], env=env)
        self.assertTrue(text.startswith("COMMON_2"))


class FailureTests(CliBaseTest):
    def test_missing_include_writes_nothing(self) -> None:
        with self.assertRaises(UnresolvedInclude):
            self._run(["broken.c", "-MF", "broken.d"])
        self.assertFalse((self.root / "broken.i").exists())
        self.assertFalse((self.root / "broken.d").exists())

    def test_cycle_writes_nothing(self) -> None:
        with self.assertRaises(CyclicInclude):
            self._run(["loop_a.c"])
        self.assertFalse((self.root / "loop_a.i").exists())

    def test_malformed_directive(self) -> None:
        with self.assertRaises(MalformedDirective) as cm:
            self._run(["bad_syntax.c"])
        self.assertEqual(cm.exception.lineno, 1)

    def test_unwritable_depfile_leaves_no_output(self) -> None:
        (self.root / "deps.d").mkdir()
        with self.assertRaises(OSError):
            self._run(["main.c", "-I", "inc1", "-MF", "deps.d"])
        self.assertFalse((self.root / "main.i").exists())
        self.assertTrue((self.root / "deps.d").is_dir())
        self.assertEqual([p.name for p in self.root.iterdir() if p.name.startswith(".")], [])

        with self.assertRaises(SystemExit) as cm:
            main(["-q", "main.c", "-I", "inc1", "-MF", "deps.d"])
        self.assertEqual(cm.exception.code, 1)
        self.assertFalse((self.root / "main.i").exists())

    def test_failed_build_still_writes_report(self) -> None:
        with self.assertRaises(UnresolvedInclude):
            self._run(["broken.c", "--report", "r.json"])
        data = json.loads((self.root / "r.json").read_text(encoding="utf-8"))
        self.assertEqual(len(data["errors"]), 1)
        self.assertIn("missing.h", data["errors"][0])

    def test_depth_limit_flag(self) -> None:
        with self.assertRaises(IncludeDepthExceeded) as cm:
            self._run(["main.c", "-I", "inc1", "--max-depth", "1"])
        self.assertEqual(cm.exception.limit, 1)
        self._run(["main.c", "-I", "inc1", "--max-depth", "2"])

    def test_main_exit_codes(self) -> None:
        with self.assertRaises(SystemExit) as ok:
            main(["-q", "main.c", "-I", "inc1"])
        self.assertEqual(ok.exception.code, 0)
        self.assertTrue((self.root / "main.i").exists())

        with self.assertRaises(SystemExit) as bad:
            main(["-q", "broken.c"])
        self.assertEqual(bad.exception.code, 1)

        with self.assertRaises(SystemExit) as usage:
            main(["-q", "main.c", "--max-depth", "many"])
        self.assertEqual(usage.exception.code, 2)

    def test_invalid_env_depth(self) -> None:
        with patch.dict(os.environ, {"PREPROC_MAX_DEPTH": "deep"}):
            with self.assertRaises(SystemExit) as cm:
                main(["-q", "main.c"])
        self.assertEqual(cm.exception.code, 2)


if __name__ == "__main__":
    unittest.main(verbosity=2)
