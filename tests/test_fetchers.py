#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Filesystem and in-memory file sources."""
from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path

from build_fixtures import populate

from preproc import (
    CommentParser,
    CyclicInclude,
    FetchError,
    FilesystemFetcher,
    MemoryFetcher,
    UnresolvedInclude,
    build_file,
    generate_deptree,
)
from preproc.core.models import FileName


class FilesystemFetcherTests(unittest.TestCase):
    def setUp(self) -> None:
        self._td = tempfile.TemporaryDirectory()
        self.root = Path(os.path.normpath(os.path.abspath(self._td.name)))
        populate(self.root)

    def tearDown(self) -> None:
        self._td.cleanup()

    def _fetcher(self, *paths: str) -> FilesystemFetcher:
        return FilesystemFetcher(paths, base_dir=self.root)

    def test_search_order_first_match_wins(self) -> None:
        first = self._fetcher("inc1", "inc2").resolve_name(FileName("common.h"))
        self.assertEqual(first, str(self.root / "inc1" / "common.h"))
        second = self._fetcher("inc2", "inc1").resolve_name(FileName("common.h"))
        self.assertEqual(second, str(self.root / "inc2" / "common.h"))

    def test_base_dir_is_searched_last(self) -> None:
        hit = self._fetcher("inc1").resolve_name(FileName("main.c"))
        self.assertEqual(hit, str(self.root / "main.c"))

    def test_local_resolves_next_to_origin(self) -> None:
        origin = str(self.root / "local" / "l.h")
        hit = self._fetcher().resolve_name(FileName("sib.h", local=True, origin=origin))
        self.assertEqual(hit, str(self.root / "local" / "sib.h"))

    def test_local_does_not_use_search_path(self) -> None:
        origin = str(self.root / "main.c")
        self.assertIsNone(self._fetcher("inc1").resolve_name(FileName("common.h", local=True, origin=origin)))

    def test_dot_relative_and_absolute(self) -> None:
        f = self._fetcher("inc1")
        self.assertEqual(f.resolve_name(FileName("./local/sib.h")), str(self.root / "local" / "sib.h"))
        self.assertEqual(f.resolve_name(FileName("./common.h")), None)
        absolute = str(self.root / "inc2" / "common.h")
        self.assertEqual(f.resolve_name(FileName(absolute)), absolute)

    def test_names_are_normalized(self) -> None:
        origin = str(self.root / "local" / "l.h")
        hit = self._fetcher().resolve_name(FileName("../local/./sib.h", local=True, origin=origin))
        self.assertEqual(hit, str(self.root / "local" / "sib.h"))

    def test_directories_are_not_files(self) -> None:
        self.assertIsNone(self._fetcher().resolve_name(FileName("inc1")))

    def test_fetch_reads_content(self) -> None:
        fetched = self._fetcher("inc1").fetch(FileName("common.h"))
        self.assertEqual(fetched.name, str(self.root / "inc1" / "common.h"))
        self.assertEqual(fetched.content, "COMMON_1\n")
        self.assertIsNone(self._fetcher().fetch(FileName("nope.h")))

    def test_undecodable_file_raises_fetch_error(self) -> None:
        (self.root / "bin.h").write_bytes(b"\xff\xfe\xfa")
        with self.assertRaises(FetchError):
            self._fetcher().fetch(FileName("bin.h"))

    def test_search_paths_are_absolute(self) -> None:
        f = self._fetcher("inc1", "does-not-exist")
        self.assertEqual(f.search_paths, [self.root / "inc1", self.root / "does-not-exist"])
        self.assertEqual(f.base_dir, self.root)

    def test_end_to_end_build(self) -> None:
        _, tree = generate_deptree("main.c", self._fetcher("inc1"), CommentParser("//"))
        self.assertEqual(
            build_file(tree).split("\n"),
            ["COMMON_1", "SIB", "LOCAL", "int main() { return 0; }"],
        )
        self.assertEqual(tree.root, str(self.root / "main.c"))

    def test_end_to_end_errors(self) -> None:
        with self.assertRaises(UnresolvedInclude) as cm:
            generate_deptree("broken.c", self._fetcher(), CommentParser())
        self.assertEqual(cm.exception.identifier, "missing.h")
        with self.assertRaises(CyclicInclude) as cm:
            generate_deptree("loop_a.c", self._fetcher(), CommentParser())
        self.assertEqual(
            cm.exception.cycle,
            tuple(str(self.root / n) for n in ("loop_a.c", "loop_b.c", "loop_a.c")),
        )


class MemoryFetcherTests(unittest.TestCase):
    def test_global_is_exact_match(self) -> None:
        f = MemoryFetcher({"a/b.h": "X"})
        self.assertEqual(f.resolve_name(FileName("a/b.h")), "a/b.h")
        self.assertIsNone(f.resolve_name(FileName("b.h")))

    def test_local_and_root(self) -> None:
        f = MemoryFetcher()
        f.add_file("main", "M")
        f.add_file("lib/x.h", "X")
        self.assertEqual(f.resolve_name(FileName.root("main")), "main")
        self.assertEqual(f.resolve_name(FileName("../lib/x.h", local=True, origin="src/m.c")), "lib/x.h")
        self.assertEqual(f.fetch(FileName.root("main")).content, "M")
        self.assertIsNone(f.fetch(FileName("ghost")))


if __name__ == "__main__":
    unittest.main(verbosity=2)
