from __future__ import annotations

"""
Runtime build report.

Collects the files visited while the dependency tree is generated, the
number of lines written by the linearizer and the time spent per stage
(`deptree`, `build`, `write`). Serialized with `--report PATH`.
"""

import json
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class BuildReport:
    started_at: float = field(default_factory=time.perf_counter)
    finished_at: float | None = None
    duration_s: float | None = None

    root: Optional[str] = None
    output: Optional[str] = None

    files: List[str] = field(default_factory=list)
    bytes_total: int = 0
    lines_emitted: int = 0

    time_by_stage: Dict[str, float] = field(
        default_factory=lambda: {"deptree": 0.0, "build": 0.0, "write": 0.0}
    )

    errors: List[str] = field(default_factory=list)

    def add_file(self, name: str, content: str) -> None:
        self.files.append(name)
        self.bytes_total += len(content.encode("utf-8"))

    def add_time(self, stage: str, seconds: float) -> None:
        self.time_by_stage[stage] = self.time_by_stage.get(stage, 0.0) + seconds

    def add_error(self, message: str) -> None:
        self.errors.append(message)

    def finish(self) -> None:
        self.finished_at = time.perf_counter()
        self.duration_s = self.finished_at - self.started_at

    def to_json(self, *, indent: int = 2) -> str:
        return json.dumps(
            {
                "started_at": self.started_at,
                "finished_at": self.finished_at,
                "duration_s": self.duration_s,
                "root": self.root,
                "output": self.output,
                "files": self.files,
                "files_total": len(self.files),
                "bytes_total": self.bytes_total,
                "lines_emitted": self.lines_emitted,
                "time_by_stage": self.time_by_stage,
                "errors": self.errors,
            },
            indent=indent,
        )


class StageTimer:
    def __init__(self, report: Optional[BuildReport], stage: str):
        self._report = report
        self._stage = stage
        self._t0: float | None = None

    def __enter__(self):
        self._t0 = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb):
        if self._report is not None and self._t0 is not None:
            self._report.add_time(self._stage, time.perf_counter() - self._t0)
        return False
