"""
conftest.py – make `src/` and the fixture builder importable without an
installed package, and keep PREPROC_* variables from leaking into tests.
"""
import os
import sys
from pathlib import Path

import pytest

_ROOT = Path(__file__).resolve().parents[1]
for _p in (_ROOT / "src", _ROOT / "tests" / "tools"):
    if str(_p) not in sys.path:
        sys.path.insert(0, str(_p))


@pytest.fixture(autouse=True)
def _clean_preproc_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith("PREPROC_"):
            monkeypatch.delenv(key, raising=False)
    yield
