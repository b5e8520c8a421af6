# tests/conftest.py
from __future__ import annotations

import pytest

from bigfib import runtime


@pytest.fixture(autouse=True)
def _isolated(monkeypatch, tmp_path):
    """Fresh runtime settings and a throwaway workspace for every test."""
    monkeypatch.setenv("BIGFIB_HOME", str(tmp_path / "ws"))
    runtime.reset()
    yield
    runtime.reset()
