# tests/stats/conftest.py
"""Pytest configuration and shared fixtures for stats tests."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

from stats_helpers import make_record


def pytest_configure() -> None:
    # Ensure entitystats package is importable when running tests from repo root.
    repo_root = Path(__file__).resolve().parents[2]
    src_dir = repo_root / "src"
    if src_dir.exists() and str(src_dir) not in sys.path:
        sys.path.insert(0, str(src_dir))


@pytest.fixture
def records() -> list[dict]:
    """Seven records across three providers; acme has 3, beta 2, gamma 2."""
    return [
        make_record("a1", provider="acme", paths=2, tags=1, methods={"get": 2, "post": 1},
                    summaries=2, summariesLength=20, descriptions=1, descriptionsLength=30),
        make_record("a2", provider="acme", paths=4, tags=3, methods={"get": 1}),
        make_record("a3", provider="acme", paths=5, tags=2, methods={"delete": 1}),
        make_record("b1", provider="beta", paths=1, tags=1, methods={"get": 3}),
        make_record("b2", provider="beta", paths=5, tags=0),
        make_record("g1", provider="gamma", paths=2, tags=4, methods={"put": 1}),
        make_record("g2", provider="gamma", paths=1, tags=1),
    ]
