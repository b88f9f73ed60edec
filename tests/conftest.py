"""Pytest configuration and fixtures shared across all test modules.

Environment variables are set before any import that builds the global
settings object.
"""

import os

import pytest

os.environ["APP_ENV"] = "testing"
os.environ.setdefault("APP_API_KEY_REQUIRED", "false")
os.environ.setdefault("DUMP_MODE", "limited")
os.environ.setdefault("LOG_LEVEL", "WARNING")


class FakeClock:
    """Deterministic clock used to test quota expiry."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.current = start

    def __call__(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def dump_dir(tmp_path) -> str:
    directory = tmp_path / "dumps"
    directory.mkdir()
    return str(directory)
