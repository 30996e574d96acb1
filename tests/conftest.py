"""Shared test fixtures for all test modules."""

from pathlib import Path

import pytest

from metricsampler.adapters.storage.in_memory import InMemorySampleCache


class FakeClock:
    """Manually advanced clock for deterministic cache timestamps."""

    def __init__(self, now: int = 0) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    """Provide a clock starting at t=0."""
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> InMemorySampleCache:
    """Provide an empty in-memory cache driven by the fake clock."""
    return InMemorySampleCache(clock=clock)


@pytest.fixture
def samples_db_path(tmp_path: Path) -> str:
    """Provide a temporary database path for SQLite cache tests."""
    return str(tmp_path / "samples.db")
