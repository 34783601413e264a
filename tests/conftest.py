"""
Shared pytest fixtures for async time-series store tests.
"""

import os
import tempfile
from datetime import datetime, timezone

import pytest
import pytest_asyncio

from tsdb import LMDBConfig, LMDBStore, TimeEntry

NS_PER_SECOND = 1_000_000_000

BASE_TIME = int(datetime(2009, 1, 1, tzinfo=timezone.utc).timestamp()) * NS_PER_SECOND


def make_series(count: int, start: int = BASE_TIME, step: int = NS_PER_SECOND) -> list[TimeEntry]:
    """Build ``count`` entries at ``step`` intervals with distinct payloads."""
    return [
        TimeEntry(time=start + i * step, value=f"reading-{i}".encode())
        for i in range(count)
    ]


@pytest.fixture
def temp_dir():
    """Provide a temporary directory that is cleaned up after test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def db_path(temp_dir):
    """Provide a path for the LMDB data file."""
    return os.path.join(temp_dir, "series.mdb")


@pytest_asyncio.fixture
async def db(db_path):
    """Provide an open LMDBStore."""
    async with LMDBStore(LMDBConfig(path=db_path)) as store:
        yield store


@pytest.fixture
def series_factory():
    """Provide make_series to tests that need custom series."""
    return make_series


@pytest.fixture
def sample_series():
    """100 entries one second apart, starting 2009-01-01T00:00:00Z."""
    return make_series(100)


@pytest_asyncio.fixture
async def populated_db(db, sample_series):
    """Provide a store with ``sample_series`` stored as series 'sensor'."""
    await db.add("sensor", sample_series)
    return db
