"""
Time-series access layer on LMDB.

Every series is its own LMDB named database, keyed by 8-byte big-endian
timestamps with opaque byte payloads. The store provides:
- add(name, series) - atomic batched insert, creates the series lazily
- query(q) - directional range page with a continuation for the next page
- get_pages(q) - page-start timestamps and match count for a range
- get(name) / stream_series(name) - full series, eager or lazy
- delete(name) - drop a series

Usage:
    async with open_db(LMDBConfig(path="data/series.mdb")) as db:
        await db.add("temp", [TimeEntry(1, b"a"), TimeEntry(2, b"b")])
        page = await db.query(Query("temp", start=0, end=10, limit=1))
        # page.entries == [TimeEntry(1, b"a")], page.continuation == 2
        page = await db.query(Query("temp", start=0, end=10, limit=1).resume_from(2))
"""

from tsdb.config import LMDBConfig
from tsdb.engine import LMDBStore, SeriesStream, open_db
from tsdb.interfaces import TimeSeriesDB
from tsdb.logging_config import configure_logging
from tsdb.models import (
    CorruptKeyError,
    DatabaseClosedError,
    InvalidArgumentError,
    KeyEncoding,
    PageIndex,
    Query,
    QueryResult,
    SeriesNotFoundError,
    SortOrder,
    StorageError,
    StreamError,
    TimeEntry,
    TimeSeries,
    TSDBError,
)

ASC = SortOrder.ASC
DESC = SortOrder.DESC

__all__ = [
    "ASC",
    "DESC",
    "CorruptKeyError",
    "DatabaseClosedError",
    "InvalidArgumentError",
    "KeyEncoding",
    "LMDBConfig",
    "LMDBStore",
    "PageIndex",
    "Query",
    "QueryResult",
    "SeriesNotFoundError",
    "SeriesStream",
    "SortOrder",
    "StorageError",
    "StreamError",
    "TSDBError",
    "TimeEntry",
    "TimeSeries",
    "TimeSeriesDB",
    "configure_logging",
    "open_db",
]
