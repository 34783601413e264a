"""
Data models for the time-series store.
"""

from tsdb.models.exceptions import (
    CorruptKeyError,
    DatabaseClosedError,
    InvalidArgumentError,
    SeriesNotFoundError,
    StorageError,
    StreamError,
    TSDBError,
)
from tsdb.models.key_codec import KeyEncoding, OrderPreservingKeyCodec, TimeKeyCodec
from tsdb.models.query import PageIndex, Query, QueryResult, SortOrder
from tsdb.models.time_entry import TimeEntry, TimeSeries

__all__ = [
    "CorruptKeyError",
    "DatabaseClosedError",
    "InvalidArgumentError",
    "KeyEncoding",
    "OrderPreservingKeyCodec",
    "PageIndex",
    "Query",
    "QueryResult",
    "SeriesNotFoundError",
    "SortOrder",
    "StorageError",
    "StreamError",
    "TSDBError",
    "TimeEntry",
    "TimeKeyCodec",
    "TimeSeries",
]
