"""
Abstract base classes for the time-series store.
"""

from tsdb.interfaces.ordered_cursor import OrderedCursor
from tsdb.interfaces.time_series_db import TimeSeriesDB

__all__ = ["OrderedCursor", "TimeSeriesDB"]
