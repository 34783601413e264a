"""
TimeEntry - a single (timestamp, payload) record.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class TimeEntry:
    """
    One record of a time series.

    Attributes:
        time: Timestamp in nanoseconds (signed 64-bit).
        value: Opaque payload, stored and returned byte-for-byte.
    """

    time: int
    value: bytes


TimeSeries = list[TimeEntry]
