"""
Custom exceptions for the time-series store.
"""


class TSDBError(Exception):
    """Base class for every error raised by the time-series store."""


class SeriesNotFoundError(TSDBError, KeyError):
    """
    Raised when a series has never been written (or was deleted).

    Query, get, get_pages and stream_series raise this. Delete does not:
    deleting a missing series is a no-op.
    """

    def __init__(self, series: str):
        """
        Initialize not-found error.

        Args:
            series: Name of the missing series.
        """
        self.series = series
        super().__init__(series)

    def __str__(self) -> str:
        return f"Series {self.series!r} does not exist"


class InvalidArgumentError(TSDBError, ValueError):
    """Raised for malformed requests: empty series name, bad limit, etc."""


class StorageError(TSDBError):
    """
    Raised when the underlying LMDB environment reports a failure.

    The lmdb exception is always chained as ``__cause__``.
    """


class CorruptKeyError(StorageError):
    """
    Raised when a stored key cannot be decoded into a timestamp.
    """

    def __init__(self, key: bytes):
        """
        Initialize corruption error.

        Args:
            key: The raw key read from the store.
        """
        self.key = key
        super().__init__(
            f"Corrupt time key {key.hex()!r}: expected 8 bytes, got {len(key)}"
        )


class StreamError(TSDBError):
    """
    Raised by a series stream after its last delivered entry when the
    producing scan failed part way.
    """


class DatabaseClosedError(TSDBError):
    """Raised when an operation is attempted on a closed store."""
