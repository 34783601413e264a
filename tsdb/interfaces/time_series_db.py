"""
TimeSeriesDB abstract base class for time-series storage backends.
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator

from tsdb.models.query import PageIndex, Query, QueryResult
from tsdb.models.time_entry import TimeEntry, TimeSeries


class TimeSeriesDB(ABC):
    """
    Capability set every storage backend provides.

    Implementations:
    - LMDBStore: one LMDB named sub-database per series
    """

    @abstractmethod
    async def add(self, name: str, series: TimeSeries) -> None:
        """
        Insert entries into a series, creating it if needed.

        Existing entries with the same timestamp are overwritten. The call
        is atomic: either every entry is stored or none is.

        Args:
            name: Series name. Must not be empty.
            series: Entries to store.

        Raises:
            InvalidArgumentError: If the name is empty or an entry is malformed.
        """
        pass

    @abstractmethod
    async def query(self, q: Query) -> QueryResult:
        """
        Return one page of a directional range scan.

        Args:
            q: The range, direction and page size.

        Returns:
            The page and, if the page was cut by the limit, the continuation.

        Raises:
            SeriesNotFoundError: If the series does not exist.
        """
        pass

    @abstractmethod
    async def get_pages(self, q: Query) -> PageIndex:
        """
        Return the start timestamp of every page of ``q`` and the match count.

        Raises:
            SeriesNotFoundError: If the series does not exist.
        """
        pass

    @abstractmethod
    async def get(self, name: str) -> TimeSeries:
        """
        Return a whole series in ascending time order.

        Raises:
            SeriesNotFoundError: If the series does not exist.
        """
        pass

    @abstractmethod
    def stream_series(self, name: str) -> AsyncIterator[TimeEntry]:
        """
        Lazily deliver a whole series in ascending time order.

        Failures are raised by the iterator after every entry produced
        before them has been delivered.
        """
        pass

    @abstractmethod
    async def delete(self, name: str) -> None:
        """Remove a whole series. Deleting a missing series is a no-op."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release every resource held by the store."""
        pass

    async def __aenter__(self) -> "TimeSeriesDB":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
