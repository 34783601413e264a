"""
Query, QueryResult and PageIndex for range scans.
"""

from dataclasses import dataclass, field, replace
from enum import Enum

from tsdb.models.exceptions import InvalidArgumentError
from tsdb.models.time_entry import TimeEntry


class SortOrder(str, Enum):
    """Direction of a range scan."""

    ASC = "asc"  # oldest first
    DESC = "desc"  # newest first


@dataclass(frozen=True)
class Query:
    """
    A paginated range request against one series.

    Attributes:
        series: Name of the series to scan.
        start: Lower time bound (inclusive).
        end: Upper time bound (inclusive).
        sort: ASC walks forward from start, DESC walks backward from end.
        limit: Maximum number of entries per page. Must be positive.
    """

    series: str
    start: int
    end: int
    sort: SortOrder = SortOrder.ASC
    limit: int = 100

    def __post_init__(self) -> None:
        try:
            sort = SortOrder(self.sort)
        except ValueError:
            raise InvalidArgumentError(
                f"sort must be 'asc' or 'desc', got {self.sort!r}"
            ) from None
        # Frozen dataclass: coerce plain strings through object.__setattr__
        object.__setattr__(self, "sort", sort)

        if isinstance(self.limit, bool) or not isinstance(self.limit, int):
            raise InvalidArgumentError(f"limit must be an int, got {self.limit!r}")
        if self.limit <= 0:
            raise InvalidArgumentError(f"limit must be positive, got {self.limit}")

    @property
    def descending(self) -> bool:
        return self.sort is SortOrder.DESC

    def resume_from(self, continuation: int) -> "Query":
        """
        Build the query for the page starting at ``continuation``.

        Moves ``start`` for ASC and ``end`` for DESC; the other bound and
        the limit stay fixed. Also used to jump to a PageIndex boundary.
        """
        if self.descending:
            return replace(self, end=continuation)
        return replace(self, start=continuation)


@dataclass
class QueryResult:
    """
    One page of a range scan.

    Attributes:
        entries: At most ``limit`` entries in scan order.
        continuation: Timestamp of the first unconsumed qualifying entry,
            or None when the range is exhausted.
    """

    entries: list[TimeEntry] = field(default_factory=list)
    continuation: int | None = None

    @property
    def has_more(self) -> bool:
        return self.continuation is not None


@dataclass
class PageIndex:
    """
    Page-start timestamps and total match count for a query.

    Attributes:
        boundaries: Timestamp of the first entry of every page, in scan order.
        total_count: Number of qualifying entries in the whole range.
    """

    boundaries: list[int] = field(default_factory=list)
    total_count: int = 0

    @property
    def page_count(self) -> int:
        return len(self.boundaries)
