"""
Range scan engine - directional, paginated scans over an OrderedCursor.
"""

from collections.abc import Callable
from dataclasses import dataclass

from tsdb.interfaces.ordered_cursor import OrderedCursor
from tsdb.models.key_codec import TimeKeyCodec
from tsdb.models.query import PageIndex, Query, QueryResult
from tsdb.models.time_entry import TimeEntry


@dataclass(frozen=True)
class ScanPlan:
    """
    Where a scan starts, which way it walks and where it stops.

    Attributes:
        first: Timestamp the cursor seeks to.
        boundary: Last timestamp that still qualifies.
        descending: Walk toward smaller keys when True.
    """

    first: int
    boundary: int
    descending: bool

    @classmethod
    def for_query(cls, q: Query) -> "ScanPlan":
        if q.descending:
            return cls(first=q.end, boundary=q.start, descending=True)
        return cls(first=q.start, boundary=q.end, descending=False)

    def qualifies(self, ts: int) -> bool:
        if self.descending:
            return ts >= self.boundary
        return ts <= self.boundary

    def stepper(self, cursor: OrderedCursor) -> Callable[[], bool]:
        return cursor.prev if self.descending else cursor.next


class RangeQueryEngine:
    """
    Translates a Query into cursor traversal.

    The seek is the store's native one for both directions: the cursor
    lands on the first key >= encode(first) and then walks in the scan
    direction. For DESC this means a non-stored ``end`` starts the scan
    at the next greater key, and an ``end`` past the last key yields
    nothing.
    """

    def __init__(self, codec: TimeKeyCodec) -> None:
        self._codec = codec

    def query(self, cursor: OrderedCursor, q: Query) -> QueryResult:
        """
        Collect one page of at most ``q.limit`` qualifying entries.

        Args:
            cursor: Cursor over the series container.
            q: The query to run.

        Returns:
            The page, with a continuation when more qualifying entries exist.
        """
        plan = ScanPlan.for_query(q)
        step = plan.stepper(cursor)
        decode = self._codec.decode

        entries: list[TimeEntry] = []
        positioned = cursor.seek(self._codec.encode(plan.first))
        while positioned and len(entries) < q.limit:
            ts = decode(cursor.key())
            if not plan.qualifies(ts):
                break
            entries.append(TimeEntry(time=ts, value=cursor.value()))
            positioned = step()

        continuation = None
        if len(entries) == q.limit and positioned:
            ts = decode(cursor.key())
            if plan.qualifies(ts):
                continuation = ts

        return QueryResult(entries=entries, continuation=continuation)

    def page_index(self, cursor: OrderedCursor, q: Query) -> PageIndex:
        """
        Walk the whole qualifying range, recording every page's first timestamp.

        Args:
            cursor: Cursor over the series container.
            q: The query whose pages are indexed; ``q.limit`` is the page size.

        Returns:
            Page boundaries in scan order and the total qualifying count.
        """
        plan = ScanPlan.for_query(q)
        step = plan.stepper(cursor)
        decode = self._codec.decode

        boundaries: list[int] = []
        count = 0
        positioned = cursor.seek(self._codec.encode(plan.first))
        while positioned:
            ts = decode(cursor.key())
            if not plan.qualifies(ts):
                break
            if count % q.limit == 0:
                boundaries.append(ts)
            count += 1
            positioned = step()

        return PageIndex(boundaries=boundaries, total_count=count)
