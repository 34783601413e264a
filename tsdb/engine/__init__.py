from tsdb.engine.factory import open_db
from tsdb.engine.lmdb_store import LMDBCursor, LMDBStore
from tsdb.engine.range_scan import RangeQueryEngine, ScanPlan
from tsdb.engine.streaming import SeriesStream

__all__ = [
    "LMDBCursor",
    "LMDBStore",
    "RangeQueryEngine",
    "ScanPlan",
    "SeriesStream",
    "open_db",
]
