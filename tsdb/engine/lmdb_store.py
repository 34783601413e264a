"""
LMDBStore - time-series store on LMDB named databases.
"""

import asyncio
import logging
import os
import threading
from collections.abc import Iterator
from contextlib import contextmanager, nullcontext
from functools import partial
from pathlib import Path
from typing import Any

import lmdb

from tsdb.config import LMDBConfig
from tsdb.engine.range_scan import RangeQueryEngine
from tsdb.engine.streaming import DEFAULT_BUFFER_SIZE, Emit, SeriesStream
from tsdb.interfaces.ordered_cursor import OrderedCursor
from tsdb.interfaces.time_series_db import TimeSeriesDB
from tsdb.models.exceptions import (
    DatabaseClosedError,
    InvalidArgumentError,
    SeriesNotFoundError,
    StorageError,
)
from tsdb.models.key_codec import codec_for
from tsdb.models.query import PageIndex, Query, QueryResult
from tsdb.models.time_entry import TimeEntry, TimeSeries

logger = logging.getLogger(__name__)


class LMDBCursor(OrderedCursor):
    """OrderedCursor over an lmdb.Cursor."""

    def __init__(self, cursor: lmdb.Cursor) -> None:
        self._cursor = cursor

    def seek(self, key: bytes) -> bool:
        return self._cursor.set_range(key)

    def key(self) -> bytes:
        return self._cursor.key()

    def value(self) -> bytes:
        return self._cursor.value()

    def next(self) -> bool:
        return self._cursor.next()

    def prev(self) -> bool:
        return self._cursor.prev()


@contextmanager
def _storage_errors(action: str) -> Iterator[None]:
    """Re-raise lmdb failures as StorageError."""
    try:
        yield
    except lmdb.Error as e:
        raise StorageError(f"{action} failed: {e}") from e


class LMDBStore(TimeSeriesDB):
    """
    Time-series store keeping every series in its own LMDB named database.

    Layout:
    - Data file at ``config.path`` (subdir=False), lock file beside it
    - Series name (UTF-8) -> named database
    - 8-byte big-endian timestamp key -> raw payload

    Concurrency:
    - Every read runs in its own read-only transaction (a snapshot)
    - Writes are serialized by an asyncio lock and LMDB's writer lock;
      each add/delete is a single transaction
    - Blocking LMDB work runs in the event loop's default executor

    Named-database handles are cached. A transaction that opens or drops a
    handle holds ``_handle_lock`` until it commits or aborts, so handle
    opens never run concurrently. Reads open handles in a read-only
    transaction and never wait on the writer.
    """

    def __init__(self, config: LMDBConfig) -> None:
        """
        Open (or create) the LMDB environment described by ``config``.

        Args:
            config: Storage settings.
        """
        path = os.path.abspath(config.path)
        Path(path).parent.mkdir(parents=True, exist_ok=True)

        with _storage_errors(f"Opening {path}"):
            self._env = lmdb.open(
                path,
                subdir=False,
                mode=config.file_mode,
                map_size=config.map_size,
                max_dbs=config.max_dbs,
            )

        self._config = config
        self._path = path
        self._codec = codec_for(config.key_encoding)
        self._engine = RangeQueryEngine(self._codec)

        # Series name -> named database handle
        self._handles: dict[str, Any] = {}
        self._handle_lock = threading.Lock()

        self._write_lock = asyncio.Lock()
        self._streams: set[SeriesStream] = set()
        self._closed = False

        logger.info(
            f"Opened time-series store at {path} "
            f"(mode={oct(config.file_mode)}, keys={config.key_encoding.value})"
        )

    @property
    def path(self) -> str:
        return self._path

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Public async API
    # ------------------------------------------------------------------

    async def add(self, name: str, series: TimeSeries) -> None:
        if not isinstance(name, str) or not name:
            raise InvalidArgumentError("Time series record with empty name")
        records = self._encode_series(series)

        async with self._write_lock:
            await self._run(self._add_sync, name, records)

    async def query(self, q: Query) -> QueryResult:
        if not isinstance(q, Query):
            raise InvalidArgumentError(f"Expected a Query, got {type(q).__name__}")
        return await self._run(self._query_sync, q)

    async def get_pages(self, q: Query) -> PageIndex:
        if not isinstance(q, Query):
            raise InvalidArgumentError(f"Expected a Query, got {type(q).__name__}")
        return await self._run(self._get_pages_sync, q)

    async def get(self, name: str) -> TimeSeries:
        return await self._run(self._get_sync, name)

    def stream_series(
        self, name: str, buffer_size: int = DEFAULT_BUFFER_SIZE
    ) -> SeriesStream:
        """
        Stream a whole series without loading it into memory.

        Args:
            name: Series to read.
            buffer_size: Entries buffered ahead of the consumer.

        Returns:
            A SeriesStream; use it with ``async with`` so an abandoned
            stream releases its read transaction.
        """
        self._check_open()
        stream = SeriesStream(
            partial(self._scan_series, name),
            name=name,
            buffer_size=buffer_size,
            on_close=self._streams.discard,
        )
        self._streams.add(stream)
        return stream

    async def delete(self, name: str) -> None:
        async with self._write_lock:
            await self._run(self._delete_sync, name)

    async def list_series(self) -> list[str]:
        """Return the names of every stored series in ascending order."""
        return await self._run(self._list_series_sync)

    async def close(self) -> None:
        """Close open streams, wait for pending writes and close the environment."""
        if self._closed:
            return
        self._closed = True

        streams = list(self._streams)
        if streams:
            logger.warning(f"Closing store with {len(streams)} open stream(s)")
        for stream in streams:
            await stream.aclose()

        async with self._write_lock:
            self._handles.clear()
            self._env.close()

        logger.info(f"Closed time-series store at {self._path}")

    # ------------------------------------------------------------------
    # Blocking implementations (run in the executor)
    # ------------------------------------------------------------------

    def _add_sync(self, name: str, records: list[tuple[bytes, bytes]]) -> None:
        # A cached handle needs no open; only a first write takes the lock
        guard = nullcontext() if name in self._handles else self._handle_lock
        with guard, _storage_errors(f"Adding to series {name!r}"):
            txn = self._env.begin(write=True)
            opened = False
            try:
                db, opened = self._open_series_db(txn, name, create=True)
                txn.cursor(db=db).putmulti(records)
                txn.commit()
            except BaseException:
                # The abort closes a handle opened in this transaction
                if opened:
                    self._handles.pop(name, None)
                txn.abort()
                raise

        logger.debug(f"Added {len(records)} entries to series {name!r}")

    def _query_sync(self, q: Query) -> QueryResult:
        with _storage_errors(f"Querying series {q.series!r}"):
            db = self._series_handle(q.series)
            with self._env.begin() as txn:
                self._check_exists(txn, q.series)
                cursor = LMDBCursor(txn.cursor(db=db))
                result = self._engine.query(cursor, q)

        logger.debug(
            f"Query {q.series!r} [{q.start}, {q.end}] {q.sort.value} limit={q.limit}: "
            f"{len(result.entries)} entries, continuation={result.continuation}"
        )
        return result

    def _get_pages_sync(self, q: Query) -> PageIndex:
        with _storage_errors(f"Indexing pages of series {q.series!r}"):
            db = self._series_handle(q.series)
            with self._env.begin() as txn:
                self._check_exists(txn, q.series)
                cursor = LMDBCursor(txn.cursor(db=db))
                return self._engine.page_index(cursor, q)

    def _get_sync(self, name: str) -> TimeSeries:
        decode = self._codec.decode
        with _storage_errors(f"Reading series {name!r}"):
            db = self._series_handle(name)
            with self._env.begin() as txn:
                self._check_exists(txn, name)
                return [
                    TimeEntry(time=decode(key), value=value)
                    for key, value in txn.cursor(db=db)
                ]

    def _scan_series(self, name: str, emit: Emit) -> None:
        decode = self._codec.decode
        with _storage_errors(f"Streaming series {name!r}"):
            db = self._series_handle(name)
            with self._env.begin() as txn:
                self._check_exists(txn, name)
                for key, value in txn.cursor(db=db):
                    if not emit(TimeEntry(time=decode(key), value=value)):
                        break

    def _delete_sync(self, name: str) -> None:
        if not self._series_key(name):
            return

        with self._handle_lock, _storage_errors(f"Deleting series {name!r}"):
            with self._env.begin(write=True) as txn:
                try:
                    db, _ = self._open_series_db(txn, name, create=False)
                except SeriesNotFoundError:
                    logger.debug(f"Delete of missing series {name!r} ignored")
                    return
                try:
                    txn.drop(db, delete=True)
                finally:
                    # drop(delete=True) closes the handle immediately
                    self._handles.pop(name, None)

        logger.debug(f"Deleted series {name!r}")

    def _list_series_sync(self) -> list[str]:
        with _storage_errors("Listing series"):
            with self._env.begin() as txn:
                return [key.decode("utf-8") for key, _ in txn.cursor()]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _run(self, fn, *args):
        """Run a blocking LMDB call in the default executor."""
        self._check_open()
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, fn, *args)

    def _check_open(self) -> None:
        if self._closed:
            raise DatabaseClosedError(f"Store at {self._path} is closed")

    def _encode_series(self, series: TimeSeries) -> list[tuple[bytes, bytes]]:
        """Validate and encode every entry before any write starts."""
        records = []
        for entry in series:
            if not isinstance(entry, TimeEntry):
                raise InvalidArgumentError(
                    f"Expected TimeEntry, got {type(entry).__name__}"
                )
            if not isinstance(entry.value, (bytes, bytearray, memoryview)):
                raise InvalidArgumentError(
                    f"Entry value at {entry.time} must be bytes, "
                    f"got {type(entry.value).__name__}"
                )
            records.append((self._codec.encode(entry.time), bytes(entry.value)))
        return records

    @staticmethod
    def _series_key(name: str) -> bytes:
        if not isinstance(name, str):
            raise InvalidArgumentError(f"Series name must be a str, got {type(name).__name__}")
        return name.encode("utf-8")

    def _open_series_db(self, txn: lmdb.Transaction, name: str, create: bool) -> tuple[Any, bool]:
        """
        Return the handle for ``name`` and whether it was opened just now.

        Must run inside a write transaction whose caller holds
        ``_handle_lock`` until the transaction ends.
        """
        db = self._handles.get(name)
        if db is not None:
            return db, False

        try:
            db = self._env.open_db(self._series_key(name), txn=txn, create=create)
        except lmdb.NotFoundError:
            raise SeriesNotFoundError(name) from None

        self._handles[name] = db
        return db, True

    def _series_handle(self, name: str) -> Any:
        """Return a cached handle for a read, opening it if needed."""
        if not isinstance(name, str) or not name:
            raise SeriesNotFoundError(name)

        db = self._handles.get(name)
        if db is not None:
            return db

        with self._handle_lock:
            db = self._handles.get(name)
            if db is None:
                # The handle outlives the transaction only once it commits
                with self._env.begin() as txn:
                    try:
                        db = self._env.open_db(
                            self._series_key(name), txn=txn, create=False
                        )
                    except lmdb.NotFoundError:
                        raise SeriesNotFoundError(name) from None
                self._handles[name] = db
        return db

    def _check_exists(self, txn: lmdb.Transaction, name: str) -> None:
        """Raise SeriesNotFoundError unless ``name`` exists in this snapshot."""
        if txn.get(self._series_key(name)) is None:
            raise SeriesNotFoundError(name)
