"""
SeriesStream - async iterator fed by a producer thread.

The producer runs a blocking scan on a dedicated thread per stream
and hands entries over through a bounded asyncio.Queue. The scan holds
its read transaction until it finishes or the stream is closed.

Producers never use the loop's default executor: a producer parked on a
full queue must not take a worker away from the store's other calls.
"""

import asyncio
import logging
import threading
from collections.abc import Callable

from tsdb.models.exceptions import (
    InvalidArgumentError,
    SeriesNotFoundError,
    StreamError,
)
from tsdb.models.time_entry import TimeEntry

logger = logging.getLogger(__name__)

DEFAULT_BUFFER_SIZE = 10

# Emit callback handed to the scan: returns False once the consumer has gone.
Emit = Callable[[TimeEntry], bool]
Scan = Callable[[Emit], None]

_END = object()


class SeriesStream:
    """
    Lazy, cancellable delivery of a scan's entries.

    Usage:
        async with store.stream_series("temperature") as stream:
            async for entry in stream:
                ...

    Entries are delivered in production order. If the scan fails, every
    entry produced before the failure is delivered first and the failure
    is raised from the following ``__anext__``: a missing series as
    SeriesNotFoundError, anything else wrapped in StreamError.

    Leaving the ``async with`` block (or calling ``aclose()``) before the
    end stops the producer and releases its transaction.
    """

    def __init__(
        self,
        scan: Scan,
        name: str = "",
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        on_close: Callable[["SeriesStream"], None] | None = None,
    ) -> None:
        """
        Initialize a stream. The scan starts on the first ``__anext__``.

        Args:
            scan: Blocking function that calls ``emit`` for every entry and
                stops early when ``emit`` returns False.
            name: Series name, for log messages.
            buffer_size: Entries buffered ahead of the consumer.
            on_close: Called once when the stream finishes or is closed.
        """
        if buffer_size <= 0:
            raise InvalidArgumentError(
                f"buffer_size must be positive, got {buffer_size}"
            )

        self._scan = scan
        self._name = name
        self._buffer_size = buffer_size
        self._on_close = on_close

        self._loop: asyncio.AbstractEventLoop | None = None
        self._queue: asyncio.Queue | None = None
        self._producer: asyncio.Future | None = None
        self._cancelled = threading.Event()
        self._finished = False

    @property
    def closed(self) -> bool:
        return self._finished

    def _start(self) -> None:
        self._loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue(maxsize=self._buffer_size)
        self._producer = self._loop.create_future()

        thread = threading.Thread(
            target=self._run_producer,
            name=f"tsdb-stream-{self._name}",
            daemon=True,
        )
        thread.start()

    def _run_producer(self) -> None:
        """Thread body: run the producer and settle the future on the loop."""
        try:
            self._produce()
        except Exception as e:
            self._loop.call_soon_threadsafe(self._settle, e)
        else:
            self._loop.call_soon_threadsafe(self._settle, None)

    def _settle(self, error: Exception | None) -> None:
        if self._producer.done():
            return
        if error is None:
            self._producer.set_result(None)
        else:
            self._producer.set_exception(error)

    def _send(self, item: object) -> None:
        """Blocking put from the producer thread."""
        asyncio.run_coroutine_threadsafe(self._queue.put(item), self._loop).result()

    def _emit(self, entry: TimeEntry) -> bool:
        if self._cancelled.is_set():
            return False
        self._send(entry)
        return not self._cancelled.is_set()

    def _produce(self) -> None:
        """Run the scan, then signal the end unless the consumer left."""
        try:
            self._scan(self._emit)
        finally:
            if not self._cancelled.is_set():
                self._send(_END)

    def __aiter__(self) -> "SeriesStream":
        return self

    async def __anext__(self) -> TimeEntry:
        if self._finished:
            raise StopAsyncIteration
        if self._producer is None:
            self._start()

        item = await self._queue.get()
        if item is not _END:
            return item

        self._finish()
        try:
            await self._producer
        except SeriesNotFoundError:
            raise
        except Exception as e:
            raise StreamError(f"Streaming series {self._name!r} failed: {e}") from e
        raise StopAsyncIteration

    async def aclose(self) -> None:
        """Stop the producer, drop buffered entries and wait for it to exit."""
        if self._finished:
            return
        self._finish()
        if self._producer is None:
            return

        self._cancelled.set()
        # Free queue slots so a producer blocked on a full queue can observe
        # the cancellation.
        while not self._queue.empty():
            self._queue.get_nowait()

        results = await asyncio.gather(self._producer, return_exceptions=True)
        if isinstance(results[0], BaseException):
            logger.warning(
                f"Stream of {self._name!r} closed early; scan error dropped: {results[0]}"
            )
        else:
            logger.debug(f"Stream of {self._name!r} closed before exhaustion")

    def _finish(self) -> None:
        self._finished = True
        if self._on_close is not None:
            self._on_close(self)
            self._on_close = None

    async def __aenter__(self) -> "SeriesStream":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
