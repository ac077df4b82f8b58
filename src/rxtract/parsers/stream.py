"""Background-thread adapter that turns a callback scan into an iterator.

The scan itself is ``Parser.parse_with``; this module only relays its Records
through a bounded queue. The producer blocks until the reader takes each
Record or the cancel event is set, in which case the forwarding callback
returns False and the scan stops at that point.

Usage::

    cancel = threading.Event()
    with parser.parse(open("app.log"), cancel=cancel) as stream:
        for record in stream:
            handle(record)
"""
from __future__ import annotations

import logging
import queue
import threading
from typing import TYPE_CHECKING, Iterator

from ..config import settings
from .base import LineSource, Record

if TYPE_CHECKING:
    from .extractor import Parser

logger = logging.getLogger(__name__)

# Put on the queue once the scan thread has finished
_DONE = object()


class RecordStream:
    """Iterate the Records of a scan running on its own thread.

    Args:
        parser:        Compiled parser to run.
        lines:         Line source, consumed only by the scan thread.
        cancel:        Event that stops the scan when set. A private event is
                       created when omitted; ``close()`` sets it.
        maxsize:       Queue bound (default ``settings.stream_buffer``).
        poll_interval: Seconds between cancellation checks while blocked
                       (default ``settings.poll_interval``).
    """

    def __init__(
        self,
        parser: "Parser",
        lines: LineSource,
        cancel: threading.Event | None = None,
        maxsize: int | None = None,
        poll_interval: float | None = None,
    ) -> None:
        self._cancel = cancel if cancel is not None else threading.Event()
        self._queue: queue.Queue[object] = queue.Queue(maxsize=maxsize or settings.stream_buffer)
        self._poll = poll_interval or settings.poll_interval
        self._error: BaseException | None = None
        self._finished = False

        self._thread = threading.Thread(
            target=self._run, args=(parser, lines), name="rxtract-scan", daemon=True
        )
        self._thread.start()
        logger.debug("Started streaming scan with %r", parser)

    # ------------------------------------------------------------------
    # Producer side
    # ------------------------------------------------------------------

    def _offer(self, item: object) -> bool:
        """Block until item is queued; False if cancelled first."""
        while not self._cancel.is_set():
            try:
                self._queue.put(item, timeout=self._poll)
                return True
            except queue.Full:
                continue
        return False

    def _run(self, parser: "Parser", lines: LineSource) -> None:
        try:
            parser.parse_with(lines, self._offer)
        except Exception as exc:  # re-raised on the reader side
            self._error = exc
        finally:
            self._offer(_DONE)
            logger.debug("Streaming scan finished")

    # ------------------------------------------------------------------
    # Reader side
    # ------------------------------------------------------------------

    def __iter__(self) -> Iterator[Record]:
        return self

    def __next__(self) -> Record:
        while not self._finished:
            try:
                item = self._queue.get(timeout=self._poll)
            except queue.Empty:
                if self._cancel.is_set() and not self._thread.is_alive():
                    self._finished = True
                continue
            if item is _DONE:
                self._finished = True
                break
            return item  # type: ignore[return-value]

        if self._error is not None:
            error, self._error = self._error, None
            raise error
        raise StopIteration

    def close(self) -> None:
        """Cancel the scan and wait for its thread to exit."""
        self._cancel.set()
        self._thread.join()
        self._finished = True

    @property
    def cancelled(self) -> bool:
        return self._cancel.is_set()

    def __enter__(self) -> "RecordStream":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
