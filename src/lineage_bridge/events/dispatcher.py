"""Event dispatcher - single delivery channel in front of the processor."""

from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass, field

from ..config import DispatcherConfig
from .processor import CatalogEventProcessor
from .types import CatalogEvent


logger = logging.getLogger(__name__)


@dataclass
class EventDispatcher:
    """
    Bounded FIFO queue drained by one worker thread.

    Register `push_event` (or the dispatcher itself) as the catalog
    listener callback. Events are processed one at a time in delivery
    order, so a drop pre-event is always handled before its post-event.

    Features:
    - Non-blocking push (events are dropped and counted when full)
    - A failing event is logged with its coordinates and skipped
    - Drain on stop
    """
    processor: CatalogEventProcessor

    # Maximum queue depth
    max_queue_size: int = 10000

    # How often the worker checks for shutdown while idle
    poll_interval_seconds: float = 1.0

    # Internal state
    _queue: queue.Queue = field(default=None, init=False)
    _thread: threading.Thread | None = field(default=None, init=False)
    _stopping: threading.Event = field(default_factory=threading.Event, init=False)
    _stats_lock: threading.Lock = field(default_factory=threading.Lock, init=False)
    _stats: dict = field(default_factory=dict, init=False)

    def __post_init__(self):
        self._queue = queue.Queue(maxsize=self.max_queue_size)
        self._stats = {
            "received": 0,
            "processed": 0,
            "dropped": 0,
            "errors": 0,
        }

    @classmethod
    def from_config(cls, processor: CatalogEventProcessor, config: DispatcherConfig) -> EventDispatcher:
        """Build a dispatcher sized by the `dispatcher` config section."""
        return cls(
            processor=processor,
            max_queue_size=config.max_queue_size,
            poll_interval_seconds=config.poll_interval_seconds,
        )

    def start(self) -> None:
        """Start the worker thread."""
        if self._thread is not None and self._thread.is_alive():
            return
        self._stopping.clear()
        self._thread = threading.Thread(
            target=self._run,
            name="catalog-event-dispatcher",
            daemon=True,
        )
        self._thread.start()
        logger.info(f"Event dispatcher started (max_queue={self.max_queue_size})")

    def stop(self, drain: bool = True, timeout: float | None = None) -> None:
        """Stop the worker and optionally process what is still queued."""
        self._stopping.set()
        if self._thread is not None:
            self._thread.join(timeout)
            if self._thread.is_alive():
                # One event at a time: no drain while the worker is mid-event
                logger.warning(
                    f"Event dispatcher worker still busy after {timeout}s, "
                    f"leaving {self.queue_depth} events queued"
                )
                return
            self._thread = None
        if drain:
            self.process_pending()
        logger.info(f"Event dispatcher stopped. Stats: {self.stats}")

    def push_event(self, event: CatalogEvent) -> bool:
        """
        Queue an event (non-blocking).

        Returns True if queued, False if dropped.
        """
        try:
            self._queue.put_nowait(event)
        except queue.Full:
            self._count("dropped")
            logger.error(f"Event queue is full (max {self.max_queue_size}), dropping {event!r}")
            return False
        self._count("received")
        return True

    __call__ = push_event

    def process_pending(self) -> int:
        """Process every queued event on the calling thread. Returns count handled."""
        handled = 0
        while True:
            try:
                event = self._queue.get_nowait()
            except queue.Empty:
                return handled
            self._handle(event)
            self._queue.task_done()
            handled += 1

    def join(self) -> None:
        """Block until every queued event has been handled."""
        self._queue.join()

    def _run(self) -> None:
        logger.debug("Event dispatcher loop started")
        while not self._stopping.is_set():
            try:
                event = self._queue.get(timeout=self.poll_interval_seconds)
            except queue.Empty:
                continue
            self._handle(event)
            self._queue.task_done()

    def _handle(self, event: CatalogEvent) -> None:
        try:
            outcome = self.processor.process(event)
        except Exception as e:
            self._count("errors")
            logger.exception(f"Error processing catalog event {event!r}: {e}")
            return
        self._count("processed")
        logger.debug(f"{event!r} -> {outcome.value}")

    def _count(self, key: str) -> None:
        with self._stats_lock:
            self._stats[key] += 1

    @property
    def queue_depth(self) -> int:
        """Current queue depth."""
        return self._queue.qsize()

    @property
    def stats(self) -> dict:
        """Dispatcher statistics."""
        with self._stats_lock:
            stats = dict(self._stats)
        return {**stats, "queue_depth": self.queue_depth}
