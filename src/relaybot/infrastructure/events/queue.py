"""Event queue for event-driven architecture."""

import asyncio
import logging

from relaybot.domain.entities.event import Event

logger = logging.getLogger(__name__)


class EventQueue:
    """In-memory FIFO event queue.

    Every enqueued event is delivered exactly once, in arrival order.
    Events are never merged or replaced.
    """

    def __init__(self) -> None:
        """Initialize the event queue."""
        self._queue: asyncio.Queue[Event] = asyncio.Queue()

    async def enqueue(self, event: Event) -> None:
        """Add an event to the queue.

        Args:
            event: The event to enqueue.
        """
        await self._queue.put(event)
        logger.debug(
            "Enqueued event: type=%s, pending=%d", event.type.value, self.pending_count
        )

    async def dequeue(self) -> Event:
        """Get the next event from the queue.

        This method blocks until an event is available.

        Returns:
            The next event to process.
        """
        return await self._queue.get()

    def mark_done(self, event: Event) -> None:
        """Mark an event as done processing.

        Args:
            event: The event that finished processing.
        """
        self._queue.task_done()
        logger.debug("Event marked as done: %s", event.type.value)

    async def join(self) -> None:
        """Wait until every enqueued event has been marked done."""
        await self._queue.join()

    @property
    def pending_count(self) -> int:
        """Number of events waiting to be processed."""
        return self._queue.qsize()

    def clear(self) -> None:
        """Drop all pending events."""
        dropped = 0
        while True:
            try:
                self._queue.get_nowait()
            except asyncio.QueueEmpty:
                break
            self._queue.task_done()
            dropped += 1

        logger.info("EventQueue cleared (%d pending events dropped)", dropped)
