"""Event loop for event-driven architecture."""

import asyncio
import logging

from relaybot.infrastructure.events.dispatcher import EventDispatcher
from relaybot.infrastructure.events.queue import EventQueue

logger = logging.getLogger(__name__)

# How often the loop wakes up to check for a stop request
_POLL_INTERVAL_SECONDS = 1.0


class EventLoop:
    """Sequential event processing loop.

    Dequeues one event at a time and awaits its handlers before taking
    the next, so each inbound chat line finishes its whole round trip
    (generation and paced sending) before the next one starts.
    """

    def __init__(
        self,
        queue: EventQueue,
        dispatcher: EventDispatcher,
        poll_interval: float = _POLL_INTERVAL_SECONDS,
    ) -> None:
        """Initialize the event loop.

        Args:
            queue: The event queue to read from.
            dispatcher: The dispatcher to send events to.
            poll_interval: Seconds between stop checks while idle.
        """
        self._queue = queue
        self._dispatcher = dispatcher
        self._poll_interval = poll_interval
        self._stop_event = asyncio.Event()
        self._stop_event.set()  # Initially stopped
        self._processed = 0

    async def start(self) -> None:
        """Run the loop until stop() is called."""
        if not self._stop_event.is_set():
            logger.warning("EventLoop already running")
            return

        self._stop_event.clear()
        logger.info("EventLoop started")

        while not self._stop_event.is_set():
            try:
                event = await asyncio.wait_for(
                    self._queue.dequeue(),
                    timeout=self._poll_interval,
                )
            except asyncio.TimeoutError:
                continue
            except asyncio.CancelledError:
                break

            logger.debug("Processing event: %s", event.type.value)
            try:
                await self._dispatcher.dispatch(event)
            except asyncio.CancelledError:
                self._queue.mark_done(event)
                break
            except Exception:
                logger.exception("Error in event loop")
            self._queue.mark_done(event)
            self._processed += 1

        self._stop_event.set()
        logger.info("EventLoop stopped (%d events processed)", self._processed)

    async def stop(self) -> None:
        """Stop the loop and drop events that were not processed yet."""
        logger.info("Stopping EventLoop")
        self._stop_event.set()
        self._queue.clear()

    @property
    def is_running(self) -> bool:
        """Check if the event loop is running."""
        return not self._stop_event.is_set()

    @property
    def processed_count(self) -> int:
        """Number of events processed since start."""
        return self._processed
