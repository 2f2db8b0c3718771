import asyncio
import json
import uuid
from typing import Awaitable, Callable, Optional

from constants import OUTBOUND_QUEUE_SIZE
from logging_config import get_logger

logger = get_logger(__name__)

SendCallable = Callable[[str], Awaitable[None]]


class Connection:
    """One peer's message channel.

    Outbound messages go through a bounded queue drained by `pump()`, so a slow
    peer never blocks whoever is delivering to it. The transport owns the
    underlying socket; this object only knows how to hand it text frames.
    """

    def __init__(self, send: SendCallable, connection_id: Optional[str] = None, max_queue: int = OUTBOUND_QUEUE_SIZE):
        self.connection_id = connection_id or uuid.uuid4().hex
        self._send = send
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=max_queue)
        self._open = True
        self._close_handled = False

    def __repr__(self):
        return f"Connection({self.connection_id[:8]}, open={self._open})"

    def __eq__(self, other):
        if not isinstance(other, Connection):
            return NotImplemented
        return self.connection_id == other.connection_id

    def __hash__(self):
        return hash(self.connection_id)

    @property
    def is_open(self) -> bool:
        return self._open

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def enqueue(self, message: dict) -> bool:
        """Queue a message without blocking; drops the oldest one on overflow."""
        try:
            self._queue.put_nowait(message)
        except asyncio.QueueFull:
            dropped = self._queue.get_nowait()
            logger.warning(f"Outbound queue full for connection {self.connection_id}, dropped a '{dropped.get('type', 'unknown')}' message")
            self._queue.put_nowait(message)
        return True

    def mark_closed(self) -> bool:
        """Mark the channel closed. Returns True only for the first call."""
        self._open = False
        if self._close_handled:
            return False
        self._close_handled = True
        return True

    async def pump(self):
        """Writer loop: send queued messages in order until the channel dies."""
        while True:
            message = await self._queue.get()
            if not self._open:
                logger.debug(f"Connection {self.connection_id} closed, discarding {self._queue.qsize() + 1} queued messages")
                break
            try:
                await self._send(json.dumps(message))
            except Exception as e:
                # No retry: a channel that failed once is treated as dead until closure is reported
                logger.debug(f"Send failed for connection {self.connection_id}: {e}")
                self._open = False
                break


def deliver(connection, message: dict) -> bool:
    """Best-effort delivery: silently skips connections that are no longer open."""
    if not connection.is_open:
        logger.debug(f"Skipping delivery of '{message.get('type', 'unknown')}' to closed connection {connection.connection_id}")
        return False
    return connection.enqueue(message)
