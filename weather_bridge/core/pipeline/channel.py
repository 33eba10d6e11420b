"""Canal acotado entre el fetcher y el publisher.

Unlike BackpressureQueue-style buffers this channel never drops: a full
channel suspends the producer until the consumer makes room. This is the
only back-pressure point of the pipeline.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from typing import Generic, TypeVar

from ..domain.errors import QueueClosedError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_CAPACITY = 10


class BoundedChannel(Generic[T]):
    """FIFO channel with a fixed capacity and explicit closing.

    - put() suspends while full, raises QueueClosedError once closed
    - get() suspends while empty, drains what is left after close() and
      then raises QueueClosedError

    Uso:
        channel = BoundedChannel[Measurement](maxsize=10)

        # Productor
        await channel.put(measurement)

        # Consumidor
        measurement = await channel.get()
    """

    def __init__(self, maxsize: int = DEFAULT_CAPACITY):
        if maxsize <= 0:
            raise ValueError("maxsize must be positive")
        self._maxsize = maxsize
        self._items: deque[T] = deque()
        self._cond = asyncio.Condition()
        self._closed = False
        self._enqueued = 0
        self._dequeued = 0

    async def put(self, item: T) -> None:
        async with self._cond:
            await self._cond.wait_for(
                lambda: self._closed or len(self._items) < self._maxsize
            )
            if self._closed:
                raise QueueClosedError()
            self._items.append(item)
            self._enqueued += 1
            self._cond.notify_all()

    async def get(self) -> T:
        async with self._cond:
            await self._cond.wait_for(lambda: self._closed or bool(self._items))
            if not self._items:
                raise QueueClosedError()
            item = self._items.popleft()
            self._dequeued += 1
            self._cond.notify_all()
            return item

    async def close(self) -> None:
        async with self._cond:
            if not self._closed:
                logger.debug("[CHANNEL] Closed with %d pending item(s)", len(self._items))
            self._closed = True
            self._cond.notify_all()

    @property
    def size(self) -> int:
        return len(self._items)

    @property
    def maxsize(self) -> int:
        return self._maxsize

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def is_full(self) -> bool:
        return len(self._items) >= self._maxsize

    def stats(self) -> dict:
        return {
            "enqueued": self._enqueued,
            "dequeued": self._dequeued,
            "current_size": len(self._items),
            "max_size": self._maxsize,
            "closed": self._closed,
        }
