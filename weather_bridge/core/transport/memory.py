from __future__ import annotations

import asyncio
from typing import AsyncIterator, Optional

from ..domain.errors import TransportSendError
from ..domain.interfaces import ITransport, PublishRequest
from ..domain.notifications import Notification, NotificationKind, TerminalCause


class InMemoryTransport(ITransport):
    """Implementación en memoria del transporte.

    - Guarda cada PublishRequest en ``published`` en orden de emisión.
    - Responde cada publish con un PUBACK en el stream de notificaciones.
    - ``end_stream()`` produce la notificación terminal.
    - ``fail_topics`` hace fallar los publish a esos topics.

    Pensado para tests y para ejecutar el pipeline sin broker.
    """

    def __init__(
        self,
        fail_topics: Optional[set[str]] = None,
        publish_delay: float = 0.0,
    ):
        self.published: list[PublishRequest] = []
        self.completed: list[PublishRequest] = []
        self.fail_topics = set(fail_topics or ())
        self.publish_delay = publish_delay
        self._queue: asyncio.Queue[Notification] = asyncio.Queue()
        self._next_mid = 1

    async def publish(self, request: PublishRequest) -> None:
        self.published.append(request)
        if self.publish_delay:
            await asyncio.sleep(self.publish_delay)
        if request.topic in self.fail_topics:
            raise TransportSendError(request.topic, "rejected by in-memory transport")
        self.completed.append(request)
        mid = self._next_mid
        self._next_mid += 1
        self.push(Notification.ack(NotificationKind.PUBACK, mid))

    def push(self, notification: Notification) -> None:
        self._queue.put_nowait(notification)

    def end_stream(self, cause: TerminalCause = TerminalCause.NETWORK, detail: str = "") -> None:
        self.push(Notification.stream_end(cause, detail))

    async def notifications(self) -> AsyncIterator[Notification]:
        while True:
            notification = await self._queue.get()
            yield notification
            if notification.is_terminal:
                return

    def payloads(self) -> list[str]:
        return [r.payload.decode() for r in self.published]
