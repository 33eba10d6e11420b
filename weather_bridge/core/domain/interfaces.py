"""Abstract capabilities consumed by the pipeline.

This decouples the pipeline from the concrete weather provider and the
concrete message bus. Any implementation (HTTP-backed, broker-backed,
in-memory for tests) can implement these interfaces.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import IntEnum
from typing import AsyncIterator

from .measurement import Measurement
from .notifications import Notification


class QoS(IntEnum):
    """Delivery guarantee level of a publish."""
    AT_MOST_ONCE = 0
    AT_LEAST_ONCE = 1
    EXACTLY_ONCE = 2


@dataclass(frozen=True)
class PublishRequest:
    topic: str
    payload: bytes
    qos: QoS = QoS.AT_LEAST_ONCE


class IWeatherSource(ABC):
    """Abstract weather provider.

    Implementations:
    - OpenWeatherMapClient: HTTP, api.openweathermap.org
    """

    @abstractmethod
    async def fetch_current(self) -> Measurement:
        """Fetch the current weather.

        Raises:
            SourceError: on network, parse or upstream-reported failures
        """
        pass


class ITransport(ABC):
    """Abstract message-bus connection.

    Implementations:
    - MQTTTransport: paho-mqtt
    - InMemoryTransport: records publishes, for tests
    """

    @abstractmethod
    async def publish(self, request: PublishRequest) -> None:
        """Hand a publish request to the connection.

        Must be safe to call from several coroutines concurrently.

        Raises:
            TransportSendError: if the request was not accepted
        """
        pass

    @abstractmethod
    def notifications(self) -> AsyncIterator[Notification]:
        """Unbounded stream of connection events.

        Ends right after yielding a terminal notification.
        """
        pass
