"""Publish relay: fans each measurement out into three MQTT publishes.

For every measurement taken from the channel:

1. temperature in the display unit, two decimals
2. pressure in pascals, two decimals
3. relative humidity, one decimal

The three requests are sent concurrently and all three are awaited before
the next measurement is taken, so publishes of two fetch cycles never
interleave and measurements go out in FIFO order.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from common.logging_config import TRACE
from ..domain.errors import PublishError
from ..domain.interfaces import ITransport, PublishRequest, QoS
from ..domain.measurement import Measurement
from ..domain.topics import MeasurementKind, Topics
from ..domain.units import TemperatureUnit
from ..monitoring.stats import PipelineStats
from .channel import BoundedChannel

logger = logging.getLogger(__name__)

PUBLISH_ORDER = (
    MeasurementKind.TEMPERATURE,
    MeasurementKind.PRESSURE,
    MeasurementKind.HUMIDITY,
)


def format_payloads(measurement: Measurement, unit: TemperatureUnit) -> tuple[str, str, str]:
    """(temperature, pressure, humidity) payload strings."""
    temperature = unit.from_kelvin(measurement.temperature)
    return (
        f"{temperature:.2f}",
        f"{measurement.pressure:.2f}",
        f"{measurement.humidity.value:.1f}",
    )


class PublishRelay:
    """Drena el canal y publica cada lectura en sus tres topics.

    Never returns normally: it ends by raising PublishError when a send
    fails or QueueClosedError when the channel closes.
    """

    def __init__(
        self,
        channel: BoundedChannel[Measurement],
        topics: Topics,
        unit: TemperatureUnit,
        transport: ITransport,
        stats: Optional[PipelineStats] = None,
    ):
        self._channel = channel
        self._topics = topics
        self._unit = unit
        self._transport = transport
        self._stats = stats or PipelineStats()

    def build_requests(self, measurement: Measurement) -> list[PublishRequest]:
        payloads = format_payloads(measurement, self._unit)
        return [
            PublishRequest(self._topics.for_kind(kind), payload.encode(), QoS.AT_LEAST_ONCE)
            for kind, payload in zip(PUBLISH_ORDER, payloads)
        ]

    async def publish(self, measurement: Measurement) -> None:
        """Publish one measurement; returns once all three sends completed."""
        requests = self.build_requests(measurement)
        for request in requests:
            logger.log(TRACE, "[PUBLISHER] %s <- %r", request.topic, request.payload)

        results = await asyncio.gather(
            *(self._transport.publish(r) for r in requests),
            return_exceptions=True,
        )

        failures = [r for r in results if isinstance(r, BaseException)]
        if failures:
            self._stats.publish_failures += len(failures)
            logger.error("[PUBLISHER] %d of %d publishes failed", len(failures), len(requests))
            raise PublishError(failures)

        self._stats.cycles_published += 1
        logger.debug("[PUBLISHER] Publisher completed with %d request(s)", len(requests))

    async def run(self) -> None:
        logger.info(
            "[PUBLISHER] Started topics=%s,%s,%s unit=%s",
            self._topics.temperature,
            self._topics.pressure,
            self._topics.humidity,
            self._unit.value,
        )
        while True:
            measurement = await self._channel.get()
            await self.publish(measurement)
