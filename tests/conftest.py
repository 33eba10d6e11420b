"""Fixtures compartidas por los tests del bridge."""

from __future__ import annotations

from typing import Iterable, Union

import pytest

from weather_bridge.config import BridgeSettings, MQTTConnectionSettings, PublishingSettings
from weather_bridge.core.domain import IWeatherSource, Measurement, SourceError, Topics
from weather_bridge.core.pipeline import BoundedChannel
from weather_bridge.core.transport import InMemoryTransport
from weather_bridge.weather.location import CityId

Step = Union[Measurement, BaseException]


class ScriptedWeatherSource(IWeatherSource):
    """Fuente que devuelve (o lanza) los pasos dados, en orden.

    Once the script is exhausted the last step repeats forever.
    """

    def __init__(self, steps: Iterable[Step]):
        self._steps = list(steps)
        self.calls = 0

    async def fetch_current(self) -> Measurement:
        index = min(self.calls, len(self._steps) - 1)
        self.calls += 1
        step = self._steps[index]
        if isinstance(step, BaseException):
            raise step
        return step


@pytest.fixture
def measurement() -> Measurement:
    """10 °C, 1001 hPa, 55.1 %."""
    return Measurement.create(283.15, 1001, 55.1)


@pytest.fixture
def topics() -> Topics:
    return Topics.build("d1")


@pytest.fixture
def channel() -> BoundedChannel[Measurement]:
    return BoundedChannel(maxsize=10)


@pytest.fixture
def transport() -> InMemoryTransport:
    return InMemoryTransport()


@pytest.fixture
def failing_source() -> ScriptedWeatherSource:
    return ScriptedWeatherSource([SourceError("boom")])


@pytest.fixture
def bridge_settings() -> BridgeSettings:
    return BridgeSettings(
        api_key="secret",
        location=CityId("2643743"),
        publishing=PublishingSettings(device_name="d1"),
        mqtt=MQTTConnectionSettings(host="localhost"),
        interval_secs=0.01,
    )
