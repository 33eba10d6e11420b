"""Topic naming for the Hardwario/BigClown MQTT bus.

Topics follow the node layout described at
https://developers.hardwario.com/interfaces/mqtt-protocol:

    {prefix}node/{device}/{sensor}/{channel}/{quantity}

They are computed once at startup and reused for every publish.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class MeasurementKind(Enum):
    TEMPERATURE = ("thermometer", "temperature")
    PRESSURE = ("barometer", "pressure")
    HUMIDITY = ("hygrometer", "relative-humidity")

    @property
    def sensor(self) -> str:
        return self.value[0]

    @property
    def quantity(self) -> str:
        return self.value[1]


def topic(
    prefix: Optional[str],
    device: str,
    channel: str,
    kind: MeasurementKind,
) -> str:
    return f"{prefix or ''}node/{device}/{kind.sensor}/{channel}/{kind.quantity}"


@dataclass(frozen=True)
class Topics:
    """Los tres topics precalculados, uno por magnitud."""
    temperature: str
    pressure: str
    humidity: str

    @classmethod
    def build(
        cls,
        device: str,
        prefix: Optional[str] = None,
        channel_thermometer: str = "0:0",
        channel_barometer: str = "0:0",
        channel_hygrometer: str = "0:0",
    ) -> "Topics":
        return cls(
            temperature=topic(prefix, device, channel_thermometer, MeasurementKind.TEMPERATURE),
            pressure=topic(prefix, device, channel_barometer, MeasurementKind.PRESSURE),
            humidity=topic(prefix, device, channel_hygrometer, MeasurementKind.HUMIDITY),
        )

    def for_kind(self, kind: MeasurementKind) -> str:
        return {
            MeasurementKind.TEMPERATURE: self.temperature,
            MeasurementKind.PRESSURE: self.pressure,
            MeasurementKind.HUMIDITY: self.humidity,
        }[kind]
