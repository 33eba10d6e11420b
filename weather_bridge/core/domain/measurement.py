"""Modelo de dominio para una lectura meteorológica."""

from __future__ import annotations

import math
from dataclasses import dataclass

HECTOPASCAL = 100.0


def _round2(value: float) -> float:
    # Halves round away from zero (1.125 -> 1.13), not to even.
    return math.copysign(math.floor(abs(value) * 100.0 + 0.5), value) / 100.0


@dataclass(frozen=True)
class Humidity:
    """Relative humidity in percent, always within [0.0, 100.0]."""

    value: float

    def __post_init__(self):
        if self.value != self.value:  # NaN check
            raise ValueError("Humidity is NaN")
        if self.value > 100.0:
            raise ValueError("Humidity may be at most 100.0%.")
        if self.value < 0.0:
            raise ValueError("Humidity must be at least 0%.")
        object.__setattr__(self, "value", _round2(float(self.value)))

    @staticmethod
    def is_valid(value: float) -> bool:
        if not math.isfinite(value):
            return False
        rounded = _round2(value)
        return 0.0 <= rounded <= 100.0

    def __float__(self) -> float:
        return self.value


@dataclass(frozen=True)
class Measurement:
    """Snapshot of one fetch cycle.

    This is the single value that flows through the pipeline:
    weather source → channel → publish relay → MQTT

    - temperature: kelvin
    - pressure: pascals
    - humidity: relative humidity in percent
    """

    temperature: float
    pressure: float
    humidity: Humidity

    @classmethod
    def create(
        cls,
        temperature_k: float,
        pressure_hpa: float,
        humidity_pct: float,
    ) -> "Measurement":
        """Build from OpenWeatherMap's native units (K, hPa, %)."""
        return cls(
            temperature=float(temperature_k),
            pressure=float(pressure_hpa) * HECTOPASCAL,
            humidity=Humidity(humidity_pct),
        )
