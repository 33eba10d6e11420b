"""Temperature display units."""

from __future__ import annotations

from enum import Enum

ZERO_CELSIUS_K = 273.15


class TemperatureUnit(str, Enum):
    """Unidad de salida para la temperatura publicada."""
    KELVIN = "kelvin"
    CELSIUS = "celsius"
    FAHRENHEIT = "fahrenheit"

    def from_kelvin(self, kelvin: float) -> float:
        if self is TemperatureUnit.CELSIUS:
            return kelvin - ZERO_CELSIUS_K
        if self is TemperatureUnit.FAHRENHEIT:
            return (kelvin - ZERO_CELSIUS_K) * 9.0 / 5.0 + 32.0
        return kelvin

    def to_kelvin(self, value: float) -> float:
        if self is TemperatureUnit.CELSIUS:
            return value + ZERO_CELSIUS_K
        if self is TemperatureUnit.FAHRENHEIT:
            return (value - 32.0) * 5.0 / 9.0 + ZERO_CELSIUS_K
        return value

    @classmethod
    def choices(cls) -> list[str]:
        return [u.value for u in cls]
