"""Bridge configuration.

Loaded once before the pipeline starts and immutable for the lifetime of
the process.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .core.domain.topics import Topics
from .core.domain.units import TemperatureUnit
from .core.pipeline.fetcher import ErrorPolicy, FetchSettings
from .weather.location import LocationSpecifier

DEFAULT_INTERVAL_SECS = 600  # OpenWeatherMap updates at most every 10 minutes
DEFAULT_CHANNEL = "0:0"
CHANNEL_CAPACITY = 10


@dataclass(frozen=True)
class MQTTConnectionSettings:
    host: str
    port: int = 1883
    client_id: str = "weather"
    username: Optional[str] = None
    password: Optional[str] = None
    keepalive: int = 30

    def __post_init__(self):
        if not 0 < self.port < 65536:
            raise ValueError(f"invalid MQTT port: {self.port}")
        if self.keepalive < 0:
            raise ValueError(f"invalid keepalive: {self.keepalive}")

    @property
    def has_credentials(self) -> bool:
        return bool(self.username) and bool(self.password)


@dataclass(frozen=True)
class PublishingSettings:
    """Identificación del agente en los topics publicados."""
    device_name: str
    topic_prefix: Optional[str] = None
    channel_thermometer: str = DEFAULT_CHANNEL
    channel_barometer: str = DEFAULT_CHANNEL
    channel_hygrometer: str = DEFAULT_CHANNEL

    def topics(self) -> Topics:
        return Topics.build(
            device=self.device_name,
            prefix=self.topic_prefix,
            channel_thermometer=self.channel_thermometer,
            channel_barometer=self.channel_barometer,
            channel_hygrometer=self.channel_hygrometer,
        )


@dataclass(frozen=True)
class BridgeSettings:
    api_key: str
    location: LocationSpecifier
    publishing: PublishingSettings
    mqtt: MQTTConnectionSettings
    units: TemperatureUnit = TemperatureUnit.CELSIUS
    interval_secs: float = DEFAULT_INTERVAL_SECS
    error_policy: ErrorPolicy = ErrorPolicy.CONTINUE
    api_base: Optional[str] = None
    verbosity: int = 0

    def __post_init__(self):
        if not self.interval_secs > 0:
            raise ValueError(f"interval must be positive, got {self.interval_secs!r}")

    def fetch_settings(self) -> FetchSettings:
        return FetchSettings(period=float(self.interval_secs), error_policy=self.error_policy)
