"""Domain layer - Modelos, contratos y errores."""

from .errors import (
    BridgeError,
    PublishError,
    QueueClosedError,
    SourceError,
    TransportSendError,
    TransportTerminalError,
)
from .interfaces import ITransport, IWeatherSource, PublishRequest, QoS
from .measurement import Humidity, Measurement
from .notifications import Notification, NotificationKind, TerminalCause
from .topics import MeasurementKind, Topics, topic
from .units import TemperatureUnit

__all__ = [
    "BridgeError",
    "PublishError",
    "QueueClosedError",
    "SourceError",
    "TransportSendError",
    "TransportTerminalError",
    "ITransport",
    "IWeatherSource",
    "PublishRequest",
    "QoS",
    "Humidity",
    "Measurement",
    "Notification",
    "NotificationKind",
    "TerminalCause",
    "MeasurementKind",
    "Topics",
    "topic",
    "TemperatureUnit",
]
