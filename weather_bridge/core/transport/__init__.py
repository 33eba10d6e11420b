"""Transport - conexión MQTT (paho) y transporte en memoria."""

from .memory import InMemoryTransport
from .mqtt_client import MQTTTransport, classify_disconnect

__all__ = ["InMemoryTransport", "MQTTTransport", "classify_disconnect"]
