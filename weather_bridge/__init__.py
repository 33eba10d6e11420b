"""Weather bridge: OpenWeatherMap current conditions → MQTT."""

__version__ = "0.1.0"
