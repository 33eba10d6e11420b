"""Tests del modelo de dominio: humedad, unidades, topics, notificaciones y errores."""

import math

import pytest

from weather_bridge.core.domain import (
    Humidity,
    Measurement,
    MeasurementKind,
    Notification,
    NotificationKind,
    PublishError,
    TemperatureUnit,
    TerminalCause,
    Topics,
    TransportSendError,
    TransportTerminalError,
    topic,
)


# =============================================================================
# HUMIDITY / MEASUREMENT
# =============================================================================

class TestHumidity:

    def test_rounds_to_two_decimals(self):
        assert Humidity(55.123).value == 55.12
        assert Humidity(55.126).value == 55.13

    @pytest.mark.parametrize("raw,expected", [(1.125, 1.13), (0.125, 0.13), (10.625, 10.63)])
    def test_halves_round_away_from_zero(self, raw, expected):
        """Los valores .xx5 exactos redondean hacia arriba, no al par."""
        assert Humidity(raw).value == expected

    def test_is_valid_rejects_non_finite(self):
        assert not Humidity.is_valid(float("nan"))
        assert not Humidity.is_valid(float("inf"))

    def test_bounds_are_inclusive(self):
        assert Humidity(0.0).value == 0.0
        assert Humidity(100.0).value == 100.0

    def test_above_100_rejected(self):
        with pytest.raises(ValueError, match="at most 100"):
            Humidity(100.5)

    def test_negative_rejected(self):
        with pytest.raises(ValueError, match="at least 0"):
            Humidity(-0.5)

    def test_nan_rejected(self):
        with pytest.raises(ValueError, match="NaN"):
            Humidity(float("nan"))

    def test_is_valid(self):
        assert Humidity.is_valid(42.0)
        assert not Humidity.is_valid(101.0)
        assert not Humidity.is_valid(-1.0)

    def test_float_conversion(self):
        assert float(Humidity(12.5)) == 12.5


class TestMeasurement:

    def test_create_converts_hectopascal_to_pascal(self):
        m = Measurement.create(283.15, 1001, 55.1)
        assert m.temperature == pytest.approx(283.15)
        assert m.pressure == pytest.approx(100100.0)
        assert m.humidity.value == 55.1

    def test_create_rejects_invalid_humidity(self):
        with pytest.raises(ValueError):
            Measurement.create(283.15, 1001, 120)

    def test_measurement_is_immutable(self):
        m = Measurement.create(283.15, 1001, 55.1)
        with pytest.raises(AttributeError):
            m.temperature = 0.0


# =============================================================================
# TEMPERATURE UNITS
# =============================================================================

class TestTemperatureUnit:

    @pytest.mark.parametrize(
        "unit,kelvin,expected",
        [
            (TemperatureUnit.KELVIN, 283.15, 283.15),
            (TemperatureUnit.CELSIUS, 283.15, 10.0),
            (TemperatureUnit.CELSIUS, 273.15, 0.0),
            (TemperatureUnit.FAHRENHEIT, 273.15, 32.0),
            (TemperatureUnit.FAHRENHEIT, 373.15, 212.0),
        ],
    )
    def test_from_kelvin(self, unit, kelvin, expected):
        assert unit.from_kelvin(kelvin) == pytest.approx(expected)

    @pytest.mark.parametrize("unit", list(TemperatureUnit))
    @pytest.mark.parametrize("kelvin", [0.0, 180.5, 273.15, 310.0, 1000.0])
    def test_round_trip_within_tolerance(self, unit, kelvin):
        assert math.isclose(unit.to_kelvin(unit.from_kelvin(kelvin)), kelvin, abs_tol=1e-4)

    def test_choices(self):
        assert TemperatureUnit.choices() == ["kelvin", "celsius", "fahrenheit"]


# =============================================================================
# TOPICS
# =============================================================================

class TestTopics:

    def test_default_layout(self):
        topics = Topics.build("d1")
        assert topics.temperature == "node/d1/thermometer/0:0/temperature"
        assert topics.pressure == "node/d1/barometer/0:0/pressure"
        assert topics.humidity == "node/d1/hygrometer/0:0/relative-humidity"

    def test_prefix_is_prepended_verbatim(self):
        topics = Topics.build("d1", prefix="home/")
        assert topics.temperature == "home/node/d1/thermometer/0:0/temperature"

    def test_custom_channels(self):
        topics = Topics.build(
            "d1",
            channel_thermometer="1:0",
            channel_barometer="0:1",
            channel_hygrometer="0:2",
        )
        assert topics.temperature == "node/d1/thermometer/1:0/temperature"
        assert topics.pressure == "node/d1/barometer/0:1/pressure"
        assert topics.humidity == "node/d1/hygrometer/0:2/relative-humidity"

    def test_topic_function_without_prefix(self):
        assert topic(None, "dev", "0:0", MeasurementKind.PRESSURE) == "node/dev/barometer/0:0/pressure"

    def test_for_kind(self):
        topics = Topics.build("d1")
        assert topics.for_kind(MeasurementKind.HUMIDITY) == topics.humidity


# =============================================================================
# NOTIFICATIONS / ERRORS
# =============================================================================

class TestNotifications:

    def test_only_stream_end_is_terminal(self):
        assert Notification.stream_end(TerminalCause.NETWORK).is_terminal
        assert not Notification.connected().is_terminal
        assert not Notification.ack(NotificationKind.PUBACK, 3).is_terminal
        assert not Notification.inbound("x/y").is_terminal

    def test_ack_detail_carries_mid(self):
        assert Notification.ack(NotificationKind.PUBACK, 7).detail == "mid=7"

    def test_str(self):
        assert str(Notification.connected()) == "connected"
        assert str(Notification.ack(NotificationKind.PUBACK, 1)) == "puback(mid=1)"
        assert str(Notification.stream_end(TerminalCause.TIMEOUT, "ka")) == "stream_end(timeout: ka)"


class TestErrors:

    @pytest.mark.parametrize(
        "cause,label",
        [
            (TerminalCause.TIMEOUT, "Timeout"),
            (TerminalCause.NETWORK, "Network Error"),
            (TerminalCause.PROTOCOL_STATE, "Mqtt State Error"),
            (TerminalCause.IO, "IO Error"),
            (TerminalCause.STREAM_DONE, "Stream is done"),
            (TerminalCause.OTHER, "Transport Error"),
        ],
    )
    def test_terminal_error_labels(self, cause, label):
        assert str(TransportTerminalError(cause)) == label
        assert str(TransportTerminalError(cause, "x")) == f"{label}: x"

    def test_publish_error_lists_failures(self):
        err = PublishError([TransportSendError("a/b", "nope"), TransportSendError("c/d", "nope")])
        assert len(err.failures) == 2
        assert "2 publish(es) failed" in str(err)
        assert "a/b" in str(err) and "c/d" in str(err)


# =============================================================================
# STATS
# =============================================================================

class TestPipelineStats:

    def test_success_rate(self):
        from weather_bridge.core.monitoring import PipelineStats

        stats = PipelineStats(fetch_attempts=4, fetch_failures=1, cycles_published=3)
        data = stats.to_dict()

        assert data["fetch_success_rate"] == 0.75
        assert data["cycles_published"] == 3
        assert "published=3" in str(stats)

    def test_success_rate_without_attempts(self):
        from weather_bridge.core.monitoring import PipelineStats

        assert PipelineStats().to_dict()["fetch_success_rate"] == 1.0
