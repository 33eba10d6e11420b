"""Test de extremo a extremo: fuente simulada → canal → relay → transporte en memoria."""

import asyncio
import logging
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from conftest import ScriptedWeatherSource
from weather_bridge import app
from weather_bridge.app import FETCHER_TASK, MQTT_LOOP_TASK, PUBLISHER_TASK, run_bridge
from weather_bridge.core.domain import SourceError, TerminalCause, TransportTerminalError
from weather_bridge.core.monitoring import PipelineStats
from weather_bridge.core.pipeline import ErrorPolicy
from weather_bridge.core.transport import InMemoryTransport


class _DisconnectingTransport(InMemoryTransport):
    """Cierra el stream de notificaciones tras N publish completados."""

    def __init__(self, after: int, **kwargs):
        super().__init__(**kwargs)
        self._after = after

    async def publish(self, request):
        await super().publish(request)
        if len(self.completed) == self._after:
            self.end_stream(TerminalCause.NETWORK, "connection reset")


class TestEndToEnd:

    @pytest.mark.asyncio
    async def test_three_cycles_then_stream_end(self, bridge_settings, measurement):
        source = ScriptedWeatherSource([measurement])
        transport = _DisconnectingTransport(after=9)
        stats = PipelineStats()

        outcome = await asyncio.wait_for(
            run_bridge(bridge_settings, source=source, transport=transport, stats=stats),
            timeout=5.0,
        )

        assert outcome.name == MQTT_LOOP_TASK
        assert isinstance(outcome.error, TransportTerminalError)
        assert outcome.error.cause is TerminalCause.NETWORK

        assert transport.payloads()[:9] == ["10.00", "100100.00", "55.1"] * 3
        assert [r.topic for r in transport.published[:3]] == [
            "node/d1/thermometer/0:0/temperature",
            "node/d1/barometer/0:0/pressure",
            "node/d1/hygrometer/0:0/relative-humidity",
        ]
        assert stats.cycles_published >= 3

    @pytest.mark.asyncio
    async def test_abort_policy_ends_with_fetcher(self, bridge_settings):
        from dataclasses import replace

        settings = replace(bridge_settings, error_policy=ErrorPolicy.ABORT)
        source = ScriptedWeatherSource([SourceError('Error code 401 with message "Invalid API key"')])
        transport = InMemoryTransport()

        outcome = await asyncio.wait_for(
            run_bridge(settings, source=source, transport=transport),
            timeout=5.0,
        )

        assert outcome.name == FETCHER_TASK
        assert isinstance(outcome.error, SourceError)
        assert "Invalid API key" in outcome.message
        assert transport.published == []

    @pytest.mark.asyncio
    async def test_publish_failure_ends_with_publisher(self, bridge_settings, measurement):
        source = ScriptedWeatherSource([measurement])
        transport = InMemoryTransport(fail_topics={"node/d1/barometer/0:0/pressure"})

        outcome = await asyncio.wait_for(
            run_bridge(bridge_settings, source=source, transport=transport),
            timeout=5.0,
        )

        assert outcome.name == PUBLISHER_TASK
        assert "publish(es) failed" in outcome.message


class TestRunBridgeCleanup:

    @pytest.mark.asyncio
    async def test_http_client_closed_when_transport_start_fails(self, bridge_settings):
        """Si el transporte MQTT no arranca, el cliente HTTP se cierra igual."""
        client = MagicMock()
        client.aclose = AsyncMock()
        failing_transport = MagicMock()
        failing_transport.start.side_effect = OSError("cannot resolve broker")

        with patch.object(app, "OpenWeatherMapClient", return_value=client), \
                patch.object(app, "MQTTTransport", return_value=failing_transport):
            with pytest.raises(OSError):
                await run_bridge(bridge_settings)

        client.aclose.assert_awaited_once()
        failing_transport.stop.assert_called_once()

    @pytest.mark.asyncio
    async def test_channel_stats_logged(self, bridge_settings, measurement, caplog):
        caplog.set_level(logging.INFO, logger="weather_bridge.app")
        source = ScriptedWeatherSource([measurement])
        transport = _DisconnectingTransport(after=3)

        await asyncio.wait_for(run_bridge(bridge_settings, source=source, transport=transport), timeout=5.0)

        assert "Supervising: Weather fetcher, Publisher task, MQTT loop" in caplog.text
        assert "Channel: {" in caplog.text
