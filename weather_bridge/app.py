"""Bridge - punto de entrada del pipeline.

Flujo:
  OpenWeatherMap → fetch loop → BoundedChannel(10) → publish relay → MQTT
  MQTT notifications → transport loop → supervisor (failure signal only)
"""

from __future__ import annotations

import logging
from typing import Optional

from .config import CHANNEL_CAPACITY, BridgeSettings
from .core.domain.interfaces import ITransport, IWeatherSource
from .core.domain.measurement import Measurement
from .core.monitoring.stats import PipelineStats
from .core.pipeline.channel import BoundedChannel
from .core.pipeline.fetcher import run_fetch_loop
from .core.pipeline.publisher import PublishRelay
from .core.pipeline.supervisor import Supervisor, TaskOutcome
from .core.pipeline.transport_loop import run_transport_loop
from .core.transport.mqtt_client import MQTTTransport
from .weather.client import OpenWeatherMapClient

logger = logging.getLogger(__name__)

FETCHER_TASK = "Weather fetcher"
PUBLISHER_TASK = "Publisher task"
MQTT_LOOP_TASK = "MQTT loop"


async def run_bridge(
    settings: BridgeSettings,
    source: Optional[IWeatherSource] = None,
    transport: Optional[ITransport] = None,
    stats: Optional[PipelineStats] = None,
) -> TaskOutcome:
    """Run the pipeline until its first task ends and report that task.

    ``source`` and ``transport`` default to OpenWeatherMap and paho-mqtt;
    passing them in skips creating (and closing) the defaults.
    """
    stats = stats or PipelineStats()
    topics = settings.publishing.topics()
    channel: BoundedChannel[Measurement] = BoundedChannel(maxsize=CHANNEL_CAPACITY)

    owned_client: Optional[OpenWeatherMapClient] = None
    owned_transport: Optional[MQTTTransport] = None
    try:
        if source is None:
            owned_client = OpenWeatherMapClient(
                settings.location,
                settings.api_key,
                base_url=settings.api_base,
            )
            source = owned_client

        if transport is None:
            owned_transport = MQTTTransport(settings.mqtt)
            owned_transport.start()
            transport = owned_transport

        relay = PublishRelay(channel, topics, settings.units, transport, stats)

        supervisor = Supervisor()
        supervisor.add(FETCHER_TASK, run_fetch_loop(settings.fetch_settings(), source, channel, stats))
        supervisor.add(PUBLISHER_TASK, relay.run())
        supervisor.add(MQTT_LOOP_TASK, run_transport_loop(transport, stats))
        logger.info("[BRIDGE] Supervising: %s", ", ".join(supervisor.names))

        outcome = await supervisor.run()
    finally:
        if owned_client is not None:
            await owned_client.aclose()
        if owned_transport is not None:
            owned_transport.stop()
        logger.info("[BRIDGE] %s", stats)
        logger.info("[BRIDGE] Channel: %s", channel.stats())

    return outcome
