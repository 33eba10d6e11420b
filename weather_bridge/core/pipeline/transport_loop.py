"""Transport loop: drains the connection's notification stream.

Non-terminal notifications are observability only. The loop has no
successful exit: a terminal notification, or the stream simply ending,
raises TransportTerminalError.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..domain.errors import TransportTerminalError
from ..domain.interfaces import ITransport
from ..domain.notifications import NotificationKind, TerminalCause
from ..monitoring.stats import PipelineStats

logger = logging.getLogger(__name__)


async def run_transport_loop(
    transport: ITransport,
    stats: Optional[PipelineStats] = None,
) -> None:
    stats = stats or PipelineStats()

    async for notification in transport.notifications():
        stats.notifications += 1

        if notification.is_terminal:
            cause = notification.cause or TerminalCause.OTHER
            logger.error("[MQTT_LOOP] Stream ended: %s", notification)
            raise TransportTerminalError(cause, notification.detail)

        if notification.kind is NotificationKind.CONNECTED:
            logger.info("[MQTT_LOOP] Connected %s", notification.detail)
        elif notification.kind is NotificationKind.PUBLISH:
            logger.debug("[MQTT_LOOP] Unexpected inbound publish: %s", notification.detail)
        else:
            logger.debug("[MQTT_LOOP] %s", notification)

    raise TransportTerminalError(TerminalCause.STREAM_DONE, "notification stream ended")
