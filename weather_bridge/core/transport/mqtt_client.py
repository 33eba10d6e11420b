"""Cliente MQTT para publicación de lecturas (paho-mqtt).

paho runs its network loop in a background thread and reports through
callbacks. Each callback is turned into a Notification and handed to the
asyncio loop with call_soon_threadsafe, so the transport loop consumes
them as a plain async stream.
"""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator, Callable, Optional

import paho.mqtt.client as mqtt

from ...config import MQTTConnectionSettings
from ..domain.errors import TransportSendError
from ..domain.interfaces import ITransport, PublishRequest
from ..domain.notifications import Notification, NotificationKind, TerminalCause

logger = logging.getLogger(__name__)

# MQTT reason codes reported on disconnect.
RC_UNSPECIFIED_ERROR = 0x80
RC_MALFORMED_PACKET = 0x81
RC_PROTOCOL_ERROR = 0x82
RC_KEEP_ALIVE_TIMEOUT = 0x8D
RC_SESSION_TAKEN_OVER = 0x8E


def classify_disconnect(reason_code) -> TerminalCause:
    """Map a paho disconnect reason code to a TerminalCause."""
    value = getattr(reason_code, "value", reason_code)
    if value == 0:
        return TerminalCause.STREAM_DONE
    if value == RC_KEEP_ALIVE_TIMEOUT:
        return TerminalCause.TIMEOUT
    if value in (RC_MALFORMED_PACKET, RC_PROTOCOL_ERROR, RC_SESSION_TAKEN_OVER):
        return TerminalCause.PROTOCOL_STATE
    if value == RC_UNSPECIFIED_ERROR:
        return TerminalCause.NETWORK
    return TerminalCause.OTHER


def _create_paho_client(client_id: str) -> mqtt.Client:
    return mqtt.Client(
        client_id=client_id,
        protocol=mqtt.MQTTv311,
        callback_api_version=mqtt.CallbackAPIVersion.VERSION2,
    )


class MQTTTransport(ITransport):
    """ITransport sobre paho-mqtt.

    Responsabilidades:
    - Conexión/desconexión al broker
    - Publicación de PublishRequest
    - Traducción de callbacks paho → Notification
    """

    def __init__(
        self,
        settings: MQTTConnectionSettings,
        client_factory: Callable[[str], mqtt.Client] = _create_paho_client,
    ):
        self._settings = settings
        self._client_factory = client_factory
        self._client: Optional[mqtt.Client] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._queue: Optional[asyncio.Queue[Notification]] = None
        self._connected = False

    def start(self) -> None:
        """Connect asynchronously and start paho's network thread.

        Must be called from within the running event loop.
        """
        self._loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue()

        client = self._client_factory(self._settings.client_id)
        client.on_connect = self._on_connect
        client.on_connect_fail = self._on_connect_fail
        client.on_disconnect = self._on_disconnect
        client.on_publish = self._on_publish
        client.on_subscribe = self._on_subscribe
        client.on_unsubscribe = self._on_unsubscribe
        client.on_message = self._on_message

        if self._settings.has_credentials:
            client.username_pw_set(self._settings.username, self._settings.password)

        logger.info(
            "[MQTT] Connecting to %s:%d as %s",
            self._settings.host,
            self._settings.port,
            self._settings.client_id,
        )
        client.connect_async(
            self._settings.host,
            self._settings.port,
            keepalive=self._settings.keepalive,
        )
        client.loop_start()
        self._client = client

    def stop(self) -> None:
        """Detiene el loop de red y desconecta."""
        if self._client is None:
            return
        try:
            self._client.loop_stop()
            self._client.disconnect()
        except Exception as e:
            logger.warning("[MQTT] Disconnect error: %s", e)
        self._client = None
        self._connected = False

    async def publish(self, request: PublishRequest) -> None:
        if self._client is None:
            raise TransportSendError(request.topic, "transport not started")

        info = self._client.publish(request.topic, request.payload, qos=int(request.qos))

        if info.rc == mqtt.MQTT_ERR_SUCCESS:
            return
        # paho keeps QoS>0 messages queued while offline and sends them on connect.
        if info.rc == mqtt.MQTT_ERR_NO_CONN and request.qos > 0:
            logger.debug("[MQTT] Queued while offline: topic=%s mid=%s", request.topic, info.mid)
            return
        raise TransportSendError(request.topic, mqtt.error_string(info.rc))

    async def notifications(self) -> AsyncIterator[Notification]:
        if self._queue is None:
            raise RuntimeError("transport not started")
        while True:
            notification = await self._queue.get()
            yield notification
            if notification.is_terminal:
                return

    @property
    def is_connected(self) -> bool:
        return self._connected

    # ------------------------------------------------------------------
    # paho callbacks (network thread)
    # ------------------------------------------------------------------

    def _emit(self, notification: Notification) -> None:
        if self._loop is None or self._queue is None:
            return
        try:
            self._loop.call_soon_threadsafe(self._queue.put_nowait, notification)
        except RuntimeError:
            # Event loop already closed; nobody is listening anymore.
            logger.debug("[MQTT] Dropped notification after shutdown: %s", notification)

    def _on_connect(self, client, userdata, flags, reason_code, properties=None):
        if reason_code == 0:
            self._connected = True
            logger.info("[MQTT] Connected to broker")
            self._emit(Notification.connected(f"{self._settings.host}:{self._settings.port}"))
        else:
            self._connected = False
            logger.error("[MQTT] Connection refused: %s", reason_code)
            self._emit(Notification.stream_end(
                TerminalCause.PROTOCOL_STATE, f"connection refused: {reason_code}"
            ))

    def _on_connect_fail(self, client, userdata):
        self._connected = False
        logger.error("[MQTT] Connection to %s:%d failed", self._settings.host, self._settings.port)
        self._emit(Notification.stream_end(
            TerminalCause.NETWORK,
            f"cannot connect to {self._settings.host}:{self._settings.port}",
        ))

    def _on_disconnect(self, client, userdata, flags, reason_code, properties=None):
        self._connected = False
        logger.warning("[MQTT] Disconnected (%s)", reason_code)
        self._emit(Notification.stream_end(
            classify_disconnect(reason_code), f"disconnected: {reason_code}"
        ))

    def _on_publish(self, client, userdata, mid, reason_code=None, properties=None):
        self._emit(Notification.ack(NotificationKind.PUBACK, mid))

    def _on_subscribe(self, client, userdata, mid, reason_code_list=None, properties=None):
        self._emit(Notification.ack(NotificationKind.SUBACK, mid))

    def _on_unsubscribe(self, client, userdata, mid, reason_code_list=None, properties=None):
        self._emit(Notification.ack(NotificationKind.UNSUBACK, mid))

    def _on_message(self, client, userdata, msg):
        self._emit(Notification.inbound(msg.topic))
