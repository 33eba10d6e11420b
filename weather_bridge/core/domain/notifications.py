"""Notificaciones producidas por el loop de conexión MQTT."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class NotificationKind(Enum):
    """Kinds of events surfaced by a transport connection."""
    CONNECTED = "connected"
    PUBLISH = "publish"        # inbound message; we never subscribe, so unexpected
    PUBACK = "puback"
    PUBREC = "pubrec"
    PUBCOMP = "pubcomp"
    SUBACK = "suback"
    UNSUBACK = "unsuback"
    STREAM_END = "stream_end"  # terminal


class TerminalCause(Enum):
    """Why a notification stream ended."""
    TIMEOUT = "timeout"
    NETWORK = "network"
    PROTOCOL_STATE = "protocol_state"
    IO = "io"
    STREAM_DONE = "stream_done"
    OTHER = "other"


@dataclass(frozen=True)
class Notification:
    kind: NotificationKind
    detail: str = ""
    cause: Optional[TerminalCause] = None

    @property
    def is_terminal(self) -> bool:
        return self.kind is NotificationKind.STREAM_END

    @classmethod
    def connected(cls, detail: str = "") -> "Notification":
        return cls(NotificationKind.CONNECTED, detail)

    @classmethod
    def inbound(cls, topic: str) -> "Notification":
        return cls(NotificationKind.PUBLISH, topic)

    @classmethod
    def ack(cls, kind: NotificationKind, mid: int) -> "Notification":
        return cls(kind, f"mid={mid}")

    @classmethod
    def stream_end(cls, cause: TerminalCause, detail: str = "") -> "Notification":
        return cls(NotificationKind.STREAM_END, detail, cause)

    def __str__(self) -> str:
        if self.is_terminal:
            return f"{self.kind.value}({self.cause.value if self.cause else '?'}: {self.detail})"
        return f"{self.kind.value}({self.detail})" if self.detail else self.kind.value
