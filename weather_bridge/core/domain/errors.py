"""Error taxonomy of the bridge.

- SourceError: the weather source failed (policy-gated in the fetch loop)
- QueueClosedError: the internal channel was closed (always fatal)
- TransportSendError: the transport refused one publish request
- PublishError: one or more of a cycle's publishes failed (always fatal)
- TransportTerminalError: the notification stream ended (always fatal)
"""

from __future__ import annotations

from typing import Sequence

from .notifications import TerminalCause


class BridgeError(Exception):
    """Base class for all bridge errors."""


class SourceError(BridgeError):
    """Weather source failed: network, parse or upstream-reported error."""


class QueueClosedError(BridgeError):
    """The measurement channel was closed unexpectedly."""

    def __init__(self, message: str = "measurement channel closed"):
        super().__init__(message)


class TransportSendError(BridgeError):
    """The transport could not accept a publish request."""

    def __init__(self, topic: str, reason: str):
        super().__init__(f"publish to {topic} failed: {reason}")
        self.topic = topic
        self.reason = reason


class PublishError(BridgeError):
    """At least one of the concurrent publishes of a cycle failed."""

    def __init__(self, failures: Sequence[BaseException]):
        self.failures = list(failures)
        details = "; ".join(str(f) for f in self.failures)
        super().__init__(f"{len(self.failures)} publish(es) failed: {details}")


class TransportTerminalError(BridgeError):
    """The transport's notification stream ended."""

    def __init__(self, cause: TerminalCause, detail: str = ""):
        self.cause = cause
        self.detail = detail
        super().__init__(self._describe())

    def _describe(self) -> str:
        labels = {
            TerminalCause.TIMEOUT: "Timeout",
            TerminalCause.NETWORK: "Network Error",
            TerminalCause.PROTOCOL_STATE: "Mqtt State Error",
            TerminalCause.IO: "IO Error",
            TerminalCause.STREAM_DONE: "Stream is done",
            TerminalCause.OTHER: "Transport Error",
        }
        label = labels[self.cause]
        return f"{label}: {self.detail}" if self.detail else label
