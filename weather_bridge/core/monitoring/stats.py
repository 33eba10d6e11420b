"""Estadísticas del pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class PipelineStats:
    """Counters shared by the three pipeline tasks.

    Each counter is written by exactly one task; all tasks run on the same
    event loop, so no locking is needed.
    """

    fetch_attempts: int = 0
    fetch_failures: int = 0
    enqueued: int = 0
    cycles_published: int = 0
    publish_failures: int = 0
    notifications: int = 0
    last_fetch_at: float = 0
    started_at: datetime = field(default_factory=_utc_now)

    def __str__(self) -> str:
        return (
            f"Stats: fetched={self.fetch_attempts} fetch_failed={self.fetch_failures} "
            f"enqueued={self.enqueued} published={self.cycles_published} "
            f"publish_failed={self.publish_failures} notifications={self.notifications}"
        )

    def to_dict(self) -> dict:
        return {
            "fetch_attempts": self.fetch_attempts,
            "fetch_failures": self.fetch_failures,
            "enqueued": self.enqueued,
            "cycles_published": self.cycles_published,
            "publish_failures": self.publish_failures,
            "notifications": self.notifications,
            "last_fetch_at": self.last_fetch_at,
            "started_at": self.started_at.isoformat(),
            "fetch_success_rate": self._fetch_success_rate(),
        }

    def _fetch_success_rate(self) -> float:
        if self.fetch_attempts == 0:
            return 1.0
        return (self.fetch_attempts - self.fetch_failures) / self.fetch_attempts
