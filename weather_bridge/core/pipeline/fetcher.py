"""Fetch loop: polls the weather source on a fixed period.

Flujo:
  timer tick → IWeatherSource.fetch_current() → BoundedChannel.put()

The first fetch happens one full period after start. On failure the
ErrorPolicy decides whether the loop logs and waits for the next tick
(continue) or ends by raising the error (abort).
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..domain.errors import SourceError
from ..domain.interfaces import IWeatherSource
from ..domain.measurement import Measurement
from ..monitoring.stats import PipelineStats
from .channel import BoundedChannel

logger = logging.getLogger(__name__)


class ErrorPolicy(str, Enum):
    """Qué hacer cuando falla una consulta al proveedor."""
    CONTINUE = "continue"
    ABORT = "abort"


@dataclass(frozen=True)
class FetchSettings:
    """Configuración inmutable del fetch loop."""
    period: float
    error_policy: ErrorPolicy = ErrorPolicy.CONTINUE

    def __post_init__(self):
        if not self.period > 0:
            raise ValueError(f"period must be positive, got {self.period!r}")


async def run_fetch_loop(
    settings: FetchSettings,
    source: IWeatherSource,
    channel: BoundedChannel[Measurement],
    stats: Optional[PipelineStats] = None,
) -> None:
    """Run until aborted by a source error or a closed channel.

    Raises:
        SourceError: first fetch failure under ErrorPolicy.ABORT
        QueueClosedError: the channel was closed
    """
    stats = stats or PipelineStats()
    period = settings.period
    loop = asyncio.get_running_loop()
    deadline = loop.time() + period

    logger.info(
        "[FETCHER] Started period=%.3fs policy=%s",
        period,
        settings.error_policy.value,
    )

    while True:
        delay = deadline - loop.time()
        if delay > 0:
            await asyncio.sleep(delay)

        # Fixed cadence; ticks missed while a fetch or a put overran are
        # skipped rather than fired in a burst.
        deadline += period
        now = loop.time()
        if deadline <= now:
            deadline += ((now - deadline) // period + 1) * period

        stats.fetch_attempts += 1
        stats.last_fetch_at = time.time()

        try:
            measurement = await source.fetch_current()
        except Exception as e:
            stats.fetch_failures += 1
            if settings.error_policy is ErrorPolicy.ABORT:
                logger.error("[FETCHER] Fetch failed, aborting: %s", e)
                if isinstance(e, SourceError):
                    raise
                raise SourceError(str(e)) from e
            logger.error("[FETCHER] Fetch failed (attempt %d): %s", stats.fetch_attempts, e)
            continue

        logger.debug(
            "[FETCHER] Fetched temperature=%.2fK pressure=%.2fPa humidity=%.2f%%",
            measurement.temperature,
            measurement.pressure,
            measurement.humidity.value,
        )

        if channel.is_full:
            logger.warning(
                "[FETCHER] Channel full (%d), waiting for the publisher",
                channel.maxsize,
            )
        await channel.put(measurement)
        stats.enqueued += 1
