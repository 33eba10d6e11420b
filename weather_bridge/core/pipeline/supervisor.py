"""Supervisor: first task to finish ends the whole pipeline.

In steady state none of the supervised tasks should ever finish, so any
completion, with or without an error, is reported as abnormal. The other
tasks are cancelled without draining in-flight work.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaskOutcome:
    """Which task finished first, and how."""
    name: str
    error: Optional[BaseException] = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    @property
    def message(self) -> str:
        if self.error is None:
            return f"{self.name} finished without error"
        return f"{self.name} finished: {type(self.error).__name__}: {self.error}"


class Supervisor:
    """Runs named units of work concurrently until the first one ends.

    Uso:
        supervisor = Supervisor()
        supervisor.add("Weather fetcher", run_fetch_loop(...))
        supervisor.add("Publisher task", relay.run())
        outcome = await supervisor.run()
    """

    def __init__(self):
        self._units: list[tuple[str, Awaitable[None]]] = []

    def add(self, name: str, work: Awaitable[None]) -> None:
        if any(existing == name for existing, _ in self._units):
            raise ValueError(f"task already registered: {name}")
        self._units.append((name, work))

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self._units]

    async def run(self) -> TaskOutcome:
        if not self._units:
            raise RuntimeError("nothing to supervise")

        tasks: dict[asyncio.Task, str] = {}
        for name, work in self._units:
            task = asyncio.ensure_future(work)
            task.set_name(name)
            tasks[task] = name
        self._units = []

        logger.info("[SUPERVISOR] Running %s", ", ".join(tasks.values()))

        try:
            done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()

        # Several tasks may be done in the same loop iteration; report the
        # first one in registration order.
        finished = next(t for t in tasks if t in done)
        outcome = TaskOutcome(tasks[finished], self._error_of(finished))

        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

        logger.error("[SUPERVISOR] %s", outcome.message)
        return outcome

    @staticmethod
    def _error_of(task: asyncio.Task) -> Optional[BaseException]:
        if task.cancelled():
            return asyncio.CancelledError()
        return task.exception()
