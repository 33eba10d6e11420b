"""Pipeline - fetcher, publisher, loop MQTT y supervisor."""

from .channel import BoundedChannel
from .fetcher import ErrorPolicy, FetchSettings, run_fetch_loop
from .publisher import PublishRelay, format_payloads
from .supervisor import Supervisor, TaskOutcome
from .transport_loop import run_transport_loop

__all__ = [
    "BoundedChannel",
    "ErrorPolicy",
    "FetchSettings",
    "run_fetch_loop",
    "PublishRelay",
    "format_payloads",
    "Supervisor",
    "TaskOutcome",
    "run_transport_loop",
]
