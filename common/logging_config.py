from __future__ import annotations

import logging
import sys

# Below DEBUG; used for per-request publish traces.
TRACE = 5
logging.addLevelName(TRACE, "TRACE")


def verbosity_to_level(verbosity: int) -> int:
    """Map the number of -v flags to a logging level."""
    if verbosity <= 0:
        return logging.ERROR
    if verbosity == 1:
        return logging.WARNING
    if verbosity == 2:
        return logging.INFO
    if verbosity == 3:
        return logging.DEBUG
    return TRACE


def configure_logging(verbosity: int = 0) -> None:
    logging.basicConfig(
        level=verbosity_to_level(verbosity),
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )
