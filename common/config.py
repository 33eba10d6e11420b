from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

ENV_FILE_VAR = "WEATHER_BRIDGE_ENV_FILE"


def _default_env_file() -> str:
    return str(Path.cwd() / ".env")


def load_env_file() -> Optional[str]:
    """Load the env file (if present) without overriding real environment variables.

    Returns the path that was loaded, or None.
    """
    env_file = os.getenv(ENV_FILE_VAR, _default_env_file())
    if env_file and Path(env_file).exists():
        load_dotenv(env_file, override=False)
        return env_file
    return None


def env_str(name: str, default: Optional[str] = None) -> Optional[str]:
    # Empty values count as unset, same as a missing variable.
    value = os.getenv(name)
    return value if value else default


def env_bool(name: str, default: bool = False) -> bool:
    value = env_str(name)
    if value is None:
        return default
    return value.strip().lower() in ("true", "1", "yes", "on")
