"""Configuration helpers for loading environment variables.

This module ensures that variables defined in a project-level ``.env`` file
are loaded before attempting to access them.  Consumers should rely on the
``get_env`` helper (or :meth:`NebulaSettings.from_env`) instead of using
:func:`os.getenv` directly so that the configuration is loaded in a single,
well-defined place.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import List, Optional, Tuple

from dotenv import load_dotenv


@lru_cache(maxsize=1)
def _load_environment() -> None:
    """Load environment variables from the project's ``.env`` file.

    The loader first attempts to read ``.env`` from the repository root.  If the
    file does not exist we still call :func:`load_dotenv` to allow the default
    discovery mechanism to run.  Subsequent calls are cached so the file is only
    read once per process.
    """

    project_root = Path(__file__).resolve().parents[1]
    env_path = project_root / ".env"

    if env_path.exists():
        load_dotenv(env_path, override=False)
    else:
        load_dotenv(override=False)


def get_env(key: str, default: Optional[str] = None) -> Optional[str]:
    """Return the value for ``key`` from the environment.

    Parameters
    ----------
    key:
        The name of the environment variable to look up.
    default:
        The value to return when ``key`` is not present.
    """

    _load_environment()
    return os.environ.get(key, default)


def _get_int(key: str, default: int) -> int:
    raw = get_env(key)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{key} must be an integer, got {raw!r}") from exc


def parse_addresses(raw: str) -> List[Tuple[str, int]]:
    """Parse ``host:port[,host:port]``; a missing port defaults to 9669."""

    addresses: List[Tuple[str, int]] = []
    for chunk in raw.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        host, _, port = chunk.partition(":")
        addresses.append((host, int(port) if port else 9669))
    return addresses


@dataclass
class NebulaSettings:
    """Connection settings for the NebulaGraph service."""

    addresses: List[Tuple[str, int]] = field(default_factory=lambda: [("127.0.0.1", 9669)])
    username: str = "root"
    password: str = "nebula"
    space: str = "context"
    max_conn_size: int = 10
    min_conn_size: int = 1
    timeout_ms: int = 1000
    default_limit: int = 100

    @classmethod
    def from_env(cls) -> "NebulaSettings":
        defaults = cls()
        addresses = parse_addresses(get_env("NEBULA_ADDRESSES", "") or "") or defaults.addresses
        return cls(
            addresses=addresses,
            username=get_env("NEBULA_USER", defaults.username) or defaults.username,
            password=get_env("NEBULA_PASSWORD", defaults.password) or defaults.password,
            space=get_env("NEBULA_SPACE", defaults.space) or defaults.space,
            max_conn_size=_get_int("NEBULA_MAX_CONN", defaults.max_conn_size),
            min_conn_size=_get_int("NEBULA_MIN_CONN", defaults.min_conn_size),
            timeout_ms=_get_int("NEBULA_TIMEOUT", defaults.timeout_ms),
            default_limit=_get_int("MDGRAPH_DEFAULT_LIMIT", defaults.default_limit),
        )


__all__ = ["NebulaSettings", "get_env", "parse_addresses"]
