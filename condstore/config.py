from __future__ import annotations

import os


_TRUTHY = {"1", "true", "yes", "on"}


def get_redis_url() -> str:
    return os.environ.get("REDIS_URL", "redis://localhost:6379/0")


def strict_prefixes_enabled() -> bool:
    """Whether overlapping provider registrations raise instead of logging a warning."""

    return os.environ.get("CONDSTORE_STRICT_PREFIXES", "").strip().casefold() in _TRUTHY


def get_log_level() -> str:
    return os.environ.get("CONDSTORE_LOG_LEVEL", "INFO").strip().upper() or "INFO"
