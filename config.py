"""Configuration loader — reads service limits from environment variables.

Supports per-surface overrides with global fallback:
    CAPTIONLENS_{SURFACE}_{SUFFIX} → CAPTIONLENS_{SUFFIX} → default
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_MAX_PAYLOAD_BYTES = 20_000_000
DEFAULT_CACHE_TTL_SECONDS = 600.0
DEFAULT_CACHE_MAX_ENTRIES = 128
DEFAULT_LOG_LEVEL = "WARNING"


class ConfigError(Exception):
    """An environment variable holds a value that cannot be used."""


@dataclass(frozen=True)
class ServiceConfig:
    max_payload_bytes: int = DEFAULT_MAX_PAYLOAD_BYTES
    cache_ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS
    cache_max_entries: int = DEFAULT_CACHE_MAX_ENTRIES
    log_level: str = DEFAULT_LOG_LEVEL


def _env(key: str, surface_key: Optional[str] = None) -> str:
    """Resolve an env var with optional surface-specific override.

    Checks CAPTIONLENS_{SURFACE}_{SUFFIX} first, then CAPTIONLENS_{SUFFIX}.
    """
    if surface_key:
        val = os.environ.get(f"CAPTIONLENS_{surface_key}_{key}", "").strip()
        if val:
            return val
    return os.environ.get(f"CAPTIONLENS_{key}", "").strip()


def _non_negative(key: str, raw: str, cast):
    try:
        value = cast(raw)
    except ValueError as exc:
        raise ConfigError(f"CAPTIONLENS_{key} must be a number, got {raw!r}") from exc
    if value < 0:
        raise ConfigError(f"CAPTIONLENS_{key} must not be negative, got {raw!r}")
    return value


def load_config(surface_key: Optional[str] = None) -> ServiceConfig:
    """Build the service configuration from environment variables.

    Args:
        surface_key: Optional surface identifier ("CLI" or "MCP"). When set,
                     surface-specific env vars take priority over global ones.

    Environment variables (global):
        CAPTIONLENS_MAX_PAYLOAD_BYTES — largest accepted payload, UTF-8 bytes
        CAPTIONLENS_CACHE_TTL         — seconds a parsed result stays cached
        CAPTIONLENS_CACHE_MAX_ENTRIES — cache size bound
        CAPTIONLENS_LOG_LEVEL         — logging level name (e.g. INFO, DEBUG)

    Blank values fall back to the defaults.

    Raises:
        ConfigError: If a numeric variable is not a non-negative number.
    """
    opts: dict = {}

    max_bytes = _env("MAX_PAYLOAD_BYTES", surface_key)
    if max_bytes:
        opts["max_payload_bytes"] = _non_negative("MAX_PAYLOAD_BYTES", max_bytes, int)

    ttl = _env("CACHE_TTL", surface_key)
    if ttl:
        opts["cache_ttl_seconds"] = _non_negative("CACHE_TTL", ttl, float)

    max_entries = _env("CACHE_MAX_ENTRIES", surface_key)
    if max_entries:
        opts["cache_max_entries"] = _non_negative("CACHE_MAX_ENTRIES", max_entries, int)

    log_level = _env("LOG_LEVEL", surface_key)
    if log_level:
        opts["log_level"] = log_level.upper()

    return ServiceConfig(**opts)
