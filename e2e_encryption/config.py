"""
Runtime configuration.

Settings come from environment variables, optionally loaded from a ``.env``
file:

- ``E2E_OFFLOAD_ENGINE``: run engine calls in a worker thread (default: false)
- ``E2E_LOG_LEVEL``: log level for ``configure_logging`` (default: WARNING)
- ``E2E_BENCHMARK_MESSAGES``: default message count for the benchmark (default: 1000)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Union

from dotenv import load_dotenv

from .errors import ConfigError

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}

DEFAULT_BENCHMARK_MESSAGES = 1000


@dataclass(frozen=True)
class Settings:
    """Library settings."""

    offload_engine: bool = False
    log_level: str = "WARNING"
    benchmark_messages: int = DEFAULT_BENCHMARK_MESSAGES

    @classmethod
    def from_mapping(cls, env: Mapping[str, str]) -> Settings:
        """
        Build settings from an environment-like mapping.

        Raises:
            ConfigError: If a value cannot be parsed
        """
        return cls(
            offload_engine=_parse_bool(env, "E2E_OFFLOAD_ENGINE", False),
            log_level=_parse_log_level(env, "E2E_LOG_LEVEL", "WARNING"),
            benchmark_messages=_parse_positive_int(
                env, "E2E_BENCHMARK_MESSAGES", DEFAULT_BENCHMARK_MESSAGES
            ),
        )


def load_settings(env_file: Optional[Union[str, Path]] = None) -> Settings:
    """
    Load settings from the process environment.

    Args:
        env_file: Optional ``.env`` file to load first; variables already
            set in the environment take precedence

    Returns:
        Parsed Settings

    Raises:
        ConfigError: If a variable has an invalid value
    """
    if env_file is not None:
        load_dotenv(env_file)
    else:
        load_dotenv()
    return Settings.from_mapping(os.environ)


def configure_logging(settings: Settings) -> None:
    """Install a basic stderr handler at the configured level."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _parse_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigError(f"Invalid boolean for {name}: {raw!r}")


def _parse_log_level(env: Mapping[str, str], name: str, default: str) -> str:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    level = raw.strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigError(f"Invalid log level for {name}: {raw!r}")
    return level


def _parse_positive_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ConfigError(f"Invalid integer for {name}: {raw!r}", cause=e)
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")
    return value
