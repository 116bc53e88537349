"""Shared configuration helpers and dataclasses."""

from .errors import ConfigurationError
from .runtime import env_bool, env_int, env_seconds, env_str, reset_default_values
from .settings import QuiesceSettings

__all__ = [
    "ConfigurationError",
    "QuiesceSettings",
    "env_bool",
    "env_int",
    "env_seconds",
    "env_str",
    "reset_default_values",
]
