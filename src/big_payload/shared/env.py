"""
Environment variable parsing shared by the producer and consumer configs.

Unset or blank variables fall back to the default; malformed values raise
ConfigurationError naming the variable.
"""

import os

from src.big_payload.shared.errors import ConfigurationError

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _read(name: str) -> str | None:
    value = os.environ.get(name)
    if value is None or value.strip() == "":
        return None
    return value.strip()


def parse_bool_env(name: str, default: bool = False) -> bool:
    """Read a boolean flag; unset means default."""
    value = _read(name)
    if value is None:
        return default
    return value.lower() in _TRUE_VALUES


def parse_int_env(name: str, default: int) -> int:
    """Read an integer; unset means default.

    Raises:
        ConfigurationError: If the value is not an integer
    """
    value = _read(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from e


def parse_float_env(name: str, default: float) -> float:
    """Read a number of seconds or similar; unset means default.

    Raises:
        ConfigurationError: If the value is not a number
    """
    value = _read(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from e
