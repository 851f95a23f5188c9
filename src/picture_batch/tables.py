from __future__ import annotations

from pathlib import Path
from typing import Any

from picture_batch.errors import ConfigurationError


def as_dict_table(value: Any, name: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigurationError(f"config: [{name}] must be a TOML table")
    return value


def as_table_list(value: Any, name: str) -> list[dict[str, Any]]:
    if value is None:
        return []
    if isinstance(value, dict):
        return [value]
    if not isinstance(value, list) or not all(isinstance(x, dict) for x in value):
        raise ConfigurationError(f"config: [[{name}]] must be an array of tables")
    return value


def get_path(table: dict[str, Any], key: str, name: str) -> Path | None:
    value = table.get(key)
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise ConfigurationError(f"config: {name} must be a non-empty string path")
    return Path(value)


def get_bool(table: dict[str, Any], key: str, default: bool) -> bool:
    value = table.get(key, default)
    if not isinstance(value, bool):
        raise ConfigurationError(f"config: {key} must be a bool")
    return value


def get_int(table: dict[str, Any], key: str, default: int) -> int:
    value = table.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"config: {key} must be an int")
    return value


def get_float(table: dict[str, Any], key: str, default: float) -> float:
    value = table.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"config: {key} must be a number")
    return float(value)


def get_str(table: dict[str, Any], key: str, default: str) -> str:
    value = table.get(key, default)
    if not isinstance(value, str):
        raise ConfigurationError(f"config: {key} must be a string")
    return value


def get_optional_str(table: dict[str, Any], key: str) -> str | None:
    value = table.get(key)
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise ConfigurationError(f"config: {key} must be a non-empty string")
    return value


def get_str_list(table: dict[str, Any], key: str, default: tuple[str, ...]) -> tuple[str, ...]:
    value = table.get(key)
    if value is None:
        return default
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, list) or not all(isinstance(x, str) for x in value):
        raise ConfigurationError(f"config: {key} must be a list of strings")
    return tuple(value)


def get_size(table: dict[str, Any], key: str, default: str) -> str:
    """
    Returns a size as text: either a pixel count ("120") or a percentage ("50%").
    TOML integers are accepted as pixel counts.
    """
    value = table.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise ConfigurationError(f"config: {key} must be an int or a string like '50%'")
    return str(value)
