"""
Sensor Configuration
====================

Loads and saves the sensor fleet configuration (JSON).

File shape:

    {
        "sensors": [
            {
                "name": "A1",
                "location": "Rack-A",
                "min_value": 5,
                "max_value": 55,
                "smoothing_enabled": true,
                "smoothing_window_size": 6,
                "anomaly_detection_enabled": true,
                "anomaly_threshold": 0.8,
                "warning_threshold": 45.0,
                "critical_threshold": 50.0
            }
        ]
    }

A bare top-level list of sensor objects is accepted as well.

Author: Guilherme F. G. Santos
Date: January 2026
License: MIT
"""

from __future__ import annotations

import json
import math
import os
from dataclasses import fields
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Union

from .sensors.state import SensorConfig

DEFAULT_CONFIG_FILE = "sensor_config.json"
CONFIG_ENV_VAR = "SENSOR_SIM_CONFIG"

_NUMERIC_FIELDS = (
    "min_value",
    "max_value",
    "anomaly_threshold",
    "warning_threshold",
    "critical_threshold",
)
_BOOL_FIELDS = ("smoothing_enabled", "anomaly_detection_enabled")
_STR_FIELDS = ("name", "location")
_INT_FIELDS = ("smoothing_window_size",)
_REQUIRED_FIELDS = ("name", "location", "min_value", "max_value")


class ConfigErrorKind(Enum):
    FILE_NOT_FOUND = "file_not_found"
    PARSE_ERROR = "parse_error"
    INVALID = "invalid"


class ConfigError(Exception):
    """Fatal configuration problem; raised at startup only."""

    def __init__(self, kind: ConfigErrorKind, message: str, path: Union[str, Path, None] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.path = str(path) if path is not None else None


def default_config_path() -> Path:
    """SENSOR_SIM_CONFIG if set, else sensor_config.json in the working directory."""
    env = os.getenv(CONFIG_ENV_VAR)
    if env is not None and env.strip():
        return Path(env).expanduser()
    return Path(DEFAULT_CONFIG_FILE)


def _is_number(value: Any) -> bool:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return False
    return math.isfinite(value)


def _parse_sensor(raw: Any, index: int) -> SensorConfig:
    if not isinstance(raw, dict):
        raise ConfigError(
            ConfigErrorKind.PARSE_ERROR,
            f"Failed to deserialize sensor #{index}: expected an object",
        )

    known = {f.name for f in fields(SensorConfig)}
    unknown = set(raw) - known
    if unknown:
        raise ConfigError(
            ConfigErrorKind.PARSE_ERROR,
            f"Failed to deserialize sensor #{index}: unknown keys {sorted(unknown)}",
        )

    for key in _REQUIRED_FIELDS:
        if key not in raw:
            raise ConfigError(
                ConfigErrorKind.PARSE_ERROR,
                f"Failed to deserialize sensor #{index}: missing key '{key}'",
            )

    def mismatch(key: str, expected: str) -> ConfigError:
        return ConfigError(
            ConfigErrorKind.PARSE_ERROR,
            f"Failed to deserialize sensor #{index}: '{key}' must be {expected}, "
            f"got {raw[key]!r}",
        )

    for key in _STR_FIELDS:
        if key in raw and not isinstance(raw[key], str):
            raise mismatch(key, "a string")
    for key in _NUMERIC_FIELDS:
        if key in raw and not _is_number(raw[key]):
            raise mismatch(key, "a finite number")
    for key in _BOOL_FIELDS:
        if key in raw and not isinstance(raw[key], bool):
            raise mismatch(key, "a boolean")
    for key in _INT_FIELDS:
        if key in raw and (not isinstance(raw[key], int) or isinstance(raw[key], bool)):
            raise mismatch(key, "an integer")

    config = SensorConfig(**raw)
    try:
        config.validate()
    except ValueError as e:
        raise ConfigError(ConfigErrorKind.INVALID, f"Invalid sensor #{index}: {e}") from None
    return config


def parse_sensor_configs(raw: Any) -> List[SensorConfig]:
    """Build SensorConfig objects from already-decoded JSON."""
    if isinstance(raw, dict):
        if "sensors" not in raw:
            raise ConfigError(
                ConfigErrorKind.PARSE_ERROR,
                "Failed to deserialize configuration: missing key 'sensors'",
            )
        raw = raw["sensors"]
    if not isinstance(raw, list):
        raise ConfigError(
            ConfigErrorKind.PARSE_ERROR,
            "Failed to deserialize configuration: 'sensors' must be a list",
        )

    configs = [_parse_sensor(item, i) for i, item in enumerate(raw)]

    names = [c.name for c in configs]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise ConfigError(ConfigErrorKind.INVALID, f"Duplicate sensor names: {duplicates}")
    return configs


def load_sensor_configs(path: Union[str, Path]) -> List[SensorConfig]:
    """
    Load the sensor fleet configuration.

    Raises:
        ConfigError: FILE_NOT_FOUND if the file is absent, PARSE_ERROR on
            malformed JSON or type mismatch, INVALID on unusable values
    """
    p = Path(path)
    if not p.is_file():
        raise ConfigError(
            ConfigErrorKind.FILE_NOT_FOUND, "Sensor configuration file not found.", p
        )

    try:
        with p.open(encoding="utf-8") as fp:
            raw = json.load(fp)
    except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
        raise ConfigError(
            ConfigErrorKind.PARSE_ERROR, f"Failed to deserialize {p}: {e}", p
        ) from None

    try:
        return parse_sensor_configs(raw)
    except ConfigError as e:
        e.path = str(p)
        raise


def save_sensor_configs(configs: List[SensorConfig], path: Union[str, Path]) -> None:
    data: Dict[str, Any] = {"sensors": [c.to_dict() for c in configs]}
    with Path(path).open("w", encoding="utf-8") as fp:
        json.dump(data, fp, indent=2)
