"""Configuration for the status reader.

Settings are layered, lowest priority first:

1. Built-in defaults
2. YAML file (``--config PATH`` or ``$VSTAT_CONFIG``)
3. Command-line flags

Example YAML::

    region: murderous
    json_mode: true
    loop_ms: 500
    filename: /run/vstat/status.json
    vid: "0x534d"
    pid: "0x2109"
    exec_helper: ["ms-exec", "--device", "0"]
"""

from __future__ import annotations

import os
import shlex
from dataclasses import dataclass, fields, replace
from typing import Any, Mapping, Optional

import yaml

from .decoders import DEFAULT_DECODER, resolve_decoder_name
from .errors import ConfigError
from .file_utils import read_yaml_file
from .usb_hal import DEFAULT_PID, DEFAULT_VID

ENV_CONFIG = "VSTAT_CONFIG"


@dataclass(frozen=True)
class StatusConfig:
    """Resolved settings for one ``status`` run."""

    region: str = DEFAULT_DECODER
    json_mode: bool = False
    loop_ms: int = 0
    filename: Optional[str] = None
    vid: int = DEFAULT_VID
    pid: int = DEFAULT_PID
    exec_helper: tuple[str, ...] = ()


_FIELD_NAMES = frozenset(f.name for f in fields(StatusConfig))


def _parse_int(key: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{key}: expected an integer, got {value!r}")
    if isinstance(value, int):
        return value
    try:
        return int(str(value), 0)
    except ValueError:
        raise ConfigError(f"{key}: expected an integer, got {value!r}") from None


def parse_usb_id(key: str, value: Any) -> int:
    """USB IDs are hex by convention: '534d', '0x534d' and 0x534D are all accepted."""
    if isinstance(value, str):
        try:
            result = int(value, 16)
        except ValueError:
            raise ConfigError(f"{key}: invalid USB id {value!r}") from None
    else:
        result = _parse_int(key, value)
    if not 0 <= result <= 0xFFFF:
        raise ConfigError(f"{key}: USB id out of range: {value!r}")
    return result


def _parse_helper(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return tuple(shlex.split(value))
    if isinstance(value, (list, tuple)):
        return tuple(str(v) for v in value)
    raise ConfigError(f"exec_helper: expected a string or list, got {value!r}")


def _normalize(values: Mapping[str, Any]) -> dict[str, Any]:
    """Validate raw settings and convert them to field types."""
    unknown = sorted(set(values) - _FIELD_NAMES)
    if unknown:
        raise ConfigError(f"Unknown config key(s): {', '.join(unknown)}")

    out: dict[str, Any] = {}
    for key, value in values.items():
        if key == "region":
            out[key] = "" if value is None else str(value)
        elif key == "json_mode":
            out[key] = bool(value)
        elif key == "loop_ms":
            loop_ms = _parse_int(key, value)
            if loop_ms < 0:
                raise ConfigError(f"loop_ms must be >= 0, got {loop_ms}")
            out[key] = loop_ms
        elif key == "filename":
            out[key] = str(value) if value else None
        elif key in ("vid", "pid"):
            out[key] = parse_usb_id(key, value)
        elif key == "exec_helper":
            out[key] = _parse_helper(value)
    return out


def load_config(
    path: Optional[str] = None,
    overrides: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> StatusConfig:
    """Build a StatusConfig from the YAML file and flag overrides.

    Args:
        path: YAML config file. Falls back to ``$VSTAT_CONFIG`` if None.
        overrides: Flag values; entries that are None are ignored.
        environ: Environment mapping (os.environ if None).

    Raises:
        ConfigError: On unreadable files, unknown keys or bad values.
    """
    env = os.environ if environ is None else environ
    path = path or env.get(ENV_CONFIG) or None

    config = StatusConfig()
    if path:
        try:
            file_values = read_yaml_file(path)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot load config {path}: {e}") from e
        config = replace(config, **_normalize(file_values))

    if overrides:
        given = {k: v for k, v in overrides.items() if v is not None}
        config = replace(config, **_normalize(given))

    return replace(config, region=resolve_decoder_name(config.region))
