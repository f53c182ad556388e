"""Configuration loading and management."""

from __future__ import annotations

import os
import shlex
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from daemonprobe.core.deadline import DEFAULT_TIMEOUT

DEFAULT_PS_COMMAND = "ps -eo stat,uid,ppid,comm,args"

ENV_PREFIX = "DAEMONPROBE_"
CONFIG_ENV_VAR = "DAEMONPROBE_CONFIG"


@dataclass(slots=True)
class ProbeConfig:
    """Merged configuration from all sources.

    Priority: CLI args > env vars > config file > defaults
    """

    timeout: float = DEFAULT_TIMEOUT
    ps_command: str = DEFAULT_PS_COMMAND
    label: str = ""
    debug: bool = False
    log_json: bool = False


def load_yaml_config(path: Path) -> dict[str, Any]:
    """Load a YAML config file, returning empty dict if not found."""
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        return data if isinstance(data, dict) else {}
    except (yaml.YAMLError, OSError):
        return {}


def _env_overrides() -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    for f in fields(ProbeConfig):
        raw = os.environ.get(f"{ENV_PREFIX}{f.name.upper()}")
        if raw is not None:
            overrides[f.name] = raw
    return overrides


def _coerce(value: Any, default: Any) -> Any:
    """Convert ``value`` to the type of ``default``; None if impossible."""
    if isinstance(default, bool):
        if isinstance(value, bool):
            return value
        text = str(value).strip().lower()
        if text in {"1", "true", "yes", "on"}:
            return True
        if text in {"0", "false", "no", "off", ""}:
            return False
        return None
    if isinstance(default, float):
        try:
            number = float(value)
        except (TypeError, ValueError):
            return None
        return number if number > 0 else None
    if isinstance(default, str):
        if isinstance(value, list):
            return shlex.join(str(part) for part in value)
        return str(value)
    return value


def _apply_dict(config: ProbeConfig, data: dict[str, Any]) -> None:
    """Apply known keys from ``data``; unknown keys and bad values are ignored."""
    for f in fields(ProbeConfig):
        if f.name not in data or data[f.name] is None:
            continue
        value = _coerce(data[f.name], getattr(config, f.name))
        if value is not None:
            setattr(config, f.name, value)


def load_config(
    *,
    cli_args: dict[str, Any] | None = None,
    config_path: str | Path | None = None,
    use_dotenv: bool = True,
) -> ProbeConfig:
    """Load configuration from all sources with proper priority."""
    if use_dotenv:
        load_dotenv()

    config = ProbeConfig()

    path = config_path or os.environ.get(CONFIG_ENV_VAR)
    if path:
        _apply_dict(config, load_yaml_config(Path(path)))

    _apply_dict(config, _env_overrides())
    _apply_dict(config, cli_args or {})
    return config
