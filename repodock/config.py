"""Configuration loading for repodock (.repodock.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .errors import ConfigError

CONFIG_FILENAME = ".repodock.yml"

DEFAULT_PORTS: tuple[int, ...] = (3000, 8000, 8080)
DEFAULT_LARGE_FILE_THRESHOLD = 1024 * 1024


@dataclass
class RepodockConfig:
    """Represents the settings defined in .repodock.yml."""

    root: Path
    exclude_dirs: List[str] = field(default_factory=list)
    keywords: Dict[str, List[str]] = field(default_factory=dict)
    default_ports: List[int] = field(default_factory=lambda: list(DEFAULT_PORTS))
    large_file_threshold: int = DEFAULT_LARGE_FILE_THRESHOLD
    disabled_checks: List[str] = field(default_factory=list)


def default_config(root: Path | None = None) -> RepodockConfig:
    """Return a configuration populated with built-in defaults."""
    return RepodockConfig(root=(root or Path.cwd()).resolve())


def load_config(config_path: Path) -> RepodockConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return RepodockConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")

    analyzer_data = _as_dict(data.get("analyzer"))
    checker_data = _as_dict(data.get("checker"))

    keywords: Dict[str, List[str]] = {}
    for bucket, values in _as_dict(analyzer_data.get("keywords")).items():
        entries = [item.lower() for item in _as_str_list(values)]
        if entries:
            keywords[str(bucket)] = entries

    ports = [port for port in (_as_int(item) for item in _as_list(analyzer_data.get("default_ports"))) if port]
    threshold = _as_int(analyzer_data.get("large_file_threshold"))

    return RepodockConfig(
        root=root,
        exclude_dirs=_as_str_list(analyzer_data.get("exclude_dirs")),
        keywords=keywords,
        default_ports=ports or list(DEFAULT_PORTS),
        large_file_threshold=threshold if threshold and threshold > 0 else DEFAULT_LARGE_FILE_THRESHOLD,
        disabled_checks=_as_str_list(checker_data.get("disabled")),
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_LARGE_FILE_THRESHOLD",
    "DEFAULT_PORTS",
    "RepodockConfig",
    "default_config",
    "load_config",
]
