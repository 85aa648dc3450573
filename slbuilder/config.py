"""TOML-based provider and instance configuration.

Loads ~/.slbuilder/defaults.toml (global) and slbuilder.toml (project),
merges them, and resolves named entries into SoftLayer and InstanceSpec
values.

Example slbuilder.toml::

    [providers.prod]
    type = "softlayer"
    username = "builder"
    poll_interval = 5

    [instances.base]
    hostname = "packer"
    domain = "example.com"
    datacenter = "ams01"
    base_os_code = "UBUNTU_LATEST"
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from slbuilder.core.exceptions import ConfigurationError
from slbuilder.providers.softlayer.config import SoftLayer
from slbuilder.providers.softlayer.types import InstanceSpec

type RawConfig = dict[str, Any]

GLOBAL_CONFIG_PATH = Path.home() / ".slbuilder" / "defaults.toml"
PROJECT_CONFIG_NAME = "slbuilder.toml"

_PROVIDER_MAP: dict[str, type[SoftLayer]] = {
    "softlayer": SoftLayer,
}


_SECTIONS = ("providers", "instances")


def _merge_tables(*layers: RawConfig) -> RawConfig:
    """Merge TOML tables left to right; nested tables merge, other values replace."""
    merged: RawConfig = {}
    for layer in layers:
        for key, value in layer.items():
            current = merged.get(key)
            if isinstance(current, dict) and isinstance(value, dict):
                merged[key] = _merge_tables(current, value)
            else:
                merged[key] = value
    return merged


def _read_toml(path: Path) -> RawConfig:
    if not path.is_file():
        return {}
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML in {path}: {e}") from e


def load_config(
    *,
    project_dir: Path | None = None,
    global_path: Path | None = None,
) -> RawConfig:
    """Return the global defaults overlaid with the project file."""
    config = _merge_tables(
        _read_toml(global_path or GLOBAL_CONFIG_PATH),
        _read_toml((project_dir or Path.cwd()) / PROJECT_CONFIG_NAME),
    )
    for section in _SECTIONS:
        table = config.setdefault(section, {})
        if not isinstance(table, dict):
            raise ConfigurationError(f"'{section}' must be a table, got {type(table).__name__}")
    return config


def _build(cls: type, kind: str, name: str, raw: RawConfig) -> Any:
    try:
        return cls(**raw)
    except TypeError as e:
        raise ConfigurationError(f"Invalid {kind} '{name}': {e}") from e


def resolve_provider(
    name: str,
    *,
    project_dir: Path | None = None,
    global_path: Path | None = None,
) -> SoftLayer:
    config = load_config(project_dir=project_dir, global_path=global_path)

    providers = config["providers"]
    if name not in providers:
        raise ConfigurationError(
            f"Provider '{name}' not found. Available: {', '.join(providers) or 'none'}"
        )

    raw = dict(providers[name])
    provider_type = raw.pop("type", None)
    if provider_type is None:
        raise ConfigurationError(f"Provider '{name}' missing 'type' field")

    cls = _PROVIDER_MAP.get(provider_type)
    if cls is None:
        raise ConfigurationError(
            f"Unknown provider type '{provider_type}'. "
            f"Valid: {', '.join(_PROVIDER_MAP)}"
        )
    return _build(cls, "provider", name, raw)


def resolve_instance(
    name: str,
    *,
    project_dir: Path | None = None,
    global_path: Path | None = None,
) -> InstanceSpec:
    config = load_config(project_dir=project_dir, global_path=global_path)

    instances = config["instances"]
    if name not in instances:
        raise ConfigurationError(
            f"Instance '{name}' not found. Available: {', '.join(instances) or 'none'}"
        )
    return _build(InstanceSpec, "instance", name, dict(instances[name]))
