# fastcd/config.py
"""
Configuration from the environment and an optional YAML file.

Environment variables win over the file:
    HOME               Locates the store and is abbreviated to ~ in listings
    EDITOR             Program used by --edit
    FASTCD_CONFIG      Config file (default: $XDG_CONFIG_HOME/fastcd/config.yaml)
    FASTCD_BRIDGE_FILE Shell bridge artifact location
    FASTCD_LOG_LEVEL   Logging level name

Config file keys:
    store: ~/.fstore
    editor: vim
    workspace_suffixes: [.xcworkspace, .code-workspace]
    project_suffixes: [.xcodeproj]
    start_script: start
    log_level: WARNING
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from .bridge import default_artifact_path
from .errors import ConfigError

STORE_NAME = ".fstore"
DEFAULT_WORKSPACE_SUFFIXES = [".xcworkspace", ".code-workspace"]
DEFAULT_PROJECT_SUFFIXES = [".xcodeproj"]
DEFAULT_START_SCRIPT = "start"
DEFAULT_LOG_LEVEL = "WARNING"

FILE_KEYS = {"store", "editor", "workspace_suffixes", "project_suffixes", "start_script", "log_level"}


@dataclass
class Config:
    """Resolved fastcd settings."""
    home: Path
    store_path: Path
    bridge_path: Path
    editor: Optional[str] = None
    workspace_suffixes: List[str] = field(default_factory=lambda: list(DEFAULT_WORKSPACE_SUFFIXES))
    project_suffixes: List[str] = field(default_factory=lambda: list(DEFAULT_PROJECT_SUFFIXES))
    start_script: str = DEFAULT_START_SCRIPT
    log_level: str = DEFAULT_LOG_LEVEL


def config_file_path(environ: Mapping[str, str], home: Path) -> Path:
    explicit = environ.get("FASTCD_CONFIG")
    if explicit:
        return Path(explicit).expanduser()
    config_root = Path(environ.get("XDG_CONFIG_HOME") or home / ".config")
    return config_root / "fastcd" / "config.yaml"


def _suffix_list(data: Dict[str, Any], key: str, default: List[str]) -> List[str]:
    value = data.get(key)
    if value is None:
        return list(default)
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list) or not all(isinstance(v, str) and v for v in value):
        raise ConfigError(f"Config key '{key}' must be a list of suffixes")
    return [v if v.startswith(".") else f".{v}" for v in value]


def _string(data: Dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str) or not value:
        raise ConfigError(f"Config key '{key}' must be a non-empty string")
    return value


def read_config_file(path: Path) -> Dict[str, Any]:
    """
    Parse the YAML config file.

    Returns an empty dict if the file does not exist.
    """
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Failed to read config {path}: {e}")
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid config {path}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config {path}: expected a mapping")

    unknown = set(data) - FILE_KEYS
    if unknown:
        raise ConfigError(f"Invalid config {path}: unknown keys {', '.join(sorted(map(str, unknown)))}")
    return data


def load_config(environ: Mapping[str, str] = None) -> Config:
    """Build the Config for this process."""
    if environ is None:
        environ = os.environ

    home = Path(environ["HOME"]) if environ.get("HOME") else Path.home()
    data = read_config_file(config_file_path(environ, home))

    store = _string(data, "store")
    if store is None:
        store_path = home / STORE_NAME
    elif store == "~" or store.startswith("~/"):
        store_path = home / store[2:]
    else:
        # Relative paths are taken from the home directory
        store_path = home / Path(store).expanduser()

    bridge = environ.get("FASTCD_BRIDGE_FILE")
    bridge_path = Path(bridge) if bridge else default_artifact_path()

    return Config(
        home=home,
        store_path=store_path,
        bridge_path=bridge_path,
        editor=environ.get("EDITOR") or _string(data, "editor"),
        workspace_suffixes=_suffix_list(data, "workspace_suffixes", DEFAULT_WORKSPACE_SUFFIXES),
        project_suffixes=_suffix_list(data, "project_suffixes", DEFAULT_PROJECT_SUFFIXES),
        start_script=_string(data, "start_script") or DEFAULT_START_SCRIPT,
        log_level=(environ.get("FASTCD_LOG_LEVEL") or _string(data, "log_level") or DEFAULT_LOG_LEVEL).upper(),
    )
