"""Tool configuration loading and normalization.

A tool package is a directory holding one config file plus its
implementation module. This module parses that config (YAML, JSON or
Python) into a normalized dict suitable for ToolManifest construction:

- config.yaml / config.yml: parsed with PyYAML
- config.json: parsed with json
- config.py: executed with runpy; must expose get_config() or CONFIG

Normalized fields: id, name, version, description, author, enabled,
dependencies, permissions, settings, entry ("module:Class"), root_dir.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional
import json
import runpy
import yaml
from .errors import ConfigError

CONFIG_FILENAMES = ("config.yaml", "config.yml", "config.json", "config.py")


def _read_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        try:
            return yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e


def _read_json(path: Path) -> Dict[str, Any]:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e


def _read_py(path: Path) -> Dict[str, Any]:
    ns = runpy.run_path(str(path))
    if "get_config" in ns:
        return ns["get_config"]()
    if "CONFIG" in ns:
        return ns["CONFIG"]
    raise ConfigError("Python config must expose get_config() or CONFIG")


def _ensure_list(val, field_name: str):
    if val is None:
        return []
    if isinstance(val, (list, tuple)):
        return list(val)
    raise ConfigError(f"{field_name} must be a list")


def normalize_config(raw: Dict[str, Any], default_id: Optional[str] = None) -> Dict[str, Any]:
    if not isinstance(raw, dict):
        raise ConfigError("Tool config must be a mapping")
    td = dict(raw)
    td["id"] = td.get("id") or default_id
    if not td["id"] or not isinstance(td["id"], str):
        raise ConfigError("Tool config requires a string id")
    td.setdefault("name", td["id"])
    td.setdefault("version", "0.1.0")
    td.setdefault("description", "")
    td.setdefault("enabled", True)
    if not isinstance(td["enabled"], bool):
        raise ConfigError(f"enabled must be a boolean, got {td['enabled']!r}")
    td["version"] = str(td["version"])
    td["dependencies"] = _ensure_list(td.get("dependencies"), "dependencies")
    td["permissions"] = _ensure_list(td.get("permissions"), "permissions")
    settings = td.get("settings")
    if settings is None:
        settings = {}
    if not isinstance(settings, dict):
        raise ConfigError("settings must be a mapping")
    td["settings"] = settings
    entry = td.get("entry")
    if entry is not None and (not isinstance(entry, str) or ":" not in entry):
        raise ConfigError("entry must be 'module:Class'")
    return td


def parse_config_file(path: Path, default_id: Optional[str] = None) -> Dict[str, Any]:
    if path.suffix in (".yml", ".yaml"):
        data = _read_yaml(path)
    elif path.suffix == ".json":
        data = _read_json(path)
    else:
        data = _read_py(path)
    td = normalize_config(data, default_id=default_id or path.parent.name)
    td.setdefault("root_dir", str(path.parent))
    return td


def find_config_file(dir_path: Path) -> Optional[Path]:
    for fname in CONFIG_FILENAMES:
        p = dir_path / fname
        if p.exists():
            return p
    return None


def load_config_in_dir(dir_path: Path) -> Optional[Dict[str, Any]]:
    p = find_config_file(dir_path)
    if p is None:
        return None
    return parse_config_file(p)


__all__ = [
    "parse_config_file",
    "load_config_in_dir",
    "find_config_file",
    "normalize_config",
    "ConfigError",
    "CONFIG_FILENAMES",
]
