"""
gsdgraph.config - Configuration loading and defaults

Configuration lives in an optional ``.gsdgraph.toml`` at (or above) the
project root. Values are merged over DEFAULT_CONFIG and can be
overridden with ``GSDGRAPH_<SECTION>_<KEY>`` environment variables.
"""

from __future__ import annotations

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any

import tomlkit
from tomlkit.exceptions import TOMLKitError

from gsdgraph.config.defaults import (
    CONFIG_FILENAME,
    DEFAULT_CONFIG,
    DEFAULT_SRC_IGNORE_PATTERNS,
)
from gsdgraph.exceptions import ConfigError
from gsdgraph.models import SourceConfig

logger = logging.getLogger(__name__)

ENV_PREFIX = "GSDGRAPH_"

__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_CONFIG",
    "DEFAULT_SRC_IGNORE_PATTERNS",
    "find_config_file",
    "get_config",
    "get_planning_dir",
    "get_source_configs",
    "load_config",
    "merge_configs",
    "parse_toml",
]


def parse_toml(content: str) -> dict[str, Any]:
    """Parse TOML text into plain Python dicts and lists.

    Raises:
        TOMLKitError: If the text is not valid TOML.
    """
    return tomlkit.parse(content).unwrap()


def find_config_file(start_path: Path | None = None) -> Path | None:
    """
    Find .gsdgraph.toml by walking up from start_path.

    Args:
        start_path: Directory to start from (defaults to cwd)

    Returns:
        Path to the config file, or None if none exists up to the filesystem root
    """
    current = (start_path or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        if current == current.parent:
            return None
        current = current.parent


def merge_configs(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep-merge override into a copy of base. Lists are replaced, not appended."""
    result = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def _try_parse_env_value(value: str) -> Any:
    """Interpret an environment value as JSON list/object, bool, int, or string."""
    stripped = value.strip()
    if stripped.startswith(("[", "{")):
        try:
            return json.loads(stripped)
        except json.JSONDecodeError:
            return value
    lowered = stripped.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    if stripped.isdigit():
        return int(stripped)
    return value


def _apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    """Apply GSDGRAPH_<SECTION>_<KEY> environment variables to config.

    GSDGRAPH_PIPELINE_ARTIFACT_DONE_BYTES=100 sets
    config["pipeline"]["artifact_done_bytes"] = 100.
    """
    for name, raw in os.environ.items():
        if not name.startswith(ENV_PREFIX):
            continue
        parts = name[len(ENV_PREFIX) :].lower().split("_", 1)
        if len(parts) != 2 or not all(parts):
            continue
        section, key = parts
        target = config.setdefault(section, {})
        if not isinstance(target, dict):
            logger.warning("Ignoring %s: [%s] is not a table", name, section)
            continue
        target[key] = _try_parse_env_value(raw)
    return config


def load_config(config_path: Path) -> dict[str, Any]:
    """
    Load a config file and merge it over the defaults.

    Raises:
        ConfigError: If the file cannot be read or is not valid TOML
    """
    try:
        content = config_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"cannot read config: {e.strerror or e}", config_path) from e
    try:
        user_config = parse_toml(content)
    except TOMLKitError as e:
        raise ConfigError(f"invalid TOML: {e}", config_path) from e

    logger.debug("Loaded config from %s", config_path)
    return _apply_env_overrides(merge_configs(DEFAULT_CONFIG, user_config))


def get_config(config_path: Path | None = None, start_path: Path | None = None) -> dict[str, Any]:
    """Return the effective configuration.

    Uses config_path if given, otherwise searches upward from start_path.
    Falls back to DEFAULT_CONFIG (plus env overrides) when no file exists.
    """
    if config_path is None:
        config_path = find_config_file(start_path)
    if config_path is None:
        return _apply_env_overrides(copy.deepcopy(DEFAULT_CONFIG))
    return load_config(config_path)


def get_planning_dir(config: dict[str, Any], project_path: Path) -> Path:
    """Resolve the planning directory configured for a project."""
    planning_dir = config.get("project", {}).get("planning_dir", ".planning")
    return project_path / planning_dir


def get_source_configs(config: dict[str, Any], project_path: Path) -> list[SourceConfig]:
    """Build SourceConfig objects from [[directories.sources]].

    Relative paths are resolved against project_path.

    Raises:
        ConfigError: If a source entry lacks a path or source_type
    """
    sources = []
    for i, entry in enumerate(config.get("directories", {}).get("sources", [])):
        if not isinstance(entry, dict) or "path" not in entry or "source_type" not in entry:
            raise ConfigError(f"directories.sources[{i}] needs 'path' and 'source_type'")
        sources.append(
            SourceConfig(
                path=str(project_path / entry["path"]),
                source_type=str(entry["source_type"]),
                ignore_patterns=tuple(entry.get("ignore", [])),
            )
        )
    return sources
