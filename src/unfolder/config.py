"""
TOML-based config file loading for unfolder.

Searches for `.unfolder.toml`, `unfolder.toml`, or `pyproject.toml [tool.unfolder]`
walking up from the current directory. Config values are merged with CLI flags
using three-way precedence: explicit CLI flags > config file > built-in defaults.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, TypeVar, cast

from unfolder.errors import ConfigError

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]

log = logging.getLogger(__name__)


@dataclass
class UnfolderConfig:
    """
    Parsed config from a TOML file. Fields are `None` when not set in the config,
    allowing the merge logic to distinguish "not configured" from "explicitly set
    to default value".
    """

    include_vcs: bool | None = None
    extend_exclude: list[str] | None = None
    ignore_files: list[str] | None = None


# Config file search order (first match wins within each directory level)
_CONFIG_FILENAMES = [".unfolder.toml", "unfolder.toml", "pyproject.toml"]

# Mapping from TOML kebab-case keys to Python snake_case field names
_KEBAB_TO_SNAKE: dict[str, str] = {
    "include-vcs": "include_vcs",
    "extend-exclude": "extend_exclude",
    "ignore-files": "ignore_files",
}

_VALID_FIELDS = {f.name for f in fields(UnfolderConfig)}

# Fields whose value must be a list of strings rather than a bool
_LIST_FIELDS = {"extend_exclude", "ignore_files"}


def find_config_file(start_dir: Path) -> Path | None:
    """
    Walk up from `start_dir` looking for a config file. Returns the first
    found, or `None`. Search order per directory: `.unfolder.toml` >
    `unfolder.toml` > `pyproject.toml` (only if it has `[tool.unfolder]`).
    """
    current = start_dir.resolve()
    while True:
        for filename in _CONFIG_FILENAMES:
            candidate = current / filename
            if candidate.is_file():
                if filename == "pyproject.toml":
                    if _pyproject_has_unfolder_section(candidate):
                        return candidate
                else:
                    return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def _pyproject_has_unfolder_section(path: Path) -> bool:
    """Check if a pyproject.toml has a [tool.unfolder] section."""
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
        return "unfolder" in data.get("tool", {})
    except (tomllib.TOMLDecodeError, OSError, UnicodeDecodeError):
        return False


def load_config(config_path: Path) -> UnfolderConfig:
    """
    Load an `UnfolderConfig` from a TOML file. Supports both standalone
    `unfolder.toml` / `.unfolder.toml` and `pyproject.toml` (extracts
    `[tool.unfolder]`). Raises `ConfigError` if the file is not valid UTF-8 TOML
    or a known key has a value of the wrong type.
    """
    try:
        data = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
        raise ConfigError(f"Invalid config file {config_path}: {e}") from e

    if config_path.name == "pyproject.toml":
        data = data.get("tool", {}).get("unfolder", {})

    return _parse_config_data(data, config_path)


def _parse_config_data(data: dict[str, Any], source: Path) -> UnfolderConfig:
    """Parse a flat or sectioned TOML dict into UnfolderConfig, skipping unknown keys."""
    # Flatten sections: e.g. [ignore] merges into top level
    flat: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, dict):
            for sub_key, sub_value in cast(dict[str, Any], value).items():
                flat[sub_key] = sub_value
        else:
            flat[key] = value

    mapped: dict[str, Any] = {}
    for key, value in flat.items():
        snake_key = _KEBAB_TO_SNAKE.get(key, key.replace("-", "_"))
        if snake_key in _VALID_FIELDS:
            _check_value(key, snake_key, value, source)
            mapped[snake_key] = value
        else:
            log.warning("Ignoring unrecognized config key in %s: %s", source, key)

    return UnfolderConfig(**mapped)


def _check_value(key: str, snake_key: str, value: Any, source: Path) -> None:
    """Raise `ConfigError` unless `value` has the type `snake_key` expects."""
    if snake_key in _LIST_FIELDS:
        if not isinstance(value, list) or not all(
            isinstance(item, str) for item in cast(list[Any], value)
        ):
            raise ConfigError(f"Invalid config file {source}: {key} must be a list of strings")
    elif not isinstance(value, bool):
        raise ConfigError(f"Invalid config file {source}: {key} must be true or false")


_T = TypeVar("_T")


def merge_cli_with_config(
    cli_opts: _T,
    config: UnfolderConfig | None,
    explicit_flags: set[str],
) -> _T:
    """
    Merge CLI options with config file settings.

    Precedence: explicit CLI flags > config file > built-in defaults.
    """
    if config is None:
        return cli_opts

    for cfg_field in fields(UnfolderConfig):
        cfg_value = getattr(config, cfg_field.name)
        if cfg_value is None:
            continue  # Not set in config

        if cfg_field.name in explicit_flags:
            continue

        if hasattr(cli_opts, cfg_field.name):
            setattr(cli_opts, cfg_field.name, cfg_value)

    return cli_opts
