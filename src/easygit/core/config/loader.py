"""
Configuration loading with multi-layer merging.

Implements the configuration precedence chain:
    defaults < user config < project config < env vars
"""

import json
import os
from pathlib import Path
from typing import Any

from .models import EasyGitConfig

# Global cache to avoid reloading config multiple times per session
_config_cache: EasyGitConfig | None = None


def get_xdg_config_home() -> Path:
    """
    Get XDG config home directory.

    Returns:
        Path to config directory (defaults to ~/.config)
    """
    if xdg_home := os.environ.get("XDG_CONFIG_HOME"):
        return Path(xdg_home)
    return Path.home() / ".config"


def get_user_config_path() -> Path:
    """
    Get path to user configuration file.

    Returns:
        Path to ~/.config/easygit/config.json (or XDG equivalent)
    """
    return get_xdg_config_home() / "easygit" / "config.json"


def get_project_config_path(cwd: Path | None = None) -> Path:
    """
    Get path to project configuration file.

    Args:
        cwd: Working directory to search from (defaults to current directory)

    Returns:
        Path to .easygit/config.json in the project root
    """
    if cwd is None:
        cwd = Path.cwd()
    return cwd / ".easygit" / "config.json"


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two dictionaries.

    Values in `override` take precedence over values in `base`.
    Nested dicts are merged, not replaced.

    Example:
        >>> deep_merge({"core": {"a": 1, "b": 2}}, {"core": {"b": 3}})
        {'core': {'a': 1, 'b': 3}}
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def load_json_file(path: Path) -> dict[str, Any] | None:
    """
    Load a JSON file, returning None if it doesn't exist or is invalid.

    Args:
        path: Path to JSON file

    Returns:
        Parsed JSON as dict, or None if file doesn't exist or can't be parsed
    """
    if not path.exists():
        return None

    try:
        with path.open() as f:
            data = json.load(f)
            if isinstance(data, dict):
                return data
            return None
    except (json.JSONDecodeError, OSError) as e:
        # Config system should be resilient: warn and fall back
        print(f"Warning: Failed to parse config at {path}: {e}")
        return None


def apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Apply environment variable overrides to configuration.

    Supported env vars:
        EASYGIT_SYNC_STRATEGY - overrides core.sync_strategy ('rebase' or 'merge')
        EASYGIT_DEFAULT_REMOTE - overrides core.default_remote

    Args:
        config_dict: Configuration dictionary to override

    Returns:
        Configuration dictionary with env var overrides applied
    """
    result = config_dict.copy()

    if strategy := os.environ.get("EASYGIT_SYNC_STRATEGY"):
        strategy = strategy.strip().lower()
        if strategy in ("rebase", "merge"):
            result["core"] = {**result.get("core", {}), "sync_strategy": strategy}
        else:
            print(f"Warning: Invalid EASYGIT_SYNC_STRATEGY value '{strategy}', ignoring")

    if remote := os.environ.get("EASYGIT_DEFAULT_REMOTE"):
        result["core"] = {**result.get("core", {}), "default_remote": remote.strip()}

    return result


def get_default_config() -> dict[str, Any]:
    """
    Get hardcoded default configuration.

    Returns:
        Dictionary with default configuration values
    """
    return {
        "core": {
            "sync_strategy": "rebase",
            "default_remote": "origin",
        },
    }


def load_config(project_dir: Path | None = None, use_cache: bool = True) -> EasyGitConfig:
    """
    Load configuration with multi-layer merging.

    Configuration precedence (highest to lowest):
        1. Environment variables (EASYGIT_*)
        2. Project config (.easygit/config.json)
        3. User config (~/.config/easygit/config.json)
        4. Hardcoded defaults

    Args:
        project_dir: Project directory to load .easygit/config.json from (defaults to cwd)
        use_cache: If True, return cached config from previous load

    Returns:
        Validated EasyGitConfig instance

    Raises:
        ValidationError: If the merged config fails Pydantic validation
    """
    global _config_cache

    if use_cache and _config_cache is not None:
        return _config_cache

    merged = get_default_config()

    if user_config := load_json_file(get_user_config_path()):
        merged = deep_merge(merged, user_config)

    if project_config := load_json_file(get_project_config_path(project_dir)):
        merged = deep_merge(merged, project_config)

    merged = apply_env_overrides(merged)

    config = EasyGitConfig(**merged)
    _config_cache = config

    return config


def clear_cache() -> None:
    """
    Clear the cached configuration.

    Useful for testing or when config files change during execution.
    """
    global _config_cache
    _config_cache = None
