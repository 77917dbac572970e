"""
Configuration loading with multi-layer merging.

Implements the configuration precedence chain:
    defaults < user config < project config < env vars
"""

import json
import os
from pathlib import Path
from typing import Any

from .models import ConstellationConfig

# Global cache to avoid reloading config multiple times per process
_config_cache: ConstellationConfig | None = None


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
        Path to ~/.config/constellation/config.json (or XDG equivalent)
    """
    return get_xdg_config_home() / "constellation" / "config.json"


def get_project_config_path(cwd: Path | None = None) -> Path:
    """
    Get path to project configuration file.

    Args:
        cwd: Working directory to search from (defaults to current directory)

    Returns:
        Path to .constellation.json in the given directory
    """
    if cwd is None:
        cwd = Path.cwd()
    return cwd / ".constellation.json"


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two dictionaries.

    Values in `override` take precedence over values in `base`.
    Nested dicts are merged, not replaced.

    Example:
        >>> base = {"a": 1, "limits": {"feed_entries": 50, "stale_days": 7}}
        >>> override = {"limits": {"stale_days": 3}}
        >>> deep_merge(base, override)
        {"a": 1, "limits": {"feed_entries": 50, "stale_days": 3}}
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
        # Config system should be resilient to a broken file
        print(f"Warning: Failed to parse config at {path}: {e}")
        return None


def _set_nested(config_dict: dict[str, Any], section: str, key: str, value: Any) -> None:
    if not isinstance(config_dict.get(section), dict):
        config_dict[section] = {}
    config_dict[section][key] = value


def _positive_int(name: str, raw: str) -> int | None:
    try:
        value = int(raw)
    except ValueError:
        print(f"Warning: Invalid {name} value '{raw}', ignoring")
        return None
    if value < 1:
        print(f"Warning: {name} must be >= 1, got {value}, ignoring")
        return None
    return value


def apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Apply environment variable overrides to configuration.

    Env vars have the highest precedence and override all config files.

    Supported env vars:
        CONSTELLATION_WORKSPACE - overrides workspace
        CONSTELLATION_REGISTRY - overrides registry_path
        CONSTELLATION_STALE_DAYS - overrides limits.stale_days
        CONSTELLATION_FEED_LIMIT - overrides limits.feed_entries
        CONSTELLATION_PROBES_ENABLED - overrides probes.enabled
        CONSTELLATION_PORT - overrides server.port

    Args:
        config_dict: Configuration dictionary to override

    Returns:
        Configuration dictionary with env var overrides applied
    """
    result = config_dict.copy()

    if workspace := os.environ.get("CONSTELLATION_WORKSPACE"):
        result["workspace"] = workspace

    if registry := os.environ.get("CONSTELLATION_REGISTRY"):
        result["registry_path"] = registry

    if stale_str := os.environ.get("CONSTELLATION_STALE_DAYS"):
        stale_days = _positive_int("CONSTELLATION_STALE_DAYS", stale_str)
        if stale_days is not None:
            _set_nested(result, "limits", "stale_days", stale_days)

    if feed_str := os.environ.get("CONSTELLATION_FEED_LIMIT"):
        feed_limit = _positive_int("CONSTELLATION_FEED_LIMIT", feed_str)
        if feed_limit is not None:
            _set_nested(result, "limits", "feed_entries", feed_limit)

    if probes_str := os.environ.get("CONSTELLATION_PROBES_ENABLED"):
        probes_enabled = probes_str.lower() not in ("false", "0", "")
        _set_nested(result, "probes", "enabled", probes_enabled)

    if port_str := os.environ.get("CONSTELLATION_PORT"):
        port = _positive_int("CONSTELLATION_PORT", port_str)
        if port is not None:
            _set_nested(result, "server", "port", port)

    return result


def get_default_config() -> dict[str, Any]:
    """
    Get hardcoded default configuration.

    Returns:
        Dictionary with default configuration values
    """
    return {
        "limits": {
            "feed_entries": 50,
            "activity_feed": 50,
            "department_feed": 20,
            "stale_days": 7,
        },
        "probes": {"enabled": True, "pm2_timeout": 5.0, "git_timeout": 3.0},
        "server": {"host": "127.0.0.1", "port": 3400},
    }


def load_config(project_dir: Path | None = None, use_cache: bool = True) -> ConstellationConfig:
    """
    Load configuration with multi-layer merging.

    Configuration precedence (highest to lowest):
        1. Environment variables (CONSTELLATION_*)
        2. Project config (.constellation.json)
        3. User config (~/.config/constellation/config.json)
        4. Hardcoded defaults

    Args:
        project_dir: Directory to load .constellation.json from (defaults to cwd)
        use_cache: If True, return cached config from previous load

    Returns:
        Validated ConstellationConfig instance

    Raises:
        ValidationError: If the merged config fails Pydantic validation
    """
    global _config_cache

    if use_cache and _config_cache is not None:
        return _config_cache

    merged = get_default_config()

    user_config_path = get_user_config_path()
    if user_config := load_json_file(user_config_path):
        merged = deep_merge(merged, user_config)

    project_config_path = get_project_config_path(project_dir)
    if project_config := load_json_file(project_config_path):
        merged = deep_merge(merged, project_config)

    merged = apply_env_overrides(merged)

    config = ConstellationConfig(**merged)

    _config_cache = config

    return config


def clear_cache() -> None:
    """
    Clear the cached configuration.

    Useful for testing or when config files change during execution.
    """
    global _config_cache
    _config_cache = None
