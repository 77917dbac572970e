"""Environment loading helpers.

Agent workspaces often share one `.env` with API keys for every agent, so
only `CONSTELLATION_*` keys are taken from env files. Precedence:

  os.environ (pre-existing) > project .env > user .env

A value exported in the shell is never replaced by a file.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable

from dotenv import dotenv_values

ENV_PREFIX = "CONSTELLATION_"

logger = logging.getLogger(__name__)


def read_env_file(path: Path) -> dict[str, str]:
    """Return the CONSTELLATION_* assignments of one env file."""
    if not path.is_file():
        return {}
    return {
        str(key): str(value)
        for key, value in dotenv_values(path).items()
        if key and value is not None and key.startswith(ENV_PREFIX)
    }


def default_env_paths(project_dir: Path) -> list[Path]:
    """User env first, then project env files, lowest priority first."""
    xdg_home = Path(os.environ.get("XDG_CONFIG_HOME", str(Path.home() / ".config")))
    return [
        xdg_home / "constellation" / ".env",
        project_dir / ".env",
        project_dir / ".env.local",
    ]


def load_layered_env(
    *,
    project_dir: Path | None = None,
    env_paths: Iterable[Path] | None = None,
) -> list[str]:
    """Apply CONSTELLATION_* values from env files to os.environ.

    Later files override earlier ones; keys that were already present in
    the process environment before this call are left alone.

    Returns:
        Sorted names of the keys that were set from files.
    """
    if env_paths is None:
        env_paths = default_env_paths(project_dir or Path.cwd())

    from_files: dict[str, str] = {}
    for path in env_paths:
        from_files.update(read_env_file(Path(path)))

    applied = []
    for key, value in from_files.items():
        if key in os.environ:
            continue
        os.environ[key] = value
        applied.append(key)

    if applied:
        logger.debug("Loaded %d settings from env files", len(applied))
    return sorted(applied)
