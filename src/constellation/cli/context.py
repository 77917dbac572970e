"""
Shared helpers for CLI commands.
"""

from pathlib import Path

import typer

from constellation.core.config import ConstellationConfig, load_config


def get_config(ctx: typer.Context) -> ConstellationConfig:
    """
    Load the layered configuration, applying the global --workspace option.
    """
    obj = ctx.obj or {}
    config = load_config()
    workspace: Path | None = obj.get("workspace")
    if workspace is not None:
        config = config.model_copy(update={"workspace": workspace.expanduser()})
    return config


def is_debug(ctx: typer.Context) -> bool:
    return bool((ctx.obj or {}).get("debug", False))
