"""
FastAPI dependencies shared by the routes.

The CLI stores the loaded configuration on `app.state.config`; when the
app is served some other way (e.g. `uvicorn constellation.api:app`) the
layered config is loaded on first use. Tests replace `get_aggregator`
through `app.dependency_overrides`.
"""

from fastapi import Depends, Request

from constellation.api.errors import not_found
from constellation.core.aggregator import Aggregator
from constellation.core.config import ConstellationConfig, load_config
from constellation.core.registry.models import Project


def get_config(request: Request) -> ConstellationConfig:
    config = getattr(request.app.state, "config", None)
    if config is None:
        config = load_config()
    return config


def get_aggregator(config: ConstellationConfig = Depends(get_config)) -> Aggregator:
    return Aggregator(config)


def get_project(slug: str, aggregator: Aggregator = Depends(get_aggregator)) -> Project:
    """Resolve the {slug} path parameter to a registered project."""
    project = aggregator.get_project(slug)
    if project is None:
        raise not_found("Project not found")
    return project
