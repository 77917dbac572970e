"""
Loading a project's state.json.

Two entry points with different failure policies:
- load_project_state raises a ProjectStateError carrying a stable code.
  It backs the API route where the caller asked for this document.
- try_load_project_state returns None for every failure. It backs the
  aggregated views, where one broken project must not hide the others.
"""

import json
import logging

from pydantic import ValidationError

from constellation.core.projects.models import ProjectState
from constellation.core.registry.models import Project
from constellation.core.sources.reader import SourceReader

logger = logging.getLogger(__name__)

STATE_FILE = "state.json"


class ProjectStateError(Exception):
    """Base exception for project state errors."""

    code = "NOT_FOUND"
    message = "Project state unavailable"


class ProjectDirectoryNotFoundError(ProjectStateError):
    code = "DIR_NOT_FOUND"
    message = "Project directory not found"


class StateNotFoundError(ProjectStateError):
    code = "NO_STATE"
    message = "Project has no state.json"


class MalformedStateError(ProjectStateError):
    code = "MALFORMED"
    message = "Project state.json is malformed"


def load_project_state(reader: SourceReader, project: Project) -> ProjectState:
    """
    Load and validate a project's state.json.

    Raises:
        ProjectDirectoryNotFoundError: The project directory is missing
        StateNotFoundError: There is no readable state.json
        MalformedStateError: The file is not valid JSON or not a JSON object
    """
    if not reader.project_exists(project):
        raise ProjectDirectoryNotFoundError()

    text = reader.read_project_file(project, STATE_FILE)
    if text is None:
        raise StateNotFoundError()

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        logger.info(f"state.json of {project.slug} is not valid JSON: {e}")
        raise MalformedStateError() from e

    if not isinstance(data, dict):
        raise MalformedStateError()

    try:
        return ProjectState.model_validate(data)
    except ValidationError as e:
        logger.info(f"state.json of {project.slug} failed validation: {e.error_count()} errors")
        raise MalformedStateError() from e


def try_load_project_state(reader: SourceReader, project: Project) -> ProjectState | None:
    """Load a project's state, or None if it is missing or unparseable."""
    try:
        return load_project_state(reader, project)
    except ProjectStateError:
        return None
