"""
Per-project orchestrator state (state.json) models and loading.
"""

from constellation.core.projects.models import (
    ActivityEvent,
    ProjectState,
    Task,
    TaskStatus,
)
from constellation.core.projects.state import (
    MalformedStateError,
    ProjectDirectoryNotFoundError,
    ProjectStateError,
    StateNotFoundError,
    load_project_state,
    try_load_project_state,
)

__all__ = [
    "ActivityEvent",
    "MalformedStateError",
    "ProjectDirectoryNotFoundError",
    "ProjectState",
    "ProjectStateError",
    "StateNotFoundError",
    "Task",
    "TaskStatus",
    "load_project_state",
    "try_load_project_state",
]
