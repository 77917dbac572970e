"""
Project API routes.

- GET /api/projects - Registered projects with derived progress
- GET /api/project/{slug}/state - The project's state.json
- GET /api/project/{slug}/progress - The project's progress.txt
- GET /api/project/{slug}/tasks - TASKS.md with its parsed checklist
- GET /api/project/{slug}/files/{path} - Any .json/.txt/.md file in the project

Project files are only served from inside the project's registered
directory. A path that escapes it, or names another file type, gets the
same 404 as a missing file.
"""

from typing import Any

from fastapi import APIRouter, Depends

from constellation.api.deps import get_aggregator, get_project
from constellation.api.errors import ApiError, ErrorCode, not_found
from constellation.core.aggregator import Aggregator
from constellation.core.aggregator.models import ProjectSummary
from constellation.core.aggregator.projects import PROGRESS_FILE, progress_percent
from constellation.core.parsing.models import ChecklistItem, RecordModel
from constellation.core.projects.state import (
    ProjectDirectoryNotFoundError,
    ProjectStateError,
)
from constellation.core.registry.models import Project

router = APIRouter()


class ProjectList(RecordModel):
    projects: list[ProjectSummary]


class ProjectProgress(RecordModel):
    slug: str
    exists: bool
    content: str = ""


class ProjectTasks(RecordModel):
    slug: str
    exists: bool
    content: str = ""
    items: list[ChecklistItem] = []
    done: int = 0
    total: int = 0
    progress: int = 0


class ProjectFile(RecordModel):
    slug: str
    path: str
    content: str
    size: int


def _state_error(error: ProjectStateError) -> ApiError:
    return ApiError(error.message, code=ErrorCode(error.code))


@router.get("/projects", response_model=ProjectList)
async def list_projects(aggregator: Aggregator = Depends(get_aggregator)) -> ProjectList:
    """
    List every registered project.

    An absent or broken registry yields an empty list.
    """
    return ProjectList(projects=aggregator.list_projects())


@router.get("/project/{slug}/state")
async def get_project_state(
    project: Project = Depends(get_project),
    aggregator: Aggregator = Depends(get_aggregator),
) -> dict[str, Any]:
    """
    Get a project's state.json.

    Raises:
        ApiError: 404 with code DIR_NOT_FOUND, NO_STATE or MALFORMED
    """
    try:
        state = aggregator.project_state(project)
    except ProjectStateError as e:
        raise _state_error(e) from e

    return {
        "slug": project.slug,
        "name": project.name,
        "state": state.model_dump(mode="json", by_alias=True),
    }


@router.get("/project/{slug}/progress", response_model=ProjectProgress)
async def get_project_progress(
    project: Project = Depends(get_project),
    aggregator: Aggregator = Depends(get_aggregator),
) -> ProjectProgress:
    """Get a project's progress log; empty when the project has none."""
    try:
        content = aggregator.project_document(project, PROGRESS_FILE)
    except ProjectDirectoryNotFoundError as e:
        raise _state_error(e) from e

    if content is None:
        return ProjectProgress(slug=project.slug, exists=False)
    return ProjectProgress(slug=project.slug, exists=True, content=content)


@router.get("/project/{slug}/tasks", response_model=ProjectTasks)
async def get_project_tasks(
    project: Project = Depends(get_project),
    aggregator: Aggregator = Depends(get_aggregator),
) -> ProjectTasks:
    """
    Get a project's TASKS.md with parsed checklist items.

    Example response:
        {
          "slug": "launch-site",
          "exists": true,
          "content": "- [x] Copy\\n- [ ] Deploy\\n",
          "items": [{"checked": true, "title": "Copy", ...}, ...],
          "done": 1,
          "total": 2,
          "progress": 50
        }
    """
    try:
        tasks = aggregator.project_tasks(project)
    except ProjectDirectoryNotFoundError as e:
        raise _state_error(e) from e

    if tasks is None:
        return ProjectTasks(slug=project.slug, exists=False)

    content, items, done, total = tasks
    return ProjectTasks(
        slug=project.slug,
        exists=True,
        content=content,
        items=items,
        done=done,
        total=total,
        progress=progress_percent(done, total),
    )


@router.get("/project/{slug}/files/{path:path}", response_model=ProjectFile)
async def get_project_file(
    path: str,
    project: Project = Depends(get_project),
    aggregator: Aggregator = Depends(get_aggregator),
) -> ProjectFile:
    """
    Get one allow-listed file from a project directory.

    Raises:
        ApiError: 404 for missing, escaping or disallowed paths alike
    """
    result = aggregator.project_file(project, path)
    if result is None:
        raise not_found("File not found")

    relative_path, content = result
    return ProjectFile(
        slug=project.slug, path=relative_path, content=content, size=len(content)
    )
