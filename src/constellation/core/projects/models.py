"""
Pydantic models for a project's orchestrator state (state.json).

Example document:

    {
      "phase": "build",
      "lastUpdated": "2026-01-23T09:00:00Z",
      "tasks": [
        {"id": "T1", "title": "Landing copy", "type": "content",
         "status": "done", "milestone": "M1"}
      ],
      "activity": [
        {"message": "T1 completed", "type": "task", "time": "2026-01-23T09:00:00Z"}
      ]
    }

Agents write these files by hand, so validation is lenient: a record that
cannot be read is dropped and the rest of the document still loads.
"""

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)


class TaskStatus(str, Enum):
    """Orchestrator task status."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    DONE = "done"
    FAILED = "failed"


# Spellings agents have been seen to write for the canonical statuses
TASK_STATUS_ALIASES: dict[str, str] = {
    "in-progress": "in_progress",
    "inprogress": "in_progress",
    "running": "in_progress",
    "review": "in_progress",
    "complete": "done",
    "completed": "done",
    "error": "failed",
    "todo": "pending",
    "open": "pending",
    "blocked": "pending",
}

STATUS_VALUES = {status.value for status in TaskStatus}


def epoch_to_iso(v: Any) -> Any:
    """Convert epoch seconds or milliseconds to an ISO-8601 UTC string."""
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        seconds = v / 1000 if v > 1e11 else v
        try:
            return datetime.fromtimestamp(seconds, tz=timezone.utc).isoformat()
        except (OverflowError, OSError, ValueError):
            return None
    return v


def as_text(v: Any) -> str | None:
    """Strings pass through, numbers are stringified, anything else is None."""
    if isinstance(v, str):
        return v
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return str(v)
    return None


def valid_records(v: Any, model: type[BaseModel]) -> list[BaseModel]:
    """Validate each list entry on its own, dropping the ones that fail."""
    if not isinstance(v, list):
        return []
    records = []
    for entry in v:
        try:
            records.append(model.model_validate(entry))
        except ValidationError as e:
            logger.debug(f"Skipping unreadable {model.__name__}: {e.error_count()} errors")
    return records


class StateModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Task(StateModel):
    """A task tracked in state.json."""

    id: str
    title: str = ""
    type: str = ""
    status: TaskStatus = TaskStatus.PENDING
    milestone: str | None = None

    @field_validator("id", "milestone", mode="before")
    @classmethod
    def stringify(cls, v: Any) -> Any:
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("title", "type", mode="before")
    @classmethod
    def text_or_empty(cls, v: Any) -> str:
        return as_text(v) or ""

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v: Any) -> str:
        lowered = v.strip().lower() if isinstance(v, str) else ""
        status = TASK_STATUS_ALIASES.get(lowered, lowered)
        return status if status in STATUS_VALUES else TaskStatus.PENDING.value


class ActivityEvent(StateModel):
    """An entry in a project's activity log."""

    message: str = ""
    type: str = ""
    time: str | None = None

    @field_validator("message", "type", mode="before")
    @classmethod
    def text_or_empty(cls, v: Any) -> str:
        return as_text(v) or ""

    @field_validator("time", mode="before")
    @classmethod
    def normalize_time(cls, v: Any) -> str | None:
        return as_text(epoch_to_iso(v))


class ProjectState(StateModel):
    """The parsed state.json of one project."""

    tasks: list[Task] = Field(default_factory=list)
    last_updated: str | None = None
    activity: list[ActivityEvent] = Field(default_factory=list)
    phase: str | None = None
    progress_note: str | None = None

    @field_validator("tasks", mode="before")
    @classmethod
    def readable_tasks(cls, v: Any) -> list[BaseModel]:
        return valid_records(v, Task)

    @field_validator("activity", mode="before")
    @classmethod
    def readable_activity(cls, v: Any) -> list[BaseModel]:
        return valid_records(v, ActivityEvent)

    @field_validator("last_updated", mode="before")
    @classmethod
    def normalize_last_updated(cls, v: Any) -> str | None:
        return as_text(epoch_to_iso(v))

    @field_validator("phase", "progress_note", mode="before")
    @classmethod
    def text_or_none(cls, v: Any) -> str | None:
        return as_text(v)

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def failed_tasks(self) -> list[Task]:
        return [task for task in self.tasks if task.status == TaskStatus.FAILED]
