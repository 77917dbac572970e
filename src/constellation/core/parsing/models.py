"""
Pydantic models for records parsed out of agent-written text.

Models serialize with camelCase keys (the dashboard UI's convention) but
accept either spelling when constructed.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RecordModel(BaseModel):
    """Base for every API-facing record."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class FeedEntry(RecordModel):
    """A timestamped line from an agent feed or department outbox.

    `time` is whatever the author wrote inside the bracket: "9:05",
    "14:30" or "2026-01-23 14:30".
    """

    time: str
    text: str


class ChecklistItem(RecordModel):
    """One `- [ ]` / `- [x]` line.

    Example:
        "- [x] **Ship it** — landing page #web #done:2026-01-02" parses to
        checked=True, title="Ship it", description="landing page",
        tags=["web", "done:2026-01-02"]
    """

    checked: bool
    text: str = Field(..., description="Everything after the checkbox")
    title: str
    description: str = ""
    tags: list[str] = Field(default_factory=list)


class InboxPriority(str, Enum):
    """Priority of an inbox item; anything unrecognized is UNKNOWN."""

    URGENT = "urgent"
    NORMAL = "normal"
    LOW = "low"
    UNKNOWN = "unknown"


class InboxItem(RecordModel):
    """One task-like file in an agent's inbox directory."""

    file: str
    title: str
    priority: InboxPriority = InboxPriority.UNKNOWN
    status: str = "unknown"
    done: bool = False


class StatusDocument(RecordModel):
    """Sections recognized in a department STATUS.md."""

    current_focus: str | None = None
    working_items: list[str] = Field(default_factory=list)
    blocked_items: list[str] = Field(default_factory=list)
    next_items: list[str] = Field(default_factory=list)
    completed: list[str] = Field(default_factory=list)
    last_updated: str | None = None
    tables: dict[str, list[dict[str, str]]] = Field(default_factory=dict)
