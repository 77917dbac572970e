"""
Pydantic models for the aggregator's derived views.

Nothing here is stored: every instance is rebuilt from the workspace
files on each request. All models serialize with camelCase keys.
"""

from enum import Enum

from pydantic import Field

from constellation.core.parsing.models import FeedEntry, InboxItem, RecordModel
from constellation.core.probes.models import CommitCounts, ProcessInfo
from constellation.core.registry.models import ProjectStatus


class AgentStatus(str, Enum):
    ACTIVE = "active"
    IDLE = "idle"


class InboxSummary(RecordModel):
    """Inbox counts for one agent; pending = total - done."""

    total: int = 0
    pending: int = 0
    items: list[InboxItem] = Field(default_factory=list)


class AgentSummary(RecordModel):
    """Everything the dashboard shows on an agent card."""

    name: str
    display_name: str
    color: str | None = None
    feed: list[FeedEntry] = Field(default_factory=list, description="Newest first")
    inbox: InboxSummary = Field(default_factory=InboxSummary)
    last_activity: FeedEntry | None = None
    status: AgentStatus = AgentStatus.IDLE
    is_running: bool = False


class AttentionSeverity(str, Enum):
    """Severity of an attention flag, most urgent first."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"


class AttentionFlag(RecordModel):
    """A derived warning about one project."""

    project: str
    slug: str
    reason: str
    severity: AttentionSeverity


class ProjectActivity(RecordModel):
    """A state.json activity event tagged with its project."""

    project: str
    slug: str
    message: str = ""
    type: str = ""
    time: str | None = None


class TaskRef(RecordModel):
    """A state.json task tagged with its project."""

    project: str
    slug: str
    id: str
    title: str = ""
    type: str = ""
    status: str
    milestone: str | None = None


class TaskTotals(RecordModel):
    total: int = 0
    pending: int = 0
    in_progress: int = 0
    done: int = 0
    failed: int = 0


class ProjectSummary(RecordModel):
    """A registered project with the figures derived from its directory."""

    name: str
    slug: str
    status: ProjectStatus
    assigned_to: str
    exists: bool = False
    has_state: bool = False
    phase: str = "unknown"
    progress: int = Field(default=0, ge=0, le=100)
    total_tasks: int = 0
    done_tasks: int = 0
    progress_note: str = ""


class ProjectCounts(RecordModel):
    total: int = 0
    active: int = 0
    paused: int = 0
    complete: int = 0


class Overview(RecordModel):
    """Cross-project overview."""

    counts: ProjectCounts = Field(default_factory=ProjectCounts)
    tasks: TaskTotals = Field(default_factory=TaskTotals)
    attention: list[AttentionFlag] = Field(default_factory=list)
    activity: list[ProjectActivity] = Field(default_factory=list)
    content: list[TaskRef] = Field(default_factory=list)
    research: list[TaskRef] = Field(default_factory=list)


class IdeaStatus(str, Enum):
    OPEN = "open"
    BLOCKED = "blocked"
    DONE = "done"


class Idea(RecordModel):
    """An idea parsed from a global or per-project ideas list."""

    text: str
    title: str
    description: str = ""
    status: IdeaStatus = IdeaStatus.OPEN
    tags: list[str] = Field(default_factory=list)
    source: str
    blocker: str | None = None
    done_date: str | None = None


class IdeaCounts(RecordModel):
    total: int = 0
    open: int = 0
    blocked: int = 0
    done: int = 0


class DepartmentSummary(RecordModel):
    """Department card for the department list."""

    name: str
    display_name: str
    current_focus: str | None = None
    working: int = 0
    blocked: int = 0
    next: int = 0
    last_updated: str | None = None
    inbox_pending: int = 0
    last_activity: FeedEntry | None = None


class Tweet(RecordModel):
    id: int
    text: str
    raw: str


class Finding(RecordModel):
    file: str
    title: str
    routed_to: str = "unknown"
    size: int = 0


class DepartmentStatus(RecordModel):
    """A department's parsed STATUS.md plus its live sources."""

    name: str
    display_name: str
    current_focus: str | None = None
    working_items: list[str] = Field(default_factory=list)
    blocked_items: list[str] = Field(default_factory=list)
    next_items: list[str] = Field(default_factory=list)
    completed: list[str] = Field(default_factory=list)
    last_updated: str | None = None
    tables: dict[str, list[dict[str, str]]] = Field(default_factory=dict)
    feed: list[FeedEntry] = Field(default_factory=list)
    outbox: list[FeedEntry] = Field(default_factory=list)
    inbox: InboxSummary = Field(default_factory=InboxSummary)
    projects: list[ProjectSummary] = Field(default_factory=list)
    tweets: list[Tweet] | None = None
    findings: list[Finding] | None = None


class DepartmentFeedEntry(RecordModel):
    department: str
    time: str
    text: str


class ChangelogEntry(RecordModel):
    agent: str
    color: str | None = None
    time: str
    text: str


class BlockedItem(RecordModel):
    """An urgent inbox ticket or a feed entry that reads like a blocker."""

    agent: str
    type: str = Field(..., description="'inbox' or 'feed'")
    title: str | None = None
    file: str | None = None
    priority: str | None = None
    status: str | None = None
    time: str | None = None
    text: str | None = None


class HealthSummary(RecordModel):
    total: int = 0
    online: int = 0
    stopped: int = 0


class HealthReport(RecordModel):
    services: list[ProcessInfo] = Field(default_factory=list)
    summary: HealthSummary = Field(default_factory=HealthSummary)


class CountBreakdown(RecordModel):
    total: int = 0
    per_agent: dict[str, int] = Field(default_factory=dict)


class Metrics(RecordModel):
    """Usage figures derived from workspace files and git only."""

    feed_entries: CountBreakdown = Field(default_factory=CountBreakdown)
    inbox_depth: CountBreakdown = Field(default_factory=CountBreakdown)
    git: CommitCounts = Field(default_factory=CommitCounts)
    last_updated: str
