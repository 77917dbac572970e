"""
Cross-project views: project summaries, needs-attention flags, the
activity feed and task rollups.

Attention rules, applied per project in registry order:
1. Directory missing -> high "Directory not found" (no further checks)
2. No parseable state.json and registry status active -> medium
   "Not migrated to orchestrator"
3. Failed tasks -> one high flag naming the count and task ids
4. Active and state.lastUpdated older than the staleness threshold ->
   medium flag with the whole days since the update

The final list is ordered by severity (high, medium, low, info, then
anything unknown); projects keep registry order within a severity.
"""

import logging
from datetime import datetime, timedelta

from constellation.core.aggregator.models import (
    AttentionFlag,
    AttentionSeverity,
    ProjectActivity,
    ProjectCounts,
    ProjectSummary,
    TaskRef,
    TaskTotals,
)
from constellation.core.parsing.checklist import count_checkboxes
from constellation.core.parsing.feed import parse_timestamp, sort_newest_first
from constellation.core.projects.models import ProjectState, TaskStatus
from constellation.core.projects.state import try_load_project_state
from constellation.core.registry.loader import ProjectRegistry
from constellation.core.registry.models import Project, ProjectStatus
from constellation.core.sources.reader import SourceReader

logger = logging.getLogger(__name__)

TASKS_FILE = "TASKS.md"
PRD_FILE = "PRD.md"
PROGRESS_FILE = "progress.txt"

SEVERITY_RANK: dict[str, int] = {
    AttentionSeverity.HIGH.value: 0,
    AttentionSeverity.MEDIUM.value: 1,
    AttentionSeverity.LOW.value: 2,
    AttentionSeverity.INFO.value: 3,
}

# First matching rule wins; tasks matching none stay out of every bucket
BUCKET_RULES: list[tuple[str, frozenset[str]]] = [
    ("content", frozenset({"content", "marketing"})),
    ("research", frozenset({"research", "analysis"})),
]


def progress_percent(done: int, total: int) -> int:
    """
    Completion percentage, rounded half up.

    Returns:
        0 when total is 0, otherwise round(100 * done / total)
    """
    if total <= 0:
        return 0
    return (200 * done + total) // (2 * total)


def severity_rank(severity: object) -> int:
    value = getattr(severity, "value", severity)
    return SEVERITY_RANK.get(str(value), len(SEVERITY_RANK))


def sort_by_severity(flags: list[AttentionFlag]) -> list[AttentionFlag]:
    """Stable sort by severity rank."""
    return sorted(flags, key=lambda flag: severity_rank(flag.severity))


def _flag(project: Project, reason: str, severity: AttentionSeverity) -> AttentionFlag:
    return AttentionFlag(
        project=project.name, slug=project.slug, reason=reason, severity=severity
    )


def _last_note(text: str | None) -> str:
    if not text:
        return ""
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    return lines[-1] if lines else ""


def derive_phase(reader: SourceReader, project: Project, state: ProjectState | None) -> str:
    """
    Lifecycle phase of a project.

    state.json's phase wins; otherwise the phase follows which planning
    documents exist: no PRD -> init, PRD but no TASKS -> prd, both -> build.
    """
    if state is not None and state.phase:
        return state.phase
    if not reader.project_has_file(project, PRD_FILE):
        return "init"
    if not reader.project_has_file(project, TASKS_FILE):
        return "prd"
    return "build"


def summarize_project(reader: SourceReader, project: Project) -> ProjectSummary:
    """Derive the list-view figures of one project."""
    if not reader.project_exists(project):
        return ProjectSummary(
            name=project.name,
            slug=project.slug,
            status=project.status,
            assigned_to=project.assigned_to,
        )

    state = try_load_project_state(reader, project)
    done, total = count_checkboxes(reader.read_project_file(project, TASKS_FILE))
    note = _last_note(reader.read_project_file(project, PROGRESS_FILE))
    if not note and state is not None and state.progress_note:
        note = state.progress_note

    return ProjectSummary(
        name=project.name,
        slug=project.slug,
        status=project.status,
        assigned_to=project.assigned_to,
        exists=True,
        has_state=state is not None,
        phase=derive_phase(reader, project, state),
        progress=progress_percent(done, total),
        total_tasks=total,
        done_tasks=done,
        progress_note=note,
    )


def project_flags(
    reader: SourceReader,
    project: Project,
    now: datetime,
    stale_days: int,
) -> list[AttentionFlag]:
    """Attention flags contributed by one project, in rule order."""
    if not reader.project_exists(project):
        return [_flag(project, "Directory not found", AttentionSeverity.HIGH)]

    active = project.status == ProjectStatus.ACTIVE
    state = try_load_project_state(reader, project)
    if state is None:
        if active:
            return [_flag(project, "Not migrated to orchestrator", AttentionSeverity.MEDIUM)]
        return []

    flags: list[AttentionFlag] = []

    failed = state.failed_tasks()
    if failed:
        noun = "task" if len(failed) == 1 else "tasks"
        ids = ", ".join(task.id for task in failed)
        flags.append(
            _flag(project, f"{len(failed)} failed {noun}: {ids}", AttentionSeverity.HIGH)
        )

    if active:
        updated = parse_timestamp(state.last_updated)
        if updated is not None and now - updated > timedelta(days=stale_days):
            days = (now - updated).days
            flags.append(
                _flag(project, f"No updates in {days} days", AttentionSeverity.MEDIUM)
            )

    return flags


def needs_attention(
    reader: SourceReader,
    registry: ProjectRegistry,
    now: datetime,
    stale_days: int,
) -> list[AttentionFlag]:
    """Attention flags for every registered project, most severe first."""
    flags: list[AttentionFlag] = []
    for project in registry:
        flags.extend(project_flags(reader, project, now, stale_days))
    return sort_by_severity(flags)


def load_states(
    reader: SourceReader, registry: ProjectRegistry
) -> list[tuple[Project, ProjectState]]:
    """(project, state) pairs for every project with a parseable state.json."""
    pairs = []
    for project in registry:
        state = try_load_project_state(reader, project)
        if state is not None:
            pairs.append((project, state))
    return pairs


def activity_feed(
    states: list[tuple[Project, ProjectState]], cap: int
) -> list[ProjectActivity]:
    """
    Every project's activity, newest first.

    Events without a parseable time sink to the bottom.
    """
    events = [
        ProjectActivity(
            project=project.name,
            slug=project.slug,
            message=event.message,
            type=event.type,
            time=event.time,
        )
        for project, state in states
        for event in state.activity
    ]
    return sort_newest_first(events, key=lambda event: event.time)[:cap]


def task_rollup(
    states: list[tuple[Project, ProjectState]],
) -> tuple[TaskTotals, dict[str, list[TaskRef]]]:
    """
    Count tasks across projects and route them into type buckets.

    Returns:
        Tuple of (totals over every task, bucket name -> tasks)
    """
    totals = TaskTotals()
    buckets: dict[str, list[TaskRef]] = {name: [] for name, _ in BUCKET_RULES}

    for project, state in states:
        for task in state.tasks:
            totals.total += 1
            if task.status == TaskStatus.PENDING:
                totals.pending += 1
            elif task.status == TaskStatus.IN_PROGRESS:
                totals.in_progress += 1
            elif task.status == TaskStatus.DONE:
                totals.done += 1
            elif task.status == TaskStatus.FAILED:
                totals.failed += 1

            task_type = task.type.strip().lower()
            for bucket, types in BUCKET_RULES:
                if task_type in types:
                    buckets[bucket].append(
                        TaskRef(
                            project=project.name,
                            slug=project.slug,
                            id=task.id,
                            title=task.title,
                            type=task.type,
                            status=task.status.value,
                            milestone=task.milestone,
                        )
                    )
                    break

    return totals, buckets


def count_by_status(registry: ProjectRegistry) -> ProjectCounts:
    counts = ProjectCounts(total=len(registry))
    for project in registry:
        if project.status == ProjectStatus.ACTIVE:
            counts.active += 1
        elif project.status == ProjectStatus.PAUSED:
            counts.paused += 1
        elif project.status == ProjectStatus.COMPLETE:
            counts.complete += 1
    return counts
