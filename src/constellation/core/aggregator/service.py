"""
Aggregator service.

The single entry point the API and CLI use. It holds no state between
calls: every method reloads the registry and re-reads its sources, so a
result always reflects the workspace as it is at call time.

Example:
    >>> aggregator = Aggregator(load_config())
    >>> overview = aggregator.overview()
    >>> [flag.reason for flag in overview.attention]
    ['Directory not found', 'Not migrated to orchestrator']
"""

import logging
import os
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from pathlib import Path

from constellation.core.aggregator import agents as agent_views
from constellation.core.aggregator import departments as department_views
from constellation.core.aggregator import ideas as idea_views
from constellation.core.aggregator import projects as project_views
from constellation.core.aggregator.models import (
    AgentSummary,
    AttentionFlag,
    BlockedItem,
    ChangelogEntry,
    CountBreakdown,
    DepartmentFeedEntry,
    DepartmentStatus,
    DepartmentSummary,
    HealthReport,
    HealthSummary,
    Idea,
    Metrics,
    Overview,
    ProjectActivity,
    ProjectSummary,
)
from constellation.core.config.models import ConstellationConfig
from constellation.core.parsing.checklist import count_checkboxes, parse_checklist
from constellation.core.parsing.models import ChecklistItem
from constellation.core.probes import build_probes
from constellation.core.probes.git import SourceControl
from constellation.core.probes.models import CommitCounts
from constellation.core.probes.pm2 import ProcessManager
from constellation.core.projects.models import ProjectState
from constellation.core.projects.state import (
    ProjectDirectoryNotFoundError,
    load_project_state,
)
from constellation.core.registry.loader import ProjectRegistry
from constellation.core.registry.models import Project
from constellation.core.sources.reader import InvalidSourcePathError, SourceReader

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Aggregator:
    """
    Builds every dashboard view from the workspace.

    Args:
        config: Workspace paths, caps and thresholds
        process_manager: pm2 capability (defaults from config.probes)
        source_control: git capability (defaults from config.probes)
        clock: Returns the current aware datetime
    """

    def __init__(
        self,
        config: ConstellationConfig,
        process_manager: ProcessManager | None = None,
        source_control: SourceControl | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.config = config
        self.reader = SourceReader(config)
        default_pm, default_scm = build_probes(config.probes)
        self.process_manager = process_manager or default_pm
        self.source_control = source_control or default_scm
        self.clock = clock

    @property
    def limits(self):
        return self.config.limits

    def registry(self) -> ProjectRegistry:
        return ProjectRegistry.load(self.config.registry_file)

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------

    def get_project(self, slug: str) -> Project | None:
        return self.registry().get(slug)

    def list_projects(self) -> list[ProjectSummary]:
        return [project_views.summarize_project(self.reader, p) for p in self.registry()]

    def project_state(self, project: Project) -> ProjectState:
        """
        The project's own state document.

        Raises:
            ProjectStateError: With code DIR_NOT_FOUND, NO_STATE or MALFORMED
        """
        return load_project_state(self.reader, project)

    def project_document(self, project: Project, filename: str) -> str | None:
        """
        Text of a project file, or None if it is absent or rejected.

        Raises:
            ProjectDirectoryNotFoundError: The project directory is missing
        """
        if not self.reader.project_exists(project):
            raise ProjectDirectoryNotFoundError()
        return self.reader.read_project_file(project, filename)

    def project_tasks(self, project: Project) -> tuple[str, list[ChecklistItem], int, int] | None:
        """
        TASKS.md content with its parsed checklist.

        Returns:
            (content, items, done, total), or None if there is no TASKS.md
        """
        content = self.project_document(project, project_views.TASKS_FILE)
        if content is None:
            return None
        done, total = count_checkboxes(content)
        return content, parse_checklist(content), done, total

    def project_file(self, project: Project, relative: str) -> tuple[str, str] | None:
        """
        An allow-listed project file.

        Returns:
            (path relative to the project, content), or None when the path
            is rejected or the file is missing
        """
        if not self.reader.project_exists(project):
            return None
        try:
            path = self.reader.resolve_project_file(project, relative)
        except InvalidSourcePathError:
            return None
        content = self.reader.read_project_file(project, relative)
        if content is None:
            return None
        relative_path = os.path.relpath(path, os.path.abspath(project.path))
        return Path(relative_path).as_posix(), content

    # ------------------------------------------------------------------
    # Overview
    # ------------------------------------------------------------------

    def needs_attention(self) -> list[AttentionFlag]:
        return project_views.needs_attention(
            self.reader, self.registry(), self.clock(), self.limits.stale_days
        )

    def activity_feed(self) -> list[ProjectActivity]:
        states = project_views.load_states(self.reader, self.registry())
        return project_views.activity_feed(states, self.limits.activity_feed)

    def overview(self) -> Overview:
        registry = self.registry()
        now = self.clock()
        states = project_views.load_states(self.reader, registry)
        totals, buckets = project_views.task_rollup(states)

        return Overview(
            counts=project_views.count_by_status(registry),
            tasks=totals,
            attention=project_views.needs_attention(
                self.reader, registry, now, self.limits.stale_days
            ),
            activity=project_views.activity_feed(states, self.limits.activity_feed),
            content=buckets["content"],
            research=buckets["research"],
        )

    # ------------------------------------------------------------------
    # Agents
    # ------------------------------------------------------------------

    def agents(self) -> list[AgentSummary]:
        processes = self.process_manager.list_processes()
        return [
            agent_views.build_agent_summary(
                self.reader, agent, processes, self.limits.feed_entries
            )
            for agent in self.config.agents
        ]

    def changelog(self, since: str | None) -> tuple[str, list[ChangelogEntry]]:
        window = agent_views.normalize_window(since)
        entries = agent_views.build_changelog(
            self.reader,
            self.config.agents,
            window,
            self.clock(),
            self.limits.feed_entries,
            self.limits.changelog_entries,
        )
        return window, entries

    def blocked(self) -> list[BlockedItem]:
        return agent_views.build_blocked_list(
            self.reader, self.config.agents, self.limits.feed_entries
        )

    # ------------------------------------------------------------------
    # Ideas
    # ------------------------------------------------------------------

    def ideas(self) -> list[Idea]:
        return idea_views.collect_ideas(self.reader, self.registry())

    # ------------------------------------------------------------------
    # Departments
    # ------------------------------------------------------------------

    def departments(self) -> list[DepartmentSummary]:
        return [
            department_views.summarize_department(self.reader, name, self.limits.feed_entries)
            for name in self.config.departments
        ]

    def department(self, name: str) -> DepartmentStatus | None:
        """Detail of a configured department, or None for an unknown name."""
        if name not in self.config.departments:
            return None
        assigned = [
            project_views.summarize_project(self.reader, project)
            for project in self.registry()
            if project.assigned_to == name
        ]
        return department_views.build_department_detail(
            self.reader,
            name,
            assigned,
            self.limits.feed_entries,
            self.limits.tweets,
            self.limits.findings,
        )

    def department_feed(self) -> list[DepartmentFeedEntry]:
        return department_views.department_feed(
            self.reader, self.config.departments, self.limits.department_feed
        )

    # ------------------------------------------------------------------
    # System
    # ------------------------------------------------------------------

    def health(self) -> HealthReport:
        services = self.process_manager.list_processes()
        online = sum(1 for service in services if service.is_online)
        return HealthReport(
            services=services,
            summary=HealthSummary(
                total=len(services), online=online, stopped=len(services) - online
            ),
        )

    def commit_counts(self) -> CommitCounts:
        today = self.clock().date()
        week_ago = today - timedelta(days=7)
        counts = CommitCounts()
        for project in self.registry():
            if not self.reader.project_exists(project):
                continue
            counts.commits_today += self.source_control.commit_count(project.path, today)
            counts.commits_week += self.source_control.commit_count(project.path, week_ago)
        return counts

    def metrics(self) -> Metrics:
        feed_counts: dict[str, int] = {}
        inbox_depth: dict[str, int] = {}
        for agent in self.config.agents:
            feed_counts[agent] = len(
                agent_views.read_agent_feed(self.reader, agent, self.limits.feed_entries)
            )
            inbox_depth[agent] = agent_views.summarize_inbox(self.reader, agent).pending

        return Metrics(
            feed_entries=CountBreakdown(total=sum(feed_counts.values()), per_agent=feed_counts),
            inbox_depth=CountBreakdown(total=sum(inbox_depth.values()), per_agent=inbox_depth),
            git=self.commit_counts(),
            last_updated=self.clock().isoformat(),
        )
