"""
Configuration data models for constellation.

These models define the structure of .constellation.json and
~/.config/constellation/config.json files, with validation and type
safety via Pydantic.
"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_AGENTS = ["ceo", "engineering", "content", "comms", "research", "qa"]
DEFAULT_DEPARTMENTS = ["engineering", "content", "research", "comms", "qa"]


class LimitsConfig(BaseModel):
    """
    Retention windows and caps applied to derived views.

    Every list the API returns is bounded by one of these values.
    """
    feed_entries: int = Field(
        default=50,
        ge=1,
        description="Feed entries kept per agent (most recent survive)"
    )
    activity_feed: int = Field(
        default=50,
        ge=1,
        description="Maximum entries in the cross-project activity feed"
    )
    department_feed: int = Field(
        default=20,
        ge=1,
        description="Maximum entries in the pooled department outbox feed"
    )
    changelog_entries: int = Field(
        default=100,
        ge=1,
        description="Maximum entries returned by the changelog view"
    )
    tweets: int = Field(
        default=10,
        ge=1,
        description="Recent tweet-log entries shown for the content department"
    )
    findings: int = Field(
        default=20,
        ge=1,
        description="Recent findings shown for the research department"
    )
    stale_days: int = Field(
        default=7,
        ge=1,
        description="Days without a state update before an active project is flagged"
    )


class ProbeConfig(BaseModel):
    """
    External process probes (pm2, git).

    Probes are always bounded by a timeout and degrade to empty results.
    """
    enabled: bool = Field(
        default=True,
        description="Run external process probes at all"
    )
    pm2_timeout: float = Field(
        default=5.0,
        gt=0,
        description="Seconds to wait for `pm2 jlist`"
    )
    git_timeout: float = Field(
        default=3.0,
        gt=0,
        description="Seconds to wait for each `git rev-list` call"
    )


class ServerConfig(BaseModel):
    """HTTP server binding."""
    host: str = Field(default="127.0.0.1", description="Interface to bind")
    port: int = Field(default=3400, ge=1, le=65535, description="Port to listen on")


class ConstellationConfig(BaseModel):
    """
    Top-level constellation configuration.

    Loaded from defaults, user config, project config, and env vars, then
    passed explicitly to the aggregator. Nothing reads workspace paths from
    module globals.

    Example:
        >>> config = ConstellationConfig(workspace=Path("/srv/agents/workspace"))
        >>> config.agent_dir("engineering")
        PosixPath('/srv/agents/workspace-engineering')
        >>> config.limits.stale_days
        7
    """
    workspace: Path = Field(
        default_factory=lambda: Path.home() / ".openclaw" / "workspace",
        description="Root workspace shared by all agents"
    )
    registry_path: Path | None = Field(
        default=None,
        description="Project registry document (defaults to <workspace>/org/projects.json)"
    )
    ideas_path: Path | None = Field(
        default=None,
        description="Global ideas list (defaults to <workspace>/org/IDEAS.md)"
    )
    agents: list[str] = Field(
        default_factory=lambda: list(DEFAULT_AGENTS),
        description="Agents shown on the dashboard, in display order"
    )
    departments: list[str] = Field(
        default_factory=lambda: list(DEFAULT_DEPARTMENTS),
        description="Departments with status documents"
    )
    agent_dirs: dict[str, Path] = Field(
        default_factory=dict,
        description="Per-agent workspace overrides"
    )
    limits: LimitsConfig = Field(default_factory=LimitsConfig)
    probes: ProbeConfig = Field(default_factory=ProbeConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

    model_config = ConfigDict(
        extra="ignore",
    )

    @field_validator("workspace", mode="after")
    @classmethod
    def expand_workspace(cls, v: Path) -> Path:
        """Expand ~ so configs can use home-relative paths."""
        return v.expanduser()

    @property
    def org_dir(self) -> Path:
        """Shared organisation directory (feeds, registry, ideas)."""
        return self.workspace / "org"

    @property
    def feed_dir(self) -> Path:
        return self.org_dir / "feed"

    @property
    def registry_file(self) -> Path:
        if self.registry_path is not None:
            return self.registry_path.expanduser()
        return self.org_dir / "projects.json"

    @property
    def ideas_file(self) -> Path:
        if self.ideas_path is not None:
            return self.ideas_path.expanduser()
        return self.org_dir / "IDEAS.md"

    def agent_dir(self, name: str) -> Path:
        """
        Workspace directory of one agent or department.

        The ceo agent owns the root workspace; every other agent lives in a
        sibling directory suffixed with its name unless overridden.
        """
        if name in self.agent_dirs:
            return self.agent_dirs[name].expanduser()
        if name == "ceo":
            return self.workspace
        return self.workspace.with_name(f"{self.workspace.name}-{name}")
