"""
Records returned by external process probes.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ProcessInfo(BaseModel):
    """One process as reported by the process manager."""

    name: str
    status: str = "unknown"
    cpu: float = 0
    memory: int = Field(default=0, description="Resident memory in MB")
    uptime: int = Field(default=0, description="Start time (epoch ms) as reported by pm2")
    restarts: int = 0
    pid: int | None = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @property
    def is_online(self) -> bool:
        return self.status == "online"


class CommitCounts(BaseModel):
    """Commits across all registered project repositories."""

    commits_today: int = 0
    commits_week: int = 0

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )
