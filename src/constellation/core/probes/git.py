"""
Source-control probe backed by `git rev-list`.
"""

from datetime import date
from pathlib import Path
from typing import Protocol

from constellation.core.probes.runner import run_command


class SourceControl(Protocol):
    """Anything that can count commits in a repository."""

    def commit_count(self, repo_dir: Path, since: date) -> int: ...


class GitProbe:
    """
    Counts commits with `git -C <dir> rev-list --count --since=<date> HEAD`.

    Directories without a .git entry are skipped without running git.
    """

    def __init__(self, timeout: float = 3.0, binary: str = "git") -> None:
        self.timeout = timeout
        self.binary = binary

    def commit_count(self, repo_dir: Path, since: date) -> int:
        if not (repo_dir / ".git").exists():
            return 0
        output = run_command(
            [
                self.binary,
                "-C",
                str(repo_dir),
                "rev-list",
                "--count",
                f"--since={since.isoformat()}",
                "HEAD",
            ],
            self.timeout,
        )
        if output is None:
            return 0
        try:
            return int(output.strip() or 0)
        except ValueError:
            return 0


class NullSourceControl:
    """Used when probes are disabled."""

    def commit_count(self, repo_dir: Path, since: date) -> int:
        return 0
