"""
Source reader for the agent workspace.

Resolves logical sources (agent feeds, inboxes, department documents,
project files) to paths under the configured workspace and reads them
defensively: a missing file, a permission error or bytes that are not
UTF-8 all read as empty text. Callers never see an I/O exception.

Project-relative reads are validated before anything touches the disk:
the requested path must stay lexically inside the project's registered
directory and carry an allow-listed extension. A rejected path looks
exactly like a missing file to the caller.
"""

import json
import logging
import os
import re
from pathlib import Path
from typing import Any

from constellation.core.config.models import ConstellationConfig
from constellation.core.registry.models import Project

logger = logging.getLogger(__name__)

ALLOWED_PROJECT_EXTENSIONS = frozenset({".json", ".txt", ".md"})
IDENTIFIER_PATTERN = re.compile(r"^[a-z0-9][a-z0-9_-]*$")

STATUS_FILE = "STATUS.md"
OUTBOX_FILE = "outbox.md"
TWEET_LOG_FILE = "tweet-log.md"
INBOX_DIR = "inbox"
FINDINGS_DIR = "findings"


class InvalidSourcePathError(Exception):
    """A requested path escapes its directory or has a disallowed extension."""

    pass


def is_identifier(value: str) -> bool:
    """True for names safe to splice into a path (agents, departments)."""
    return bool(IDENTIFIER_PATTERN.match(value))


def resolve_within(base_dir: Path, relative: str) -> Path:
    """
    Resolve `relative` against `base_dir` without following symlinks.

    Args:
        base_dir: Directory the result must stay inside
        relative: Requested path, relative to base_dir

    Returns:
        Normalized absolute path inside base_dir

    Raises:
        InvalidSourcePathError: If the path is empty, absolute, contains a
            null byte, leaves base_dir, or has a disallowed extension
    """
    if not relative or not relative.strip():
        raise InvalidSourcePathError("empty path")
    if "\x00" in relative:
        raise InvalidSourcePathError("null byte in path")
    if os.path.isabs(relative):
        raise InvalidSourcePathError("absolute path")

    base = os.path.normpath(os.path.abspath(base_dir))
    candidate = os.path.normpath(os.path.join(base, relative))

    if os.path.commonpath([base, candidate]) != base or candidate == base:
        raise InvalidSourcePathError("path escapes project directory")

    if os.path.splitext(candidate)[1].lower() not in ALLOWED_PROJECT_EXTENSIONS:
        raise InvalidSourcePathError("extension not allowed")

    return Path(candidate)


class SourceReader:
    """
    Defensive file access for every workspace source.

    Example:
        >>> reader = SourceReader(config)
        >>> reader.read_feed("engineering")
        '**[9:05]** Picked up the pricing page\\n'
        >>> reader.read_project_file(project, "../../etc/passwd") is None
        True
    """

    def __init__(self, config: ConstellationConfig) -> None:
        self.config = config

    # ------------------------------------------------------------------
    # Raw reads
    # ------------------------------------------------------------------

    def read_text(self, path: Path) -> str:
        """Read a file as UTF-8, returning "" on any failure."""
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return ""
        except (OSError, UnicodeDecodeError, ValueError) as e:
            logger.debug(f"Treating unreadable source as empty: {path.name}: {e}")
            return ""

    def read_json(self, path: Path) -> Any | None:
        """Read and decode a JSON file, returning None on any failure."""
        text = self.read_text(path)
        if not text.strip():
            return None
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            logger.debug(f"Invalid JSON in {path.name}: {e}")
            return None

    def list_markdown(self, directory: Path) -> list[Path]:
        """Markdown files in a directory, sorted by name; [] if unreadable."""
        try:
            return sorted(
                entry for entry in directory.iterdir()
                if entry.suffix == ".md" and entry.is_file()
            )
        except OSError:
            return []

    # ------------------------------------------------------------------
    # Agent and department sources
    # ------------------------------------------------------------------

    def feed_path(self, agent: str) -> Path:
        return self.config.feed_dir / f"{agent}.md"

    def read_feed(self, agent: str) -> str:
        if not is_identifier(agent):
            return ""
        return self.read_text(self.feed_path(agent))

    def inbox_dir(self, agent: str) -> Path:
        return self.config.agent_dir(agent) / INBOX_DIR

    def read_inbox(self, agent: str) -> list[tuple[str, str]]:
        """
        Read every inbox ticket of an agent.

        Returns:
            List of (file name, content) pairs sorted by file name
        """
        if not is_identifier(agent):
            return []
        return [
            (path.name, self.read_text(path))
            for path in self.list_markdown(self.inbox_dir(agent))
        ]

    def read_status(self, department: str) -> str:
        if not is_identifier(department):
            return ""
        return self.read_text(self.config.agent_dir(department) / STATUS_FILE)

    def read_outbox(self, department: str) -> str:
        if not is_identifier(department):
            return ""
        return self.read_text(self.config.agent_dir(department) / OUTBOX_FILE)

    def read_tweet_log(self, department: str = "content") -> str:
        return self.read_text(self.config.agent_dir(department) / TWEET_LOG_FILE)

    def read_findings(self, department: str = "research") -> list[tuple[str, str]]:
        """Research findings as (file name, content) pairs sorted by name."""
        directory = self.config.agent_dir(department) / FINDINGS_DIR
        return [(path.name, self.read_text(path)) for path in self.list_markdown(directory)]

    def read_ideas(self) -> str:
        return self.read_text(self.config.ideas_file)

    # ------------------------------------------------------------------
    # Project sources
    # ------------------------------------------------------------------

    def project_exists(self, project: Project) -> bool:
        try:
            return project.path.is_dir()
        except OSError:
            return False

    def resolve_project_file(self, project: Project, relative: str) -> Path:
        """
        Validate and resolve a project-relative path.

        Raises:
            InvalidSourcePathError: If the path is rejected
        """
        return resolve_within(project.path, relative)

    def read_project_file(self, project: Project, relative: str) -> str | None:
        """
        Read a project file.

        Returns:
            File content, or None if the path is rejected, missing or unreadable
        """
        try:
            path = self.resolve_project_file(project, relative)
        except InvalidSourcePathError as e:
            logger.info(f"Rejected project file request for {project.slug}: {e}")
            return None
        if not path.is_file():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"Unreadable project file in {project.slug}: {e}")
            return None

    def project_has_file(self, project: Project, relative: str) -> bool:
        try:
            return self.resolve_project_file(project, relative).is_file()
        except (InvalidSourcePathError, OSError):
            return False
