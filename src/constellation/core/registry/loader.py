"""
Project registry loading.

Any failure to load the registry (missing file, invalid JSON, no
"projects" array) yields an empty registry. "No projects" is a normal
state that every view handles with zeroed output.
"""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from constellation.core.registry.models import Project

logger = logging.getLogger(__name__)


class ProjectRegistry:
    """
    Ordered list of registered projects.

    Example:
        >>> registry = ProjectRegistry.load(Path("org/projects.json"))
        >>> project = registry.get("launch-site")
        >>> project.name if project else None
        'Launch Site'
    """

    def __init__(self, projects: list[Project] | None = None) -> None:
        self.projects: list[Project] = list(projects or [])

    def __iter__(self):
        return iter(self.projects)

    def __len__(self) -> int:
        return len(self.projects)

    def get(self, slug: str) -> Project | None:
        """Look up a project by slug; the first registered match wins."""
        for project in self.projects:
            if project.slug == slug:
                return project
        return None

    def find(self, value: str) -> Project | None:
        """Look up a project by name or slug, case-insensitively."""
        for project in self.projects:
            if project.matches(value):
                return project
        return None

    @classmethod
    def load(cls, registry_path: Path) -> "ProjectRegistry":
        """
        Load the registry document.

        Relative project paths are resolved against the registry's directory.
        Entries that fail validation are skipped with a warning.
        """
        try:
            data = json.loads(registry_path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            logger.debug(f"Project registry not found: {registry_path}")
            return cls()
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to read project registry {registry_path}: {e}")
            return cls()

        entries = data.get("projects") if isinstance(data, dict) else None
        if not isinstance(entries, list):
            logger.warning(f"Project registry has no projects array: {registry_path}")
            return cls()

        base_dir = registry_path.parent
        projects: list[Project] = []
        for index, entry in enumerate(entries):
            if not isinstance(entry, dict):
                logger.warning(f"Skipping registry entry {index}: not an object")
                continue
            try:
                project = Project.model_validate(entry)
            except ValidationError as e:
                logger.warning(f"Skipping registry entry {index}: {e.error_count()} errors")
                continue
            path = project.path.expanduser()
            if not path.is_absolute():
                path = base_dir / path
            projects.append(project.model_copy(update={"path": path}))

        return cls(projects)
