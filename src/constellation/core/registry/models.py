"""
Pydantic models for the project registry.

The registry document lists every project the agents work on:

    {
      "projects": [
        {"name": "Launch Site", "path": "~/projects/launch-site",
         "status": "active", "assignedTo": "engineering"}
      ]
    }

`slug` is optional and derived from the name when absent.
"""

import re
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

SLUG_SEPARATORS = re.compile(r"[^a-z0-9]+")


def slugify(name: str) -> str:
    """
    Lowercase and hyphenate a display name.

    Example:
        >>> slugify("Launch Site (v2)")
        'launch-site-v2'
    """
    return SLUG_SEPARATORS.sub("-", name.lower()).strip("-")


class ProjectStatus(str, Enum):
    """Registry status of a project."""

    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETE = "complete"


class Project(BaseModel):
    """A registered project.

    Projects are loaded fresh for every request and never mutated.
    """

    name: str = Field(..., min_length=1, description="Display name")
    slug: str = Field(default="", description="URL identifier")
    path: Path = Field(..., description="Project directory")
    status: ProjectStatus = Field(default=ProjectStatus.ACTIVE)
    assigned_to: str = Field(default="engineering", description="Owning department")

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    @model_validator(mode="before")
    @classmethod
    def derive_slug(cls, data: object) -> object:
        if isinstance(data, dict) and not data.get("slug") and data.get("name"):
            data = {**data, "slug": slugify(str(data["name"]))}
        return data

    def matches(self, value: str) -> bool:
        """Case-insensitive match against name or slug."""
        needle = value.strip().lower()
        return needle in (self.name.lower(), self.slug.lower())
