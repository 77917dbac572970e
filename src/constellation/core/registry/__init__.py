"""
Project registry.

Loads the list of known projects, their directories and registry status
from a single JSON document and provides lookup by slug.
"""

from constellation.core.registry.loader import ProjectRegistry
from constellation.core.registry.models import Project, ProjectStatus, slugify

__all__ = ["Project", "ProjectRegistry", "ProjectStatus", "slugify"]
