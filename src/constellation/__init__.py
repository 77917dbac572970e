"""
Constellation - agent operations dashboard

Aggregates the markdown and JSON status artifacts written by autonomous
agent departments into a read-only JSON API for a dashboard UI.
"""

__version__ = "0.4.0"

# Re-export core models for convenience
from constellation.core.config.models import ConstellationConfig
from constellation.core.registry.models import Project, ProjectStatus

__all__ = ["ConstellationConfig", "Project", "ProjectStatus", "__version__"]
