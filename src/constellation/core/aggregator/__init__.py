"""
Aggregator: combines parsed records from every source into the
dashboard's derived views.

- agents: agent cards, changelog, blocked list
- projects: summaries, needs-attention flags, activity feed, task rollups
- ideas: global and per-project ideas with project re-routing
- departments: department list, detail and pooled outbox feed
- service: the Aggregator facade used by the API and CLI
"""

from constellation.core.aggregator.service import Aggregator

__all__ = ["Aggregator"]
