"""
Agent API routes.

- GET /api/agents - Per-agent feed, inbox and process status
- GET /api/changelog - Pooled agent feed for a time window
- GET /api/blocked - Urgent inbox tickets and blocker-like feed entries
"""

from fastapi import APIRouter, Depends, Query

from constellation.api.deps import get_aggregator
from constellation.core.aggregator import Aggregator
from constellation.core.aggregator.agents import CHANGELOG_WINDOWS, DEFAULT_CHANGELOG_WINDOW
from constellation.core.aggregator.models import AgentSummary, BlockedItem, ChangelogEntry
from constellation.core.parsing.models import RecordModel

router = APIRouter()


class Changelog(RecordModel):
    since: str
    entries: list[ChangelogEntry]


@router.get("/agents", response_model=list[AgentSummary])
def list_agents(aggregator: Aggregator = Depends(get_aggregator)) -> list[AgentSummary]:
    """Get one summary per configured agent, feeds newest first."""
    return aggregator.agents()


@router.get("/changelog", response_model=Changelog)
async def get_changelog(
    since: str = Query(
        DEFAULT_CHANGELOG_WINDOW,
        description=f"Time window, one of {', '.join(CHANGELOG_WINDOWS)}",
    ),
    aggregator: Aggregator = Depends(get_aggregator),
) -> Changelog:
    """
    Get every agent's feed entries within a time window, newest first.

    Unrecognized windows fall back to 24h; the response echoes the window
    actually applied.
    """
    window, entries = aggregator.changelog(since)
    return Changelog(since=window, entries=entries)


@router.get("/blocked", response_model=list[BlockedItem])
async def list_blocked(aggregator: Aggregator = Depends(get_aggregator)) -> list[BlockedItem]:
    """Get urgent unfinished inbox tickets and feed entries that mention blockers."""
    return aggregator.blocked()
