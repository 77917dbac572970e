"""
Overview API route.

- GET /api/overview - Project counts, task totals, attention flags,
  the cross-project activity feed and the content/research task buckets
"""

from fastapi import APIRouter, Depends

from constellation.api.deps import get_aggregator
from constellation.core.aggregator import Aggregator
from constellation.core.aggregator.models import Overview

router = APIRouter()


@router.get("/overview", response_model=Overview)
async def get_overview(aggregator: Aggregator = Depends(get_aggregator)) -> Overview:
    """
    Get the cross-project overview.

    With no registered projects every count is zero and every list empty.

    Example response:
        {
          "counts": {"total": 3, "active": 2, "paused": 1, "complete": 0},
          "tasks": {"total": 12, "pending": 4, "inProgress": 2, "done": 5, "failed": 1},
          "attention": [
            {"project": "Shop", "slug": "shop", "reason": "1 failed task: T7",
             "severity": "high"}
          ],
          "activity": [...],
          "content": [...],
          "research": [...]
        }
    """
    return aggregator.overview()
