"""
Ideas API route.

- GET /api/ideas - Ideas from the global list and every project
"""

from fastapi import APIRouter, Depends

from constellation.api.deps import get_aggregator
from constellation.core.aggregator import Aggregator
from constellation.core.aggregator.ideas import count_ideas
from constellation.core.aggregator.models import Idea, IdeaCounts
from constellation.core.parsing.models import RecordModel

router = APIRouter()


class IdeaList(RecordModel):
    ideas: list[Idea]
    counts: IdeaCounts


@router.get("/ideas", response_model=IdeaList)
async def list_ideas(aggregator: Aggregator = Depends(get_aggregator)) -> IdeaList:
    """
    Get the flattened idea list with `#project:` re-routing applied.

    Example response:
        {
          "ideas": [
            {"title": "Ship it", "status": "done", "doneDate": "2026-01-02",
             "source": "Launch Site", "tags": ["done:2026-01-02"], ...}
          ],
          "counts": {"total": 1, "open": 0, "blocked": 0, "done": 1}
        }
    """
    ideas = aggregator.ideas()
    return IdeaList(ideas=ideas, counts=count_ideas(ideas))
