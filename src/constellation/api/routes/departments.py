"""
Department API routes.

- GET /api/departments - Department cards
- GET /api/departments/feed - Outbox entries of every department, newest first
- GET /api/departments/{name} - One department's status, feeds, inbox and
  department-specific sections
"""

from fastapi import APIRouter, Depends

from constellation.api.deps import get_aggregator
from constellation.api.errors import not_found
from constellation.core.aggregator import Aggregator
from constellation.core.aggregator.models import (
    DepartmentFeedEntry,
    DepartmentStatus,
    DepartmentSummary,
)
from constellation.core.parsing.models import RecordModel

router = APIRouter()


class DepartmentList(RecordModel):
    departments: list[DepartmentSummary]


class DepartmentFeed(RecordModel):
    entries: list[DepartmentFeedEntry]


@router.get("/departments", response_model=DepartmentList)
async def list_departments(aggregator: Aggregator = Depends(get_aggregator)) -> DepartmentList:
    return DepartmentList(departments=aggregator.departments())


@router.get("/departments/feed", response_model=DepartmentFeed)
async def get_department_feed(
    aggregator: Aggregator = Depends(get_aggregator),
) -> DepartmentFeed:
    return DepartmentFeed(entries=aggregator.department_feed())


@router.get("/departments/{name}", response_model=DepartmentStatus)
async def get_department(
    name: str, aggregator: Aggregator = Depends(get_aggregator)
) -> DepartmentStatus:
    """
    Get one department's detail.

    Raises:
        ApiError: 404 if the department is not configured
    """
    detail = aggregator.department(name)
    if detail is None:
        raise not_found("Department not found")
    return detail
