"""
System API routes.

- GET /api/health - pm2 process list with an online/stopped summary
- GET /api/metrics - Feed volume, inbox depth and commit counts

Every metrics figure is derived from workspace files or git; there are
no simulated values.
"""

from fastapi import APIRouter, Depends

from constellation.api.deps import get_aggregator
from constellation.core.aggregator import Aggregator
from constellation.core.aggregator.models import HealthReport, Metrics

router = APIRouter()


@router.get("/health", response_model=HealthReport)
def get_health(aggregator: Aggregator = Depends(get_aggregator)) -> HealthReport:
    """
    Get supervised process status.

    If pm2 is missing, slow or failing the service list is empty.
    """
    return aggregator.health()


@router.get("/metrics", response_model=Metrics)
def get_metrics(aggregator: Aggregator = Depends(get_aggregator)) -> Metrics:
    return aggregator.metrics()
