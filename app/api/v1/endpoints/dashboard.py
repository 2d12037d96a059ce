from fastapi import APIRouter, Depends

from app.schemas.dashboard import DashboardStats
from app.services.auth_service import Identity
from app.services.dashboard_service import DashboardService
from app.api.deps import get_dashboard_service, require_identity

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/stats", response_model=DashboardStats)
async def dashboard_stats(
    identity: Identity = Depends(require_identity),
    service: DashboardService = Depends(get_dashboard_service),
) -> DashboardStats:
    """Lead and quote counters, conversion rate and the newest leads."""
    return await service.compute_dashboard_stats()
