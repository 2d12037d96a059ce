from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.core.validation import parse_id
from app.schemas.estimate import (
    EstimateDeleteResponse,
    EstimateListResponse,
    EstimateOut,
    EstimateWrite,
)
from app.services.auth_service import Identity
from app.services.estimate_service import EstimateService, to_estimate_out
from app.api.deps import get_estimate_service, require_identity

router = APIRouter(prefix="/estimates", tags=["Estimates"])


@router.post("", response_model=EstimateOut, status_code=201)
async def create_estimate(
    payload: EstimateWrite,
    identity: Identity = Depends(require_identity),
    service: EstimateService = Depends(get_estimate_service),
) -> EstimateOut:
    """Create an estimate owned by the caller; the quote number is generated."""
    estimate = await service.create_estimate(identity.user_id, payload)
    return to_estimate_out(estimate)


@router.get("", response_model=EstimateListResponse)
async def list_estimates(
    page: Optional[int] = Query(default=None),
    limit: Optional[int] = Query(default=None),
    status: Optional[str] = Query(default=None),
    search: Optional[str] = Query(default=None),
    identity: Identity = Depends(require_identity),
    service: EstimateService = Depends(get_estimate_service),
) -> EstimateListResponse:
    estimates, total, page, pages = await service.list_estimates(
        identity.user_id, page=page, limit=limit, status=status, search=search
    )
    return EstimateListResponse(
        estimates=[to_estimate_out(e) for e in estimates],
        total=total,
        page=page,
        total_pages=pages,
    )


@router.get("/{estimate_id}", response_model=EstimateOut)
async def get_estimate(
    estimate_id: str,
    identity: Identity = Depends(require_identity),
    service: EstimateService = Depends(get_estimate_service),
) -> EstimateOut:
    estimate = await service.get_estimate(identity.user_id, parse_id(estimate_id))
    return to_estimate_out(estimate)


@router.patch("", response_model=EstimateOut)
async def update_estimate(
    payload: EstimateWrite,
    estimate_id: Optional[str] = Query(default=None, alias="id"),
    identity: Identity = Depends(require_identity),
    service: EstimateService = Depends(get_estimate_service),
) -> EstimateOut:
    estimate = await service.update_estimate(
        identity.user_id, parse_id(estimate_id), payload
    )
    return to_estimate_out(estimate)


@router.delete("", response_model=EstimateDeleteResponse)
async def delete_estimate(
    estimate_id: Optional[str] = Query(default=None, alias="id"),
    identity: Identity = Depends(require_identity),
    service: EstimateService = Depends(get_estimate_service),
) -> EstimateDeleteResponse:
    estimate = await service.delete_estimate(identity.user_id, parse_id(estimate_id))
    return EstimateDeleteResponse(
        message="Estimate deleted successfully", estimate=to_estimate_out(estimate)
    )
