from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from app.core.config import settings
from app.core.rate_limit import limiter
from app.core.validation import parse_id
from app.schemas.lead import (
    AssignedUserOut,
    LeadCreate,
    LeadDeleteResponse,
    LeadDetailOut,
    LeadListResponse,
    LeadOut,
    LeadUpdate,
)
from app.services.auth_service import Identity
from app.services.lead_service import LeadService
from app.api.deps import get_lead_service, require_admin, require_identity

router = APIRouter(prefix="/leads", tags=["Leads"])


@router.post("", response_model=LeadOut, status_code=201)
@limiter.limit(settings.PUBLIC_WRITE_RATE_LIMIT)
async def create_lead(
    request: Request,
    payload: LeadCreate,
    service: LeadService = Depends(get_lead_service),
) -> LeadOut:
    """Create a lead from a public form.

    No authentication; rate-limited per client address.
    """
    lead = await service.create_lead(payload)
    return LeadOut.model_validate(lead)


@router.get("", response_model=LeadListResponse)
async def list_leads(
    page: Optional[int] = Query(default=None),
    limit: Optional[int] = Query(default=None),
    status: Optional[str] = Query(default=None),
    assigned_to: Optional[int] = Query(default=None, alias="assignedTo"),
    search: Optional[str] = Query(default=None),
    identity: Identity = Depends(require_identity),
    service: LeadService = Depends(get_lead_service),
) -> LeadListResponse:
    leads, total, page, pages = await service.list_leads(
        page=page, limit=limit, status=status, assigned_to=assigned_to, search=search
    )
    return LeadListResponse(
        leads=[LeadOut.model_validate(lead) for lead in leads],
        total=total,
        page=page,
        total_pages=pages,
    )


@router.get("/{lead_id}", response_model=LeadDetailOut)
async def get_lead(
    lead_id: str,
    identity: Identity = Depends(require_identity),
    service: LeadService = Depends(get_lead_service),
) -> LeadDetailOut:
    lead, assignee = await service.get_lead(parse_id(lead_id))
    return LeadDetailOut(
        **LeadOut.model_validate(lead).model_dump(),
        assigned_user=AssignedUserOut.model_validate(assignee) if assignee else None,
    )


@router.patch("/{lead_id}", response_model=LeadOut)
async def update_lead(
    lead_id: str,
    payload: LeadUpdate,
    identity: Identity = Depends(require_identity),
    service: LeadService = Depends(get_lead_service),
) -> LeadOut:
    """Partial update; fields absent from the body are left untouched."""
    lead = await service.update_lead(parse_id(lead_id), payload)
    return LeadOut.model_validate(lead)


@router.patch("", response_model=LeadOut)
async def update_lead_by_query(
    payload: LeadUpdate,
    lead_id: Optional[str] = Query(default=None, alias="id"),
    identity: Identity = Depends(require_identity),
    service: LeadService = Depends(get_lead_service),
) -> LeadOut:
    """Same as ``PATCH /leads/{id}`` with the id in the query string."""
    lead = await service.update_lead(parse_id(lead_id), payload)
    return LeadOut.model_validate(lead)


@router.delete("", response_model=LeadDeleteResponse)
async def delete_lead(
    lead_id: Optional[str] = Query(default=None, alias="id"),
    cascade: bool = Query(default=False),
    identity: Identity = Depends(require_admin),
    service: LeadService = Depends(get_lead_service),
) -> LeadDeleteResponse:
    """Admin only.  Refused while dependents exist unless ``cascade=true``."""
    lead, removed = await service.delete_lead(parse_id(lead_id), cascade=cascade)
    return LeadDeleteResponse(
        message="Lead deleted successfully",
        lead=LeadOut.model_validate(lead),
        removed=removed,
    )
