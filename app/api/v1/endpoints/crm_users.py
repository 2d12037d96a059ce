from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.core.validation import parse_id
from app.schemas.crm_user import (
    CrmUserCreate,
    CrmUserDeleteResponse,
    CrmUserListResponse,
    CrmUserOut,
    CrmUserUpdate,
)
from app.services.auth_service import Identity
from app.services.crm_user_service import CrmUserService
from app.api.deps import get_crm_user_service, require_admin, require_identity

router = APIRouter(prefix="/crm-users", tags=["CRM Users"])


@router.get("/me", response_model=CrmUserOut)
async def get_my_profile(
    identity: Identity = Depends(require_identity),
    service: CrmUserService = Depends(get_crm_user_service),
) -> CrmUserOut:
    """CRM profile linked to the caller's identity."""
    crm_user = await service.get_profile(identity.user_id)
    return CrmUserOut.model_validate(crm_user)


@router.get("", response_model=CrmUserListResponse)
async def list_crm_users(
    page: Optional[int] = Query(default=None),
    limit: Optional[int] = Query(default=None),
    identity: Identity = Depends(require_admin),
    service: CrmUserService = Depends(get_crm_user_service),
) -> CrmUserListResponse:
    users, total, page, pages = await service.list_users(page=page, limit=limit)
    return CrmUserListResponse(
        users=[CrmUserOut.model_validate(u) for u in users],
        total=total,
        page=page,
        total_pages=pages,
    )


@router.get("/{user_id}", response_model=CrmUserOut)
async def get_crm_user(
    user_id: str,
    identity: Identity = Depends(require_admin),
    service: CrmUserService = Depends(get_crm_user_service),
) -> CrmUserOut:
    crm_user = await service.get_user(parse_id(user_id))
    return CrmUserOut.model_validate(crm_user)


@router.post("", response_model=CrmUserOut, status_code=201)
async def create_crm_user(
    payload: CrmUserCreate,
    identity: Identity = Depends(require_admin),
    service: CrmUserService = Depends(get_crm_user_service),
) -> CrmUserOut:
    crm_user = await service.create_user(payload)
    return CrmUserOut.model_validate(crm_user)


@router.patch("", response_model=CrmUserOut)
async def update_crm_user(
    payload: CrmUserUpdate,
    user_id: Optional[str] = Query(default=None, alias="id"),
    identity: Identity = Depends(require_admin),
    service: CrmUserService = Depends(get_crm_user_service),
) -> CrmUserOut:
    crm_user = await service.update_user(parse_id(user_id), payload)
    return CrmUserOut.model_validate(crm_user)


@router.delete("", response_model=CrmUserDeleteResponse)
async def delete_crm_user(
    user_id: Optional[str] = Query(default=None, alias="id"),
    identity: Identity = Depends(require_admin),
    service: CrmUserService = Depends(get_crm_user_service),
) -> CrmUserDeleteResponse:
    """Leads assigned to the user become unassigned."""
    crm_user = await service.delete_user(parse_id(user_id))
    return CrmUserDeleteResponse(
        message="User deleted successfully", user=CrmUserOut.model_validate(crm_user)
    )
