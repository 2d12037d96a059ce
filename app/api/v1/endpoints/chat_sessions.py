from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from app.core.config import settings
from app.core.rate_limit import limiter
from app.core.validation import parse_id
from app.schemas.chat_session import (
    ChatSessionCreate,
    ChatSessionLeadOut,
    ChatSessionListItem,
    ChatSessionListResponse,
    ChatSessionOut,
    ChatSessionUpdate,
)
from app.services.auth_service import Identity
from app.services.chat_session_service import ChatSessionService
from app.api.deps import get_chat_session_service, require_identity

router = APIRouter(prefix="/chat-sessions", tags=["Chat Sessions"])


@router.post("", response_model=ChatSessionOut, status_code=201)
@limiter.limit(settings.PUBLIC_WRITE_RATE_LIMIT)
async def create_chat_session(
    request: Request,
    payload: ChatSessionCreate,
    service: ChatSessionService = Depends(get_chat_session_service),
) -> ChatSessionOut:
    """Store a chat transcript.  Public; the lead link is optional."""
    chat_session = await service.create_session(payload)
    return ChatSessionOut.model_validate(chat_session)


@router.get("", response_model=ChatSessionListResponse)
async def list_chat_sessions(
    page: Optional[int] = Query(default=None),
    limit: Optional[int] = Query(default=None),
    lead_id: Optional[int] = Query(default=None, alias="leadId"),
    status: Optional[str] = Query(default=None),
    identity: Identity = Depends(require_identity),
    service: ChatSessionService = Depends(get_chat_session_service),
) -> ChatSessionListResponse:
    rows, total, page, pages = await service.list_sessions(
        page=page, limit=limit, lead_id=lead_id, status=status
    )
    sessions = [
        ChatSessionListItem(
            **ChatSessionOut.model_validate(chat_session).model_dump(),
            lead=ChatSessionLeadOut.model_validate(lead) if lead else None,
        )
        for chat_session, lead in rows
    ]
    return ChatSessionListResponse(
        sessions=sessions, total=total, page=page, total_pages=pages
    )


@router.get("/{session_id}", response_model=ChatSessionOut)
async def get_chat_session(
    session_id: str,
    identity: Identity = Depends(require_identity),
    service: ChatSessionService = Depends(get_chat_session_service),
) -> ChatSessionOut:
    chat_session = await service.get_session(parse_id(session_id))
    return ChatSessionOut.model_validate(chat_session)


@router.patch("", response_model=ChatSessionOut)
async def update_chat_session(
    payload: ChatSessionUpdate,
    session_id: Optional[str] = Query(default=None, alias="id"),
    identity: Identity = Depends(require_identity),
    service: ChatSessionService = Depends(get_chat_session_service),
) -> ChatSessionOut:
    """Append messages and/or change status; earlier messages are kept."""
    chat_session = await service.update_session(parse_id(session_id), payload)
    return ChatSessionOut.model_validate(chat_session)
