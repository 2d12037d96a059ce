from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.core.validation import parse_id
from app.schemas.common import MessageResponse
from app.schemas.note import NoteCreate, NoteListResponse, NoteOut, NoteUpdate
from app.services.auth_service import Identity
from app.services.note_service import NoteService
from app.api.deps import get_note_service, require_identity

router = APIRouter(prefix="/notes", tags=["Notes"])


@router.post("", response_model=NoteOut, status_code=201)
async def create_note(
    payload: NoteCreate,
    identity: Identity = Depends(require_identity),
    service: NoteService = Depends(get_note_service),
) -> NoteOut:
    note = await service.create_note(identity.user_id, payload)
    return NoteOut.model_validate(note)


@router.get("", response_model=NoteListResponse)
async def list_notes(
    category: Optional[str] = Query(default=None),
    completed: Optional[bool] = Query(default=None),
    identity: Identity = Depends(require_identity),
    service: NoteService = Depends(get_note_service),
) -> NoteListResponse:
    """The caller's notes, newest first."""
    notes = await service.list_notes(
        identity.user_id, category=category, completed=completed
    )
    return NoteListResponse(notes=[NoteOut.model_validate(n) for n in notes])


@router.patch("", response_model=NoteOut)
async def update_note(
    payload: NoteUpdate,
    note_id: Optional[str] = Query(default=None, alias="id"),
    identity: Identity = Depends(require_identity),
    service: NoteService = Depends(get_note_service),
) -> NoteOut:
    note = await service.update_note(identity.user_id, parse_id(note_id), payload)
    return NoteOut.model_validate(note)


@router.delete("", response_model=MessageResponse)
async def delete_note(
    note_id: Optional[str] = Query(default=None, alias="id"),
    identity: Identity = Depends(require_identity),
    service: NoteService = Depends(get_note_service),
) -> MessageResponse:
    await service.delete_note(identity.user_id, parse_id(note_id))
    return MessageResponse(message="Note deleted successfully")
