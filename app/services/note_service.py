import logging
from typing import List, Optional

from app.core.constants import NOTE_CATEGORIES
from app.core.exceptions import ForbiddenError, InvalidInputError, NotFoundError
from app.core.validation import optional_text, require_choice, require_non_blank
from app.models.base import utcnow
from app.models.note import Note
from app.repositories.note_repository import NoteRepository
from app.schemas.common import NoteCategory
from app.schemas.note import NoteCreate, NoteUpdate

logger = logging.getLogger(__name__)


class NoteService:
    """Personal notes; every operation is scoped to the calling identity."""

    def __init__(self, repo: NoteRepository) -> None:
        self._repo = repo

    async def create_note(self, user_id: str, data: NoteCreate) -> Note:
        if data.title is None:
            raise InvalidInputError("Title is required", "MISSING_TITLE")
        title = require_non_blank(data.title, "title")
        category = NoteCategory.nota.value
        if data.category is not None:
            category = require_choice(data.category, NOTE_CATEGORIES, "category")
        note = await self._repo.create(
            user_id=user_id,
            title=title,
            content=optional_text(data.content),
            category=category,
            completed=bool(data.completed),
            due_date=data.due_date,
        )
        await self._repo.commit()
        return note

    async def list_notes(
        self,
        user_id: str,
        category: Optional[str] = None,
        completed: Optional[bool] = None,
    ) -> List[Note]:
        if category is not None:
            category = require_choice(category, NOTE_CATEGORIES, "category")
        return await self._repo.list_for_user(
            user_id, category=category, completed=completed
        )

    async def get_note(self, user_id: str, note_id: int) -> Note:
        note = await self._repo.get_by_id(note_id)
        if note is None:
            raise NotFoundError("Note not found", "NOTE_NOT_FOUND")
        if note.user_id != user_id:
            raise ForbiddenError("Forbidden: You do not have access to this note")
        return note

    async def update_note(self, user_id: str, note_id: int, data: NoteUpdate) -> Note:
        note = await self.get_note(user_id, note_id)
        provided = data.model_fields_set
        changes = {}
        if "title" in provided:
            if data.title is None:
                raise InvalidInputError("Title cannot be empty", "INVALID_TITLE")
            changes["title"] = require_non_blank(data.title, "title")
        if "category" in provided:
            changes["category"] = require_choice(
                data.category, NOTE_CATEGORIES, "category"
            )
        if "completed" in provided:
            if data.completed is None:
                raise InvalidInputError(
                    "completed must be a boolean", "INVALID_COMPLETED"
                )
            changes["completed"] = data.completed
        if "content" in provided:
            changes["content"] = optional_text(data.content)
        if "due_date" in provided:
            changes["due_date"] = data.due_date

        for field, value in changes.items():
            setattr(note, field, value)
        note.updated_at = utcnow()
        await self._repo.commit()
        return note

    async def delete_note(self, user_id: str, note_id: int) -> Note:
        note = await self.get_note(user_id, note_id)
        await self._repo.delete(note)
        await self._repo.commit()
        logger.info("Note %s deleted", note_id)
        return note
