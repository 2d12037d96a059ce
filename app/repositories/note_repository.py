from typing import Any, List, Optional

from sqlalchemy import select

from app.models.note import Note
from app.repositories.base import BaseRepository


class NoteRepository(BaseRepository):
    """Encapsulates every SQL query that touches the ``notes`` table."""

    async def get_by_id(self, note_id: int) -> Optional[Note]:
        result = await self._db.execute(select(Note).where(Note.id == note_id))
        return result.scalar_one_or_none()

    async def list_for_user(
        self,
        user_id: str,
        category: Optional[str] = None,
        completed: Optional[bool] = None,
    ) -> List[Note]:
        """The owner's notes, newest first."""
        query = select(Note).where(Note.user_id == user_id)
        if category:
            query = query.where(Note.category == category)
        if completed is not None:
            query = query.where(Note.completed.is_(completed))
        result = await self._db.execute(
            query.order_by(Note.created_at.desc(), Note.id.desc())
        )
        return list(result.scalars().all())

    async def create(self, **kwargs: Any) -> Note:
        note = Note(**kwargs)
        self._db.add(note)
        await self._db.flush()
        return note
