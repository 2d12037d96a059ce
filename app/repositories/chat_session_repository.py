from typing import Any, List, Optional, Tuple

from sqlalchemy import func, select

from app.models.chat_session import ChatSession
from app.models.lead import Lead
from app.repositories.base import BaseRepository


class ChatSessionRepository(BaseRepository):
    """Encapsulates every SQL query that touches the ``chat_sessions`` table."""

    async def get_by_id(self, session_id: int) -> Optional[ChatSession]:
        result = await self._db.execute(
            select(ChatSession).where(ChatSession.id == session_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    def build_filters(
        lead_id: Optional[int] = None, status: Optional[str] = None
    ) -> list:
        filters = []
        if lead_id is not None:
            filters.append(ChatSession.lead_id == lead_id)
        if status:
            filters.append(ChatSession.status == status)
        return filters

    async def list_page(
        self, filters: list, offset: int, limit: int
    ) -> Tuple[List[Tuple[ChatSession, Optional[Lead]]], int]:
        """One page of ``(session, linked lead or None)``, newest first."""
        total = await self._db.scalar(
            select(func.count()).select_from(ChatSession).where(*filters)
        )
        result = await self._db.execute(
            select(ChatSession, Lead)
            .outerjoin(Lead, ChatSession.lead_id == Lead.id)
            .where(*filters)
            .order_by(ChatSession.created_at.desc(), ChatSession.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return [(s, lead) for s, lead in result.all()], total or 0

    async def list_for_leads(self, lead_ids: List[int]) -> List[ChatSession]:
        if not lead_ids:
            return []
        result = await self._db.execute(
            select(ChatSession)
            .where(ChatSession.lead_id.in_(lead_ids))
            .order_by(ChatSession.created_at.desc(), ChatSession.id.desc())
        )
        return list(result.scalars().all())

    async def create(self, **kwargs: Any) -> ChatSession:
        chat_session = ChatSession(**kwargs)
        self._db.add(chat_session)
        await self._db.flush()
        return chat_session
