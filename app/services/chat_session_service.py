import logging
from typing import List, Optional, Tuple

from app.core.constants import CHAT_SESSION_STATUSES
from app.core.exceptions import InvalidInputError, NotFoundError, ReferenceNotFoundError
from app.core.validation import (
    clamp_pagination,
    require_choice,
    total_pages,
    validate_chat_messages,
)
from app.models.base import utcnow
from app.models.chat_session import ChatSession
from app.models.lead import Lead
from app.repositories.chat_session_repository import ChatSessionRepository
from app.repositories.lead_repository import LeadRepository
from app.schemas.chat_session import ChatSessionCreate, ChatSessionUpdate
from app.schemas.common import ChatSessionStatus

logger = logging.getLogger(__name__)


class ChatSessionService:
    """Chat transcripts.  Messages are append-only."""

    def __init__(
        self, session_repo: ChatSessionRepository, lead_repo: LeadRepository
    ) -> None:
        self._sessions = session_repo
        self._leads = lead_repo

    async def create_session(self, data: ChatSessionCreate) -> ChatSession:
        messages = validate_chat_messages(data.messages)
        if data.lead_id is not None and not await self._leads.exists(data.lead_id):
            raise ReferenceNotFoundError("Lead not found", "LEAD_NOT_FOUND")
        chat_session = await self._sessions.create(
            lead_id=data.lead_id,
            messages=messages,
            context_captured=data.context_captured,
            status=ChatSessionStatus.active.value,
        )
        await self._sessions.commit()
        return chat_session

    async def list_sessions(
        self,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        lead_id: Optional[int] = None,
        status: Optional[str] = None,
    ) -> Tuple[List[Tuple[ChatSession, Optional[Lead]]], int, int, int]:
        page, limit = clamp_pagination(page, limit)
        filters = self._sessions.build_filters(lead_id=lead_id, status=status)
        rows, total = await self._sessions.list_page(
            filters, offset=(page - 1) * limit, limit=limit
        )
        return rows, total, page, total_pages(total, limit)

    async def get_session(self, session_id: int) -> ChatSession:
        chat_session = await self._sessions.get_by_id(session_id)
        if chat_session is None:
            raise NotFoundError("Chat session not found", "CHAT_SESSION_NOT_FOUND")
        return chat_session

    async def update_session(
        self, session_id: int, data: ChatSessionUpdate
    ) -> ChatSession:
        """Append messages and/or change status or captured context.

        The stored transcript is never replaced, only extended.
        """
        provided = data.model_fields_set & {"messages", "status", "context_captured"}
        if not provided:
            raise InvalidInputError(
                "At least one of messages, status or contextCaptured is required",
                "NO_UPDATE_FIELDS",
            )
        chat_session = await self.get_session(session_id)

        new_messages = None
        if "messages" in provided:
            new_messages = validate_chat_messages(data.messages)
        if "status" in provided:
            chat_session.status = require_choice(
                data.status, CHAT_SESSION_STATUSES, "status"
            )
        if "context_captured" in provided:
            chat_session.context_captured = data.context_captured
        if new_messages:
            # New list so the JSON column registers the change
            chat_session.messages = list(chat_session.messages or []) + new_messages
        chat_session.updated_at = utcnow()
        await self._sessions.commit()
        return chat_session
