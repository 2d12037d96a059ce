from datetime import datetime
from typing import Any, Dict, List, Optional

from app.schemas.common import CamelModel


class ChatMessage(CamelModel):
    role: str
    content: str


class ChatSessionCreate(CamelModel):
    messages: Optional[Any] = None
    lead_id: Optional[int] = None
    context_captured: Optional[Dict[str, Any]] = None


class ChatSessionUpdate(CamelModel):
    """At least one field must be present; ``messages`` are appended."""

    messages: Optional[Any] = None
    status: Optional[str] = None
    context_captured: Optional[Dict[str, Any]] = None


class ChatSessionOut(CamelModel):
    id: int
    lead_id: Optional[int] = None
    messages: List[ChatMessage]
    context_captured: Optional[Dict[str, Any]] = None
    status: str
    created_at: datetime
    updated_at: datetime


class ChatSessionLeadOut(CamelModel):
    name: str
    email: str


class ChatSessionListItem(ChatSessionOut):
    lead: Optional[ChatSessionLeadOut] = None


class ChatSessionListResponse(CamelModel):
    sessions: List[ChatSessionListItem]
    total: int
    page: int
    total_pages: int
