from datetime import datetime
from typing import List, Optional

from pydantic import Field

from app.schemas.chat_session import ChatSessionOut
from app.schemas.common import CamelModel
from app.schemas.file import FileOut
from app.schemas.lead import LeadOut
from app.schemas.quote import QuoteOut


class TicketDetails(CamelModel):
    question1: Optional[str] = None
    question2: Optional[str] = None
    question3: Optional[str] = None


class TicketCreate(CamelModel):
    """Payload the chat assistant submits once contact details are known."""

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    service: Optional[str] = None
    details: TicketDetails = Field(default_factory=TicketDetails)
    ticket_number: Optional[str] = None
    language: Optional[str] = None


class TicketCreateResponse(CamelModel):
    ticket_number: str
    lead: LeadOut
    chat_session: ChatSessionOut


class TicketQuoteOut(QuoteOut):
    product_name: Optional[str] = None
    product_category: Optional[str] = None


class TicketOut(LeadOut):
    """A lead with everything attached to it."""

    chat_sessions: List[ChatSessionOut] = Field(default_factory=list)
    quotes: List[TicketQuoteOut] = Field(default_factory=list)
    files: List[FileOut] = Field(default_factory=list)


class TicketListResponse(CamelModel):
    tickets: List[TicketOut]
    total: int
    generated_at: datetime
