from typing import Dict, Optional

from pydantic import Field

from app.schemas.common import CamelModel
from app.schemas.file import FileOut
from app.schemas.lead import LeadOut


class QuoteFunnelAnswers(CamelModel):
    """Answers collected by the six quote-funnel steps."""

    indoor_outdoor: Optional[str] = None
    sign_type: Optional[str] = None
    lighting: Optional[str] = None
    size: Optional[str] = None
    has_logo: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    contact_preference: Optional[str] = None


class QuoteFunnelResponse(CamelModel):
    ticket_number: str
    lead: LeadOut
    file: Optional[FileOut] = None
    warning: Optional[str] = None


class ChatState(CamelModel):
    """Conversation state carried by the client between chat turns."""

    step: str = "ask_service"
    language: Optional[str] = None
    service: Optional[str] = None
    question_set: Optional[str] = None
    answers: Dict[str, str] = Field(default_factory=dict)
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    ticket_number: Optional[str] = None


class ChatTurnRequest(CamelModel):
    state: Optional[ChatState] = None
    message: Optional[str] = None


class ChatTurnResponse(CamelModel):
    state: ChatState
    reply: str
    ticket_number: Optional[str] = None
