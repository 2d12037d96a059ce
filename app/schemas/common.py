from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class LeadSource(str, Enum):
    chat = "chat"
    wizard = "wizard"
    contact = "contact"


class LeadStatus(str, Enum):
    new = "new"
    contacted = "contacted"
    qualified = "qualified"
    proposal = "proposal"
    won = "won"
    lost = "lost"


class QuoteStatus(str, Enum):
    draft = "draft"
    sent = "sent"
    accepted = "accepted"
    rejected = "rejected"


class ChatSessionStatus(str, Enum):
    active = "active"
    closed = "closed"


class CrmRole(str, Enum):
    admin = "admin"
    agent = "agent"


class NoteCategory(str, Enum):
    nota = "nota"
    tarea = "tarea"
    recordatorio = "recordatorio"


class CamelModel(BaseModel):
    """Base for every wire schema.

    Python attributes stay snake_case; JSON uses camelCase.  Requests may
    use either spelling.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ErrorResponse(BaseModel):
    """Body of every error response."""

    error: str
    code: str


class MessageResponse(CamelModel):
    message: str


class HealthResponse(BaseModel):
    status: str = "ok"
