import logging
from collections import defaultdict
from typing import Tuple

from app.core.exceptions import InvalidInputError
from app.core.numbering import generate_ticket_number
from app.core.validation import normalize_email, optional_text, require_non_blank
from app.models.base import utcnow
from app.models.chat_session import ChatSession
from app.models.lead import Lead
from app.repositories.chat_session_repository import ChatSessionRepository
from app.repositories.file_repository import FileRepository
from app.repositories.lead_repository import LeadRepository
from app.repositories.quote_repository import QuoteRepository
from app.schemas.common import ChatSessionStatus, LeadSource, LeadStatus
from app.schemas.chat_session import ChatSessionOut
from app.schemas.file import FileOut
from app.schemas.lead import LeadOut
from app.schemas.ticket import (
    TicketCreate,
    TicketListResponse,
    TicketOut,
    TicketQuoteOut,
)

logger = logging.getLogger(__name__)


def build_ticket_notes(ticket: TicketCreate, ticket_number: str) -> str:
    lines = [f"Servicio: {ticket.service or '-'}"]
    answers = ticket.details.model_dump()
    for index, key in enumerate(("question1", "question2", "question3"), start=1):
        if answers.get(key):
            lines.append(f"Pregunta {index}: {answers[key]}")
    lines.append(f"Ticket: {ticket_number}")
    return "\n".join(lines)


class TicketService:
    """Chat tickets: a lead plus the chat session that produced it.

    Also builds the per-lead aggregate (sessions, quotes, files) shown on
    the ticket board.
    """

    def __init__(
        self,
        lead_repo: LeadRepository,
        chat_session_repo: ChatSessionRepository,
        quote_repo: QuoteRepository,
        file_repo: FileRepository,
    ) -> None:
        self._leads = lead_repo
        self._sessions = chat_session_repo
        self._quotes = quote_repo
        self._files = file_repo

    async def create_ticket(self, ticket: TicketCreate) -> Tuple[Lead, ChatSession]:
        if ticket.name is None or ticket.email is None:
            raise InvalidInputError(
                "Missing required fields: name and email are required",
                "MISSING_REQUIRED_FIELDS",
            )
        name = require_non_blank(ticket.name, "name")
        email = normalize_email(ticket.email, "email")
        ticket_number = (
            optional_text(ticket.ticket_number, "ticketNumber", 100)
            or generate_ticket_number()
        )

        lead = await self._leads.create(
            name=name,
            email=email,
            phone=optional_text(ticket.phone, "phone", 50),
            source=LeadSource.chat.value,
            status=LeadStatus.new.value,
            notes=build_ticket_notes(ticket, ticket_number),
            ticket_number=ticket_number,
        )
        chat_session = await self._sessions.create(
            lead_id=lead.id,
            messages=[],
            context_captured={
                "service": ticket.service,
                "details": ticket.details.model_dump(),
                "language": ticket.language,
            },
            status=ChatSessionStatus.active.value,
        )
        await self._leads.commit()
        logger.info("Ticket %s recorded as lead %s", ticket_number, lead.id)
        return lead, chat_session

    async def list_tickets(self) -> TicketListResponse:
        leads = await self._leads.list_all()
        lead_ids = [lead.id for lead in leads]

        sessions = defaultdict(list)
        for chat_session in await self._sessions.list_for_leads(lead_ids):
            sessions[chat_session.lead_id].append(
                ChatSessionOut.model_validate(chat_session)
            )
        quotes = defaultdict(list)
        for quote, product in await self._quotes.list_for_leads_with_product(lead_ids):
            item = TicketQuoteOut.model_validate(quote)
            if product is not None:
                item.product_name = product.name
                item.product_category = product.category
            quotes[quote.lead_id].append(item)
        files = defaultdict(list)
        for lead_file in await self._files.list_for_leads(lead_ids):
            files[lead_file.lead_id].append(FileOut.model_validate(lead_file))

        tickets = [
            TicketOut(
                **LeadOut.model_validate(lead).model_dump(),
                chat_sessions=sessions[lead.id],
                quotes=quotes[lead.id],
                files=files[lead.id],
            )
            for lead in leads
        ]
        return TicketListResponse(
            tickets=tickets, total=len(tickets), generated_at=utcnow()
        )

    async def rollback(self) -> None:
        await self._leads.rollback()
