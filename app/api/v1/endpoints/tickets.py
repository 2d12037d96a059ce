from fastapi import APIRouter, Depends, Request

from app.core.config import settings
from app.core.rate_limit import limiter
from app.schemas.chat_session import ChatSessionOut
from app.schemas.lead import LeadOut
from app.schemas.ticket import TicketCreate, TicketCreateResponse, TicketListResponse
from app.services.auth_service import Identity
from app.services.ticket_service import TicketService
from app.api.deps import get_ticket_service, require_identity

router = APIRouter(prefix="/tickets", tags=["Tickets"])


@router.post("", response_model=TicketCreateResponse, status_code=201)
@limiter.limit(settings.PUBLIC_WRITE_RATE_LIMIT)
async def create_ticket(
    request: Request,
    payload: TicketCreate,
    service: TicketService = Depends(get_ticket_service),
) -> TicketCreateResponse:
    """Record a ticket produced by the chat assistant as a lead."""
    lead, chat_session = await service.create_ticket(payload)
    return TicketCreateResponse(
        ticket_number=lead.ticket_number,
        lead=LeadOut.model_validate(lead),
        chat_session=ChatSessionOut.model_validate(chat_session),
    )


@router.get("", response_model=TicketListResponse)
async def list_tickets(
    identity: Identity = Depends(require_identity),
    service: TicketService = Depends(get_ticket_service),
) -> TicketListResponse:
    """Every lead with its chat sessions, quotes and files."""
    return await service.list_tickets()
