import logging
from typing import Optional

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db
from app.services.auth_service import AuthService, Identity

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Repository factory functions (one per repository, each gets the shared db)
# ---------------------------------------------------------------------------


async def get_lead_repo(
    db: AsyncSession = Depends(get_db),
):
    from app.repositories.lead_repository import LeadRepository

    return LeadRepository(db)


async def get_product_repo(
    db: AsyncSession = Depends(get_db),
):
    from app.repositories.product_repository import ProductRepository

    return ProductRepository(db)


async def get_quote_repo(
    db: AsyncSession = Depends(get_db),
):
    from app.repositories.quote_repository import QuoteRepository

    return QuoteRepository(db)


async def get_estimate_repo(
    db: AsyncSession = Depends(get_db),
):
    from app.repositories.estimate_repository import EstimateRepository

    return EstimateRepository(db)


async def get_chat_session_repo(
    db: AsyncSession = Depends(get_db),
):
    from app.repositories.chat_session_repository import ChatSessionRepository

    return ChatSessionRepository(db)


async def get_file_repo(
    db: AsyncSession = Depends(get_db),
):
    from app.repositories.file_repository import FileRepository

    return FileRepository(db)


async def get_crm_user_repo(
    db: AsyncSession = Depends(get_db),
):
    from app.repositories.crm_user_repository import CrmUserRepository

    return CrmUserRepository(db)


async def get_auth_repo(
    db: AsyncSession = Depends(get_db),
):
    from app.repositories.auth_repository import AuthRepository

    return AuthRepository(db)


async def get_note_repo(
    db: AsyncSession = Depends(get_db),
):
    from app.repositories.note_repository import NoteRepository

    return NoteRepository(db)


async def get_dashboard_repo(
    db: AsyncSession = Depends(get_db),
):
    from app.repositories.dashboard_repository import DashboardRepository

    return DashboardRepository(db)


# ---------------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------------


async def get_auth_service(
    auth_repo=Depends(get_auth_repo),
    crm_user_repo=Depends(get_crm_user_repo),
) -> AuthService:
    return AuthService(auth_repo=auth_repo, crm_user_repo=crm_user_repo)


async def get_current_identity(
    request: Request,
    authorization: Optional[str] = Header(default=None),
    auth_service: AuthService = Depends(get_auth_service),
) -> Optional[Identity]:
    """Resolve the caller from the bearer token or the session cookie."""
    cookie_token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    return await auth_service.resolve_identity(authorization, cookie_token)


async def require_identity(
    identity: Optional[Identity] = Depends(get_current_identity),
) -> Identity:
    return AuthService.require(identity)


async def require_admin(
    identity: Optional[Identity] = Depends(get_current_identity),
    auth_service: AuthService = Depends(get_auth_service),
) -> Identity:
    return await auth_service.require_admin(identity)


# ---------------------------------------------------------------------------
# Service factory functions
# ---------------------------------------------------------------------------


async def get_lead_service(
    lead_repo=Depends(get_lead_repo),
    crm_user_repo=Depends(get_crm_user_repo),
):
    """Build a :class:`LeadService` with injected repositories."""
    from app.services.lead_service import LeadService

    return LeadService(lead_repo=lead_repo, crm_user_repo=crm_user_repo)


async def get_dashboard_service(
    dashboard_repo=Depends(get_dashboard_repo),
):
    from app.services.dashboard_service import DashboardService

    return DashboardService(repo=dashboard_repo)


async def get_product_service(
    product_repo=Depends(get_product_repo),
):
    from app.services.product_service import ProductService

    return ProductService(repo=product_repo)


async def get_quote_service(
    quote_repo=Depends(get_quote_repo),
    lead_repo=Depends(get_lead_repo),
    product_repo=Depends(get_product_repo),
):
    """Build a :class:`QuoteService` with injected repositories."""
    from app.services.quote_service import QuoteService

    return QuoteService(
        quote_repo=quote_repo, lead_repo=lead_repo, product_repo=product_repo
    )


async def get_estimate_service(
    estimate_repo=Depends(get_estimate_repo),
):
    from app.services.estimate_service import EstimateService

    return EstimateService(repo=estimate_repo)


async def get_chat_session_service(
    chat_session_repo=Depends(get_chat_session_repo),
    lead_repo=Depends(get_lead_repo),
):
    from app.services.chat_session_service import ChatSessionService

    return ChatSessionService(session_repo=chat_session_repo, lead_repo=lead_repo)


async def get_file_service(
    file_repo=Depends(get_file_repo),
    lead_repo=Depends(get_lead_repo),
    quote_repo=Depends(get_quote_repo),
):
    from app.services.file_service import FileService

    return FileService(
        file_repo=file_repo, lead_repo=lead_repo, quote_repo=quote_repo
    )


async def get_crm_user_service(
    crm_user_repo=Depends(get_crm_user_repo),
    auth_repo=Depends(get_auth_repo),
    lead_repo=Depends(get_lead_repo),
):
    """Build a :class:`CrmUserService` with injected repositories."""
    from app.services.crm_user_service import CrmUserService

    return CrmUserService(
        crm_user_repo=crm_user_repo, auth_repo=auth_repo, lead_repo=lead_repo
    )


async def get_note_service(
    note_repo=Depends(get_note_repo),
):
    from app.services.note_service import NoteService

    return NoteService(repo=note_repo)


async def get_ticket_service(
    lead_repo=Depends(get_lead_repo),
    chat_session_repo=Depends(get_chat_session_repo),
    quote_repo=Depends(get_quote_repo),
    file_repo=Depends(get_file_repo),
):
    """Build a :class:`TicketService` with injected repositories."""
    from app.services.ticket_service import TicketService

    return TicketService(
        lead_repo=lead_repo,
        chat_session_repo=chat_session_repo,
        quote_repo=quote_repo,
        file_repo=file_repo,
    )


async def get_ticket_client(
    ticket_service=Depends(get_ticket_service),
):
    """HTTP client when ``TICKET_SERVICE_URL`` is set, else in-process."""
    from app.intake.ticket_client import HttpTicketClient, LocalTicketClient

    if settings.TICKET_SERVICE_URL:
        return HttpTicketClient(
            settings.TICKET_SERVICE_URL, timeout=settings.TICKET_SERVICE_TIMEOUT
        )
    return LocalTicketClient(ticket_service)


async def get_intake_service(
    lead_service=Depends(get_lead_service),
    file_service=Depends(get_file_service),
    ticket_client=Depends(get_ticket_client),
):
    """Build an :class:`IntakeService` with its chat assistant."""
    from app.intake.chat_assistant import ChatAssistant
    from app.services.intake_service import IntakeService

    return IntakeService(
        lead_service=lead_service,
        file_service=file_service,
        chat_assistant=ChatAssistant(ticket_client),
    )
