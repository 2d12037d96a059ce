"""Submission of chat tickets to the ticket collaborator.

Both clients report success as a boolean.  A failed submission is
logged and returned as ``False`` so the conversation can tell the
visitor that confirmation is pending; it never ends the conversation.
"""

import logging
from typing import TYPE_CHECKING, Optional, Protocol

import httpx
from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import LeadPipelineError
from app.schemas.ticket import TicketCreate

if TYPE_CHECKING:
    from app.services.ticket_service import TicketService

logger = logging.getLogger(__name__)


class TicketClient(Protocol):
    async def submit(self, ticket: TicketCreate) -> bool: ...


class HttpTicketClient:
    """Posts the ticket as camelCase JSON to an external endpoint."""

    def __init__(
        self,
        url: str,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._url = url
        self._timeout = timeout
        self._transport = transport

    async def submit(self, ticket: TicketCreate) -> bool:
        payload = ticket.model_dump(by_alias=True, mode="json")
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.post(self._url, json=payload)
        except httpx.HTTPError as exc:
            logger.error(
                "Ticket %s could not be sent to %s: %s",
                ticket.ticket_number,
                self._url,
                exc,
            )
            return False
        if not response.is_success:
            logger.error(
                "Ticket service rejected ticket %s: HTTP %s",
                ticket.ticket_number,
                response.status_code,
            )
            return False
        logger.info("Ticket %s submitted to %s", ticket.ticket_number, self._url)
        return True


class LocalTicketClient:
    """Hands the ticket to the in-process :class:`TicketService`."""

    def __init__(self, ticket_service: "TicketService") -> None:
        self._service = ticket_service

    async def submit(self, ticket: TicketCreate) -> bool:
        try:
            await self._service.create_ticket(ticket)
        except LeadPipelineError as exc:
            logger.warning(
                "Ticket %s not recorded (%s): %s",
                ticket.ticket_number,
                exc.code,
                exc.detail,
            )
            return False
        except SQLAlchemyError:
            logger.error(
                "Ticket %s not recorded: database error",
                ticket.ticket_number,
                exc_info=True,
            )
            await self._service.rollback()
            return False
        return True
