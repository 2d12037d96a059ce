import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import LeadPipelineError
from app.intake.chat_assistant import ChatAssistant
from app.intake.quote_funnel import QuoteFunnel, UploadedFile
from app.schemas.file import FileOut
from app.schemas.intake import (
    ChatTurnRequest,
    ChatTurnResponse,
    QuoteFunnelAnswers,
    QuoteFunnelResponse,
)
from app.schemas.lead import LeadOut
from app.services.file_service import FileService
from app.services.lead_service import LeadService

logger = logging.getLogger(__name__)

ATTACHMENT_FAILED_WARNING = "Lead creado pero hubo un error al subir el archivo"


class IntakeService:
    """Terminal actions of the public intake flows.

    The quote funnel writes the lead first and the logo second.  The two
    writes are not atomic: when the logo fails the lead is kept and the
    response carries a warning instead of an error.
    """

    def __init__(
        self,
        lead_service: LeadService,
        file_service: FileService,
        chat_assistant: ChatAssistant,
    ) -> None:
        self._leads = lead_service
        self._files = file_service
        self._assistant = chat_assistant

    async def submit_quote_funnel(
        self,
        answers: QuoteFunnelAnswers,
        logo: Optional[UploadedFile] = None,
        now_ms: Optional[int] = None,
    ) -> QuoteFunnelResponse:
        funnel = QuoteFunnel.replay(answers, logo)
        submission = funnel.prepare_submission(now_ms)
        lead = await self._leads.create_lead(submission.lead)
        funnel.mark_submitted()
        logger.info(
            "Quote funnel ticket %s submitted as lead %s",
            submission.ticket_number,
            lead.id,
        )

        response = QuoteFunnelResponse(
            ticket_number=submission.ticket_number, lead=LeadOut.model_validate(lead)
        )
        if submission.logo is None:
            return response
        try:
            lead_file = await self._files.upload(
                lead_id=lead.id,
                filename=submission.logo.filename,
                content_type=submission.logo.content_type,
                data=submission.logo.data,
            )
        except LeadPipelineError as exc:
            logger.warning(
                "Logo for lead %s rejected (%s): %s", lead.id, exc.code, exc.detail
            )
            response.warning = ATTACHMENT_FAILED_WARNING
        except SQLAlchemyError:
            logger.error("Logo for lead %s not stored", lead.id, exc_info=True)
            await self._files.rollback()
            response.warning = ATTACHMENT_FAILED_WARNING
        else:
            response.file = FileOut.model_validate(lead_file)
        return response

    async def chat_turn(self, request: ChatTurnRequest) -> ChatTurnResponse:
        return await self._assistant.handle(request.state, request.message)
