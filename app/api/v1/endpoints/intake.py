from fastapi import APIRouter, Depends, Request
from starlette.datastructures import UploadFile

from app.core.config import settings
from app.core.rate_limit import limiter
from app.intake.quote_funnel import UploadedFile
from app.schemas.intake import (
    ChatTurnRequest,
    ChatTurnResponse,
    QuoteFunnelAnswers,
    QuoteFunnelResponse,
)
from app.services.intake_service import IntakeService
from app.api.deps import get_intake_service
from app.api.forms import require_multipart

router = APIRouter(prefix="/intake", tags=["Intake"])


@router.post("/quote-funnel", response_model=QuoteFunnelResponse, status_code=201)
@limiter.limit(settings.PUBLIC_WRITE_RATE_LIMIT)
async def submit_quote_funnel(
    request: Request,
    service: IntakeService = Depends(get_intake_service),
) -> QuoteFunnelResponse:
    """Submit every quote-funnel answer at once, plus an optional ``logo``.

    The answers are replayed step by step; the first incomplete step is
    reported as ``STEP_INCOMPLETE``.
    """
    require_multipart(request)
    form = await request.form()
    answers = QuoteFunnelAnswers.model_validate(
        {key: value for key, value in form.items() if isinstance(value, str)}
    )
    logo = None
    upload = form.get("logo")
    if isinstance(upload, UploadFile):
        logo = UploadedFile(
            filename=upload.filename or "logo",
            content_type=upload.content_type or "application/octet-stream",
            data=await upload.read(),
        )
    return await service.submit_quote_funnel(answers, logo)


@router.post("/chat", response_model=ChatTurnResponse)
@limiter.limit(settings.PUBLIC_WRITE_RATE_LIMIT)
async def chat_turn(
    request: Request,
    payload: ChatTurnRequest,
    service: IntakeService = Depends(get_intake_service),
) -> ChatTurnResponse:
    """One visitor message in, one assistant reply and the next state out."""
    return await service.chat_turn(payload)
