from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from starlette.datastructures import UploadFile

from app.core.config import settings
from app.core.exceptions import InvalidInputError
from app.core.rate_limit import limiter
from app.core.validation import parse_id
from app.schemas.file import FileListResponse, FileOut
from app.services.file_service import FileService
from app.api.deps import get_file_service
from app.api.forms import require_multipart

router = APIRouter(prefix="/files", tags=["Files"])


@router.post("", response_model=FileOut, status_code=201)
@limiter.limit(settings.PUBLIC_WRITE_RATE_LIMIT)
async def upload_file(
    request: Request,
    service: FileService = Depends(get_file_service),
) -> FileOut:
    """Attach a file to a lead.

    Multipart fields: ``file``, ``leadId`` and optional ``quoteId``.  The
    file is stored inline as a data URL.
    """
    require_multipart(request)
    form = await request.form()
    upload = form.get("file")
    if not isinstance(upload, UploadFile):
        raise InvalidInputError("File is required", "FILE_REQUIRED")
    lead_id = parse_id(form.get("leadId"), "leadId")
    raw_quote_id = form.get("quoteId")
    quote_id = parse_id(raw_quote_id, "quoteId") if raw_quote_id else None

    data = await upload.read()
    lead_file = await service.upload(
        lead_id=lead_id,
        filename=upload.filename or "upload",
        content_type=upload.content_type,
        data=data,
        quote_id=quote_id,
    )
    return FileOut.model_validate(lead_file)


@router.get("", response_model=FileListResponse)
async def list_files(
    lead_id: Optional[str] = Query(default=None, alias="leadId"),
    service: FileService = Depends(get_file_service),
) -> FileListResponse:
    files = await service.list_files(parse_id(lead_id, "leadId"))
    return FileListResponse(files=[FileOut.model_validate(f) for f in files])
