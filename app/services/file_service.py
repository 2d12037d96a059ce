import base64
import logging
from typing import List, Optional

from app.core.config import settings
from app.core.exceptions import InvalidInputError, ReferenceNotFoundError
from app.core.validation import check_length
from app.models.file import LeadFile
from app.repositories.file_repository import FileRepository
from app.repositories.lead_repository import LeadRepository
from app.repositories.quote_repository import QuoteRepository

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def to_data_url(content_type: str, data: bytes) -> str:
    """Self-contained ``data:<mime>;base64,<payload>`` reference."""
    return f"data:{content_type};base64,{base64.b64encode(data).decode('ascii')}"


class FileService:
    """Attachments stored inline as data URLs.

    Every check runs before the insert, so a rejected upload leaves no row.
    """

    def __init__(
        self,
        file_repo: FileRepository,
        lead_repo: LeadRepository,
        max_size: Optional[int] = None,
        quote_repo: Optional[QuoteRepository] = None,
    ) -> None:
        self._files = file_repo
        self._leads = lead_repo
        self._quotes = quote_repo
        self._max_size = settings.MAX_FILE_SIZE if max_size is None else max_size

    async def upload(
        self,
        lead_id: int,
        filename: str,
        content_type: Optional[str],
        data: bytes,
        quote_id: Optional[int] = None,
        uploaded_by: Optional[str] = None,
    ) -> LeadFile:
        if not await self._leads.exists(lead_id):
            raise ReferenceNotFoundError("Lead not found", "LEAD_NOT_FOUND")
        if quote_id is not None:
            await self._check_quote(quote_id, lead_id)
        if len(data) > self._max_size:
            raise InvalidInputError(
                f"File size exceeds {self._max_size} bytes", "FILE_TOO_LARGE"
            )
        content_type = check_length(
            content_type or DEFAULT_CONTENT_TYPE, "fileType", 100
        )
        filename = check_length(filename or "upload", "filename", 255)
        lead_file = await self._files.create(
            lead_id=lead_id,
            quote_id=quote_id,
            filename=filename,
            file_url=to_data_url(content_type, data),
            file_type=content_type,
            file_size=len(data),
            uploaded_by=uploaded_by,
        )
        await self._files.commit()
        logger.info(
            "File %s (%d bytes) attached to lead %s", lead_file.id, len(data), lead_id
        )
        return lead_file

    async def _check_quote(self, quote_id: int, lead_id: int) -> None:
        quote = await self._quotes.get_by_id(quote_id) if self._quotes else None
        if quote is None:
            raise ReferenceNotFoundError("Quote not found", "QUOTE_NOT_FOUND")
        if quote.lead_id != lead_id:
            raise InvalidInputError(
                "Quote belongs to a different lead", "INVALID_QUOTE_ID"
            )

    async def list_files(self, lead_id: int) -> List[LeadFile]:
        return await self._files.list_for_lead(lead_id)

    async def rollback(self) -> None:
        await self._files.rollback()
