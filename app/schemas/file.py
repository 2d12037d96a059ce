from datetime import datetime
from typing import List, Optional

from app.schemas.common import CamelModel


class FileOut(CamelModel):
    id: int
    lead_id: int
    quote_id: Optional[int] = None
    filename: str
    file_url: str
    file_type: str
    file_size: int
    uploaded_by: Optional[str] = None
    created_at: datetime


class FileListResponse(CamelModel):
    files: List[FileOut]
