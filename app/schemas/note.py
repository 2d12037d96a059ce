from datetime import datetime
from typing import List, Optional

from app.schemas.common import CamelModel


class NoteCreate(CamelModel):
    title: Optional[str] = None
    content: Optional[str] = None
    category: Optional[str] = None
    completed: Optional[bool] = None
    due_date: Optional[datetime] = None


class NoteUpdate(NoteCreate):
    """Same fields as create; only those present are applied."""


class NoteOut(CamelModel):
    id: int
    title: str
    content: Optional[str] = None
    category: str
    completed: bool
    due_date: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class NoteListResponse(CamelModel):
    notes: List[NoteOut]
