from datetime import datetime
from typing import List, Optional

from app.schemas.common import CamelModel


class CrmUserCreate(CamelModel):
    auth_user_id: Optional[str] = None
    email: Optional[str] = None
    name: Optional[str] = None
    role: Optional[str] = None


class CrmUserUpdate(CamelModel):
    role: Optional[str] = None
    name: Optional[str] = None


class CrmUserOut(CamelModel):
    id: int
    auth_user_id: str
    email: str
    name: str
    role: str
    created_at: datetime
    updated_at: datetime


class CrmUserListResponse(CamelModel):
    users: List[CrmUserOut]
    total: int
    page: int
    total_pages: int


class CrmUserDeleteResponse(CamelModel):
    message: str
    user: CrmUserOut
