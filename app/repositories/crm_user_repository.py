from typing import Any, List, Optional, Tuple

from sqlalchemy import func, select

from app.models.crm_user import CrmUser
from app.repositories.base import BaseRepository


class CrmUserRepository(BaseRepository):
    """Encapsulates every SQL query that touches the ``crm_users`` table."""

    async def get_by_id(self, user_id: int) -> Optional[CrmUser]:
        result = await self._db.execute(select(CrmUser).where(CrmUser.id == user_id))
        return result.scalar_one_or_none()

    async def get_by_auth_user_id(self, auth_user_id: str) -> Optional[CrmUser]:
        """Resolve the CRM profile linked to an authentication identity."""
        result = await self._db.execute(
            select(CrmUser).where(CrmUser.auth_user_id == auth_user_id)
        )
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[CrmUser]:
        result = await self._db.execute(select(CrmUser).where(CrmUser.email == email))
        return result.scalar_one_or_none()

    async def list_page(self, offset: int, limit: int) -> Tuple[List[CrmUser], int]:
        total = await self._db.scalar(select(func.count()).select_from(CrmUser))
        result = await self._db.execute(
            select(CrmUser)
            .order_by(CrmUser.created_at.desc(), CrmUser.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all()), total or 0

    async def create(self, **kwargs: Any) -> CrmUser:
        crm_user = CrmUser(**kwargs)
        self._db.add(crm_user)
        await self._db.flush()
        return crm_user
