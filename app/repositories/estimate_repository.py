from typing import Any, List, Optional, Tuple

from sqlalchemy import func, or_, select

from app.models.estimate import Estimate
from app.repositories.base import BaseRepository


class EstimateRepository(BaseRepository):
    """Encapsulates every SQL query that touches the ``estimates`` table.

    Lookups by id are deliberately *not* owner-filtered so the service can
    tell "absent" from "belongs to someone else".
    """

    async def get_by_id(self, estimate_id: int) -> Optional[Estimate]:
        result = await self._db.execute(
            select(Estimate).where(Estimate.id == estimate_id)
        )
        return result.scalar_one_or_none()

    async def quote_number_exists(self, quote_number: str) -> bool:
        result = await self._db.execute(
            select(Estimate.id).where(Estimate.quote_number == quote_number)
        )
        return result.scalar_one_or_none() is not None

    @staticmethod
    def build_filters(
        user_id: str,
        status: Optional[str] = None,
        search: Optional[str] = None,
    ) -> list:
        filters = [Estimate.user_id == user_id]
        if status:
            filters.append(Estimate.status == status)
        if search:
            pattern = f"%{search}%"
            filters.append(
                or_(
                    Estimate.client_name.ilike(pattern),
                    Estimate.client_email.ilike(pattern),
                    Estimate.quote_number.ilike(pattern),
                )
            )
        return filters

    async def list_page(
        self, filters: list, offset: int, limit: int
    ) -> Tuple[List[Estimate], int]:
        total = await self._db.scalar(
            select(func.count()).select_from(Estimate).where(*filters)
        )
        result = await self._db.execute(
            select(Estimate)
            .where(*filters)
            .order_by(Estimate.created_at.desc(), Estimate.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all()), total or 0

    async def create(self, **kwargs: Any) -> Estimate:
        estimate = Estimate(**kwargs)
        self._db.add(estimate)
        await self._db.flush()
        return estimate
