from typing import Any, List

from sqlalchemy import select

from app.models.file import LeadFile
from app.repositories.base import BaseRepository


class FileRepository(BaseRepository):
    """Encapsulates every SQL query that touches the ``files`` table."""

    async def list_for_lead(self, lead_id: int) -> List[LeadFile]:
        """Files of one lead, newest first."""
        result = await self._db.execute(
            select(LeadFile)
            .where(LeadFile.lead_id == lead_id)
            .order_by(LeadFile.created_at.desc(), LeadFile.id.desc())
        )
        return list(result.scalars().all())

    async def list_for_leads(self, lead_ids: List[int]) -> List[LeadFile]:
        if not lead_ids:
            return []
        result = await self._db.execute(
            select(LeadFile)
            .where(LeadFile.lead_id.in_(lead_ids))
            .order_by(LeadFile.created_at.desc(), LeadFile.id.desc())
        )
        return list(result.scalars().all())

    async def create(self, **kwargs: Any) -> LeadFile:
        lead_file = LeadFile(**kwargs)
        self._db.add(lead_file)
        await self._db.flush()
        return lead_file
