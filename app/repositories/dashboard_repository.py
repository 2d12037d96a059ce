from typing import List, Tuple

from sqlalchemy import select

from app.models.lead import Lead
from app.models.quote import Quote
from app.repositories.base import BaseRepository


class DashboardRepository(BaseRepository):
    """Full-table reads backing the dashboard statistics.

    No incremental aggregates are kept; each call scans current state.
    """

    async def fetch_leads(self) -> List[Lead]:
        """Every lead, newest first."""
        result = await self._db.execute(
            select(Lead).order_by(Lead.created_at.desc(), Lead.id.desc())
        )
        return list(result.scalars().all())

    async def fetch_quote_statuses(self) -> List[str]:
        result = await self._db.execute(select(Quote.status))
        return list(result.scalars().all())

    async def fetch_all(self) -> Tuple[List[Lead], List[str]]:
        """Both scans; either failing fails the whole read."""
        leads = await self.fetch_leads()
        quote_statuses = await self.fetch_quote_statuses()
        return leads, quote_statuses
