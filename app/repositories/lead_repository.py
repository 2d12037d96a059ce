from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import delete, func, or_, select, update

from app.models.chat_session import ChatSession
from app.models.crm_user import CrmUser
from app.models.file import LeadFile
from app.models.lead import Lead
from app.models.quote import Quote
from app.repositories.base import BaseRepository


class LeadRepository(BaseRepository):
    """Encapsulates every SQL query that touches the ``leads`` table."""

    async def get_by_id(self, lead_id: int) -> Optional[Lead]:
        """Return a single lead by primary key, or ``None``."""
        result = await self._db.execute(select(Lead).where(Lead.id == lead_id))
        return result.scalar_one_or_none()

    async def exists(self, lead_id: int) -> bool:
        result = await self._db.execute(select(Lead.id).where(Lead.id == lead_id))
        return result.scalar_one_or_none() is not None

    async def get_with_assignee(
        self, lead_id: int
    ) -> Optional[Tuple[Lead, Optional[CrmUser]]]:
        """Return ``(lead, assigned CRM user or None)``, or ``None`` if absent."""
        result = await self._db.execute(
            select(Lead, CrmUser)
            .outerjoin(CrmUser, Lead.assigned_to == CrmUser.id)
            .where(Lead.id == lead_id)
        )
        row = result.first()
        if row is None:
            return None
        return row[0], row[1]

    @staticmethod
    def build_filters(
        status: Optional[str] = None,
        assigned_to: Optional[int] = None,
        search: Optional[str] = None,
    ) -> list:
        """Column-level filter expressions for the lead list.

        ``search`` is matched case-insensitively against name, email and
        phone, OR-combined.
        """
        filters = []
        if status:
            filters.append(Lead.status == status)
        if assigned_to is not None:
            filters.append(Lead.assigned_to == assigned_to)
        if search:
            pattern = f"%{search}%"
            filters.append(
                or_(
                    Lead.name.ilike(pattern),
                    Lead.email.ilike(pattern),
                    Lead.phone.ilike(pattern),
                )
            )
        return filters

    async def list_page(
        self, filters: list, offset: int, limit: int
    ) -> Tuple[List[Lead], int]:
        """Return one page of leads (newest first) and the filtered total."""
        total = await self._db.scalar(
            select(func.count()).select_from(Lead).where(*filters)
        )
        result = await self._db.execute(
            select(Lead)
            .where(*filters)
            .order_by(Lead.created_at.desc(), Lead.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all()), total or 0

    async def list_all(self) -> List[Lead]:
        """Every lead, newest first."""
        result = await self._db.execute(
            select(Lead).order_by(Lead.created_at.desc(), Lead.id.desc())
        )
        return list(result.scalars().all())

    async def create(self, **kwargs: Any) -> Lead:
        """Insert a new lead and flush so the server-assigned id is populated."""
        lead = Lead(**kwargs)
        self._db.add(lead)
        await self._db.flush()
        return lead

    async def count_dependents(self, lead_id: int) -> Dict[str, int]:
        """Number of quotes, files and chat sessions referencing *lead_id*."""
        counts = {}
        for key, model in (
            ("quotes", Quote),
            ("files", LeadFile),
            ("chatSessions", ChatSession),
        ):
            counts[key] = (
                await self._db.scalar(
                    select(func.count())
                    .select_from(model)
                    .where(model.lead_id == lead_id)
                )
                or 0
            )
        return counts

    async def remove_dependents(self, lead_id: int) -> None:
        """Delete files and quotes of a lead and detach its chat sessions.

        Files go first because they may reference the lead's quotes.
        """
        await self._db.execute(delete(LeadFile).where(LeadFile.lead_id == lead_id))
        await self._db.execute(delete(Quote).where(Quote.lead_id == lead_id))
        await self._db.execute(
            update(ChatSession)
            .where(ChatSession.lead_id == lead_id)
            .values(lead_id=None)
        )

    async def unassign_user(self, crm_user_id: int) -> None:
        """Clear ``assigned_to`` on every lead pointing at *crm_user_id*."""
        await self._db.execute(
            update(Lead)
            .where(Lead.assigned_to == crm_user_id)
            .values(assigned_to=None)
        )
