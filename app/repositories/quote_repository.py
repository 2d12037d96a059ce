from typing import Any, List, Optional, Tuple

from sqlalchemy import func, select, update

from app.models.file import LeadFile
from app.models.lead import Lead
from app.models.product import Product
from app.models.quote import Quote
from app.repositories.base import BaseRepository


class QuoteRepository(BaseRepository):
    """Encapsulates every SQL query that touches the ``quotes`` table."""

    async def get_by_id(self, quote_id: int) -> Optional[Quote]:
        result = await self._db.execute(select(Quote).where(Quote.id == quote_id))
        return result.scalar_one_or_none()

    async def get_with_relations(
        self, quote_id: int
    ) -> Optional[Tuple[Quote, Optional[Lead], Optional[Product]]]:
        """Return ``(quote, lead, product)`` or ``None`` if the quote is absent."""
        result = await self._db.execute(
            select(Quote, Lead, Product)
            .outerjoin(Lead, Quote.lead_id == Lead.id)
            .outerjoin(Product, Quote.product_id == Product.id)
            .where(Quote.id == quote_id)
        )
        row = result.first()
        if row is None:
            return None
        return row[0], row[1], row[2]

    @staticmethod
    def build_filters(
        lead_id: Optional[int] = None,
        status: Optional[str] = None,
        search: Optional[str] = None,
    ) -> list:
        """Filters for the quote list; ``search`` matches the lead's name."""
        filters = []
        if lead_id is not None:
            filters.append(Quote.lead_id == lead_id)
        if status:
            filters.append(Quote.status == status)
        if search:
            filters.append(Lead.name.ilike(f"%{search}%"))
        return filters

    async def list_page(
        self, filters: list, offset: int, limit: int
    ) -> Tuple[List[Tuple[Quote, Optional[Lead], Optional[Product]]], int]:
        """One page of ``(quote, lead, product)`` rows, newest first, plus total."""
        total = await self._db.scalar(
            select(func.count(Quote.id))
            .select_from(Quote)
            .outerjoin(Lead, Quote.lead_id == Lead.id)
            .where(*filters)
        )
        result = await self._db.execute(
            select(Quote, Lead, Product)
            .outerjoin(Lead, Quote.lead_id == Lead.id)
            .outerjoin(Product, Quote.product_id == Product.id)
            .where(*filters)
            .order_by(Quote.created_at.desc(), Quote.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return [(q, lead, product) for q, lead, product in result.all()], total or 0

    async def list_for_leads_with_product(
        self, lead_ids: List[int]
    ) -> List[Tuple[Quote, Optional[Product]]]:
        """Quotes of the given leads with their product, newest first."""
        if not lead_ids:
            return []
        result = await self._db.execute(
            select(Quote, Product)
            .outerjoin(Product, Quote.product_id == Product.id)
            .where(Quote.lead_id.in_(lead_ids))
            .order_by(Quote.created_at.desc(), Quote.id.desc())
        )
        return [(q, product) for q, product in result.all()]

    async def create(self, **kwargs: Any) -> Quote:
        quote = Quote(**kwargs)
        self._db.add(quote)
        await self._db.flush()
        return quote

    async def detach_files(self, quote_id: int) -> None:
        """Clear ``quote_id`` on files attached to *quote_id*."""
        await self._db.execute(
            update(LeadFile).where(LeadFile.quote_id == quote_id).values(quote_id=None)
        )
