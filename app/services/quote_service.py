import logging
from typing import List, Optional, Tuple

from app.core.constants import QUOTE_STATUSES
from app.core.exceptions import InvalidInputError, NotFoundError, ReferenceNotFoundError
from app.core.validation import (
    clamp_pagination,
    optional_text,
    require_at_least,
    require_choice,
    require_positive,
    total_pages,
)
from app.models.base import utcnow
from app.models.lead import Lead
from app.models.product import Product
from app.models.quote import Quote
from app.repositories.lead_repository import LeadRepository
from app.repositories.product_repository import ProductRepository
from app.repositories.quote_repository import QuoteRepository
from app.schemas.common import QuoteStatus
from app.schemas.quote import QuoteCreate, QuoteUpdate

logger = logging.getLogger(__name__)

_TEXT_FIELDS = {"size": 100, "budget_range": 100, "artwork_preference": 255}


class QuoteService:
    """Quotes: priced proposals for one product, tied to one lead."""

    def __init__(
        self,
        quote_repo: QuoteRepository,
        lead_repo: LeadRepository,
        product_repo: ProductRepository,
    ) -> None:
        self._quotes = quote_repo
        self._leads = lead_repo
        self._products = product_repo

    async def create_quote(self, data: QuoteCreate) -> Quote:
        """Insert a ``draft`` quote.

        The lead and product must already exist; a dangling reference is
        rejected with a 400 and no row is written.
        """
        if data.lead_id is None:
            raise InvalidInputError("Lead ID is required", "MISSING_LEAD_ID")
        if data.product_id is None:
            raise InvalidInputError("Product ID is required", "MISSING_PRODUCT_ID")
        if data.estimated_price is None:
            raise InvalidInputError(
                "Estimated price is required", "MISSING_ESTIMATED_PRICE"
            )
        require_positive(data.estimated_price, "estimatedPrice")
        quantity = 1 if data.quantity is None else data.quantity
        require_at_least(quantity, 1, "quantity")

        if not await self._leads.exists(data.lead_id):
            raise ReferenceNotFoundError("Lead not found", "LEAD_NOT_FOUND")
        if await self._products.get_by_id(data.product_id) is None:
            raise ReferenceNotFoundError("Product not found", "PRODUCT_NOT_FOUND")

        quote = await self._quotes.create(
            lead_id=data.lead_id,
            product_id=data.product_id,
            estimated_price=data.estimated_price,
            quantity=quantity,
            status=QuoteStatus.draft.value,
            valid_until=data.valid_until,
            **{
                field: optional_text(getattr(data, field), field, limit)
                for field, limit in _TEXT_FIELDS.items()
            },
        )
        await self._quotes.commit()
        logger.info("Quote %s created for lead %s", quote.id, data.lead_id)
        return quote

    async def list_quotes(
        self,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        lead_id: Optional[int] = None,
        status: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Tuple[List[Tuple[Quote, Optional[Lead], Optional[Product]]], int, int, int]:
        page, limit = clamp_pagination(page, limit)
        filters = self._quotes.build_filters(lead_id=lead_id, status=status, search=search)
        rows, total = await self._quotes.list_page(
            filters, offset=(page - 1) * limit, limit=limit
        )
        return rows, total, page, total_pages(total, limit)

    async def get_quote(
        self, quote_id: int
    ) -> Tuple[Quote, Optional[Lead], Optional[Product]]:
        row = await self._quotes.get_with_relations(quote_id)
        if row is None:
            raise NotFoundError("Quote not found", "QUOTE_NOT_FOUND")
        return row

    async def update_quote(self, quote_id: int, data: QuoteUpdate) -> Quote:
        """Partial update; always stamps ``updated_at``."""
        quote = await self._quotes.get_by_id(quote_id)
        if quote is None:
            raise NotFoundError("Quote not found", "QUOTE_NOT_FOUND")

        provided = data.model_fields_set
        changes = {}
        if "status" in provided:
            changes["status"] = require_choice(data.status, QUOTE_STATUSES, "status")
        if "estimated_price" in provided:
            changes["estimated_price"] = require_positive(
                data.estimated_price, "estimatedPrice"
            )
        if "quantity" in provided:
            changes["quantity"] = require_at_least(data.quantity, 1, "quantity")
        if "valid_until" in provided:
            changes["valid_until"] = data.valid_until
        for field, limit in _TEXT_FIELDS.items():
            if field in provided:
                changes[field] = optional_text(getattr(data, field), field, limit)

        for field, value in changes.items():
            setattr(quote, field, value)
        quote.updated_at = utcnow()
        await self._quotes.commit()
        return quote

    async def delete_quote(self, quote_id: int) -> Quote:
        quote = await self._quotes.get_by_id(quote_id)
        if quote is None:
            raise NotFoundError("Quote not found", "QUOTE_NOT_FOUND")
        await self._quotes.detach_files(quote_id)
        await self._quotes.delete(quote)
        await self._quotes.commit()
        logger.info("Quote %s deleted", quote_id)
        return quote
