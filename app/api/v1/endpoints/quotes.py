from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.core.validation import parse_id
from app.schemas.quote import (
    QuoteCreate,
    QuoteDeleteResponse,
    QuoteDetailOut,
    QuoteLeadOut,
    QuoteListItem,
    QuoteListResponse,
    QuoteOut,
    QuoteProductOut,
    QuoteUpdate,
)
from app.services.auth_service import Identity
from app.services.quote_service import QuoteService
from app.api.deps import get_quote_service, require_admin, require_identity

router = APIRouter(prefix="/quotes", tags=["Quotes"])


@router.post("", response_model=QuoteOut, status_code=201)
async def create_quote(
    payload: QuoteCreate,
    identity: Identity = Depends(require_identity),
    service: QuoteService = Depends(get_quote_service),
) -> QuoteOut:
    quote = await service.create_quote(payload)
    return QuoteOut.model_validate(quote)


@router.get("", response_model=QuoteListResponse)
async def list_quotes(
    page: Optional[int] = Query(default=None),
    limit: Optional[int] = Query(default=None),
    lead_id: Optional[int] = Query(default=None, alias="leadId"),
    status: Optional[str] = Query(default=None),
    search: Optional[str] = Query(default=None),
    identity: Identity = Depends(require_identity),
    service: QuoteService = Depends(get_quote_service),
) -> QuoteListResponse:
    """Quotes newest first, each with its lead and product names."""
    rows, total, page, pages = await service.list_quotes(
        page=page, limit=limit, lead_id=lead_id, status=status, search=search
    )
    items = []
    for quote, lead, product in rows:
        item = QuoteListItem.model_validate(quote)
        if lead is not None:
            item.lead_name, item.lead_email = lead.name, lead.email
        if product is not None:
            item.product_name, item.product_category = product.name, product.category
        items.append(item)
    return QuoteListResponse(quotes=items, total=total, page=page, total_pages=pages)


@router.get("/{quote_id}", response_model=QuoteDetailOut)
async def get_quote(
    quote_id: str,
    identity: Identity = Depends(require_identity),
    service: QuoteService = Depends(get_quote_service),
) -> QuoteDetailOut:
    quote, lead, product = await service.get_quote(parse_id(quote_id))
    return QuoteDetailOut(
        **QuoteOut.model_validate(quote).model_dump(),
        lead=QuoteLeadOut.model_validate(lead) if lead else None,
        product=QuoteProductOut.model_validate(product) if product else None,
    )


@router.patch("/{quote_id}", response_model=QuoteOut)
async def update_quote(
    quote_id: str,
    payload: QuoteUpdate,
    identity: Identity = Depends(require_identity),
    service: QuoteService = Depends(get_quote_service),
) -> QuoteOut:
    quote = await service.update_quote(parse_id(quote_id), payload)
    return QuoteOut.model_validate(quote)


@router.patch("", response_model=QuoteOut)
async def update_quote_by_query(
    payload: QuoteUpdate,
    quote_id: Optional[str] = Query(default=None, alias="id"),
    identity: Identity = Depends(require_identity),
    service: QuoteService = Depends(get_quote_service),
) -> QuoteOut:
    quote = await service.update_quote(parse_id(quote_id), payload)
    return QuoteOut.model_validate(quote)


@router.delete("", response_model=QuoteDeleteResponse)
async def delete_quote(
    quote_id: Optional[str] = Query(default=None, alias="id"),
    identity: Identity = Depends(require_admin),
    service: QuoteService = Depends(get_quote_service),
) -> QuoteDeleteResponse:
    """Admin only.  Files attached to the quote stay on the lead."""
    quote = await service.delete_quote(parse_id(quote_id))
    return QuoteDeleteResponse(
        message="Quote deleted successfully", quote=QuoteOut.model_validate(quote)
    )
