from datetime import datetime
from typing import List, Optional

from app.schemas.common import CamelModel


class QuoteCreate(CamelModel):
    lead_id: Optional[int] = None
    product_id: Optional[int] = None
    estimated_price: Optional[int] = None
    quantity: Optional[int] = None
    size: Optional[str] = None
    budget_range: Optional[str] = None
    artwork_preference: Optional[str] = None
    valid_until: Optional[datetime] = None


class QuoteUpdate(CamelModel):
    """Partial update; ``lead_id`` and ``product_id`` are fixed at creation."""

    status: Optional[str] = None
    estimated_price: Optional[int] = None
    quantity: Optional[int] = None
    size: Optional[str] = None
    budget_range: Optional[str] = None
    artwork_preference: Optional[str] = None
    valid_until: Optional[datetime] = None


class QuoteOut(CamelModel):
    id: int
    lead_id: int
    product_id: int
    quantity: int
    size: Optional[str] = None
    budget_range: Optional[str] = None
    artwork_preference: Optional[str] = None
    estimated_price: int
    status: str
    valid_until: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class QuoteListItem(QuoteOut):
    lead_name: Optional[str] = None
    lead_email: Optional[str] = None
    product_name: Optional[str] = None
    product_category: Optional[str] = None


class QuoteLeadOut(CamelModel):
    name: str
    email: str
    phone: Optional[str] = None
    status: str


class QuoteProductOut(CamelModel):
    name: str
    category: str
    base_price: int
    description_es: Optional[str] = None
    description_en: Optional[str] = None
    image_url: Optional[str] = None


class QuoteDetailOut(QuoteOut):
    lead: Optional[QuoteLeadOut] = None
    product: Optional[QuoteProductOut] = None


class QuoteListResponse(CamelModel):
    quotes: List[QuoteListItem]
    total: int
    page: int
    total_pages: int


class QuoteDeleteResponse(CamelModel):
    message: str
    quote: QuoteOut
