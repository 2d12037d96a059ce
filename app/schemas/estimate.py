from datetime import datetime
from typing import Any, List, Optional

from app.schemas.common import CamelModel


class EstimateItem(CamelModel):
    description: str
    quantity: float
    unit_price: float
    total: float


class EstimateWrite(CamelModel):
    """Shared body of estimate create and update.

    ``items`` is left untyped so the service can report ``MISSING_ITEMS``
    and ``INVALID_ITEMS`` itself.  ``user_id`` is captured only so a body
    that tries to set the owner can be rejected.
    """

    client_name: Optional[str] = None
    client_email: Optional[str] = None
    client_phone: Optional[str] = None
    client_address: Optional[str] = None
    items: Optional[Any] = None
    subtotal: Optional[float] = None
    tax_rate: Optional[float] = None
    tax_amount: Optional[float] = None
    shipping_cost: Optional[float] = None
    total: Optional[float] = None
    notes: Optional[str] = None
    valid_until: Optional[datetime] = None
    status: Optional[str] = None
    pdf_file: Optional[str] = None
    user_id: Optional[Any] = None


class EstimateOut(CamelModel):
    id: int
    quote_number: str
    client_name: str
    client_email: str
    client_phone: Optional[str] = None
    client_address: Optional[str] = None
    items: List[EstimateItem]
    subtotal: float
    tax_rate: float
    tax_amount: float
    shipping_cost: float
    total: float
    notes: Optional[str] = None
    valid_until: Optional[datetime] = None
    status: str
    pdf_file: Optional[str] = None
    user_id: str
    created_at: datetime
    updated_at: datetime


class EstimateListResponse(CamelModel):
    estimates: List[EstimateOut]
    total: int
    page: int
    total_pages: int


class EstimateDeleteResponse(CamelModel):
    message: str
    estimate: EstimateOut
