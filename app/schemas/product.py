from datetime import datetime
from typing import List, Optional

from app.schemas.common import CamelModel


class ProductOut(CamelModel):
    id: int
    category: str
    name: str
    base_price: int
    description_es: Optional[str] = None
    description_en: Optional[str] = None
    image_url: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class ProductListResponse(CamelModel):
    products: List[ProductOut]
