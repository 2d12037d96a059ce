from typing import Any, List, Optional

from sqlalchemy import select

from app.models.product import Product
from app.repositories.base import BaseRepository


class ProductRepository(BaseRepository):
    """Encapsulates every SQL query that touches the ``products`` table."""

    async def get_by_id(self, product_id: int) -> Optional[Product]:
        result = await self._db.execute(select(Product).where(Product.id == product_id))
        return result.scalar_one_or_none()

    async def list_active(self) -> List[Product]:
        """Active products ordered by category then name."""
        result = await self._db.execute(
            select(Product)
            .where(Product.is_active.is_(True))
            .order_by(Product.category, Product.name)
        )
        return list(result.scalars().all())

    async def get_by_category_and_name(
        self, category: str, name: str
    ) -> Optional[Product]:
        result = await self._db.execute(
            select(Product).where(Product.category == category, Product.name == name)
        )
        return result.scalar_one_or_none()

    async def create(self, **kwargs: Any) -> Product:
        product = Product(**kwargs)
        self._db.add(product)
        await self._db.flush()
        return product
