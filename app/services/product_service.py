from typing import List

from app.models.product import Product
from app.repositories.product_repository import ProductRepository


class ProductService:
    def __init__(self, repo: ProductRepository) -> None:
        self._repo = repo

    async def list_products(self) -> List[Product]:
        """Active catalogue, ordered by category then name."""
        return await self._repo.list_active()
