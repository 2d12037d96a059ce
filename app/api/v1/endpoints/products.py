from fastapi import APIRouter, Depends

from app.schemas.product import ProductListResponse, ProductOut
from app.services.product_service import ProductService
from app.api.deps import get_product_service

router = APIRouter(prefix="/products", tags=["Products"])


@router.get("", response_model=ProductListResponse)
async def list_products(
    service: ProductService = Depends(get_product_service),
) -> ProductListResponse:
    products = await service.list_products()
    return ProductListResponse(products=[ProductOut.model_validate(p) for p in products])
