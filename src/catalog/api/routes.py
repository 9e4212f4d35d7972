"""FastAPI endpoints for the Catalogue domain.

Only single-product lookup is exposed; the ordering API is the write side.
"""

from fastapi import APIRouter, Request
from protean.utils.globals import current_domain

from catalog.api.schemas import ProductResponse
from catalog.product.product import Product

product_router = APIRouter(prefix="/products", tags=["products"])


# --- Product endpoints ---


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str, request: Request) -> ProductResponse:
    product = current_domain.repository_for(Product).get_available(product_id)
    return ProductResponse.from_product(product, request.app.state.settings.low_stock_threshold)
