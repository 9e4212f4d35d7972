"""Pydantic response schemas for the Catalogue API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from catalog.product.product import Product, availability_status, formatted_price

# --- Product Response Schemas ---


class ProductResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    description: str
    price: float
    formatted_price: str
    category: str
    image: str | None = None
    sku: str | None = None
    stock_quantity: int
    in_stock: bool
    availability_status: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_product(cls, product: Product, low_stock_threshold: int) -> ProductResponse:
        return cls(
            id=product.id,
            name=product.name,
            description=product.description,
            price=float(product.price),
            formatted_price=formatted_price(product),
            category=product.category,
            image=product.image,
            sku=product.sku,
            stock_quantity=product.stock_quantity,
            in_stock=product.in_stock,
            availability_status=availability_status(product, low_stock_threshold),
            created_at=product.created_at,
            updated_at=product.updated_at,
        )
