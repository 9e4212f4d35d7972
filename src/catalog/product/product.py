"""Product aggregate: catalogue entry the ordering core reads prices and stock from.

Ordering never holds a reference to a live Product: carts and orders copy the
name and price they need at the moment they need them. The only mutation
ordering performs on a Product is through the Stock Ledger.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import Boolean, DateTime, Decimal, Integer, String, Text

from catalog.product.events import ProductAdded, StockDecreased, StockIncreased
from ordering.domain import ordering
from shared.errors import InvalidArgument
from shared.money import format_inr, to_money

LOW_STOCK_THRESHOLD = 5


class ProductCategory(Enum):
    ELECTRONICS = "Electronics"
    WEARABLES = "Wearables"
    ACCESSORIES = "Accessories"
    PERIPHERALS = "Peripherals"
    AUDIO = "Audio"
    COMPUTING = "Computing"


@ordering.aggregate
class Product:
    name: String(required=True, min_length=1, max_length=100)
    description: Text(default="")
    price: Decimal(required=True, min_value=0)
    category: String(max_length=20, choices=ProductCategory, default=ProductCategory.ELECTRONICS.value)
    image: String(max_length=500, sanitize=False)
    sku: String(max_length=50)
    stock_quantity: Integer(min_value=0, default=0)
    in_stock: Boolean(default=False)
    is_active: Boolean(default=True)
    created_at: DateTime()
    updated_at: DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        name,
        price,
        stock_quantity=0,
        description="",
        category=ProductCategory.ELECTRONICS,
        image=None,
        sku=None,
        product_id=None,
        is_active=True,
    ):
        now = datetime.now(UTC)
        values = dict(
            name=name,
            description=description,
            price=to_money(price),
            category=ProductCategory(category).value,
            image=image,
            sku=sku,
            stock_quantity=stock_quantity,
            in_stock=stock_quantity > 0,
            is_active=is_active,
            created_at=now,
            updated_at=now,
        )
        if product_id is not None:
            values["id"] = str(product_id)

        product = cls(**values)
        product.raise_(
            ProductAdded(
                product_id=product.id,
                name=product.name,
                price=str(product.price),
                stock_quantity=product.stock_quantity,
            )
        )
        return product

    # -------------------------------------------------------------------
    # Stock
    # -------------------------------------------------------------------
    def is_available(self, quantity=1):
        return self.is_active and self.stock_quantity >= quantity

    def decrease_stock(self, quantity):
        """Remove units from stock, clamping at zero."""
        if quantity < 1:
            raise InvalidArgument("Stock adjustment quantity must be at least 1")

        previous = self.stock_quantity
        self.stock_quantity = max(0, previous - quantity)
        self.in_stock = self.stock_quantity > 0
        self.updated_at = datetime.now(UTC)

        self.raise_(
            StockDecreased(
                product_id=self.id,
                quantity=quantity,
                previous_stock=previous,
                new_stock=self.stock_quantity,
            )
        )

    def increase_stock(self, quantity):
        """Return units to stock."""
        if quantity < 1:
            raise InvalidArgument("Stock adjustment quantity must be at least 1")

        previous = self.stock_quantity
        self.stock_quantity = previous + quantity
        self.in_stock = self.stock_quantity > 0
        self.updated_at = datetime.now(UTC)

        self.raise_(
            StockIncreased(
                product_id=self.id,
                quantity=quantity,
                previous_stock=previous,
                new_stock=self.stock_quantity,
            )
        )


# ---------------------------------------------------------------------------
# Display values
# ---------------------------------------------------------------------------
def formatted_price(product: Product) -> str:
    return format_inr(product.price)


def availability_status(product: Product, low_stock_threshold: int = LOW_STOCK_THRESHOLD) -> str:
    if product.stock_quantity == 0:
        return "Out of Stock"
    if product.stock_quantity <= low_stock_threshold:
        return "Low Stock"
    return "In Stock"
