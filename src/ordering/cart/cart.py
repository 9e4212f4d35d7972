"""Cart aggregate: one mutable collection of prospective purchase lines per user.

A cart holds at most one line per product. Each line snapshots the product's
name and unit price; its subtotal is always derived from price x quantity.
Every mutation recomputes ``total_items`` and ``total_amount`` and bumps
``last_updated`` before returning, so totals never drift from the lines.

A cart's identity is derived from its owner's user id, so each user has
exactly one.
"""

from datetime import UTC, datetime
from uuid import NAMESPACE_URL, uuid5

from protean.fields import DateTime, Decimal, HasMany, Identifier, Integer, String

from catalog.product.product import Product
from ordering.cart.events import CartCleared, CartItemAdded, CartItemQuantityUpdated, CartItemRemoved
from ordering.domain import ordering
from shared.errors import InsufficientStock, InvalidArgument
from shared.money import ZERO

_CART_NAMESPACE = uuid5(NAMESPACE_URL, "storefront:cart")


def cart_id_for(user_id) -> str:
    return str(uuid5(_CART_NAMESPACE, str(user_id)))


@ordering.entity(part_of="Cart")
class CartLine:
    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=100)
    unit_price = Decimal(required=True, min_value=0)
    quantity = Integer(required=True, min_value=1)
    added_at = DateTime()

    @property
    def subtotal(self):
        return self.unit_price * self.quantity


@ordering.aggregate
class Cart:
    user_id = Identifier(required=True)
    lines = HasMany(CartLine)
    total_items = Integer(default=0)
    total_amount = Decimal(default=ZERO)
    created_at = DateTime()
    last_updated = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, user_id):
        now = datetime.now(UTC)
        return cls(id=cart_id_for(user_id), user_id=str(user_id), created_at=now, last_updated=now)

    def line_for(self, product_id) -> CartLine | None:
        return next((line for line in self.lines if str(line.product_id) == str(product_id)), None)

    # -------------------------------------------------------------------
    # Line management
    # -------------------------------------------------------------------
    def add_item(self, product: Product, quantity=1):
        """Add units of a product, merging into its existing line.

        The combined quantity is checked against current stock. Name and unit
        price are refreshed from the product, so an existing line follows the
        current catalogue price for its whole quantity.
        """
        if quantity < 1:
            raise InvalidArgument("Quantity must be at least 1")

        existing = self.line_for(product.id)
        combined = quantity + (existing.quantity if existing else 0)
        if combined > product.stock_quantity:
            raise InsufficientStock(
                f"Insufficient stock. Available: {product.stock_quantity}",
                product_id=product.id,
                available=product.stock_quantity,
                requested=combined,
            )

        if existing:
            existing.quantity = combined
            existing.unit_price = product.price
            existing.product_name = product.name
        else:
            self.add_lines(
                CartLine(
                    product_id=product.id,
                    product_name=product.name,
                    unit_price=product.price,
                    quantity=quantity,
                    added_at=datetime.now(UTC),
                )
            )

        self._recalculate_totals()

        self.raise_(
            CartItemAdded(
                user_id=self.user_id,
                product_id=product.id,
                quantity=quantity,
                line_quantity=combined,
                unit_price=str(product.price),
            )
        )

    def update_item_quantity(self, product_id, quantity):
        """Replace a line's quantity. Zero removes the line; a missing line is left alone."""
        if quantity < 0:
            raise InvalidArgument("Quantity cannot be negative")

        line = self.line_for(product_id)
        if line is None:
            self._recalculate_totals()
            return

        if quantity == 0:
            self.remove_item(product_id)
            return

        previous = line.quantity
        line.quantity = quantity
        self._recalculate_totals()

        self.raise_(
            CartItemQuantityUpdated(
                user_id=self.user_id,
                product_id=line.product_id,
                previous_quantity=previous,
                new_quantity=quantity,
            )
        )

    def remove_item(self, product_id):
        line = self.line_for(product_id)
        if line is not None:
            self.remove_lines(line)
            self.raise_(CartItemRemoved(user_id=self.user_id, product_id=line.product_id))

        self._recalculate_totals()

    def clear(self):
        lines = list(self.lines)
        if lines:
            self.remove_lines(lines)
        self._recalculate_totals()

        self.raise_(CartCleared(user_id=self.user_id, items_removed=len(lines)))

    # -------------------------------------------------------------------
    # Internal
    # -------------------------------------------------------------------
    def _recalculate_totals(self):
        self.total_items = sum(line.quantity for line in self.lines)
        self.total_amount = sum((line.subtotal for line in self.lines), ZERO)
        self.last_updated = datetime.now(UTC)
