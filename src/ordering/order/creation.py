"""Order placement: commands and handler.

Placement is all-or-nothing. Every item is validated against the catalogue
and the stock ledger before any stock is touched; the decrements, the new
order and (for checkout) the emptied cart are written in one unit of work.
Callers hold the ledger locks of every product involved until that unit of
work has committed.
"""

from collections import defaultdict

import structlog
from protean import handle
from protean.fields import Identifier, Integer, List, String, ValueObject
from protean.utils.globals import current_domain, g

from catalog.product.product import Product
from catalog.stock.ledger import stock_ledger
from ordering.cart.cart import Cart
from ordering.domain import ordering
from ordering.order.identifiers import generate_order_id
from ordering.order.order import (
    Order,
    OrderLine,
    ShippingAddress,
    canonical_user_id,
    customer_name,
    parse_payment_method,
    validate_notes,
)
from shared.errors import InsufficientStock, InvalidArgument, NotFound

logger = structlog.get_logger(__name__)


@ordering.value_object(part_of="Order")
class OrderItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True)


@ordering.command(part_of="Order")
class PlaceOrder:
    user_id = Identifier(required=True)
    items = List(content_type=ValueObject(OrderItem))
    first_name = String(max_length=50)
    last_name = String(max_length=50)
    address = String(max_length=255)
    city = String(max_length=100)
    state = String(max_length=100)
    zip_code = String(max_length=20)
    country = String(max_length=100)
    payment_method = String(max_length=20)
    notes = String(max_length=1000)


@ordering.command(part_of="Order")
class CheckoutCart:
    """Place an order for everything in the user's cart, then empty the cart."""

    user_id = Identifier(required=True)
    first_name = String(max_length=50)
    last_name = String(max_length=50)
    address = String(max_length=255)
    city = String(max_length=100)
    state = String(max_length=100)
    zip_code = String(max_length=20)
    country = String(max_length=100)
    payment_method = String(max_length=20)
    notes = String(max_length=1000)


@ordering.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command) -> Order:
        address, payment_method, notes = _validate_details(command)

        if not command.items:
            raise InvalidArgument("Order must contain at least one item")
        for item in command.items:
            if item.quantity < 1:
                raise InvalidArgument(f"Quantity for product {item.product_id} must be at least 1")

        requested = [(str(item.product_id), item.quantity) for item in command.items]
        return _place(command.user_id, address, requested, payment_method, notes)

    @handle(CheckoutCart)
    def checkout_cart(self, command) -> Order:
        address, payment_method, notes = _validate_details(command)

        cart = current_domain.repository_for(Cart).find_by_user(command.user_id)
        if cart is None or not cart.lines:
            raise InvalidArgument("Cart is empty")

        requested = [(str(line.product_id), line.quantity) for line in cart.lines]
        return _place(command.user_id, address, requested, payment_method, notes, cart=cart)


# ---------------------------------------------------------------------------
# Internal
# ---------------------------------------------------------------------------
def _validate_details(command):
    address = ShippingAddress.create(
        first_name=command.first_name,
        last_name=command.last_name,
        address=command.address,
        city=command.city,
        state=command.state,
        zip_code=command.zip_code,
        country=command.country,
    )
    return address, parse_payment_method(command.payment_method), validate_notes(command.notes)


def _order_id_prefix() -> str:
    return g.get("order_id_prefix", None) or current_domain.ORDER_ID_PREFIX


def _place(user_id, address, requested, payment_method, notes, cart=None):
    products = current_domain.repository_for(Product)
    orders = current_domain.repository_for(Order)
    user_id = canonical_user_id(user_id)

    lines = []
    claimed = defaultdict(int)
    for product_id, quantity in requested:
        product = products.get_or_none(product_id)
        if product is None or not product.is_active:
            raise NotFound(f"Product with ID {product_id} not found", product_id=product_id)

        # Repeated lines for one product draw on the same stock
        claimed[product_id] += quantity
        if claimed[product_id] > product.stock_quantity:
            raise InsufficientStock(
                f"Insufficient stock for {product.name}. "
                f"Available: {product.stock_quantity}, Requested: {claimed[product_id]}",
                product_id=product_id,
                available=product.stock_quantity,
                requested=claimed[product_id],
            )

        lines.append(OrderLine.snapshot(product, quantity))

    for product_id, quantity in claimed.items():
        stock_ledger.decrease(product_id, quantity)

    order = Order.place(
        order_id=generate_order_id(prefix=_order_id_prefix(), exists=orders.exists_order_id),
        user_id=user_id,
        lines=lines,
        shipping_address=address,
        payment_method=payment_method,
        notes=notes,
    )
    orders.add(order)

    if cart is not None:
        cart.clear()
        current_domain.repository_for(Cart).add(cart)

    logger.info(
        "order_placed",
        id=order.id,
        order_id=order.order_id,
        user_id=order.user_id,
        customer_name=customer_name(order),
        items=[{"product_id": line.product_id, "quantity": line.quantity} for line in order.lines],
        total_amount=str(order.total_amount),
    )
    return order
