"""Domain events for the Order aggregate.

Events are versioned, immutable facts. They are dispatched after the unit of
work that produced them commits.
"""

from protean.fields import DateTime, Dict, Identifier, List, String

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """A new order was placed and its stock was taken from the ledger."""

    __version__ = 1

    internal_id = Identifier(required=True)
    order_id = String(required=True, max_length=32)
    user_id = Identifier(required=True)
    items = List(content_type=Dict())  # product_id, product_name, unit_price, quantity, subtotal
    total_amount = String(required=True)  # serialized Decimal
    payment_method = String(required=True)
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderConfirmed:
    """A pending order was confirmed."""

    __version__ = 1

    order_id = String(required=True, max_length=32)
    confirmed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderProcessing:
    """The order is being prepared for shipment."""

    __version__ = 1

    order_id = String(required=True, max_length=32)
    started_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderShipped:
    """The order left the warehouse."""

    __version__ = 1

    order_id = String(required=True, max_length=32)
    tracking_number = String(max_length=100)
    estimated_delivery = DateTime()
    shipped_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderDelivered:
    """The order reached the customer."""

    __version__ = 1

    order_id = String(required=True, max_length=32)
    delivered_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderCancelled:
    """The order was cancelled before shipment."""

    __version__ = 1

    order_id = String(required=True, max_length=32)
    user_id = Identifier(required=True)
    reason = String(max_length=200)
    previous_status = String(required=True)
    cancelled_at = DateTime(required=True)


@ordering.event(part_of="Order")
class PaymentStatusChanged:
    """The order's payment status moved along its own axis."""

    __version__ = 1

    order_id = String(required=True, max_length=32)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_at = DateTime(required=True)
