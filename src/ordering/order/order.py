"""Order aggregate: the immutable record of a purchase and its lifecycle.

Lines, total, business order id, owner, shipping address and creation time
are fixed when the order is placed. Afterwards only the lifecycle fields
change: status, payment status, cancellation metadata and delivery metadata.

State Machine:
    PENDING → CONFIRMED → PROCESSING → SHIPPED → DELIVERED
    CANCELLED (from PENDING, CONFIRMED, PROCESSING)

Orders placed through the order builder start in CONFIRMED.

Payment status is an independent axis:
    PENDING → PAID | FAILED,  FAILED → PAID | PENDING,  PAID → REFUNDED
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, Decimal, HasMany, Identifier, Integer, String, ValueObject

from ordering.domain import ordering
from ordering.order.events import (
    OrderCancelled,
    OrderConfirmed,
    OrderDelivered,
    OrderPlaced,
    OrderProcessing,
    OrderShipped,
    PaymentStatusChanged,
)
from shared.errors import InvalidArgument, InvalidState
from shared.money import ZERO, format_inr, round_to_cents

MAX_NOTES_LENGTH = 500
MAX_CANCELLATION_REASON_LENGTH = 200
MIN_ADDRESS_LENGTH = 5
DEFAULT_COUNTRY = "United States"


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class PaymentMethod(Enum):
    CREDIT_CARD = "credit_card"
    DEBIT_CARD = "debit_card"
    PAYPAL = "paypal"
    STRIPE = "stripe"
    CASH_ON_DELIVERY = "cash_on_delivery"


# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

_PAYMENT_TRANSITIONS = {
    PaymentStatus.PENDING: {PaymentStatus.PAID, PaymentStatus.FAILED},
    PaymentStatus.FAILED: {PaymentStatus.PAID, PaymentStatus.PENDING},
    PaymentStatus.PAID: {PaymentStatus.REFUNDED},
    PaymentStatus.REFUNDED: set(),
}

_IMMUTABLE_FIELDS = frozenset({"order_id", "user_id", "lines", "total_amount", "shipping_address", "created_at"})


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class ShippingAddress:
    """Where the order is delivered. Captured at placement and never changed."""

    first_name = String(required=True, max_length=50)
    last_name = String(required=True, max_length=50)
    address = String(required=True, max_length=255)
    city = String(max_length=100)
    state = String(max_length=100)
    zip_code = String(max_length=20)
    country = String(max_length=100, default=DEFAULT_COUNTRY)

    @classmethod
    def create(cls, first_name, last_name, address, city=None, state=None, zip_code=None, country=None):
        first_name = (first_name or "").strip()
        last_name = (last_name or "").strip()
        address = (address or "").strip()

        if not first_name:
            raise InvalidArgument("First name is required")
        if not last_name:
            raise InvalidArgument("Last name is required")
        if len(address) < MIN_ADDRESS_LENGTH:
            raise InvalidArgument(f"Address must be at least {MIN_ADDRESS_LENGTH} characters long")

        return cls(
            first_name=first_name,
            last_name=last_name,
            address=address,
            city=_blank_to_none(city),
            state=_blank_to_none(state),
            zip_code=_blank_to_none(zip_code),
            country=_blank_to_none(country) or DEFAULT_COUNTRY,
        )


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderLine:
    """Price and name snapshot of one product at placement time."""

    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=100)
    unit_price = Decimal(required=True, min_value=0)
    quantity = Integer(required=True, min_value=1)

    @property
    def subtotal(self):
        return self.unit_price * self.quantity

    @classmethod
    def snapshot(cls, product, quantity):
        return cls(
            product_id=product.id,
            product_name=product.name,
            unit_price=product.price,
            quantity=quantity,
        )


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    order_id = String(required=True, max_length=32)
    user_id = Identifier(required=True)
    lines = HasMany(OrderLine)
    shipping_address = ValueObject(ShippingAddress)
    total_amount = Decimal(default=ZERO)
    status = String(max_length=20, choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_status = String(max_length=20, choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    payment_method = String(max_length=20, choices=PaymentMethod, default=PaymentMethod.CREDIT_CARD.value)
    notes = String(max_length=MAX_NOTES_LENGTH)
    tracking_number = String(max_length=100)
    estimated_delivery = DateTime()
    delivered_at = DateTime()
    cancelled_at = DateTime()
    cancellation_reason = String(max_length=MAX_CANCELLATION_REASON_LENGTH)
    created_at = DateTime()
    updated_at = DateTime()

    def __setattr__(self, name, value):
        if name in _IMMUTABLE_FIELDS and getattr(self, "_initialized", False):
            raise InvalidState(f"Order {name} cannot be changed once the order is placed")
        super().__setattr__(name, value)

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        order_id,
        user_id,
        lines,
        shipping_address,
        payment_method=PaymentMethod.CREDIT_CARD,
        notes=None,
    ):
        """Create a confirmed order from validated lines.

        The total is the sum of line subtotals, rounded to cents once after
        summing.
        """
        if not lines:
            raise InvalidArgument("Order must contain at least one item")

        now = datetime.now(UTC)
        total = round_to_cents(sum((line.subtotal for line in lines), ZERO))

        order = cls(
            order_id=order_id,
            user_id=canonical_user_id(user_id),
            lines=list(lines),
            shipping_address=shipping_address,
            total_amount=total,
            status=OrderStatus.CONFIRMED.value,
            payment_status=PaymentStatus.PENDING.value,
            payment_method=parse_payment_method(payment_method).value,
            notes=validate_notes(notes),
            created_at=now,
            updated_at=now,
        )

        order.raise_(
            OrderPlaced(
                internal_id=order.id,
                order_id=order.order_id,
                user_id=order.user_id,
                items=[
                    {
                        "product_id": line.product_id,
                        "product_name": line.product_name,
                        "unit_price": str(line.unit_price),
                        "quantity": line.quantity,
                        "subtotal": str(line.subtotal),
                    }
                    for line in order.lines
                ],
                total_amount=str(order.total_amount),
                payment_method=order.payment_method,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def is_owned_by(self, user_id) -> bool:
        return canonical_user_id(self.user_id) == canonical_user_id(user_id)

    @property
    def is_terminal(self) -> bool:
        return not _VALID_TRANSITIONS[OrderStatus(self.status)]

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def confirm(self):
        self._assert_can_transition(OrderStatus.CONFIRMED)
        now = self._move_to(OrderStatus.CONFIRMED)
        self.raise_(OrderConfirmed(order_id=self.order_id, confirmed_at=now))

    def mark_processing(self):
        self._assert_can_transition(OrderStatus.PROCESSING)
        now = self._move_to(OrderStatus.PROCESSING)
        self.raise_(OrderProcessing(order_id=self.order_id, started_at=now))

    def record_shipment(self, tracking_number=None, estimated_delivery=None):
        self._assert_can_transition(OrderStatus.SHIPPED)
        self.tracking_number = tracking_number
        self.estimated_delivery = estimated_delivery
        now = self._move_to(OrderStatus.SHIPPED)
        self.raise_(
            OrderShipped(
                order_id=self.order_id,
                tracking_number=tracking_number,
                estimated_delivery=estimated_delivery,
                shipped_at=now,
            )
        )

    def record_delivery(self):
        self._assert_can_transition(OrderStatus.DELIVERED)
        now = self._move_to(OrderStatus.DELIVERED)
        self.delivered_at = now
        self.raise_(OrderDelivered(order_id=self.order_id, delivered_at=now))

    def cancel(self, reason=None):
        """Cancel the order. Shipped, delivered and cancelled orders cannot be cancelled."""
        current = OrderStatus(self.status)
        if current == OrderStatus.CANCELLED:
            raise InvalidState("Order is already cancelled")
        if current in (OrderStatus.SHIPPED, OrderStatus.DELIVERED):
            raise InvalidState("Cannot cancel shipped or delivered orders")

        reason = _blank_to_none(reason)
        if reason is not None and len(reason) > MAX_CANCELLATION_REASON_LENGTH:
            raise InvalidArgument(
                f"Cancellation reason cannot exceed {MAX_CANCELLATION_REASON_LENGTH} characters"
            )

        self._assert_can_transition(OrderStatus.CANCELLED)
        now = self._move_to(OrderStatus.CANCELLED)
        self.cancelled_at = now
        self.cancellation_reason = reason

        self.raise_(
            OrderCancelled(
                order_id=self.order_id,
                user_id=self.user_id,
                reason=reason,
                previous_status=current.value,
                cancelled_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Payment
    # -------------------------------------------------------------------
    def record_payment_status(self, new_status):
        try:
            target = PaymentStatus(new_status)
        except ValueError as exc:
            raise InvalidArgument(f"Unknown payment status: {new_status}") from exc

        current = PaymentStatus(self.payment_status)
        if target not in _PAYMENT_TRANSITIONS[current]:
            raise InvalidState(f"Cannot change payment status from {current.value} to {target.value}")

        now = datetime.now(UTC)
        self.payment_status = target.value
        self.updated_at = now

        self.raise_(
            PaymentStatusChanged(
                order_id=self.order_id,
                previous_status=current.value,
                new_status=target.value,
                changed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Internal
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target):
        current = OrderStatus(self.status)
        if self.is_terminal:
            raise InvalidState(f"Order is {current.value} and can no longer change status")
        if target not in _VALID_TRANSITIONS[current]:
            raise InvalidState(f"Cannot transition from {current.value} to {target.value}")

    def _move_to(self, target):
        now = datetime.now(UTC)
        self.status = target.value
        self.updated_at = now
        return now


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def canonical_user_id(value) -> str:
    """Normalize a user reference (string, UUID or any id object) for comparison."""
    if value is None:
        raise InvalidArgument("User id is required")
    return str(value).strip()


def parse_payment_method(value) -> PaymentMethod:
    if value is None:
        return PaymentMethod.CREDIT_CARD
    try:
        return PaymentMethod(value)
    except ValueError as exc:
        raise InvalidArgument(f"Unknown payment method: {value}") from exc


def validate_notes(notes):
    notes = _blank_to_none(notes)
    if notes is not None and len(notes) > MAX_NOTES_LENGTH:
        raise InvalidArgument(f"Notes cannot exceed {MAX_NOTES_LENGTH} characters")
    return notes


def customer_name(order: Order) -> str:
    return f"{order.shipping_address.first_name} {order.shipping_address.last_name}"


def formatted_total(order: Order) -> str:
    return format_inr(order.total_amount)


def _blank_to_none(value):
    if value is None:
        return None
    value = str(value).strip()
    return value or None
