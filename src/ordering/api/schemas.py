"""Pydantic request/response schemas for the Ordering API.

These are external contracts, separate from the internal commands. JSON keys
are camelCase on the way in and on the way out. Display values such as
``formattedTotal`` and ``customerName`` are derived here at serialization time
and never stored.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ordering.cart.cart import Cart
from ordering.order.order import Order, customer_name, formatted_total
from shared.money import format_inr


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )


# ---------------------------------------------------------------------------
# Cart Request Schemas
# ---------------------------------------------------------------------------
class AddToCartRequest(CamelModel):
    product_id: str
    quantity: int = 1

    model_config = ConfigDict(
        json_schema_extra={"examples": [{"productId": "1", "quantity": 2}]},
    )


class UpdateCartItemRequest(CamelModel):
    quantity: int


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class ShippingDetailsRequest(CamelModel):
    first_name: str
    last_name: str
    address: str
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str | None = None
    notes: str | None = None
    payment_method: str | None = None


class CartItemSchema(CamelModel):
    id: str
    quantity: int


class CreateOrderRequest(ShippingDetailsRequest):
    cart_items: list[CartItemSchema] = Field(default_factory=list)

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "firstName": "Asha",
                    "lastName": "Rao",
                    "address": "12 MG Road",
                    "city": "Bengaluru",
                    "cartItems": [{"id": "1", "quantity": 2}],
                }
            ]
        },
    )


class CancelOrderRequest(CamelModel):
    reason: str | None = None


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class CartLineResponse(CamelModel):
    product_id: str
    product_name: str
    unit_price: float
    quantity: int
    subtotal: float
    added_at: datetime


class CartResponse(CamelModel):
    user_id: str
    items: list[CartLineResponse]
    total_items: int
    total_amount: float
    formatted_total: str
    created_at: datetime
    last_updated: datetime

    @classmethod
    def from_cart(cls, cart: Cart) -> "CartResponse":
        return cls(
            user_id=cart.user_id,
            items=[
                CartLineResponse(
                    product_id=line.product_id,
                    product_name=line.product_name,
                    unit_price=float(line.unit_price),
                    quantity=line.quantity,
                    subtotal=float(line.subtotal),
                    added_at=line.added_at,
                )
                for line in cart.lines
            ],
            total_items=cart.total_items,
            total_amount=float(cart.total_amount),
            formatted_total=format_inr(cart.total_amount),
            created_at=cart.created_at,
            last_updated=cart.last_updated,
        )


class OrderLineResponse(CamelModel):
    product_id: str
    product_name: str
    unit_price: float
    quantity: int
    subtotal: float


class ShippingAddressResponse(CamelModel):
    first_name: str
    last_name: str
    address: str
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str


class OrderResponse(CamelModel):
    id: str
    order_id: str
    user_id: str
    items: list[OrderLineResponse]
    shipping_address: ShippingAddressResponse
    total_amount: float
    formatted_total: str
    customer_name: str
    status: str
    payment_status: str
    payment_method: str
    notes: str | None = None
    tracking_number: str | None = None
    estimated_delivery: datetime | None = None
    delivered_at: datetime | None = None
    cancelled_at: datetime | None = None
    cancellation_reason: str | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_order(cls, order: Order) -> "OrderResponse":
        return cls(
            id=order.id,
            order_id=order.order_id,
            user_id=order.user_id,
            items=[
                OrderLineResponse(
                    product_id=line.product_id,
                    product_name=line.product_name,
                    unit_price=float(line.unit_price),
                    quantity=line.quantity,
                    subtotal=float(line.subtotal),
                )
                for line in order.lines
            ],
            shipping_address=ShippingAddressResponse(**order.shipping_address.to_dict()),
            total_amount=float(order.total_amount),
            formatted_total=formatted_total(order),
            customer_name=customer_name(order),
            status=order.status,
            payment_status=order.payment_status,
            payment_method=order.payment_method,
            notes=order.notes,
            tracking_number=order.tracking_number,
            estimated_delivery=order.estimated_delivery,
            delivered_at=order.delivered_at,
            cancelled_at=order.cancelled_at,
            cancellation_reason=order.cancellation_reason,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class OrderListResponse(CamelModel):
    orders: list[OrderResponse]
    count: int
