"""FastAPI routes for the Ordering domain: cart and orders.

Each request runs inside the ordering domain context pushed by the app
middleware. Writes go through ``Storefront.process``; reads go straight to
the repositories.
"""

from fastapi import APIRouter, Depends

from ordering.api.dependencies import current_user_id, get_storefront
from ordering.api.schemas import (
    AddToCartRequest,
    CancelOrderRequest,
    CartResponse,
    CreateOrderRequest,
    OrderListResponse,
    OrderResponse,
    ShippingDetailsRequest,
    UpdateCartItemRequest,
)
from ordering.cart.items import AddToCart, RemoveFromCart, UpdateCartItemQuantity
from ordering.cart.management import ClearCart, GetCart
from ordering.storefront import Storefront
from ordering.order.cancellation import CancelOrder
from ordering.order.creation import CheckoutCart, OrderItem, PlaceOrder
from ordering.order import history


def _shipping_fields(body: ShippingDetailsRequest) -> dict:
    return {
        "first_name": body.first_name,
        "last_name": body.last_name,
        "address": body.address,
        "city": body.city,
        "state": body.state,
        "zip_code": body.zip_code,
        "country": body.country,
        "notes": body.notes,
        "payment_method": body.payment_method,
    }


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=CartResponse)
async def get_cart(
    user_id: str = Depends(current_user_id),
    storefront: Storefront = Depends(get_storefront),
) -> CartResponse:
    cart = storefront.process(GetCart(user_id=user_id))
    return CartResponse.from_cart(cart)


@cart_router.post("/add", response_model=CartResponse)
async def add_to_cart(
    body: AddToCartRequest,
    user_id: str = Depends(current_user_id),
    storefront: Storefront = Depends(get_storefront),
) -> CartResponse:
    command = AddToCart(
        user_id=user_id,
        product_id=body.product_id,
        quantity=body.quantity,
    )
    cart = storefront.process(command)
    return CartResponse.from_cart(cart)


@cart_router.put("/item/{product_id}", response_model=CartResponse)
async def update_cart_item(
    product_id: str,
    body: UpdateCartItemRequest,
    user_id: str = Depends(current_user_id),
    storefront: Storefront = Depends(get_storefront),
) -> CartResponse:
    command = UpdateCartItemQuantity(
        user_id=user_id,
        product_id=product_id,
        quantity=body.quantity,
    )
    cart = storefront.process(command)
    return CartResponse.from_cart(cart)


@cart_router.delete("/item/{product_id}", response_model=CartResponse)
async def remove_cart_item(
    product_id: str,
    user_id: str = Depends(current_user_id),
    storefront: Storefront = Depends(get_storefront),
) -> CartResponse:
    cart = storefront.process(RemoveFromCart(user_id=user_id, product_id=product_id))
    return CartResponse.from_cart(cart)


@cart_router.delete("/clear", response_model=CartResponse)
async def clear_cart(
    user_id: str = Depends(current_user_id),
    storefront: Storefront = Depends(get_storefront),
) -> CartResponse:
    cart = storefront.process(ClearCart(user_id=user_id))
    return CartResponse.from_cart(cart)


@cart_router.post("/checkout", status_code=201, response_model=OrderResponse)
async def checkout_cart(
    body: ShippingDetailsRequest,
    user_id: str = Depends(current_user_id),
    storefront: Storefront = Depends(get_storefront),
) -> OrderResponse:
    """Place an order for the whole cart and empty it."""
    order = storefront.process(CheckoutCart(user_id=user_id, **_shipping_fields(body)))
    return OrderResponse.from_order(order)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderResponse)
async def create_order(
    body: CreateOrderRequest,
    user_id: str = Depends(current_user_id),
    storefront: Storefront = Depends(get_storefront),
) -> OrderResponse:
    command = PlaceOrder(
        user_id=user_id,
        items=[OrderItem(product_id=item.id, quantity=item.quantity) for item in body.cart_items],
        **_shipping_fields(body),
    )
    order = storefront.process(command)
    return OrderResponse.from_order(order)


@order_router.get("", response_model=OrderListResponse)
async def list_orders(user_id: str = Depends(current_user_id)) -> OrderListResponse:
    orders = history.list_orders(user_id)
    return OrderListResponse(
        orders=[OrderResponse.from_order(order) for order in orders],
        count=len(orders),
    )


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, user_id: str = Depends(current_user_id)) -> OrderResponse:
    order = history.get_order(user_id, order_id)
    return OrderResponse.from_order(order)


@order_router.patch("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(
    order_id: str,
    body: CancelOrderRequest | None = None,
    user_id: str = Depends(current_user_id),
    storefront: Storefront = Depends(get_storefront),
) -> OrderResponse:
    command = CancelOrder(
        user_id=user_id,
        order_id=order_id,
        reason=body.reason if body else None,
    )
    order = storefront.process(command)
    return OrderResponse.from_order(order)
