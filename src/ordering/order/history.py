"""Order history reads. These touch no aggregate state, so they bypass the command pipeline."""

from protean.utils.globals import current_domain

from ordering.order.order import Order, canonical_user_id
from shared.errors import AccessDenied


def list_orders(user_id) -> list[Order]:
    """The user's orders, newest first."""
    return current_domain.repository_for(Order).find_by_user(canonical_user_id(user_id))


def get_order(user_id, order_id) -> Order:
    order = current_domain.repository_for(Order).locate(order_id)
    if not order.is_owned_by(user_id):
        raise AccessDenied("Order not found or access denied", order_id=str(order_id))
    return order
