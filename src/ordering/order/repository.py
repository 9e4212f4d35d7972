"""Order repository.

Orders are addressed either by their internal id or by their business order
id (``KNV2504123456``).
"""

from ordering.domain import ordering
from ordering.order.order import Order
from shared.errors import NotFound


@ordering.repository(part_of=Order)
class OrderRepository:
    def find_by_order_id(self, order_id) -> Order | None:
        return self.query.filter(order_id=str(order_id)).all().first

    def find_by_user(self, user_id) -> list[Order]:
        """Return the user's orders, newest first."""
        return self.query.filter(user_id=str(user_id)).order_by("-created_at").limit(None).all().items

    def exists_order_id(self, order_id) -> bool:
        return self.find_by_order_id(order_id) is not None

    def locate(self, identifier) -> Order:
        """Look an order up by its internal id, falling back to its business order id."""
        identifier = str(identifier)
        order = self.get_or_none(identifier)
        if order is None:
            order = self.find_by_order_id(identifier)
        if order is None:
            raise NotFound("Order not found or access denied", order_id=identifier)
        return order
