"""Order cancellation: command and handler.

Only the owner may cancel. Cancelling returns every line's quantity to the
stock ledger in the same unit of work that records the cancellation.
"""

from collections import defaultdict

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from catalog.product.product import Product
from catalog.stock.ledger import stock_ledger
from ordering.domain import ordering
from ordering.order.order import Order
from shared.errors import AccessDenied

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class CancelOrder:
    user_id = Identifier(required=True)
    order_id = String(required=True, max_length=64)  # internal id or business order id
    reason = String(max_length=1000)


def quantities_by_product(order: Order) -> dict[str, int]:
    quantities = defaultdict(int)
    for line in order.lines:
        quantities[str(line.product_id)] += line.quantity
    return dict(quantities)


@ordering.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command) -> Order:
        """Cancel the order and put its stock back on the shelf.

        Cancellation is not status-only: the units taken at placement are
        returned to the ledger in the same unit of work. Products deleted
        since placement are skipped with a warning.
        """
        orders = current_domain.repository_for(Order)
        order = orders.locate(command.order_id)
        if not order.is_owned_by(command.user_id):
            raise AccessDenied("Order not found or access denied", order_id=command.order_id)

        order.cancel(reason=command.reason)
        orders.add(order)

        products = current_domain.repository_for(Product)
        for product_id, quantity in quantities_by_product(order).items():
            if products.get_or_none(product_id) is None:
                logger.warning("restock_skipped_missing_product", order_id=order.order_id, product_id=product_id)
                continue
            stock_ledger.increase(product_id, quantity)

        logger.info(
            "order_cancelled",
            order_id=order.order_id,
            user_id=order.user_id,
            reason=order.cancellation_reason,
        )
        return order
