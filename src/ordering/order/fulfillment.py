"""Order fulfillment: commands and handler.

Moves an order forward through the pipeline: confirmation, processing,
shipment and delivery. These are operator actions, so no ownership check
applies.
"""

from protean import handle
from protean.fields import DateTime, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order


@ordering.command(part_of="Order")
class ConfirmOrder:
    """Confirm an order that was recorded as pending."""

    order_id = String(required=True, max_length=64)


@ordering.command(part_of="Order")
class MarkProcessing:
    """Signal that the warehouse has started picking and packing."""

    order_id = String(required=True, max_length=64)


@ordering.command(part_of="Order")
class RecordShipment:
    """Record that the order was handed to a carrier."""

    order_id = String(required=True, max_length=64)
    tracking_number = String(max_length=100)
    estimated_delivery = DateTime()


@ordering.command(part_of="Order")
class RecordDelivery:
    """Record that the carrier has confirmed delivery to the customer."""

    order_id = String(required=True, max_length=64)


@ordering.command_handler(part_of=Order)
class RecordFulfillmentHandler:
    @handle(ConfirmOrder)
    def confirm_order(self, command) -> Order:
        return self._apply(command.order_id, lambda order: order.confirm())

    @handle(MarkProcessing)
    def mark_processing(self, command) -> Order:
        return self._apply(command.order_id, lambda order: order.mark_processing())

    @handle(RecordShipment)
    def record_shipment(self, command) -> Order:
        return self._apply(
            command.order_id,
            lambda order: order.record_shipment(
                tracking_number=command.tracking_number,
                estimated_delivery=command.estimated_delivery,
            ),
        )

    @handle(RecordDelivery)
    def record_delivery(self, command) -> Order:
        return self._apply(command.order_id, lambda order: order.record_delivery())

    def _apply(self, order_id, change):
        repo = current_domain.repository_for(Order)
        order = repo.locate(order_id)
        change(order)
        repo.add(order)
        return order
