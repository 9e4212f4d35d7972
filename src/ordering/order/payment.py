"""Order payment status: command and handler.

Only the status field is tracked; no gateway is involved.
"""

from protean import handle
from protean.fields import String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order


@ordering.command(part_of="Order")
class RecordPaymentStatus:
    order_id = String(required=True, max_length=64)
    status = String(required=True, max_length=20)


@ordering.command_handler(part_of=Order)
class RecordPaymentHandler:
    @handle(RecordPaymentStatus)
    def record_payment_status(self, command) -> Order:
        repo = current_domain.repository_for(Order)
        order = repo.locate(command.order_id)
        order.record_payment_status(command.status)
        repo.add(order)
        return order
