"""Storefront: the entry point the API and the CLI drive the ordering domain through.

``Storefront`` points the ``ordering`` domain at the configured database and
processes commands synchronously. Commands that move stock run while holding
the ledger locks of every product they touch, so concurrent placements and
cancellations on the same products are serialized end to end, including the
unit-of-work commit.

Subscribers registered with ``subscribe()`` receive every domain event after
its unit of work commits (see ``ordering.publishing``).
"""

from collections.abc import Callable

import structlog
from protean.utils.globals import current_domain

from catalog.stock.ledger import StockLedger, stock_ledger
from ordering.cart.cart import Cart
from ordering.config import Settings
from ordering.domain import ordering
from ordering.order.cancellation import CancelOrder, quantities_by_product
from ordering.order.creation import CheckoutCart, PlaceOrder
from ordering.order.order import Order
from ordering.utils.db import configure_database, setup_db
from shared.errors import NotFound

logger = structlog.get_logger(__name__)


class Storefront:
    def __init__(self, settings: Settings | None = None, ledger: StockLedger | None = None) -> None:
        self.settings = settings or Settings()
        self.ledger = ledger or stock_ledger
        self._subscribers: list[Callable] = []

        configure_database(ordering, self.settings)
        setup_db(ordering)

        logger.info("storefront_ready", provider=self.provider_name, environment=self.settings.environment)

    @property
    def domain(self):
        return ordering

    @property
    def provider_name(self) -> str:
        return ordering.config["databases"]["default"]["provider"]

    def subscribe(self, callback: Callable) -> None:
        """Register a callback to receive every committed domain event."""
        self._subscribers.append(callback)

    def domain_context(self):
        return ordering.domain_context(
            subscribers=tuple(self._subscribers),
            order_id_prefix=self.settings.order_id_prefix,
        )

    def process(self, command):
        """Run ``command`` to completion and return its handler's result."""
        with self.domain_context():
            with self.ledger.reserve(self._stock_affected_by(command)):
                return ordering.process(command, asynchronous=False)

    def close(self) -> None:
        ordering.close()

    # -------------------------------------------------------------------
    # Internal
    # -------------------------------------------------------------------
    def _stock_affected_by(self, command) -> list[str]:
        if isinstance(command, PlaceOrder):
            return [str(item.product_id) for item in command.items or []]

        if isinstance(command, CheckoutCart):
            cart = current_domain.repository_for(Cart).find_by_user(command.user_id)
            return [str(line.product_id) for line in cart.lines] if cart else []

        if isinstance(command, CancelOrder):
            try:
                order = current_domain.repository_for(Order).locate(command.order_id)
            except NotFound:
                return []
            return list(quantities_by_product(order))

        return []
