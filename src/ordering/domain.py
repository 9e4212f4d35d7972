"""Ordering bounded context: shopping carts, order placement and the order lifecycle.

Products, carts and orders live in one domain so that placing an order can
decrement stock, record the order and empty the cart in a single unit of work.
Commands and events are processed synchronously: a command returns only after
its unit of work has committed and its events have been dispatched.
"""

from protean.domain import Domain

ordering = Domain(
    name="ordering",
    config={
        "command_processing": "sync",
        "event_processing": "sync",
        "custom": {"ORDER_ID_PREFIX": "KNV"},
    },
)
