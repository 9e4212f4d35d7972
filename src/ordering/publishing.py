"""Relay of committed domain events to in-process subscribers.

Every event raised by Product, Cart and Order reaches ``SubscriberRelay``
after the unit of work that produced it has committed. The relay hands the
event to each callback registered on the current domain context under
``subscribers``. A failing subscriber is logged and skipped: the state change
it was told about is already durable and the caller's command has succeeded.
"""

import structlog
from protean import handle
from protean.utils.globals import g

from ordering.domain import ordering

logger = structlog.get_logger(__name__)


def _subscriber_name(callback) -> str:
    return getattr(callback, "__qualname__", None) or repr(callback)


@ordering.event_handler(stream_category="$all")
class SubscriberRelay:
    @handle("$any")
    def relay(self, event) -> None:
        event_name = event.__class__.__name__
        logger.debug("domain_event", event_name=event_name, payload=event.payload)

        for callback in g.get("subscribers", ()):
            try:
                callback(event)
            except Exception:
                logger.exception(
                    "event_subscriber_failed",
                    event_name=event_name,
                    subscriber=_subscriber_name(callback),
                )
