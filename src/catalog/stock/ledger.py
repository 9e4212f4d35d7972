"""Stock Ledger: the shared, per-product stock counters.

Stock is the one resource that concurrent order placements contend for. Every
product gets its own re-entrant lock; ``reserve()`` holds the locks of a set of
products so that a multi-product placement can check every line, decrement
every line and commit without another placement interleaving.

Lock order is always: ledger locks first, then the unit of work.
"""

import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager

import structlog
from protean.utils.globals import current_domain

from catalog.product.product import Product
from catalog.product.repository import ProductRepository

logger = structlog.get_logger(__name__)


class StockLedger:
    def __init__(self) -> None:
        self._locks: dict[str, threading.RLock] = {}
        self._guard = threading.Lock()

    def _lock_for(self, product_id: str) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(product_id)
            if lock is None:
                lock = self._locks[product_id] = threading.RLock()
            return lock

    @contextmanager
    def reserve(self, product_ids: Iterable[str]) -> Iterator[None]:
        """Hold the locks of every given product for the duration of the block.

        Locks are acquired in sorted id order, so placements with overlapping
        product sets cannot deadlock each other.
        """
        locks = [self._lock_for(pid) for pid in sorted({str(p) for p in product_ids})]
        acquired = []
        try:
            for lock in locks:
                lock.acquire()
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()

    def _products(self) -> ProductRepository:
        return current_domain.repository_for(Product)

    def stock_of(self, product_id: str) -> int:
        return self._products().get(str(product_id)).stock_quantity

    def decrease(self, product_id: str, quantity: int) -> Product:
        """Remove ``quantity`` units, clamping at zero.

        The change joins the caller's unit of work; its StockDecreased event is
        dispatched when that unit of work commits.
        """
        with self.reserve([product_id]):
            repo = self._products()
            product = repo.get(str(product_id))
            product.decrease_stock(quantity)
            repo.add(product)

        logger.debug("stock_decreased", product_id=product.id, quantity=quantity, stock=product.stock_quantity)
        return product

    def increase(self, product_id: str, quantity: int) -> Product:
        """Return ``quantity`` units to stock."""
        with self.reserve([product_id]):
            repo = self._products()
            product = repo.get(str(product_id))
            product.increase_stock(quantity)
            repo.add(product)

        logger.debug("stock_increased", product_id=product.id, quantity=quantity, stock=product.stock_quantity)
        return product


stock_ledger = StockLedger()
