"""Integration tests for the SQLAlchemy provider on a file-backed SQLite database."""

from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

import pytest
from catalog.product.product import Product
from ordering.cart.cart import Cart
from ordering.cart.items import AddToCart
from ordering.config import Settings
from ordering.domain import ordering
from ordering.order.cancellation import CancelOrder
from ordering.order.creation import OrderItem, PlaceOrder
from ordering.order.fulfillment import MarkProcessing, RecordShipment
from ordering.order.order import Order
from ordering.storefront import Storefront
from ordering.utils.db import configure_database, drop_db
from protean import current_domain
from protean.exceptions import ObjectNotFoundError
from shared.errors import InsufficientStock

SHIPPING = {"first_name": "Asha", "last_name": "Rao", "address": "12 MG Road"}


def _money(value):
    return Decimal(str(value)).quantize(Decimal("0.01"))


@pytest.fixture()
def storefront(tmp_path):
    storefront = Storefront(Settings(database_url=f"sqlite:///{tmp_path}/storefront.db", log_dir=None))
    with storefront.domain_context():
        for product_id, price, stock in (("P", "100", 5), ("Q", "19.99", 3)):
            product = Product.create(
                product_id=product_id, name=f"Product {product_id}", price=price, stock_quantity=stock
            )
            current_domain.repository_for(Product).add(product)

    yield storefront

    drop_db(ordering)
    configure_database(ordering, Settings())


@pytest.fixture()
def repo(storefront):
    """Repository lookups against the storefront's database."""

    def _repo(aggregate_cls):
        with storefront.domain_context():
            return current_domain.repository_for(aggregate_cls)

    return _repo


def _place(storefront, *items, user_id="user-1"):
    return storefront.process(
        PlaceOrder(
            user_id=user_id,
            items=[OrderItem(product_id=product_id, quantity=quantity) for product_id, quantity in items],
            **SHIPPING,
        )
    )


class TestSqlProvider:
    def test_storefront_uses_sqlite(self, storefront):
        assert storefront.provider_name == "sqlite"

    def test_product_round_trip(self, storefront, repo):
        product = Product.create(product_id="X", name="Desk Lamp", price="1299.99", stock_quantity=4, sku="LAMP-1")
        repo(Product).add(product)

        loaded = repo(Product).get("X")

        assert loaded.name == "Desk Lamp"
        assert _money(loaded.price) == Decimal("1299.99")
        assert loaded.sku == "LAMP-1"

    def test_missing_product(self, storefront, repo):
        assert repo(Product).get_or_none("missing") is None
        with pytest.raises(ObjectNotFoundError):
            repo(Product).get("missing")

    def test_cart_lines_are_synced(self, storefront, repo):
        storefront.process(AddToCart(user_id="user-1", product_id="P", quantity=2))
        storefront.process(AddToCart(user_id="user-1", product_id="Q"))

        carts = repo(Cart)
        cart = carts.find_by_user("user-1")
        cart.remove_item("P")
        carts.add(cart)

        loaded = repo(Cart).find_by_user("user-1")
        assert [(line.product_id, line.quantity) for line in loaded.lines] == [("Q", 1)]
        assert _money(loaded.total_amount) == Decimal("19.99")

    def test_order_round_trip(self, storefront, repo):
        order = _place(storefront, ("P", 1), ("Q", 2))

        loaded = repo(Order).find_by_order_id(order.order_id)

        assert loaded.id == order.id
        assert sorted(line.product_id for line in loaded.lines) == ["P", "Q"]
        assert _money(loaded.total_amount) == Decimal("139.98")
        assert loaded.shipping_address.first_name == "Asha"
        assert loaded.status == "confirmed"
        assert repo(Order).exists_order_id(order.order_id)

    def test_lifecycle_fields_are_updated(self, storefront, repo):
        order = _place(storefront, ("P", 1))
        storefront.process(MarkProcessing(order_id=order.id))
        storefront.process(RecordShipment(order_id=order.id, tracking_number="TRK-9"))

        loaded = repo(Order).get(order.id)
        assert loaded.status == "shipped"
        assert loaded.tracking_number == "TRK-9"

    def test_find_by_user_newest_first(self, storefront, repo):
        first = _place(storefront, ("P", 1))
        second = _place(storefront, ("P", 1))

        orders = repo(Order).find_by_user("user-1")

        assert {o.id for o in orders} == {first.id, second.id}
        assert orders[0].created_at >= orders[1].created_at


class TestSqlUnitOfWork:
    def test_failed_placement_leaves_no_trace(self, storefront, repo):
        with pytest.raises(InsufficientStock):
            _place(storefront, ("P", 2), ("Q", 4))

        assert repo(Product).get("P").stock_quantity == 5
        assert repo(Order).find_by_user("user-1") == []

    def test_place_and_cancel_restocks(self, storefront, repo):
        order = _place(storefront, ("P", 3))
        assert repo(Product).get("P").stock_quantity == 2

        storefront.process(CancelOrder(user_id="user-1", order_id=order.order_id))

        assert repo(Product).get("P").stock_quantity == 5
        assert repo(Order).get(order.id).status == "cancelled"

    def test_concurrent_placements_never_oversell(self, storefront, repo):
        def attempt(n):
            try:
                return _place(storefront, ("P", 1), user_id=f"user-{n}")
            except InsufficientStock:
                return None

        with ThreadPoolExecutor(max_workers=6) as pool:
            results = list(pool.map(attempt, range(12)))

        assert sum(order is not None for order in results) == 5
        assert repo(Product).get("P").stock_quantity == 0
