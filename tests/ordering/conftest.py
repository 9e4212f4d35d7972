import pytest
from protean import current_domain
from protean.integrations.pytest import DomainFixture

SHIPPING = {
    "first_name": "Asha",
    "last_name": "Rao",
    "address": "12 MG Road",
    "city": "Bengaluru",
    "zip_code": "560001",
}


@pytest.fixture(scope="session")
def ordering_bed():
    from ordering.domain import ordering

    bed = DomainFixture(ordering)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(ordering_bed):
    with ordering_bed.domain_context():
        yield


@pytest.fixture()
def shipping():
    return dict(SHIPPING)


@pytest.fixture()
def events(ordering_bed):
    """Every domain event published while the test body runs."""
    published = []
    with ordering_bed.domain.domain_context(subscribers=(published.append,)):
        yield published


@pytest.fixture()
def place_order():
    """Place an order through the builder: ``place_order(("P", 3), ("Q", 1), user_id=...)``."""
    from ordering.order.creation import OrderItem, PlaceOrder

    def _place(*items, user_id="user-1", **overrides):
        details = {**SHIPPING, **overrides}
        command = PlaceOrder(
            user_id=user_id,
            items=[OrderItem(product_id=product_id, quantity=quantity) for product_id, quantity in items],
            **details,
        )
        return current_domain.process(command, asynchronous=False)

    return _place
