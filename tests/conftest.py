import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Fetch and activate the domain by pushing the associated domain_context. The activated domain can then be
    referred to elsewhere as `current_domain`. Log files are kept out of the working tree.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env
    os.environ["STOREFRONT_ENV"] = session.config.option.env
    os.environ["LOG_DIR"] = ""

    from ordering.domain import ordering

    ordering.init()
    ordering.domain_context().push()


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        # Get the test file path relative to the tests directory
        test_path = Path(item.fspath)

        # Mark tests based on their directory
        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session", autouse=True)
def setup_db(request):
    from ordering.domain import ordering
    from ordering.utils.db import drop_db, setup_db

    setup_db(ordering)

    yield

    drop_db(ordering)


@pytest.fixture(autouse=True)
def run_around_tests():
    """Fixture to automatically cleanup infrastructure after every test"""
    yield

    from protean import current_domain

    # Clear all databases
    for _, provider in current_domain.providers.items():
        provider._data_reset()

    # Drain event stores
    current_domain.event_store.store._data_reset()


@pytest.fixture()
def settings(request):
    from ordering.config import Settings

    return Settings(environment=request.config.option.env, database_url=os.environ.get("DATABASE_URL"), log_dir=None)


@pytest.fixture()
def storefront(settings):
    from ordering.storefront import Storefront

    return Storefront(settings)


@pytest.fixture()
def make_product():
    """Factory that adds a product to the catalogue and returns it."""
    from catalog.product.product import Product
    from protean import current_domain

    def _make(product_id="P", name=None, price=100, stock=5, **kwargs):
        product = Product.create(
            product_id=product_id,
            name=name or f"Product {product_id}",
            price=price,
            stock_quantity=stock,
            **kwargs,
        )
        current_domain.repository_for(Product).add(product)
        return product

    return _make


@pytest.fixture()
def stock_of():
    from catalog.product.product import Product
    from protean import current_domain

    def _stock(product_id):
        return current_domain.repository_for(Product).get(product_id).stock_quantity

    return _stock
