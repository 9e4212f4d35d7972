"""Tests for the database management CLI."""

import sys

import pytest
from catalog.product.product import Product
from manage import main
from ordering.config import Settings
from ordering.domain import ordering
from ordering.utils.db import configure_database
from sqlalchemy import create_engine, inspect


@pytest.fixture()
def database_url(tmp_path):
    yield f"sqlite:///{tmp_path / 'storefront.db'}"

    configure_database(ordering, Settings())


def _run(monkeypatch, *args):
    monkeypatch.setattr(sys, "argv", ["manage.py", *args])
    main()


def _tables(database_url):
    engine = create_engine(database_url)
    try:
        return inspect(engine).get_table_names()
    finally:
        engine.dispose()


class TestManageCli:
    def test_setup_and_seed(self, monkeypatch, capsys, database_url):
        _run(monkeypatch, "--database-url", database_url, "setup-db")
        assert _tables(database_url)

        _run(monkeypatch, "--database-url", database_url, "seed")

        assert "Seeded 8 product(s)." in capsys.readouterr().out
        assert ordering.providers["default"].conn_info["database_uri"] == database_url
        assert ordering.repository_for(Product).get("1").stock_quantity > 0

    def test_seed_is_idempotent(self, monkeypatch, capsys, database_url):
        _run(monkeypatch, "--database-url", database_url, "seed")
        _run(monkeypatch, "--database-url", database_url, "seed")
        assert "Seeded 0 product(s)." in capsys.readouterr().out

    def test_drop_db(self, monkeypatch, database_url):
        _run(monkeypatch, "--database-url", database_url, "seed")
        _run(monkeypatch, "--database-url", database_url, "drop-db")

        assert _tables(database_url) == []

    def test_requires_sql_url(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        with pytest.raises(SystemExit) as exc:
            _run(monkeypatch, "seed")
        assert exc.value.code == 2

    def test_memory_url_rejected(self, monkeypatch):
        with pytest.raises(SystemExit) as exc:
            _run(monkeypatch, "--database-url", "memory", "setup-db")
        assert exc.value.code == 2
