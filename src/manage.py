"""Storefront database management CLI.

Provides commands to create and drop the SQL schema and to load the starter
catalogue. The target database comes from ``DATABASE_URL`` unless
``--database-url`` is given.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
    python src/manage.py seed       # Add the starter products
"""

import argparse
import sys

from ordering.config import Settings


def _database_url(args, settings):
    url = args.database_url or settings.database_url
    if not url or url == "memory":
        print("A SQL database URL is required (set DATABASE_URL or pass --database-url).")
        sys.exit(2)
    return url


def _domain(database_url):
    from ordering.domain import ordering
    from ordering.utils.db import configure_database

    configure_database(ordering, Settings(database_url=database_url))
    return ordering


def setup_database(database_url):
    from ordering.utils.db import setup_db

    print("Creating storefront database schema...")
    setup_db(_domain(database_url))
    print("Done.")


def drop_database(database_url):
    from ordering.utils.db import drop_db

    print("Dropping storefront database schema...")
    drop_db(_domain(database_url))
    print("Done.")


def seed_database(database_url):
    from catalog.data.products import seed_catalogue
    from ordering.utils.db import setup_db

    domain = _domain(database_url)
    setup_db(domain)
    try:
        with domain.domain_context():
            added = seed_catalogue()
    finally:
        domain.close()
    print(f"Seeded {added} product(s).")


def main():
    parser = argparse.ArgumentParser(description="Storefront database management")
    parser.add_argument("--database-url", help="SQLAlchemy URL (default: $DATABASE_URL)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")
    subparsers.add_parser("seed", help="Add the starter catalogue")

    args = parser.parse_args()
    database_url = _database_url(args, Settings.from_env())

    if args.command == "setup-db":
        setup_database(database_url)
    elif args.command == "drop-db":
        drop_database(database_url)
    elif args.command == "seed":
        seed_database(database_url)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
