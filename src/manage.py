"""Order desk management CLI.

Creates and drops the schemas of both stores (the relational catalogue and
any relational Protean providers) and seeds a demo catalogue.

Usage:
    python src/manage.py setup-db               # Create all tables
    python src/manage.py drop-db                # Drop all tables
    python src/manage.py seed                   # Demo products + a partner API key
    python src/manage.py seed --no-api-key      # Demo products only
"""

import argparse
import sys

DEMO_PRODUCTS = [
    {
        "product_id": "prod-kurta-001",
        "name": "Cotton Kurta",
        "price": 129900,
        "stock": 40,
        "category": "Men",
        "sizes": ["S", "M", "L", "XL"],
        "colors": ["White", "Indigo"],
        "images": ["/images/kurta-white.jpg"],
    },
    {
        "product_id": "prod-saree-002",
        "name": "Silk Saree",
        "price": 549900,
        "stock": 12,
        "category": "Women",
        "colors": ["Maroon", "Gold"],
        "images": ["/images/saree-maroon.jpg"],
    },
    {
        "product_id": "prod-dupatta-003",
        "name": "Printed Dupatta",
        "price": 39900,
        "stock": 75,
        "category": "Accessories",
        "colors": ["Mustard", "Teal"],
    },
    {
        "product_id": "prod-socks-004",
        "name": "Ankle Socks (3 pack)",
        "price": 19900,
        "stock": 200,
        "category": "Accessories",
        "sizes": ["Free"],
    },
]


def setup_databases():
    from ordering.domain import ordering
    from ordering.utils.db import setup_db

    print("Initializing ordering domain...")
    ordering.init()
    print("Creating database schemas...")
    setup_db(ordering)
    print("Done.")


def drop_databases():
    from ordering.domain import ordering
    from ordering.utils.db import drop_db

    print("Initializing ordering domain...")
    ordering.init()
    print("Dropping database schemas...")
    drop_db(ordering)
    print("Done.")


def seed(issue_api_key=True):
    from catalogue import get_store
    from ordering.domain import ordering
    from ordering.partner.management import IssueApiKey

    store = get_store()
    store.create_schema()

    existing = store.get_products([p["product_id"] for p in DEMO_PRODUCTS])
    for product in DEMO_PRODUCTS:
        if product["product_id"] in existing:
            print(f"  {product['product_id']} already present, skipped.")
            continue
        store.add_product(**product)
        print(f"  {product['product_id']} added ({product['stock']} in stock).")

    if issue_api_key:
        ordering.init()
        with ordering.domain_context():
            result = ordering.process(IssueApiKey(name="Demo partner"), asynchronous=False)
        print(f"Partner API key: {result['key']}")

    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="Order desk database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    seed_parser = subparsers.add_parser("seed", help="Load the demo catalogue")
    seed_parser.add_argument(
        "--no-api-key",
        action="store_true",
        help="Skip issuing a demo partner API key",
    )

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_databases()
    elif args.command == "drop-db":
        drop_databases()
    elif args.command == "seed":
        seed(issue_api_key=not args.no_api_key)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
