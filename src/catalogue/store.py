"""Relational catalogue store — products, prices and stock counts.

The store owns the SQLAlchemy engine. Every connection it hands out carries a
bounded timeout so that no catalogue or inventory call can block forever.
Catalogue-management writes (new products, price and stock corrections) go
through here; order-time stock movements live in ``inventory.reservation``.
"""

import json
from datetime import UTC, datetime

import structlog
from sqlalchemy import create_engine, delete, insert, select, update
from sqlalchemy.pool import StaticPool

from catalogue.product import Product
from catalogue.schema import metadata, products
from shared.errors import ProductNotFound

logger = structlog.get_logger(__name__)

DEFAULT_TIMEOUT_SECONDS = 5.0


def _is_memory_sqlite(database_uri: str) -> bool:
    return database_uri in ("sqlite://", "sqlite:///:memory:")


def build_engine(database_uri: str, timeout: float = DEFAULT_TIMEOUT_SECONDS):
    """Create an engine whose connections time out after ``timeout`` seconds."""
    if database_uri.startswith("sqlite"):
        connect_args = {"timeout": timeout, "check_same_thread": False}
        if _is_memory_sqlite(database_uri):
            # One shared connection, otherwise every checkout sees an empty database
            return create_engine(database_uri, connect_args=connect_args, poolclass=StaticPool)
        return create_engine(database_uri, connect_args=connect_args, pool_timeout=timeout)

    if database_uri.startswith("postgresql"):
        connect_args = {
            "connect_timeout": max(int(timeout), 1),
            "options": f"-c statement_timeout={int(timeout * 1000)} -c lock_timeout={int(timeout * 1000)}",
        }
        return create_engine(database_uri, connect_args=connect_args, pool_timeout=timeout, pool_pre_ping=True)

    return create_engine(database_uri, pool_timeout=timeout)


class CatalogueStore:
    def __init__(self, database_uri: str, timeout: float = DEFAULT_TIMEOUT_SECONDS):
        self.database_uri = database_uri
        self.timeout = timeout
        self.engine = build_engine(database_uri, timeout)

    # -------------------------------------------------------------------
    # Schema
    # -------------------------------------------------------------------
    def create_schema(self) -> None:
        metadata.create_all(self.engine)

    def drop_schema(self) -> None:
        metadata.drop_all(self.engine)

    def dispose(self) -> None:
        self.engine.dispose()

    def truncate(self) -> None:
        """Remove every product (test and demo resets)."""
        with self.engine.begin() as conn:
            conn.execute(delete(products))

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    def get_product(self, product_id: str) -> Product | None:
        with self.engine.connect() as conn:
            row = conn.execute(select(products).where(products.c.id == product_id)).first()
        return Product.from_row(row) if row is not None else None

    def get_products(self, product_ids) -> dict[str, Product]:
        ids = list(dict.fromkeys(product_ids))
        with self.engine.connect() as conn:
            rows = conn.execute(select(products).where(products.c.id.in_(ids))).all()
        return {row.id: Product.from_row(row) for row in rows}

    # -------------------------------------------------------------------
    # Catalogue management
    # -------------------------------------------------------------------
    def add_product(
        self,
        product_id: str,
        name: str,
        price: int,
        stock: int = 0,
        is_active: bool = True,
        description: str = "",
        category: str = "",
        images=None,
        sizes=None,
        colors=None,
    ) -> Product:
        if price < 0:
            raise ValueError(f"Price must be non-negative: {price}")
        if stock < 0:
            raise ValueError(f"Stock must be non-negative: {stock}")

        now = datetime.now(UTC)
        with self.engine.begin() as conn:
            conn.execute(
                insert(products).values(
                    id=product_id,
                    name=name,
                    description=description,
                    category=category,
                    price=price,
                    stock=stock,
                    is_active=is_active,
                    images=json.dumps(images or []),
                    sizes=json.dumps(sizes or []),
                    colors=json.dumps(colors or []),
                    created_at=now,
                    updated_at=now,
                )
            )
        logger.info("Product added to catalogue", product_id=product_id, price=price, stock=stock)
        return self.get_product(product_id)

    def _update_product(self, product_id: str, **values) -> None:
        with self.engine.begin() as conn:
            result = conn.execute(
                update(products).where(products.c.id == product_id).values(updated_at=datetime.now(UTC), **values)
            )
        if result.rowcount == 0:
            raise ProductNotFound(product_id)

    def set_stock(self, product_id: str, stock: int) -> None:
        """Overwrite the stock count (stock-take correction)."""
        if stock < 0:
            raise ValueError(f"Stock must be non-negative: {stock}")
        self._update_product(product_id, stock=stock)
        logger.info("Stock corrected", product_id=product_id, stock=stock)

    def set_price(self, product_id: str, price: int) -> None:
        if price < 0:
            raise ValueError(f"Price must be non-negative: {price}")
        self._update_product(product_id, price=price)
        logger.info("Price corrected", product_id=product_id, price=price)

    def set_active(self, product_id: str, is_active: bool) -> None:
        self._update_product(product_id, is_active=is_active)
