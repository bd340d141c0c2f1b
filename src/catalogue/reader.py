"""Catalog Reader — read-only product lookups."""

from catalogue import get_store
from catalogue.product import Product
from shared.errors import ProductNotFound


def get_product(product_id: str) -> Product:
    """Latest committed view of a product. Raises ProductNotFound for unknown ids."""
    product = get_store().get_product(product_id)
    if product is None:
        raise ProductNotFound(product_id)
    return product
