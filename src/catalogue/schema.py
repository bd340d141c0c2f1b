"""Relational schema for the product catalogue.

Stock lives in the same row as the price so that a reservation can re-check
availability and decrement it in a single conditional UPDATE.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Integer,
    MetaData,
    String,
    Table,
    Text,
)

metadata = MetaData()

products = Table(
    "products",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("name", String(255), nullable=False),
    Column("description", Text, nullable=False, default=""),
    Column("category", String(100), nullable=False, default=""),
    Column("price", Integer, nullable=False),  # minor currency units
    Column("stock", Integer, nullable=False, default=0),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("images", Text, nullable=False, default="[]"),  # JSON list
    Column("sizes", Text, nullable=False, default="[]"),  # JSON list
    Column("colors", Text, nullable=False, default="[]"),  # JSON list
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
    CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
    CheckConstraint("stock >= 0", name="ck_products_stock_non_negative"),
)
