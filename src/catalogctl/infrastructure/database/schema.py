"""SQLAlchemy Core table definitions for the catalog database.

Every versioned table carries an integer ``version`` column that the
stores compare-and-swap on. Review entries live inline as a JSON array
so that an append is a single-row conditional write.
"""

from __future__ import annotations

from sqlalchemy import JSON, Column, Integer, MetaData, Table, Text

metadata = MetaData()

# AUTOINCREMENT stops SQLite from reusing the id of a deleted product.
products = Table(
    "products",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", Text, nullable=False),
    Column("quantity", Integer, nullable=False, default=0, server_default="0"),
    Column("version", Integer, nullable=False, default=1, server_default="1"),
    sqlite_autoincrement=True,
)

reviews = Table(
    "reviews",
    metadata,
    Column("id", Text, primary_key=True),
    Column("product_id", Integer, nullable=False, unique=True),
    Column("version", Integer, nullable=False, default=1, server_default="1"),
    Column("entries", JSON, nullable=False),  # [{username, date, review}, ...]
)
