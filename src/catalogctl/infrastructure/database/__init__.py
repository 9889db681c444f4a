"""SQLite database engine and schema via SQLAlchemy Core."""

from catalogctl.infrastructure.database.engine import create_db_engine, init_database
from catalogctl.infrastructure.database.schema import metadata, products, reviews

__all__ = [
    "create_db_engine",
    "init_database",
    "metadata",
    "products",
    "reviews",
]
