"""
Database module for the product catalog and checkout sessions.

Provides the SQLite schema and connection management shared by the catalog
and checkout gateways. Queries elsewhere use parameterized statements only.
"""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from shop_assistant.config import CATALOG_DB_PATH


class Database:
    """
    SQLite database holding products and checkout sessions.

    A fresh connection is opened per operation, so one instance can be
    shared across request threads.
    """

    def __init__(self, db_path: Optional[str] = None):
        """
        Initialize the database with an optional custom path.

        Args:
            db_path: Path to SQLite database file. Uses CATALOG_DB_PATH if not provided.
        """
        self.db_path = Path(db_path or CATALOG_DB_PATH)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._initialize_schema()

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        """Context manager for database connections."""
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _initialize_schema(self):
        """Create tables if they don't exist."""
        with self.connection() as conn:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS products (
                    product_id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    category TEXT NOT NULL,
                    price REAL NOT NULL CHECK(price > 0),
                    image TEXT NOT NULL DEFAULT '',
                    description TEXT,
                    created_at TEXT NOT NULL
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS checkout_sessions (
                    session_id TEXT PRIMARY KEY,
                    product_id TEXT NOT NULL,
                    product_name TEXT NOT NULL,
                    unit_amount INTEGER NOT NULL CHECK(unit_amount > 0),
                    currency TEXT NOT NULL,
                    quantity INTEGER NOT NULL CHECK(quantity >= 1),
                    status TEXT NOT NULL DEFAULT 'open',
                    redirect_url TEXT NOT NULL,
                    success_url TEXT NOT NULL,
                    cancel_url TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    FOREIGN KEY (product_id) REFERENCES products(product_id)
                )
            """)

            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_products_category
                ON products(category)
            """)

            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_checkout_sessions_product_id
                ON checkout_sessions(product_id)
            """)


def get_database() -> Database:
    """Get the default database instance."""
    return Database()
