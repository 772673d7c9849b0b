"""
Product catalog gateway.

Read access used by the recommendation flow (lookup by id and by category)
plus seeding the catalog from a JSON product file.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from shop_assistant.config import PRODUCTS_PATH
from shop_assistant.database import Database, get_database
from shop_assistant.logger import get_logger
from shop_assistant.models import Product, ProductSummary

logger = get_logger("catalog")


class CatalogGateway:
    """Product lookups backed by the SQLite products table."""

    def __init__(self, database: Optional[Database] = None):
        self.database = database or get_database()

    def add_product(self, product: Product) -> str:
        """
        Insert or update a product.

        Args:
            product: Validated Product to save

        Returns:
            The product_id of the saved product
        """
        with self.database.connection() as conn:
            conn.execute("""
                INSERT INTO products (
                    product_id, name, category, price, image, description, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(product_id) DO UPDATE SET
                    name = excluded.name,
                    category = excluded.category,
                    price = excluded.price,
                    image = excluded.image,
                    description = excluded.description
            """, (
                product.product_id,
                product.name,
                product.category,
                product.price,
                product.image,
                product.description,
                datetime.now(timezone.utc).isoformat()
            ))
        return product.product_id

    def add_products(self, products: List[Product]) -> int:
        """Save several products; returns how many were written."""
        for product in products:
            self.add_product(product)
        return len(products)

    def get_product(self, product_id: str) -> Optional[Product]:
        """Full catalog record for an id, or None."""
        with self.database.connection() as conn:
            row = conn.execute("""
                SELECT * FROM products WHERE product_id = ?
            """, (product_id,)).fetchone()
        return self._row_to_product(row) if row else None

    def find_by_id(self, product_id: str) -> Optional[ProductSummary]:
        """
        Resolve an exact product id.

        Args:
            product_id: Catalog identifier

        Returns:
            ProductSummary if found, None otherwise
        """
        product = self.get_product(product_id)
        if product is None:
            logger.warning(f"Product with ID {product_id} not found.")
            return None
        return product.to_summary()

    def find_by_category(self, category: str) -> List[ProductSummary]:
        """All products in a category (exact match), in catalog order."""
        return [product.to_summary() for product in self.list_category(category)]

    def list_category(self, category: str) -> List[Product]:
        with self.database.connection() as conn:
            rows = conn.execute("""
                SELECT * FROM products WHERE category = ? ORDER BY rowid
            """, (category,)).fetchall()
        return [self._row_to_product(row) for row in rows]

    def get_product_count(self) -> int:
        """Get total number of products in the catalog."""
        with self.database.connection() as conn:
            return conn.execute("SELECT COUNT(*) FROM products").fetchone()[0]

    def clear(self):
        """Remove all products and their checkout sessions."""
        with self.database.connection() as conn:
            conn.execute("DELETE FROM checkout_sessions")
            conn.execute("DELETE FROM products")

    def _row_to_product(self, row) -> Product:
        return Product(
            product_id=row['product_id'],
            name=row['name'],
            category=row['category'],
            price=row['price'],
            image=row['image'],
            description=row['description']
        )


def load_products_from_file(file_path: Optional[str] = None) -> List[Product]:
    """
    Load and validate products from a JSON file.

    Args:
        file_path: Path to a file shaped {"products": [...]}. Uses PRODUCTS_PATH if not provided.

    Returns:
        Valid products; invalid entries are skipped with a warning
    """
    path = Path(file_path or PRODUCTS_PATH)
    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    products = []
    for item in data.get("products", []):
        try:
            products.append(Product(**item))
        except ValidationError as e:
            logger.warning(f"Skipping invalid product {item.get('product_id', 'unknown')}: {e}")
    return products


def initialize_catalog(
    catalog: Optional[CatalogGateway] = None,
    products_path: Optional[str] = None,
    force_reinitialize: bool = False
) -> CatalogGateway:
    """
    Seed the catalog from the product file.

    Args:
        catalog: Gateway to seed. Uses the default database if not provided.
        products_path: Product file path
        force_reinitialize: Clear and reload even if products exist

    Returns:
        The seeded gateway
    """
    catalog = catalog or CatalogGateway()

    current_count = catalog.get_product_count()
    if current_count > 0 and not force_reinitialize:
        logger.info(f"Catalog already contains {current_count} products. Use force_reinitialize=True to rebuild.")
        return catalog

    if force_reinitialize:
        logger.info("Clearing existing catalog...")
        catalog.clear()

    products = load_products_from_file(products_path)
    catalog.add_products(products)
    logger.info(f"Loaded {len(products)} products into the catalog")
    return catalog


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Initialize the product catalog")
    parser.add_argument(
        "--force",
        action="store_true",
        help="Clear and reload the catalog"
    )
    parser.add_argument(
        "--products",
        type=str,
        default=None,
        help="Path to products JSON file"
    )
    parser.add_argument(
        "--category",
        type=str,
        default=None,
        help="List the products of a category after loading"
    )
    args = parser.parse_args()

    gateway = initialize_catalog(products_path=args.products, force_reinitialize=args.force)
    print(f"Catalog holds {gateway.get_product_count()} products")

    if args.category:
        for summary in gateway.find_by_category(args.category):
            print(f"  {summary.id}  {summary.name}  ${summary.price:.2f}")
