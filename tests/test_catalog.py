"""
Tests for the catalog gateway, seed data and checkout sessions.
"""

import json
from pathlib import Path

import pytest

from shop_assistant.catalog import CatalogGateway, initialize_catalog, load_products_from_file
from shop_assistant.errors import CatalogResolutionMiss
from shop_assistant.models import Product
from shop_assistant.payments import CheckoutGateway
from shop_assistant.prompts import PRODUCT_CATEGORIES

PRODUCTS_PATH = Path(__file__).parent.parent / "data" / "products.json"


# =============================================================================
# Product model
# =============================================================================

class TestProductModel:
    """Validation of catalog records."""

    def test_price_rounding(self):
        product = Product(product_id="X-1", name="Rounded", category="bags", price=19.999)
        assert product.price == 20.0

    def test_price_must_be_positive(self):
        with pytest.raises(ValueError):
            Product(product_id="X-2", name="Free", category="bags", price=0)

    def test_summary_projection(self):
        product = Product(
            product_id="X-3",
            name="Tote",
            category="bags",
            price=10,
            image="https://img.example.com/x3.jpg",
            description="Not part of the summary"
        )

        summary = product.to_summary()

        assert summary.model_dump() == {
            "id": "X-3",
            "name": "Tote",
            "image": "https://img.example.com/x3.jpg",
            "price": 10.0
        }


# =============================================================================
# Catalog Gateway
# =============================================================================

class TestCatalogGateway:
    """Lookups by id and category."""

    def test_find_by_id(self, catalog):
        summary = catalog.find_by_id("p1")

        assert summary.id == "p1"
        assert summary.name == "Slim Jeans"
        assert summary.price == 59.99

    def test_find_by_id_missing(self, catalog):
        assert catalog.find_by_id("nope") is None

    def test_find_by_category_in_catalog_order(self, catalog):
        results = catalog.find_by_category("jeans")

        assert [r.id for r in results] == ["p1", "p2"]

    def test_find_by_category_is_exact(self, catalog):
        assert catalog.find_by_category("Jeans") == []
        assert catalog.find_by_category("suits") == []

    def test_add_product_upserts(self, catalog):
        catalog.add_product(Product(product_id="p1", name="Slim Jeans v2", category="jeans", price=55))

        assert catalog.find_by_id("p1").name == "Slim Jeans v2"
        assert catalog.get_product_count() == 3
        assert [r.id for r in catalog.find_by_category("jeans")] == ["p1", "p2"]

    def test_clear(self, catalog):
        catalog.clear()
        assert catalog.get_product_count() == 0


# =============================================================================
# Seed data
# =============================================================================

class TestSeedCatalog:
    """The bundled product file and catalog initialization."""

    def test_seed_file_covers_every_category(self):
        products = load_products_from_file(str(PRODUCTS_PATH))

        categories = {p.category for p in products}
        assert categories == set(PRODUCT_CATEGORIES)

    def test_seed_ids_are_unique(self):
        products = load_products_from_file(str(PRODUCTS_PATH))

        ids = [p.product_id for p in products]
        assert len(ids) == len(set(ids))

    def test_invalid_entries_skipped(self, tmp_path):
        path = tmp_path / "products.json"
        path.write_text(json.dumps({"products": [
            {"product_id": "ok", "name": "Good", "category": "bags", "price": 10},
            {"product_id": "bad", "name": "Negative", "category": "bags", "price": -1},
            {"name": "No id", "category": "bags", "price": 5},
        ]}))

        products = load_products_from_file(str(path))

        assert [p.product_id for p in products] == ["ok"]

    def test_initialize_catalog_is_idempotent(self, test_database):
        gateway = CatalogGateway(test_database)

        initialize_catalog(gateway, products_path=str(PRODUCTS_PATH))
        count = gateway.get_product_count()
        initialize_catalog(gateway, products_path=str(PRODUCTS_PATH))

        assert count > 0
        assert gateway.get_product_count() == count

    def test_force_reinitialize(self, catalog):
        initialize_catalog(catalog, products_path=str(PRODUCTS_PATH), force_reinitialize=True)

        assert catalog.find_by_id("p1") is None
        assert len(catalog.find_by_category("jeans")) == 3


# =============================================================================
# Checkout
# =============================================================================

class TestCheckoutGateway:
    """Checkout session creation and lookup."""

    @pytest.fixture
    def checkout(self, test_database, catalog):
        return CheckoutGateway(test_database, catalog, frontend_url="https://shop.example.com/")

    def test_create_session(self, checkout):
        session = checkout.create_checkout_session("p1")

        assert session.product_id == "p1"
        assert session.product_name == "Slim Jeans"
        assert session.unit_amount == 5999
        assert session.currency == "usd"
        assert session.quantity == 1
        assert session.status == "open"
        assert session.redirect_url == f"https://shop.example.com/checkout/{session.session_id}"
        assert session.success_url == "https://shop.example.com/success"
        assert session.cancel_url == "https://shop.example.com/cancel"

    def test_session_is_persisted(self, checkout):
        session = checkout.create_checkout_session("p2")

        stored = checkout.get_checkout_session(session.session_id)

        assert stored is not None
        assert stored.unit_amount == 6450
        assert stored.redirect_url == session.redirect_url

    def test_unknown_product(self, checkout):
        with pytest.raises(CatalogResolutionMiss) as exc_info:
            checkout.create_checkout_session("missing")
        assert exc_info.value.product_id == "missing"

    def test_unique_session_ids(self, checkout):
        first = checkout.create_checkout_session("p1")
        second = checkout.create_checkout_session("p1")

        assert first.session_id != second.session_id

    def test_update_status(self, checkout):
        session = checkout.create_checkout_session("b1")

        assert checkout.update_status(session.session_id, "complete")
        assert checkout.get_checkout_session(session.session_id).status == "complete"
        assert not checkout.update_status("no-such-session", "expired")

    def test_update_status_rejects_unknown_status(self, checkout):
        session = checkout.create_checkout_session("b1")

        with pytest.raises(ValueError):
            checkout.update_status(session.session_id, "refunded")
