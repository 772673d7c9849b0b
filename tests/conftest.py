"""Shared fixtures for the shopping assistant tests."""

import json
import os
import sys
from unittest.mock import Mock

import pytest

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from shop_assistant.catalog import CatalogGateway
from shop_assistant.conversation_store import ConversationStore
from shop_assistant.database import Database
from shop_assistant.models import Product
from shop_assistant.oracle import ModelOracle
from shop_assistant.orchestrator import ShoppingAssistant


@pytest.fixture
def test_database(tmp_path):
    """Create a temporary catalog database."""
    return Database(str(tmp_path / "test_catalog.db"))


@pytest.fixture
def catalog(test_database):
    """Catalog with two jeans and one bag."""
    gateway = CatalogGateway(test_database)
    gateway.add_products([
        Product(
            product_id="p1",
            name="Slim Jeans",
            category="jeans",
            price=59.99,
            image="https://img.example.com/p1.jpg"
        ),
        Product(
            product_id="p2",
            name="Wide Jeans",
            category="jeans",
            price=64.5,
            image="https://img.example.com/p2.jpg"
        ),
        Product(
            product_id="b1",
            name="Canvas Tote",
            category="bags",
            price=39.99,
            image="https://img.example.com/b1.jpg"
        ),
    ])
    return gateway


@pytest.fixture
def oracle():
    """Mocked language model; set complete.side_effect / return_value per test."""
    return Mock(spec=ModelOracle)


@pytest.fixture
def store():
    return ConversationStore(max_sessions=0, ttl_seconds=0)


@pytest.fixture
def assistant(oracle, catalog, store):
    return ShoppingAssistant(oracle=oracle, catalog=catalog, store=store)


@pytest.fixture
def make_reply():
    """Factory for primary model output as JSON text."""
    def _make_reply(
        ndrec=False,
        category="jeans",
        display="What size do you wear?",
        summ="A man looking for blue jeans in size M.",
        confirm_purchase=False,
        payment_success=False,
        redirect_link=""
    ):
        return json.dumps({
            "user_query": "I want blue jeans size M",
            "display": display,
            "user_preferences": {
                "gender": "male",
                "size": "M",
                "category": category,
                "summ": summ
            },
            "product_recommendation": {
                "ndrec": ndrec,
                "product_category": category
            },
            "purchase_confirmation": {
                "confirm_purchase": confirm_purchase
            },
            "payment_process": {
                "payment_success": payment_success,
                "redirect_link": redirect_link
            }
        })
    return _make_reply


@pytest.fixture
def make_choice():
    """Factory for recommendation model output as JSON text."""
    def _make_choice(item_id="p1", item_name="Slim Jeans"):
        return json.dumps({"item_id": item_id, "item_name": item_name})
    return _make_choice
