"""
Tests for the HTTP API, with the model mocked and a temporary catalog.
"""

import pytest
from fastapi.testclient import TestClient

from shop_assistant.api import app, get_assistant, get_checkout
from shop_assistant.errors import ModelInvocationError
from shop_assistant.payments import CheckoutGateway
from shop_assistant.prompts import RECOMMENDATION_REPLY


@pytest.fixture
def client(assistant, test_database, catalog):
    app.dependency_overrides[get_assistant] = lambda: assistant
    app.dependency_overrides[get_checkout] = lambda: CheckoutGateway(
        test_database, catalog, frontend_url="https://shop.example.com"
    )
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestChatEndpoint:
    """POST /api/chat"""

    def test_reply_without_recommendation(self, client, oracle, make_reply):
        oracle.complete.return_value = make_reply(display="Which size do you wear?")

        response = client.post("/api/chat", json={"message": "I need jeans", "userId": "u1"})

        assert response.status_code == 200
        assert response.json() == {"reply": "Which size do you wear?", "recommendation": None}

    def test_reply_with_recommendation(self, client, oracle, make_reply, make_choice):
        oracle.complete.side_effect = [
            make_reply(ndrec=True, category="jeans"),
            make_choice("p1", "Slim Jeans"),
        ]

        response = client.post("/api/chat", json={"message": "I want blue jeans size M", "userId": "u1"})

        assert response.status_code == 200
        body = response.json()
        assert body["reply"] == RECOMMENDATION_REPLY
        assert body["recommendation"] == {
            "id": "p1",
            "name": "Slim Jeans",
            "image": "https://img.example.com/p1.jpg",
            "price": 59.99
        }

    @pytest.mark.parametrize("payload", [
        {"message": "I need jeans"},
        {"userId": "u1"},
        {"message": "", "userId": "u1"},
        {"message": "I need jeans", "userId": ""},
        {"message": "I need jeans", "userId": "   "},
        {"message": 42, "userId": "u1"},
        {"message": "I need jeans", "userId": ["u1"]},
        {},
    ])
    def test_missing_fields_are_client_errors(self, client, oracle, store, payload):
        response = client.post("/api/chat", json=payload)

        assert response.status_code == 400
        assert response.json() == {"error": "Message and userId are required."}
        oracle.complete.assert_not_called()
        assert len(store) == 0

    def test_non_object_body_is_client_error(self, client, oracle):
        response = client.post("/api/chat", json=["I need jeans", "u1"])

        assert response.status_code == 400
        assert response.json() == {"error": "Message and userId are required."}
        oracle.complete.assert_not_called()

    def test_model_failure_is_server_error(self, client, oracle):
        oracle.complete.side_effect = ModelInvocationError("invalid api key")

        response = client.post("/api/chat", json={"message": "I need jeans", "userId": "u1"})

        assert response.status_code == 500
        assert response.json() == {"error": "Internal Server Error"}

    def test_malformed_model_output_does_not_crash(self, client, oracle):
        oracle.complete.return_value = "{oops"

        response = client.post("/api/chat", json={"message": "I need jeans", "userId": "u1"})

        assert response.status_code == 200
        assert response.json()["recommendation"] is None
        assert response.json()["reply"]


class TestCheckoutEndpoint:
    """POST /api/checkout"""

    def test_checkout_returns_redirect(self, client):
        response = client.post("/api/checkout", json={"productId": "p2"})

        assert response.status_code == 200
        body = response.json()
        assert body["redirect_link"] == f"https://shop.example.com/checkout/{body['session_id']}"

    def test_unknown_product(self, client):
        response = client.post("/api/checkout", json={"productId": "missing"})

        assert response.status_code == 404
        assert response.json() == {"error": "Product not found."}

    def test_missing_product_id_keeps_default_validation(self, client):
        response = client.post("/api/checkout", json={})

        assert response.status_code == 422


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
