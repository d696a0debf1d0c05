"""Integration tests for Catalogue API endpoints via TestClient."""

import pytest
from catalogue.api.routes import product_router
from catalogue.domain import catalogue
from fastapi import FastAPI
from fastapi.testclient import TestClient
from protean.integrations.fastapi import DomainContextMiddleware
from shared.api import register_exception_handlers


@pytest.fixture()
def client():
    app = FastAPI()
    app.add_middleware(DomainContextMiddleware, route_domain_map={"/products": catalogue})
    app.include_router(product_router)
    register_exception_handlers(app)
    return TestClient(app)


@pytest.fixture()
def partner(make_user):
    return make_user(role="Partner")


def _create(client, user, **overrides):
    payload = {
        "name": "Linen Shirt",
        "category": "Apparel",
        "gender": "Unisex",
        "price": 1200,
        "discount": 10,
        "stock": 25,
        "sizes": ["S", "M"],
        "colors": ["White"],
        "images": ["https://cdn.example.com/linen.jpg"],
    }
    payload.update(overrides)
    return client.post("/products", json=payload, headers={"X-User-Id": user.id})


def test_partner_creates_product(client, partner):
    response = _create(client, partner)
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["author"] == partner.id
    assert data["unitPrice"] == 1080.0
    assert data["isActive"] is True


def test_customer_cannot_create(client, make_user):
    response = _create(client, make_user(role="Customer"))
    assert response.status_code == 403


def test_invalid_size_for_category(client, partner):
    response = _create(client, partner, sizes=["9"])
    assert response.status_code == 400
    assert response.json()["kind"] == "ValidationError"


def test_get_product(client, partner):
    product_id = _create(client, partner).json()["data"]["id"]
    response = client.get(f"/products/{product_id}")
    assert response.status_code == 200
    assert response.json()["data"]["name"] == "Linen Shirt"


def test_get_unknown_product(client):
    response = client.get("/products/missing")
    assert response.status_code == 404


def test_owner_updates_allow_listed_fields(client, partner):
    product_id = _create(client, partner).json()["data"]["id"]
    response = client.put(
        f"/products/{product_id}",
        json={"price": 1000, "isActive": False},
        headers={"X-User-Id": partner.id},
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["price"] == 1000
    assert data["isActive"] is False
    assert data["stock"] == 25


def test_update_rejects_stock_and_unknown_keys(client, partner):
    product_id = _create(client, partner).json()["data"]["id"]
    for payload in ({"stock": 999}, {"author": "someone"}):
        response = client.put(f"/products/{product_id}", json=payload, headers={"X-User-Id": partner.id})
        assert response.status_code == 400
    assert client.get(f"/products/{product_id}").json()["data"]["stock"] == 25


def test_other_partner_cannot_update(client, partner, make_user):
    product_id = _create(client, partner).json()["data"]["id"]
    response = client.put(
        f"/products/{product_id}", json={"price": 1}, headers={"X-User-Id": make_user(role="Partner").id}
    )
    assert response.status_code == 403


def test_domain_validation_renders_storefront_error(client, partner):
    body = _create(client, partner, sizes=["XXXL"]).json()
    assert body["success"] is False
    assert body["message"] == "Invalid request"
    assert "sizes" in body["errors"]
