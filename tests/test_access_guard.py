"""Tests for the access guard on seller and order pages."""
from datetime import datetime, timedelta, timezone

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient
from sqlalchemy import update

from suq.guard import AccessGuardMiddleware, is_protected
from suq.models.user import AccessToken
from suq.schemas.auth import UserResponse


@pytest.mark.parametrize(
    "path,expected",
    [
        ("/seller", True),
        ("/seller/", True),
        ("/seller/listings/42", True),
        ("/order", True),
        ("/order/507f1f77bcf86cd799439011", True),
        ("/sellers", False),
        ("/orders", False),
        ("/api/product", False),
        ("/", False),
    ],
)
def test_is_protected(path, expected):
    assert is_protected(path, ["/seller", "/order"]) is expected


@pytest.mark.parametrize("path", ["/seller", "/order", "/order/507f1f77bcf86cd799439011"])
def test_redirects_without_session(client, path):
    """Protected pages send anonymous visitors to the login page."""
    response = client.get(path, follow_redirects=False)
    assert response.status_code == 307
    assert response.headers["location"] == f"/auth?redirect={path}"


def test_invalid_cookie_redirects(client, settings):
    client.cookies.set(settings.session_cookie_name, "forged-token")
    response = client.get("/seller", follow_redirects=False)
    assert response.status_code == 307


def test_expired_session_redirects(app, client, signed_in_user):
    """Tokens older than the session lifetime no longer open protected pages."""

    async def age_sessions():
        async with app.state.session_factory() as session:
            await session.execute(
                update(AccessToken).values(
                    created_at=datetime.now(timezone.utc) - timedelta(days=8)
                )
            )
            await session.commit()

    assert client.get("/seller").status_code == 200
    client.portal.call(age_sessions)

    response = client.get("/seller", follow_redirects=False)
    assert response.status_code == 307


def test_unprotected_paths_pass_through(client):
    assert client.get("/health").status_code == 200
    assert client.get("/api/product").status_code == 200


def test_seller_dashboard_lists_own_products(client, signed_in_user, product_data):
    client.post("/api/product", json={**product_data, "sellerId": signed_in_user["id"]})
    client.post("/api/product", json=product_data)

    response = client.get("/seller")
    assert response.status_code == 200
    data = response.json()
    assert data["user"]["id"] == signed_in_user["id"]
    assert [p["sellerId"] for p in data["products"]] == [signed_in_user["id"]]


def test_order_summary(client, signed_in_user, product_data):
    mine = {**product_data, "sellerId": signed_in_user["id"]}
    client.post("/api/product", json={**mine, "price": 100, "status": "sold"})
    client.post("/api/product", json={**mine, "price": 40, "status": "reserved"})
    client.post("/api/product", json=mine)
    client.post("/api/product", json={**product_data, "status": "sold"})

    response = client.get("/order")
    assert response.status_code == 200
    data = response.json()
    assert sorted(p["status"] for p in data["sales"]) == ["reserved", "sold"]
    assert data["stats"] == {"soldCount": 1, "reservedCount": 1, "revenue": 100}


def test_order_detail(client, signed_in_user, product_data):
    mine = {**product_data, "sellerId": signed_in_user["id"]}
    sold = client.post("/api/product", json={**mine, "status": "sold"}).json()
    listed = client.post("/api/product", json=mine).json()
    foreign = client.post("/api/product", json={**product_data, "status": "sold"}).json()

    assert client.get(f"/order/{sold['_id']}").json()["_id"] == sold["_id"]

    for product in (listed, foreign):
        response = client.get(f"/order/{product['_id']}")
        assert response.status_code == 404
        assert response.json() == {"error": "Order not found"}


def test_guard_looks_up_session_once_per_request():
    """Each protected request triggers exactly one lookup, nothing is cached."""
    calls = []
    user = UserResponse(
        id="507f1f77bcf86cd799439011",
        name="seller",
        email="seller@example.com",
        created_at=datetime(2025, 1, 1),
    )

    async def lookup(token):
        calls.append(token)
        return user if token == "good" else None

    app = FastAPI()
    app.add_middleware(
        AccessGuardMiddleware,
        lookup=lookup,
        protected_paths=["/seller"],
        cookie_name="session",
    )

    @app.get("/seller")
    def seller(request: Request):
        return {"email": request.state.user.email}

    @app.get("/public")
    def public():
        return {"ok": True}

    client = TestClient(app)
    client.get("/public")
    assert calls == []

    client.cookies.set("session", "good")
    assert client.get("/seller").json() == {"email": "seller@example.com"}
    assert client.get("/seller").status_code == 200
    assert calls == ["good", "good"]

    client.cookies.set("session", "bad")
    response = client.get("/seller", follow_redirects=False)
    assert response.headers["location"] == "/auth?redirect=/seller"
    assert calls == ["good", "good", "bad"]
