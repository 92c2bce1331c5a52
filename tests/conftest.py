"""Pytest configuration and fixtures."""
import mongomock
import pytest
from fastapi.testclient import TestClient

from suq.config import Settings
from suq.main import create_app
from suq.services.product_repository import ProductRepository, get_product_repository

SELLER_ID = "507f1f77bcf86cd799439011"
PASSWORD = "Str0ng!pass"


@pytest.fixture
def settings():
    """Settings with no external databases configured."""
    return Settings(_env_file=None, mongodb_uri=None, database_url=None)


@pytest.fixture
def products_collection():
    """In-memory stand-in for the MongoDB products collection."""
    return mongomock.MongoClient().db.products


@pytest.fixture
def repo(products_collection):
    return ProductRepository(products_collection)


@pytest.fixture
def app(settings, repo):
    """Application wired to the in-memory catalog and auth stores."""
    app = create_app(settings)
    app.dependency_overrides[get_product_repository] = lambda: repo

    yield app

    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client


@pytest.fixture
def product_data():
    return {
        "name": "Desk",
        "price": 49.99,
        "images": ["http://x/1.jpg"],
        "sellerId": SELLER_ID,
    }


@pytest.fixture
def signed_in_user(client):
    """Register a user; the client keeps the session cookie."""
    response = client.post(
        "/api/auth/sign-up/email",
        json={"name": "desk_seller", "email": "seller@example.com", "password": PASSWORD},
    )
    assert response.status_code == 201
    return response.json()["user"]
