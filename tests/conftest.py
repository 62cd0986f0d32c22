import os

# Cheap hashes for tests; must be set before the app modules are imported.
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import mongomock  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from database import ensure_indexes, get_db  # noqa: E402
from main import app, get_codec  # noqa: E402
from security import TokenCodec  # noqa: E402

TEST_SECRET = "test-secret"


@pytest.fixture
def db():
    database = mongomock.MongoClient().marketplace
    ensure_indexes(database)
    return database


@pytest.fixture
def codec():
    return TokenCodec(TEST_SECRET)


@pytest.fixture
def client(db, codec):
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_codec] = lambda: codec
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def _register(client, email, role, password="pw123"):
    res = client.post("/signup", json={
        "name": email.split("@")[0].title(),
        "email": email,
        "phone": "555-0100",
        "address": "1 Main St",
        "password": password,
        "role": role,
    })
    assert res.status_code == 201, res.text
    res = client.post("/login", json={"email": email, "password": password})
    assert res.status_code == 200, res.text
    return res.json()["token"]


@pytest.fixture
def seller_token(client):
    return _register(client, "s@x.com", "seller")


@pytest.fixture
def other_seller_token(client):
    return _register(client, "s2@x.com", "seller")


@pytest.fixture
def customer_token(client):
    return _register(client, "c@x.com", "customer")


@pytest.fixture
def widget_id(client, seller_token):
    res = client.post("/add-product", json={
        "token": seller_token,
        "name": "Widget",
        "description": "A widget",
        "price": 10,
        "image": "http://img/widget.png",
    })
    assert res.status_code == 201, res.text
    return res.json()["id"]
