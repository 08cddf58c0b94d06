import mongomock
import pytest

import config
from app import create_app


@pytest.fixture(autouse=True)
def mongo():
    client = mongomock.MongoClient()
    config.set_mongo_client(client)
    yield client
    config.set_mongo_client(None)


@pytest.fixture
def app():
    return create_app({"TESTING": True, "SECRET_KEY": "test-secret"})


@pytest.fixture
def client(app):
    return app.test_client()


def register(client, username="budi", email="budi@example.com", password="rahasia1"):
    resp = client.post("/api/auth/register", json={
        "username": username,
        "email": email,
        "password": password,
    })
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()["_id"]


@pytest.fixture
def user_id(client):
    """Register and log in a user on the shared test client"""
    return register(client)


@pytest.fixture
def admin_client(app):
    admin = app.test_client()
    resp = admin.post("/api/auth/admin/register", json={
        "username": "admin",
        "email": "admin@jagacuan.id",
        "password": "Admin1234",
        "confirm_password": "Admin1234",
    })
    assert resp.status_code == 201, resp.get_json()
    return admin
