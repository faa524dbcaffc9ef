import os

# Point the app at a private in-memory database before anything imports the settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret"

import pytest
from fastapi.testclient import TestClient

import main
from database import Base, SessionLocal, dispose_engine, get_engine, init_db
from main import app
from models.product import Product
from populate_db import seed_products


@pytest.fixture(scope="function")
def db_session():
    """
    Fresh schema for every test, torn down afterwards.
    """
    init_db()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=get_engine())
        dispose_engine()


@pytest.fixture(scope="function")
def client(db_session, monkeypatch):
    # The in-memory database lives in one connection; db_session disposes it after teardown
    monkeypatch.setattr(main, "dispose_engine", lambda: None)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(scope="function")
def products(db_session):
    """
    Default coffee menu, ordered by id.
    """
    seed_products(db_session)
    return db_session.query(Product).order_by(Product.id).all()


def register_user(client, username="alice", email="alice@caffinity.com", password="Secret123!"):
    response = client.post(
        "/api/auth/register",
        json={"username": username, "email": email, "password": password},
    )
    assert response.status_code == 201, response.text
    body = response.json()
    return body["user"], body["token"]


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope="function")
def alice(client):
    user, token = register_user(client)
    return {"user": user, "token": token, "headers": bearer(token)}


@pytest.fixture(scope="function")
def bob(client):
    user, token = register_user(client, username="bob", email="bob@caffinity.com", password="Hunter2!")
    return {"user": user, "token": token, "headers": bearer(token)}
