# tests/conftest.py

import os

# Settings are read at import time, so the environment has to be in place first.
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("COOKIE_PASSWORD", "test-cookie-password")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from server.database import get_db
from server.main import app
from server.models import Base


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    yield db
    db.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def register(client):
    def _register(email="ada@example.com", password="correct horse", name="Ada"):
        return client.post("/api/auth/register", json={"name": name, "email": email, "password": password})
    return _register


@pytest.fixture
def auth_headers(client, register):
    def _auth_headers(email="ada@example.com", password="correct horse", name="Ada"):
        register(email=email, password=password, name=name)
        res = client.post("/api/auth/token", data={"username": email, "password": password})
        return {"Authorization": f"Bearer {res.json()['access_token']}"}
    return _auth_headers


@pytest.fixture
def article(client, auth_headers):
    headers = auth_headers(email="author@example.com", name="Author")
    res = client.post("/api/articles", json={"title": "Hello", "content": "First post"}, headers=headers)
    return res.json()["article"]
