"""
Shared fixtures: an in-memory SQLite database injected into the app through
dependency_overrides, plus helpers to register accounts over HTTP.
Run: pytest -v
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from quickdesk.api.dependencies import get_db
from quickdesk.core.config import settings
from quickdesk.core.database import Base
from quickdesk.main import app
from quickdesk.models.user import ROLE_AGENT, User
from quickdesk.services.auth_service import hash_password
from quickdesk.services.category_service import seed_default_categories

ADMIN_KEY = "ADMIN2024"


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db_session(session_factory):
    db = session_factory()
    seed_default_categories(db)
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client(session_factory, db_session, tmp_path, monkeypatch):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path / "uploads"))
    monkeypatch.setattr(settings, "SMTP_HOST", None)
    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def make_agent(db_session):
    """Insert an agent row directly (no HTTP round trip)."""
    counter = {"n": 0}

    def _make(username=None, specializations=(), rating=0.0, total_ratings=0):
        counter["n"] += 1
        username = username or f"agent{counter['n']}"
        agent = User(
            username=username,
            email=f"{username}@example.com",
            password_hash=hash_password("secret"),
            role=ROLE_AGENT,
            specializations=list(specializations),
            rating=rating,
            total_ratings=total_ratings,
        )
        db_session.add(agent)
        db_session.commit()
        db_session.refresh(agent)
        return agent

    return _make


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def register(client):
    """Register an account through the API. Returns (headers, user_json)."""

    def _register(username, role="user", specializations=None, password="secret123", admin_key=None):
        body = {
            "username": username,
            "email": f"{username}@example.com",
            "password": password,
            "role": role,
            "specializations": specializations or [],
        }
        if admin_key is not None:
            body["admin_key"] = admin_key
        r = client.post("/api/auth/register", json=body)
        assert r.status_code == 201, r.text
        data = r.json()
        return auth_header(data["access_token"]), data["user"]

    return _register
