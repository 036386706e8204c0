"""
mdcms test suite — shared fixtures.

Run:  pytest tests/ -v
"""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from cms_backend.config import Settings
from cms_backend.credentials import hash_password
from server import create_app


ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "secret"


@pytest.fixture
def data_dir(tmp_path) -> Path:
    path = tmp_path / "data"
    path.mkdir()
    return path


@pytest.fixture
def users_path(tmp_path) -> Path:
    path = tmp_path / "users.yml"
    # Low cost factor keeps the suite fast.
    path.write_text(f"{ADMIN_USERNAME}: {hash_password(ADMIN_PASSWORD, rounds=4)}\n", encoding="utf-8")
    return path


@pytest.fixture
def settings(data_dir, users_path) -> Settings:
    return Settings(
        environment="test",
        data_dir=data_dir,
        users_path=users_path,
        session_secret="test-secret-key-for-unit-tests-only",
        log_level="DEBUG",
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    """Client that does not follow redirects, so 302s can be asserted."""
    with TestClient(app, follow_redirects=False) as c:
        yield c


@pytest.fixture
def admin_client(client):
    resp = client.post("/users/signin", data={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD})
    assert resp.status_code == 302
    # Drop the "Welcome!" flash so tests start from a clean page.
    client.get("/")
    return client


@pytest.fixture
def create_document(data_dir):
    def _create(name: str, content: str = "") -> Path:
        path = data_dir / name
        path.write_text(content, encoding="utf-8")
        return path

    return _create
