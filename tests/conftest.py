import os
import tempfile

# Configuration is read at import time, so the environment must be ready
# before anything from quotedesk is imported.
_DB_DIR = tempfile.mkdtemp(prefix="quotedesk-tests-")
os.environ["APP_ENV"] = "development"
os.environ["DB_TYPE"] = "sqlite"
os.environ["SQLITE_PATH"] = os.path.join(_DB_DIR, "test.db")
os.environ["JWT_ACCESS_SECRET_KEY"] = "test-secret-key"
os.environ["QUOTES_PER_PAGE"] = "10"
os.environ.pop("SMTP_HOST", None)

import asyncio

import pytest
from fastapi.testclient import TestClient

from main import app
from quotedesk.core.db import AsyncSessionLocal, reset_models
from quotedesk.core.security import hash_password
from quotedesk.models.users.user_models import User

PASSWORD = "s3cret-pass"
STAFF = {
    "admin": "admin@example.com",
    "editor": "editor@example.com",
    "viewer": "viewer@example.com",
}

_password_hash = None


async def _reset_db():
    global _password_hash
    if _password_hash is None:
        _password_hash = hash_password(PASSWORD)

    await reset_models()

    async with AsyncSessionLocal() as session:
        for role, email in STAFF.items():
            session.add(User(username=email, password_hash=_password_hash, role=role))
        await session.commit()


@pytest.fixture
def client():
    asyncio.run(_reset_db())
    with TestClient(app) as c:
        yield c


@pytest.fixture
def notifications(monkeypatch):
    """Record admin notifications instead of sending them."""
    sent = []

    def fake_send(name, email, service, notes=""):
        sent.append({"name": name, "email": email, "service": service, "notes": notes})
        return True

    monkeypatch.setattr(
        "quotedesk.services.quotes.intake_service.send_admin_notification",
        fake_send,
    )
    return sent


@pytest.fixture
def auth_headers(client):
    cache = {}

    def _headers(role="admin"):
        if role not in cache:
            res = client.post(
                "/auth/login",
                json={"email": STAFF[role], "password": PASSWORD},
            )
            assert res.status_code == 200, res.text
            token = res.json()["data"]["access_token"]
            cache[role] = {"Authorization": f"Bearer {token}"}
        return cache[role]

    return _headers


@pytest.fixture
def submit(client, notifications):
    def _submit(**fields):
        token = client.get("/quotes/form-token").json()["data"]["form_token"]
        payload = {
            "name": "Jane Doe",
            "email": "jane@example.com",
            "service": "Plumbing",
            "notes": "",
            "form_token": token,
        }
        payload.update(fields)
        return client.post("/quotes/submit", json=payload)

    return _submit


@pytest.fixture
def create_quote(submit):
    def _create(**fields):
        res = submit(**fields)
        assert res.status_code == 200, res.text
        return res.json()["data"]["id"]

    return _create


@pytest.fixture
def act(client, auth_headers):
    """Issue an action token and apply the action in one go."""

    def _act(action, ids, role="admin", view=None):
        headers = auth_headers(role)
        token = client.post(
            "/quotes/action-token",
            json={"action": action, "ids": ids},
            headers=headers,
        ).json()["data"]["token"]
        return client.post(
            "/quotes/bulk-action",
            json={"action": action, "ids": ids, "token": token, "view": view},
            headers=headers,
        )

    return _act


@pytest.fixture
def get_status(client, auth_headers):
    def _status(quote_id):
        res = client.get(f"/quotes/{quote_id}", headers=auth_headers("admin"))
        if res.status_code == 404:
            return None
        return res.json()["data"]["status"]

    return _status
