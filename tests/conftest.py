# tests/conftest.py
import pytest
from httpx import AsyncClient, ASGITransport
from mongomock_motor import AsyncMongoMockClient

from devboard.core.config import settings
from devboard.db.mongo import init_db
from devboard.main import app
from tests.helpers import register

@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    path = tmp_path / "uploads"
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(path))
    return path

@pytest.fixture(autouse=True)
async def test_db(upload_dir):
    """Fresh in-memory Mongo per test; unique indexes are enforced by the mock."""
    client = AsyncMongoMockClient()
    db = client["devboard_test"]
    await init_db(db)
    yield db

@pytest.fixture
async def client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
async def admin(client):
    return await register(client, "admin@example.com", role="admin", name="Alice Admin")

@pytest.fixture
async def other_admin(client):
    return await register(client, "other-admin@example.com", role="admin", name="Oscar Other")

@pytest.fixture
async def seeker(client):
    return await register(client, "seeker@example.com", name="Uma User")
