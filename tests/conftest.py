import os
import tempfile

# Окружение должно быть готово до импорта core.config
_TMP_DIR = tempfile.mkdtemp(prefix="photohub-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TMP_DIR}/bootstrap.db"
os.environ["UPLOAD_DIR"] = os.path.join(_TMP_DIR, "uploads")
os.environ["JWT_SECRET"] = "test-secret"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import update
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from core.database import get_db
from main import app
from models.base import Base
from models.user import User
from tests.helpers import MIME_BY_FORMAT, auth, make_image_bytes
from utils.storage import storage


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, expire_on_commit=False)


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    directory = tmp_path / "uploads"
    directory.mkdir()
    monkeypatch.setattr(storage, "base_dir", directory)
    return directory


@pytest.fixture
async def client(session_factory, upload_dir):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def register(client):
    async def _register(email: str, password: str = "secret1", username: str = "tester"):
        resp = await client.post(
            "/api/register",
            json={"email": email, "password": password, "username": username},
        )
        assert resp.status_code == 201, resp.text
        body = resp.json()
        return body["token"], body["user"]

    return _register


@pytest.fixture
def make_admin(session_factory):
    async def _make_admin(user_id: int):
        async with session_factory() as session:
            await session.execute(update(User).where(User.id == user_id).values(is_admin=True))
            await session.commit()

    return _make_admin


@pytest.fixture
async def admin_token(register, make_admin):
    token, user = await register("admin@x.com", username="admin")
    await make_admin(user["id"])
    return token


@pytest.fixture
def upload(client):
    async def _upload(token: str, is_public: bool = True, description: str = "", fmt: str = "PNG"):
        mime = MIME_BY_FORMAT[fmt]
        resp = await client.post(
            "/api/photos/upload",
            files={"photo": (f"pic.{fmt.lower()}", make_image_bytes(fmt), mime)},
            data={"is_public": "true" if is_public else "false", "description": description},
            headers=auth(token),
        )
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _upload
