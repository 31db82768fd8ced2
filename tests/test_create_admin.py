from core.security import verify_password
from tests.helpers import auth
from utils.create_admin import ensure_admin


async def test_creates_new_admin(session_factory):
    async with session_factory() as db:
        user = await ensure_admin(db, "root@x.com", "secret1", "root")

    assert user.is_admin is True
    assert user.username == "root"
    assert verify_password("secret1", user.password_hash)


async def test_promotes_existing_user(client, register, session_factory):
    token, registered = await register("a@x.com", username="alice")

    async with session_factory() as db:
        user = await ensure_admin(db, "a@x.com", "ignored", "ignored")

    assert user.id == registered["id"]
    assert user.is_admin is True
    assert user.username == "alice"

    resp = await client.get("/api/admin/photos/pending", headers=auth(token))
    assert resp.status_code == 200
