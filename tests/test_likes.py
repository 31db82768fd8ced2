import pytest
from sqlalchemy.dialects import postgresql

from core import id_generator
from services.likes import lock_comment, lock_photo
from tests.helpers import auth


@pytest.fixture
async def approved_photo(register, upload, client, admin_token):
    token, _ = await register("owner@x.com", username="owner")
    photo = await upload(token, is_public=True)
    resp = await client.post(f"/api/admin/photos/{photo['id']}/approve", headers=auth(admin_token))
    assert resp.status_code == 200
    return photo


async def test_like_is_idempotent(client, register, approved_photo):
    token, _ = await register("fan@x.com")
    url = f"/api/photos/{approved_photo['id']}/like"

    first = await client.post(url, headers=auth(token))
    assert first.status_code == 200
    assert first.json()["likes_count"] == 1

    second = await client.post(url, headers=auth(token))
    assert second.status_code == 200
    assert second.json()["likes_count"] == 1

    status = await client.get(url, headers=auth(token))
    assert status.json() == {"liked": True}


async def test_unlike_resets_count(client, register, approved_photo):
    token, _ = await register("fan@x.com")
    url = f"/api/photos/{approved_photo['id']}/like"

    await client.post(url, headers=auth(token))
    resp = await client.delete(url, headers=auth(token))
    assert resp.status_code == 200
    assert resp.json()["likes_count"] == 0

    # снять несуществующий лайк не ошибка
    again = await client.delete(url, headers=auth(token))
    assert again.status_code == 200
    assert again.json()["likes_count"] == 0

    status = await client.get(url, headers=auth(token))
    assert status.json() == {"liked": False}


async def test_likes_from_several_users(client, register, approved_photo):
    url = f"/api/photos/{approved_photo['id']}/like"
    for email in ("one@x.com", "two@x.com", "three@x.com"):
        token, _ = await register(email)
        await client.post(url, headers=auth(token))

    photo = await client.get(f"/api/photos/{approved_photo['id']}")
    assert photo.json()["likes_count"] == 3


async def test_cannot_like_pending_photo_of_someone_else(client, register, upload):
    owner_token, _ = await register("owner@x.com")
    fan_token, _ = await register("fan@x.com")
    photo = await upload(owner_token, is_public=True)

    resp = await client.post(f"/api/photos/{photo['id']}/like", headers=auth(fan_token))
    assert resp.status_code == 404


async def test_like_requires_auth(client, approved_photo):
    resp = await client.post(f"/api/photos/{approved_photo['id']}/like")
    assert resp.status_code == 401


async def test_comment_likes(client, register, approved_photo):
    author_token, _ = await register("author@x.com")
    fan_token, _ = await register("fan@x.com")
    comment = (
        await client.post(
            f"/api/photos/{approved_photo['id']}/comments",
            json={"text": "hello"},
            headers=auth(author_token),
        )
    ).json()
    url = f"/api/comments/{comment['id']}/like"

    liked = await client.post(url, headers=auth(fan_token))
    assert liked.status_code == 200
    assert liked.json()["likes_count"] == 1
    assert liked.json()["user_liked"] is True

    twice = await client.post(url, headers=auth(fan_token))
    assert twice.json()["likes_count"] == 1

    listing = await client.get(f"/api/photos/{approved_photo['id']}/comments", headers=auth(fan_token))
    assert listing.json()[0]["user_liked"] is True
    anonymous = await client.get(f"/api/photos/{approved_photo['id']}/comments")
    assert anonymous.json()[0]["user_liked"] is False

    unliked = await client.delete(url, headers=auth(fan_token))
    assert unliked.json()["likes_count"] == 0
    assert unliked.json()["user_liked"] is False


async def test_like_missing_comment(client, register):
    token, _ = await register("fan@x.com")
    resp = await client.post("/api/comments/99999999/like", headers=auth(token))
    assert resp.status_code == 404


async def test_like_survives_id_collision(client, register, approved_photo, monkeypatch):
    first_token, _ = await register("fan1@x.com")
    second_token, _ = await register("fan2@x.com")
    url = f"/api/photos/{approved_photo['id']}/like"

    monkeypatch.setattr(id_generator.random, "randint", lambda a, b: 7)
    assert (await client.post(url, headers=auth(first_token))).json()["likes_count"] == 1

    # первая попытка вытягивает уже занятый id, вторая свободный
    draws = iter([7, 8])
    monkeypatch.setattr(id_generator.random, "randint", lambda a, b: next(draws))
    resp = await client.post(url, headers=auth(second_token))

    assert resp.status_code == 200
    assert resp.json()["likes_count"] == 2
    assert (await client.get(url, headers=auth(second_token))).json() == {"liked": True}


async def test_comment_like_survives_id_collision(client, register, approved_photo, monkeypatch):
    author_token, _ = await register("author@x.com")
    first_token, _ = await register("fan1@x.com")
    second_token, _ = await register("fan2@x.com")
    comment = (
        await client.post(
            f"/api/photos/{approved_photo['id']}/comments",
            json={"text": "hello"},
            headers=auth(author_token),
        )
    ).json()
    url = f"/api/comments/{comment['id']}/like"

    monkeypatch.setattr(id_generator.random, "randint", lambda a, b: 7)
    await client.post(url, headers=auth(first_token))

    draws = iter([7, 8])
    monkeypatch.setattr(id_generator.random, "randint", lambda a, b: next(draws))
    resp = await client.post(url, headers=auth(second_token))

    assert resp.status_code == 200
    assert resp.json()["likes_count"] == 2
    assert resp.json()["user_liked"] is True


async def test_like_status_of_missing_photo(client, register):
    token, _ = await register("fan@x.com")
    resp = await client.get("/api/photos/99999999/like", headers=auth(token))
    assert resp.status_code == 404


async def test_like_status_of_hidden_photo(client, register, upload):
    owner_token, _ = await register("owner@x.com")
    fan_token, _ = await register("fan@x.com")
    photo = await upload(owner_token, is_public=False)
    url = f"/api/photos/{photo['id']}/like"

    assert (await client.get(url, headers=auth(fan_token))).status_code == 404
    assert (await client.get(url, headers=auth(owner_token))).json() == {"liked": False}


async def test_comment_on_hidden_photo_cannot_be_liked_or_reported(client, register, upload):
    owner_token, _ = await register("owner@x.com")
    fan_token, _ = await register("fan@x.com")
    photo = await upload(owner_token, is_public=True)
    comment = (
        await client.post(
            f"/api/photos/{photo['id']}/comments", json={"text": "draft"}, headers=auth(owner_token)
        )
    ).json()

    assert (await client.post(f"/api/comments/{comment['id']}/like", headers=auth(fan_token))).status_code == 404
    assert (await client.delete(f"/api/comments/{comment['id']}/like", headers=auth(fan_token))).status_code == 404
    report = await client.post(
        f"/api/comments/{comment['id']}/report", json={"reason": "spam"}, headers=auth(fan_token)
    )
    assert report.status_code == 404

    own = await client.post(f"/api/comments/{comment['id']}/like", headers=auth(owner_token))
    assert own.status_code == 200
    assert own.json()["likes_count"] == 1


def test_like_locks_target_row():
    dialect = postgresql.dialect()
    assert "FOR UPDATE" in str(lock_photo(1).compile(dialect=dialect))
    assert "FOR UPDATE" in str(lock_comment(1).compile(dialect=dialect))
