"""Tests for the feed and comments HTTP endpoints."""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select

from app.feed.models import Post
from app.feed.router import get_feed_store
from app.main import app

from tests.conftest import OTHER_USER_ID, USER_ID


@pytest.fixture
async def client(store):
    app.dependency_overrides[get_feed_store] = lambda: store
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac
    app.dependency_overrides.clear()


async def test_health(client):
    res = await client.get("/api/health/")
    assert res.status_code == 200
    assert res.json()["ok"] is True


async def test_create_and_list_posts(client, seed):
    await seed("viejo", minutes_ago=5, likers=(USER_ID, OTHER_USER_ID))

    res = await client.post("/api/feed/", json={"title": "Hola", "text": "mundo"})
    assert res.status_code == 201
    created = res.json()
    assert created["likes_count"] == 0
    assert created["is_liked"] is False
    assert created["comments"] == []

    res = await client.get("/api/feed/")
    assert res.status_code == 200
    listed = res.json()
    assert [p["title"] for p in listed] == ["Hola", "viejo"]
    assert listed[1]["likes_count"] == 2
    assert listed[1]["is_liked"] is True


async def test_create_post_requires_title_and_text(client, session_factory):
    res = await client.post("/api/feed/", json={"title": "", "text": "x"})
    assert res.status_code == 422
    res = await client.post("/api/feed/", json={"title": "t", "text": "  "})
    assert res.status_code == 422

    async with session_factory() as db:
        count = (await db.execute(select(func.count()).select_from(Post))).scalar_one()
    assert count == 0


async def test_broken_image_is_reported_as_banner_message(client):
    res = await client.post(
        "/api/feed/",
        json={"title": "t", "text": "x", "image": "data:image/png;base64,@@"},
    )
    assert res.status_code == 400
    assert res.json()["detail"].startswith("Image upload failed")


async def test_state_endpoint_does_not_fetch(client, seed):
    await seed("p")
    res = await client.get("/api/feed/state/")
    assert res.json() == {"posts": [], "loading": False}


async def test_toggle_like(client, seed):
    post_id, _ = await seed("p")
    await client.get("/api/feed/")

    res = await client.post(f"/api/feed/{post_id}/like/")
    assert res.json() == {"post_id": post_id, "likes_count": 1, "is_liked": True}

    res = await client.post(f"/api/feed/{post_id}/like/")
    assert res.json() == {"post_id": post_id, "likes_count": 0, "is_liked": False}


async def test_toggle_like_unknown_post(client):
    res = await client.post("/api/feed/nope/like/")
    assert res.status_code == 404


async def test_delete_post(client, seed):
    post_id, _ = await seed("p")
    await client.get("/api/feed/")

    res = await client.delete(f"/api/feed/{post_id}/")
    assert res.status_code == 204

    res = await client.get("/api/feed/")
    assert res.json() == []


async def test_delete_unknown_post_is_not_found(client):
    res = await client.delete("/api/feed/ghost/")
    assert res.status_code == 404
    assert res.json()["detail"] == "post not found"


async def test_delete_foreign_post_is_not_found(client, seed):
    post_id, _ = await seed("ajeno", user_id=OTHER_USER_ID)
    await client.get("/api/feed/")

    res = await client.delete(f"/api/feed/{post_id}/")
    assert res.status_code == 404

    state = (await client.get("/api/feed/state/")).json()
    assert [p["id"] for p in state["posts"]] == [post_id]
    listed = (await client.get("/api/feed/")).json()
    assert [p["id"] for p in listed] == [post_id]


async def test_comment_lifecycle(client, seed):
    post_id, _ = await seed("p")
    await client.get("/api/feed/")

    res = await client.post("/api/comments/", json={"post_id": post_id, "text": "hola"})
    assert res.status_code == 201
    comment = res.json()
    assert comment["user_id"] == USER_ID

    res = await client.patch(f"/api/comments/{comment['id']}/", json={"text": "editado"})
    assert res.status_code == 200
    assert res.json()["text"] == "editado"

    state = (await client.get("/api/feed/state/")).json()
    assert [c["text"] for c in state["posts"][0]["comments"]] == ["editado"]

    res = await client.delete(f"/api/comments/{comment['id']}/")
    assert res.status_code == 204
    state = (await client.get("/api/feed/state/")).json()
    assert state["posts"][0]["comments"] == []


async def test_update_foreign_comment_is_not_found(client, seed):
    _, (theirs,) = await seed("p", comments=((OTHER_USER_ID, "ajeno"),))

    res = await client.patch(f"/api/comments/{theirs}/", json={"text": "mío"})

    assert res.status_code == 404
    assert "no permission" in res.json()["detail"]


async def test_comment_on_missing_post_conflicts(client):
    res = await client.post("/api/comments/", json={"post_id": "ghost", "text": "hola"})
    assert res.status_code == 409
