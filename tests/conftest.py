from datetime import datetime, timedelta, timezone

import pytest

from app.comments.models import Comment
from app.db.init_db import init_models
from app.db.session import build_engine, build_session_factory
from app.feed.models import Post, PostLike
from app.feed.store import FeedStore
from app.media.storage import PostImageBucket

USER_ID = "123e4567-e89b-12d3-a456-426614174000"
OTHER_USER_ID = "9b2f0c1e-5d7a-4c39-8e61-0f3a2b4c5d6e"
PUBLIC_BASE_URL = "http://testserver"
NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
async def engine():
    eng = build_engine("sqlite+aiosqlite://")
    await init_models(eng)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def bucket(tmp_path):
    return PostImageBucket(str(tmp_path / "media"), "post-images", PUBLIC_BASE_URL)


@pytest.fixture
def store(session_factory, bucket):
    return FeedStore(session_factory, bucket, user_id=USER_ID)


@pytest.fixture
def seed(session_factory):
    """
    Inserta un post directo en la DB (como si lo hubiera creado otro cliente).
    Devuelve (post_id, [comment_ids]).
    """

    async def _seed(
        title: str,
        *,
        user_id: str = USER_ID,
        minutes_ago: int = 0,
        likers: tuple[str, ...] = (),
        comments: tuple[tuple[str, str], ...] = (),
        image: str | None = None,
    ):
        async with session_factory() as db:
            post = Post(
                user_id=user_id,
                title=title,
                text=f"{title} body",
                image=image,
                created_at=NOW - timedelta(minutes=minutes_ago),
            )
            db.add(post)
            await db.flush()

            for liker in likers:
                db.add(PostLike(post_id=post.id, user_id=liker))

            comment_rows = []
            for i, (author, text) in enumerate(comments):
                c = Comment(
                    post_id=post.id,
                    user_id=author,
                    text=text,
                    created_at=NOW + timedelta(seconds=i),
                )
                db.add(c)
                comment_rows.append(c)

            await db.flush()
            comment_ids = [c.id for c in comment_rows]
            await db.commit()
            return post.id, comment_ids

    return _seed
