# app/feed/repository.py
from sqlalchemy import select, desc, delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.feed.models import Post, PostLike


# -------------------------
# POSTS
# -------------------------
async def list_posts_with_comments(db: AsyncSession) -> list[Post]:
    """
    Todo el feed (sin paginar), más reciente primero, con sus comentarios.
    """
    q = (
        select(Post)
        .options(selectinload(Post.comments))
        .order_by(desc(Post.created_at))
    )
    res = await db.execute(q)
    return list(res.scalars())


async def create_post(
    db: AsyncSession,
    *,
    user_id: str,
    title: str,
    text: str,
    image: str | None = None,
) -> Post:
    post = Post(user_id=user_id, title=title, text=text, image=image)
    db.add(post)
    await db.flush()
    await db.refresh(post)
    return post


async def delete_post(db: AsyncSession, post_id: str, user_id: str) -> int:
    """
    Borra solo si el post es del usuario. Likes y comentarios caen por CASCADE.
    Devuelve cuántas filas se borraron.
    """
    res = await db.execute(
        delete(Post).where(Post.id == post_id, Post.user_id == user_id)
    )
    return res.rowcount or 0


# -------------------------
# ❤️ LIKES
# -------------------------
async def list_like_post_ids(db: AsyncSession, post_ids: list[str]) -> list[str]:
    """
    Un post_id por cada fila de likes (con repetidos, para contar).
    """
    if not post_ids:
        return []
    res = await db.execute(
        select(PostLike.post_id).where(PostLike.post_id.in_(post_ids))
    )
    return [row[0] for row in res.all()]


async def list_user_like_post_ids(db: AsyncSession, user_id: str) -> set[str]:
    res = await db.execute(
        select(PostLike.post_id).where(PostLike.user_id == user_id)
    )
    return {row[0] for row in res.all()}


async def add_like(db: AsyncSession, post_id: str, user_id: str) -> PostLike:
    like = PostLike(post_id=post_id, user_id=user_id)
    db.add(like)
    await db.flush()
    return like


async def remove_like(db: AsyncSession, post_id: str, user_id: str) -> int:
    res = await db.execute(
        delete(PostLike).where(
            PostLike.post_id == post_id,
            PostLike.user_id == user_id,
        )
    )
    return res.rowcount or 0
