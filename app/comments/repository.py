# app/comments/repository.py
from __future__ import annotations

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.comments.models import Comment


async def create_comment(
    db: AsyncSession,
    *,
    user_id: str,
    post_id: str,
    text: str,
) -> Comment | None:
    """
    Devuelve la fila creada tal como quedó en la DB, o None si la DB
    no la devolvió (el store lo trata como fallo).
    """
    c = Comment(user_id=user_id, post_id=post_id, text=text)
    db.add(c)
    await db.flush()
    return await db.get(Comment, c.id, populate_existing=True)


async def get_own_comment(
    db: AsyncSession, comment_id: str, user_id: str
) -> Comment | None:
    res = await db.execute(
        select(Comment).where(Comment.id == comment_id, Comment.user_id == user_id)
    )
    return res.scalar_one_or_none()


async def update_comment(
    db: AsyncSession,
    *,
    comment_id: str,
    user_id: str,
    text: str,
) -> Comment | None:
    """
    Solo el autor puede editar: si el comentario no es suyo (o no existe)
    devuelve None y no toca nada.
    """
    c = await get_own_comment(db, comment_id, user_id)
    if c is None:
        return None
    c.text = text
    await db.flush()
    await db.refresh(c)
    return c


async def delete_comment(db: AsyncSession, comment_id: str, user_id: str) -> int:
    res = await db.execute(
        delete(Comment).where(Comment.id == comment_id, Comment.user_id == user_id)
    )
    return res.rowcount or 0
