#app/comments/router.py
from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from app.comments.schemas import CommentCreate, CommentOut, CommentUpdate
from app.feed.router import get_feed_store
from app.feed.store import FeedStore

router = APIRouter(prefix="/api/comments", tags=["comments"])


@router.post("/", response_model=CommentOut, status_code=201)
async def create_comment_endpoint(
    payload: CommentCreate,
    store: FeedStore = Depends(get_feed_store),
):
    return await store.add_comment(payload.post_id, payload.text)


@router.patch("/{comment_id}/", response_model=CommentOut)
async def update_comment_endpoint(
    comment_id: str,
    payload: CommentUpdate,
    store: FeedStore = Depends(get_feed_store),
):
    """
    Solo el autor puede editar; si no → 404 (no se distingue de "no existe").
    """
    return await store.update_comment(comment_id, payload.text)


@router.delete("/{comment_id}/", status_code=204)
async def delete_comment_endpoint(
    comment_id: str,
    store: FeedStore = Depends(get_feed_store),
):
    await store.delete_comment(comment_id)
    return Response(status_code=204)
