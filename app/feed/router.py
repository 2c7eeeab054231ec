# app/feed/router.py
from typing import List

from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Request,
    Response,
)

from app.feed.schemas import FeedState, LikeOut, PostCreate, PostOut
from app.feed.store import FeedStore

router = APIRouter(
    prefix="/api/feed",
    tags=["feed"],
)


def get_feed_store(request: Request) -> FeedStore:
    """
    El store vive en app.state (se crea en el startup).
    En tests se reemplaza con dependency_overrides.
    """
    return request.app.state.feed_store


@router.get("/", response_model=List[PostOut])
async def feed_list(store: FeedStore = Depends(get_feed_store)):
    await store.fetch_posts()
    return store.posts


@router.get("/state/", response_model=FeedState)
async def feed_state(store: FeedStore = Depends(get_feed_store)):
    """Estado local tal cual, sin ir a la DB."""
    return store.snapshot()


@router.post("/", response_model=PostOut, status_code=201)
async def publish(
    payload: PostCreate,
    store: FeedStore = Depends(get_feed_store),
):
    """
    Publicar un post. Si image es un data URL se sube primero al bucket.
    """
    return await store.add_post(payload)


@router.delete("/{post_id}/", status_code=204)
async def delete_post_endpoint(
    post_id: str,
    store: FeedStore = Depends(get_feed_store),
):
    """
    Solo el autor puede borrar; si no existe o no es suyo → 404.
    """
    deleted = await store.remove_post(post_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="post not found")
    return Response(status_code=204)


@router.post("/{post_id}/like/", response_model=LikeOut)
async def toggle_like_on_post(
    post_id: str,
    store: FeedStore = Depends(get_feed_store),
):
    post = await store.toggle_like(post_id)
    if post is None:
        raise HTTPException(status_code=404, detail="post not found")
    return LikeOut(
        post_id=post.id,
        likes_count=post.likes_count,
        is_liked=post.is_liked,
    )
