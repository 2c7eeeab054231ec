# app/feed/store.py
"""
Store del feed: lista de posts en memoria + flag de loading.

Cada operación hace 1..n llamadas a la DB y luego reemplaza el estado
completo (nunca se muta una lista en sitio). Los suscriptores se enteran
de cada cambio, igual que un componente que se re-renderiza.
"""
import time
import logging
from collections import Counter
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.config import settings
from app.feed import repository as feed_repo
from app.comments import repository as comments_repo
from app.feed.errors import (
    CommentError,
    CommentNotFoundError,
    ImageUploadError,
    LikeError,
    StorageError,
)
from app.feed.models import Post
from app.feed.schemas import FeedState, PostCreate, PostOut
from app.comments.schemas import CommentOut
from app.media.storage import PostImageBucket, decode_data_url, is_data_url

log = logging.getLogger("uvicorn")

Listener = Callable[["FeedStore"], None]


def _post_out(
    post: Post,
    *,
    likes_count: int = 0,
    is_liked: bool = False,
    comments: list[CommentOut] | None = None,
) -> PostOut:
    return PostOut(
        id=post.id,
        user_id=post.user_id,
        title=post.title,
        text=post.text,
        image=post.image,
        created_at=post.created_at,
        likes_count=likes_count,
        is_liked=is_liked,
        comments=comments or [],
    )


def _has_comment(post: PostOut, comment_id: str) -> bool:
    return any(c.id == comment_id for c in post.comments)


class FeedStore:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        bucket: PostImageBucket,
        user_id: str = settings.FIXED_USER_ID,
    ):
        self._session_factory = session_factory
        self.bucket = bucket
        self.user_id = user_id

        self.posts: list[PostOut] = []
        self.loading: bool = False
        self._listeners: list[Listener] = []

    # -------------------------
    # estado / suscripción
    # -------------------------
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set(self, **changes) -> None:
        for key, value in changes.items():
            setattr(self, key, value)
        for listener in list(self._listeners):
            listener(self)

    def snapshot(self) -> FeedState:
        return FeedState(posts=list(self.posts), loading=self.loading)

    def get_post(self, post_id: str) -> PostOut | None:
        return next((p for p in self.posts if p.id == post_id), None)

    # -------------------------
    # POSTS
    # -------------------------
    async def fetch_posts(self) -> None:
        """
        Carga todo el feed y calcula likes_count / is_liked a partir de la
        tabla likes. Si algo falla, la lista local queda como estaba.
        """
        self._set(loading=True)
        try:
            async with self._session_factory() as db:
                rows = await feed_repo.list_posts_with_comments(db)
                like_post_ids = await feed_repo.list_like_post_ids(
                    db, [p.id for p in rows]
                )
                user_liked = await feed_repo.list_user_like_post_ids(db, self.user_id)

            likes_count = Counter(like_post_ids)
            posts = [
                _post_out(
                    p,
                    likes_count=likes_count.get(p.id, 0),
                    is_liked=p.id in user_liked,
                    comments=[CommentOut.model_validate(c) for c in p.comments],
                )
                for p in rows
            ]
            self._set(posts=posts)
        except Exception as e:
            log.error(f"❌ Error fetching posts: {e!r}")
            raise
        finally:
            self._set(loading=False)

    def _upload_inline_image(self, data_url: str) -> str:
        """
        Sube el data URL al bucket como '<epoch-ms>.<ext>' y devuelve la URL pública.
        """
        try:
            data, mime, ext = decode_data_url(data_url)
            filename = f"{int(time.time() * 1000)}.{ext}"
            log.info(f"🖼️ Uploading image: {filename} ({mime}, {len(data)} bytes)")
            path = self.bucket.upload(filename, data, mime)
            url = self.bucket.get_public_url(filename)
            log.info(f"✅ Upload successful: {path} → {url}")
            return url
        except (ValueError, StorageError) as e:
            log.error(f"❌ Image upload failed: {e!r}")
            raise ImageUploadError(f"Image upload failed: {e}") from e

    async def add_post(self, data: PostCreate) -> PostOut:
        """
        title/text ya vienen validados por PostCreate; aquí no se revalida.
        """
        try:
            image = data.image
            if is_data_url(image):
                image = self._upload_inline_image(image)

            async with self._session_factory() as db:
                post = await feed_repo.create_post(
                    db,
                    user_id=self.user_id,
                    title=data.title,
                    text=data.text,
                    image=image,
                )
                await db.commit()
            created = _post_out(post)
        except Exception as e:
            log.error(f"❌ Error adding post: {e!r}")
            raise

        self._set(posts=[created, *self.posts])
        return created

    def _discard_image(self, url: str) -> None:
        # best-effort: si falla, el post igual ya no existe
        try:
            self.bucket.remove([self.bucket.object_name(url)])
        except (StorageError, OSError) as e:
            log.warning(f"⚠️ No se pudo borrar la imagen {url}: {e!r}")

    async def remove_post(self, post_id: str) -> int:
        """
        Borra el post del usuario. Devuelve cuántas filas se borraron:
        0 = no existe o no es tuyo, y el estado local no se toca.
        """
        post = self.get_post(post_id)
        try:
            async with self._session_factory() as db:
                deleted = await feed_repo.delete_post(db, post_id, self.user_id)
                await db.commit()
        except Exception as e:
            log.error(f"❌ Error removing post: {e!r}")
            raise

        if not deleted:
            log.warning(f"⚠️ Post {post_id} no borrado en DB (no existe o no es tuyo)")
            return 0

        if post and self.bucket.is_hosted(post.image):
            self._discard_image(post.image)

        self._set(posts=[p for p in self.posts if p.id != post_id])
        return deleted

    # -------------------------
    # ❤️ LIKES
    # -------------------------
    async def toggle_like(self, post_id: str) -> PostOut | None:
        """
        Like optimista: se invierte el estado local ANTES de ir a la DB.
        Si la DB falla no se revierte a mano: se recarga todo el feed
        (fetch_posts) y se relanza el error.
        """
        post = self.get_post(post_id)
        if post is None:
            log.error(f"❌ Post not found: {post_id}")
            return None

        was_liked = post.is_liked
        self._set(
            posts=[
                p.model_copy(
                    update={
                        "is_liked": not p.is_liked,
                        "likes_count": p.likes_count - 1 if p.is_liked else p.likes_count + 1,
                    }
                )
                if p.id == post_id
                else p
                for p in self.posts
            ]
        )

        try:
            async with self._session_factory() as db:
                if was_liked:
                    await feed_repo.remove_like(db, post_id, self.user_id)
                else:
                    await feed_repo.add_like(db, post_id, self.user_id)
                await db.commit()
        except Exception as e:
            action = "unlike" if was_liked else "like"
            log.error(f"❌ Error toggling like ({action}) on {post_id}: {e!r}")
            error = LikeError(f"Failed to {action} post: {e}")
            await self.fetch_posts()
            raise error from e

        return self.get_post(post_id)

    # -------------------------
    # 💬 COMMENTS
    # -------------------------
    async def add_comment(self, post_id: str, text: str) -> CommentOut:
        try:
            async with self._session_factory() as db:
                c = await comments_repo.create_comment(
                    db, user_id=self.user_id, post_id=post_id, text=text
                )
                if c is None:
                    raise CommentError("Failed to create comment")
                await db.commit()
                comment = CommentOut.model_validate(c)
        except Exception as e:
            log.error(f"❌ Error adding comment: {e!r}")
            raise

        self._set(
            posts=[
                p.model_copy(update={"comments": [*p.comments, comment]})
                if p.id == post_id
                else p
                for p in self.posts
            ]
        )
        return comment

    async def update_comment(self, comment_id: str, text: str) -> CommentOut:
        try:
            async with self._session_factory() as db:
                c = await comments_repo.update_comment(
                    db, comment_id=comment_id, user_id=self.user_id, text=text
                )
                if c is None:
                    raise CommentNotFoundError(
                        "Comment not found or no permission to update"
                    )
                await db.commit()
                comment = CommentOut.model_validate(c)
        except Exception as e:
            log.error(f"❌ Error updating comment: {e!r}")
            raise

        # los ids de comentario son UUID globales: basta buscar por id
        self._set(
            posts=[
                p.model_copy(
                    update={
                        "comments": [
                            comment if c.id == comment_id else c for c in p.comments
                        ]
                    }
                )
                if _has_comment(p, comment_id)
                else p
                for p in self.posts
            ]
        )
        return comment

    async def delete_comment(self, comment_id: str) -> None:
        try:
            async with self._session_factory() as db:
                await comments_repo.delete_comment(db, comment_id, self.user_id)
                await db.commit()
        except Exception as e:
            log.error(f"❌ Error deleting comment: {e!r}")
            raise

        self._set(
            posts=[
                p.model_copy(
                    update={"comments": [c for c in p.comments if c.id != comment_id]}
                )
                if _has_comment(p, comment_id)
                else p
                for p in self.posts
            ]
        )
