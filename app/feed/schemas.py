# app/feed/schemas.py
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime

from app.comments.schemas import CommentOut


class PostCreate(BaseModel):
    """
    Payload del formulario "Create".
    title y text son obligatorios: si vienen vacíos ni se llama al store.
    image puede ser una URL o un data URL (data:image/png;base64,...).
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=255)
    text: str = Field(min_length=1)
    image: str | None = None


class PostOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    title: str
    text: str
    image: str | None = None
    created_at: datetime

    # derivados en cliente a partir de la tabla likes
    likes_count: int = 0
    is_liked: bool = False

    comments: list[CommentOut] = []


class LikeOut(BaseModel):
    post_id: str
    likes_count: int
    is_liked: bool


class FeedState(BaseModel):
    posts: list[PostOut]
    loading: bool
