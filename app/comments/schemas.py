# app/comments/schemas.py
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime


class CommentCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    post_id: str
    text: str = Field(min_length=1)


class CommentUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    text: str = Field(min_length=1)


class CommentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    post_id: str
    user_id: str
    text: str
    created_at: datetime
