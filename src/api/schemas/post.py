"""Pydantic schemas for the Posts API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class PostCreate(BaseModel):
    """Schema for creating a post or a comment.

    ``name`` and ``avatar`` default to the caller's token claims.
    """

    text: str | None = None
    name: str | None = None
    avatar: str | None = None


class LikeResponse(BaseModel):
    user: UUID


class CommentResponse(BaseModel):
    id: UUID
    user: UUID
    text: str
    name: str | None = None
    avatar: str | None = None
    date: datetime


class PostResponse(BaseModel):
    """Schema for a post document."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "789e4567-e89b-12d3-a456-426614174000",
                "user": "123e4567-e89b-12d3-a456-426614174000",
                "text": "Hello world!",
                "name": "Jane Doe",
                "avatar": "https://www.gravatar.com/avatar/abc?s=200&r=pg&d=mm",
                "likes": [],
                "comments": [],
                "date": "2026-01-28T10:00:00",
            }
        },
    )

    id: UUID
    user: UUID
    text: str
    name: str | None = None
    avatar: str | None = None
    likes: list[LikeResponse]
    comments: list[CommentResponse]
    date: datetime
