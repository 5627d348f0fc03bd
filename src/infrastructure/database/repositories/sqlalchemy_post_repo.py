"""SQLAlchemy implementation of Post repository."""

from dataclasses import replace
from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import ConcurrentUpdateError
from domain.entities.post import Comment, Like, Post
from infrastructure.database.models import PostModel


def comment_to_document(comment: Comment) -> dict[str, Any]:
    return {
        "id": str(comment.id),
        "user": str(comment.user_id),
        "text": comment.text,
        "name": comment.name,
        "avatar": comment.avatar,
        "date": comment.created_at.isoformat(),
    }


def comment_from_document(doc: dict[str, Any]) -> Comment:
    return Comment(
        id=UUID(doc["id"]),
        user_id=UUID(doc["user"]),
        text=doc["text"],
        name=doc.get("name"),
        avatar=doc.get("avatar"),
        created_at=datetime.fromisoformat(doc["date"]),
    )


class SQLAlchemyPostRepository:
    """SQLAlchemy implementation of IPostRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Post | None:
        """Get a post by ID."""
        stmt = (
            select(PostModel)
            .where(PostModel.id == id)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_all(self) -> list[Post]:
        """Get all posts, newest first."""
        stmt = select(PostModel).order_by(PostModel.created_at.desc())
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def create(self, post: Post) -> Post:
        """Create a new post."""
        model = self._to_model(post)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, post: Post) -> Post:
        """Conditional whole-document write keyed on the version read earlier."""
        stmt = (
            update(PostModel)
            .where(PostModel.id == post.id, PostModel.version == post.version)
            .values(
                text=post.text,
                name=post.name,
                avatar=post.avatar,
                likes=[{"user": str(like.user_id)} for like in post.likes],
                comments=[comment_to_document(c) for c in post.comments],
                version=post.version + 1,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        if result.rowcount == 0:
            raise ConcurrentUpdateError(str(post.id))
        return replace(post, version=post.version + 1)

    async def delete(self, id: UUID) -> bool:
        """Delete a post and return success status."""
        stmt = delete(PostModel).where(PostModel.id == id)
        result = await self._session.execute(stmt)
        return bool(result.rowcount)

    async def delete_by_user(self, user_id: UUID) -> int:
        """Delete every post a user wrote."""
        stmt = delete(PostModel).where(PostModel.user_id == user_id)
        result = await self._session.execute(stmt)
        return result.rowcount or 0

    def _to_entity(self, model: PostModel) -> Post:
        """Convert ORM model to domain entity."""
        return Post(
            id=model.id,
            user_id=model.user_id,
            text=model.text,
            name=model.name,
            avatar=model.avatar,
            likes=[Like(user_id=UUID(doc["user"])) for doc in model.likes or []],
            comments=[comment_from_document(doc) for doc in model.comments or []],
            created_at=model.created_at,
            version=model.version,
        )

    def _to_model(self, entity: Post) -> PostModel:
        """Convert domain entity to ORM model."""
        return PostModel(
            id=entity.id,
            user_id=entity.user_id,
            text=entity.text,
            name=entity.name,
            avatar=entity.avatar,
            likes=[{"user": str(like.user_id)} for like in entity.likes],
            comments=[comment_to_document(c) for c in entity.comments],
            created_at=entity.created_at,
            version=entity.version,
        )
