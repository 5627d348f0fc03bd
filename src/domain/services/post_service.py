"""Post service layer with business logic."""

from collections.abc import Callable, Mapping
from typing import Any
from uuid import UUID

import structlog

from core.exceptions import (
    AlreadyLikedError,
    CommentNotFoundError,
    ConcurrentUpdateError,
    FieldValidationError,
    NotLikedError,
    NotPostOwnerError,
    PostNotFoundError,
)
from domain.entities.post import Comment, Post
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.auth_service import require_account
from domain.services.retry import MAX_UPDATE_ATTEMPTS, backoff
from domain.validators import parse_id, validate_post_input

logger = structlog.get_logger()


class PostService:
    """Service layer for the post feed, likes and comments.

    Post and comment ids arrive as raw path segments; one that is not a
    UUID cannot name a stored document and is reported as not found.
    """

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def get_all(self) -> list[Post]:
        """Get all posts, newest first."""
        async with self._uow_factory() as uow:
            return await uow.posts.get_all()  # type: ignore[no-any-return]

    async def get_by_id(self, post_id: UUID | str) -> Post:
        """Get a single post."""
        parsed = parse_id(post_id)
        post = None
        if parsed:
            async with self._uow_factory() as uow:
                post = await uow.posts.get(parsed)
        if not post:
            raise PostNotFoundError(str(post_id), key="nopostfound")
        return post

    async def create(
        self,
        user_id: UUID,
        data: Mapping[str, Any],
        name: str | None = None,
        avatar: str | None = None,
    ) -> Post:
        """Create a post. ``name``/``avatar`` in ``data`` win over the given defaults.

        Raises:
            FieldValidationError: if the text is missing or out of bounds
            AuthenticationError: if the token's account was deleted
        """
        result = validate_post_input(data)
        if not result.is_valid:
            raise FieldValidationError(result.errors)

        post = Post(
            user_id=user_id,
            text=str(data["text"]),
            name=data.get("name") or name,
            avatar=data.get("avatar") or avatar,
        )
        async with self._uow_factory() as uow:
            await require_account(uow, user_id)
            created = await uow.posts.create(post)
            await uow.commit()

        logger.info("post_created", post_id=str(created.id), user_id=str(user_id))
        return created

    async def delete(self, post_id: UUID | str, user_id: UUID) -> None:
        """Delete a post owned by ``user_id``.

        Raises:
            PostNotFoundError: if the post does not exist
            NotPostOwnerError: if the post belongs to someone else
        """
        parsed = parse_id(post_id)
        if not parsed:
            raise PostNotFoundError(str(post_id))

        async with self._uow_factory() as uow:
            post = await uow.posts.get(parsed)
            if not post:
                raise PostNotFoundError(str(post_id))
            if post.user_id != user_id:
                raise NotPostOwnerError()

            await uow.posts.delete(parsed)
            await uow.commit()

        logger.info("post_deleted", post_id=str(parsed), user_id=str(user_id))

    async def like(self, post_id: UUID | str, user_id: UUID) -> Post:
        """Add the user's like to the head of the likes list."""

        def apply(post: Post) -> None:
            if post.is_liked_by(user_id):
                raise AlreadyLikedError()
            post.add_like(user_id)

        return await self._mutate(post_id, apply)

    async def unlike(self, post_id: UUID | str, user_id: UUID) -> Post:
        """Remove the user's like."""

        def apply(post: Post) -> None:
            if not post.remove_like(user_id):
                raise NotLikedError()

        return await self._mutate(post_id, apply)

    async def add_comment(
        self,
        post_id: UUID | str,
        user_id: UUID,
        data: Mapping[str, Any],
        name: str | None = None,
        avatar: str | None = None,
    ) -> Post:
        """Prepend a comment to the post."""
        result = validate_post_input(data)
        if not result.is_valid:
            raise FieldValidationError(result.errors)

        comment = Comment(
            user_id=user_id,
            text=str(data["text"]),
            name=data.get("name") or name,
            avatar=data.get("avatar") or avatar,
        )
        return await self._mutate(post_id, lambda post: post.add_comment(comment))

    async def remove_comment(self, post_id: UUID | str, comment_id: UUID | str) -> Post:
        """Remove a comment by id."""
        parsed_comment = parse_id(comment_id)

        def apply(post: Post) -> None:
            if not parsed_comment or not post.remove_comment(parsed_comment):
                raise CommentNotFoundError(str(comment_id))

        return await self._mutate(post_id, apply)

    async def _mutate(self, post_id: UUID | str, mutation: Callable[[Post], Any]) -> Post:
        """Read-modify-write a post, re-reading on a version conflict."""
        parsed = parse_id(post_id)
        if not parsed:
            raise PostNotFoundError(str(post_id))

        attempt = 0
        while True:
            attempt += 1
            async with self._uow_factory() as uow:
                post = await uow.posts.get(parsed)
                if not post:
                    raise PostNotFoundError(str(post_id))

                mutation(post)
                try:
                    saved = await uow.posts.update(post)
                except ConcurrentUpdateError:
                    await uow.rollback()
                    if attempt >= MAX_UPDATE_ATTEMPTS:
                        raise
                    logger.info(
                        "concurrent_update_retry",
                        post_id=str(parsed),
                        attempt=attempt,
                    )
                else:
                    await uow.commit()
                    return saved  # type: ignore[no-any-return]

            await backoff(attempt)
