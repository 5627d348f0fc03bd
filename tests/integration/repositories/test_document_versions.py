"""Integration tests for version-checked document writes against SQLite."""

from collections.abc import Callable
from datetime import date

import pytest

from core.exceptions import ConcurrentUpdateError
from domain.entities.post import Comment, Post
from domain.entities.profile import Experience, Profile
from domain.entities.user import User
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork

UowFactory = Callable[[], SQLAlchemyUnitOfWork]


async def _create_user(uow_factory: UowFactory, email: str = "alice@example.com") -> User:
    async with uow_factory() as uow:
        user = await uow.users.create(User(name="Alice", email=email, password="hash"))
        await uow.commit()
    return user


class TestPostVersions:
    @pytest.mark.asyncio
    async def test_stale_write_is_rejected(self, uow_factory: UowFactory):
        user = await _create_user(uow_factory)
        async with uow_factory() as uow:
            post = await uow.posts.create(Post(user_id=user.id, text="Versioned post"))
            await uow.commit()

        async with uow_factory() as uow:
            first = await uow.posts.get(post.id)
        async with uow_factory() as uow:
            stale = await uow.posts.get(post.id)

        first.add_like(user.id)
        async with uow_factory() as uow:
            saved = await uow.posts.update(first)
            await uow.commit()
        assert saved.version == 2

        stale.add_comment(Comment(user_id=user.id, text="Lost update"))
        async with uow_factory() as uow:
            with pytest.raises(ConcurrentUpdateError):
                await uow.posts.update(stale)

        async with uow_factory() as uow:
            current = await uow.posts.get(post.id)
        assert current.version == 2
        assert [like.user_id for like in current.likes] == [user.id]
        assert current.comments == []

    @pytest.mark.asyncio
    async def test_comment_document_round_trip(self, uow_factory: UowFactory):
        user = await _create_user(uow_factory)
        post = Post(user_id=user.id, text="Post with a comment")
        comment = Comment(user_id=user.id, text="Stored inside the post", name="Alice")
        post.add_comment(comment)
        async with uow_factory() as uow:
            await uow.posts.create(post)
            await uow.commit()

        async with uow_factory() as uow:
            loaded = await uow.posts.get(post.id)

        assert loaded.comments == [comment]


class TestProfileVersions:
    @pytest.mark.asyncio
    async def test_experience_survives_reload(self, uow_factory: UowFactory):
        user = await _create_user(uow_factory)
        async with uow_factory() as uow:
            await uow.profiles.create(Profile(user_id=user.id, handle="alice", status="Dev"))
            await uow.commit()

        entry = Experience(title="Engineer", company="Acme", from_date=date(2020, 1, 1))
        async with uow_factory() as uow:
            profile = await uow.profiles.get_by_user(user.id)
            profile.add_experience(entry)
            await uow.profiles.update(profile)
            await uow.commit()

        async with uow_factory() as uow:
            reloaded = await uow.profiles.get_by_handle("alice")

        assert reloaded.version == 2
        assert reloaded.experience == [entry]
        assert reloaded.owner is not None
        assert reloaded.owner.name == "Alice"

    @pytest.mark.asyncio
    async def test_stale_profile_write_is_rejected(self, uow_factory: UowFactory):
        user = await _create_user(uow_factory)
        async with uow_factory() as uow:
            created = await uow.profiles.create(
                Profile(user_id=user.id, handle="alice", status="Dev")
            )
            await uow.commit()

        created.bio = "First writer"
        async with uow_factory() as uow:
            await uow.profiles.update(created)
            await uow.commit()

        created.bio = "Second writer"
        async with uow_factory() as uow:
            with pytest.raises(ConcurrentUpdateError):
                await uow.profiles.update(created)
