"""Profile service layer with business logic."""

from collections.abc import Callable, Mapping
from datetime import date, datetime
from typing import Any
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError

from core.exceptions import (
    ConcurrentUpdateError,
    FieldValidationError,
    HandleTakenError,
    ProfileNotFoundError,
)
from domain.entities.profile import SOCIAL_NETWORKS, Education, Experience, Profile, SocialLinks
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.auth_service import require_account
from domain.services.retry import MAX_UPDATE_ATTEMPTS, backoff
from domain.validators import (
    parse_id,
    validate_education_input,
    validate_experience_input,
    validate_profile_input,
)

logger = structlog.get_logger()

# Optional free-text profile fields copied over when present in the request
PROFILE_TEXT_FIELDS = (
    "handle",
    "company",
    "website",
    "location",
    "bio",
    "status",
    "githubusername",
)


def _parse_date(value: Any) -> date | None:
    if not value:
        return None
    return datetime.fromisoformat(str(value)).date()


def _parse_skills(value: Any) -> list[str]:
    items = value if isinstance(value, (list, tuple)) else str(value).split(",")
    return [skill.strip() for skill in map(str, items) if skill.strip()]


def _clean(data: Mapping[str, Any], key: str) -> str | None:
    value = str(data.get(key) or "").strip()
    return value or None


def _present(data: Mapping[str, Any], keys: tuple[str, ...]) -> dict[str, str]:
    """Trimmed values of the keys that were sent with non-blank content."""
    present: dict[str, str] = {}
    for key in keys:
        value = _clean(data, key)
        if value:
            present[key] = value
    return present


class ProfileService:
    """Service layer for Profile business logic."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def get_for_user(self, user_id: UUID | str) -> Profile:
        """Get a user's profile with the owner's name and avatar joined in."""
        parsed = parse_id(user_id)
        profile = None
        if parsed:
            async with self._uow_factory() as uow:
                profile = await uow.profiles.get_by_user(parsed)
        if not profile:
            raise ProfileNotFoundError()
        return profile

    async def get_by_handle(self, handle: str) -> Profile:
        """Get a profile by its public handle."""
        async with self._uow_factory() as uow:
            profile = await uow.profiles.get_by_handle(handle)
        if not profile:
            raise ProfileNotFoundError()
        return profile

    async def get_all(self) -> list[Profile]:
        """Get every profile. An empty collection is reported as not found."""
        async with self._uow_factory() as uow:
            profiles = await uow.profiles.get_all()
        if not profiles:
            raise ProfileNotFoundError("There are no profiles")
        return profiles  # type: ignore[no-any-return]

    async def upsert(self, user_id: UUID, data: Mapping[str, Any]) -> Profile:
        """Create the user's profile, or update only the fields present in ``data``.

        Raises:
            FieldValidationError: if the form is invalid
            HandleTakenError: if the handle belongs to another profile
            AuthenticationError: if a new profile is requested for a deleted account
        """
        result = validate_profile_input(data)
        if not result.is_valid:
            raise FieldValidationError(result.errors)

        fields = _present(data, PROFILE_TEXT_FIELDS)
        skills = _parse_skills(data["skills"]) if data.get("skills") is not None else None
        social = _present(data, SOCIAL_NETWORKS)

        async with self._uow_factory() as uow:
            existing = await uow.profiles.get_by_user(user_id)

        if existing:
            return await self._update_fields(user_id, fields, skills, social)

        async with self._uow_factory() as uow:
            await require_account(uow, user_id)
            if await uow.profiles.get_by_handle(fields["handle"]):
                raise HandleTakenError(fields["handle"])

            profile = Profile(
                user_id=user_id,
                handle=fields["handle"],
                status=fields["status"],
                company=fields.get("company"),
                website=fields.get("website"),
                location=fields.get("location"),
                bio=fields.get("bio"),
                githubusername=fields.get("githubusername"),
                skills=skills or [],
                social=SocialLinks(**social),
            )
            try:
                created = await uow.profiles.create(profile)
                await uow.commit()
            except IntegrityError as e:
                # A concurrent request took the handle (or created this user's profile)
                raise HandleTakenError(fields["handle"]) from e

        logger.info("profile_created", user_id=str(user_id), handle=created.handle)
        return created

    async def _update_fields(
        self,
        user_id: UUID,
        fields: dict[str, str],
        skills: list[str] | None,
        social: dict[str, str],
    ) -> Profile:
        handle = fields.get("handle")

        async def check_handle(uow: IUnitOfWork, profile: Profile) -> None:
            if handle and handle != profile.handle:
                other = await uow.profiles.get_by_handle(handle)
                if other and other.user_id != user_id:
                    raise HandleTakenError(handle)

        def apply(profile: Profile) -> None:
            for key, value in fields.items():
                setattr(profile, key, value)
            if skills is not None:
                profile.skills = skills
            for key, value in social.items():
                setattr(profile.social, key, value)

        return await self._mutate(user_id, apply, precheck=check_handle)

    async def add_experience(self, user_id: UUID, data: Mapping[str, Any]) -> Profile:
        """Prepend an experience entry to the user's profile."""
        result = validate_experience_input(data)
        if not result.is_valid:
            raise FieldValidationError(result.errors)

        current = bool(data.get("current"))
        entry = Experience(
            title=str(data["title"]).strip(),
            company=str(data["company"]).strip(),
            location=_clean(data, "location"),
            from_date=_parse_date(data["from"]),  # type: ignore[arg-type]
            to_date=None if current else _parse_date(data.get("to")),
            current=current,
            description=_clean(data, "description"),
        )
        return await self._mutate(user_id, lambda profile: profile.add_experience(entry))

    async def add_education(self, user_id: UUID, data: Mapping[str, Any]) -> Profile:
        """Prepend an education entry to the user's profile."""
        result = validate_education_input(data)
        if not result.is_valid:
            raise FieldValidationError(result.errors)

        current = bool(data.get("current"))
        entry = Education(
            school=str(data["school"]).strip(),
            degree=str(data["degree"]).strip(),
            fieldofstudy=str(data["fieldofstudy"]).strip(),
            from_date=_parse_date(data["from"]),  # type: ignore[arg-type]
            to_date=None if current else _parse_date(data.get("to")),
            current=current,
            description=_clean(data, "description"),
        )
        return await self._mutate(user_id, lambda profile: profile.add_education(entry))

    async def remove_experience(self, user_id: UUID, experience_id: UUID | str) -> Profile:
        """Remove an experience entry. Unknown or malformed ids are a no-op."""
        entry_id = parse_id(experience_id)

        def apply(profile: Profile) -> None:
            if entry_id:
                profile.remove_experience(entry_id)

        return await self._mutate(user_id, apply)

    async def remove_education(self, user_id: UUID, education_id: UUID | str) -> Profile:
        """Remove an education entry. Unknown or malformed ids are a no-op."""
        entry_id = parse_id(education_id)

        def apply(profile: Profile) -> None:
            if entry_id:
                profile.remove_education(entry_id)

        return await self._mutate(user_id, apply)

    async def delete_account(self, user_id: UUID) -> None:
        """Delete the user's profile, posts and account in one transaction."""
        async with self._uow_factory() as uow:
            await uow.profiles.delete_by_user(user_id)
            removed_posts = await uow.posts.delete_by_user(user_id)
            await uow.users.delete(user_id)
            await uow.commit()

        logger.info("account_deleted", user_id=str(user_id), removed_posts=removed_posts)

    async def _mutate(
        self,
        user_id: UUID,
        mutation: Callable[[Profile], Any],
        precheck: Callable[[IUnitOfWork, Profile], Any] | None = None,
    ) -> Profile:
        """Read-modify-write the user's profile, re-reading on a version conflict."""
        attempt = 0
        while True:
            attempt += 1
            async with self._uow_factory() as uow:
                profile = await uow.profiles.get_by_user(user_id)
                if not profile:
                    raise ProfileNotFoundError()
                if precheck:
                    await precheck(uow, profile)

                mutation(profile)
                try:
                    saved = await uow.profiles.update(profile)
                except ConcurrentUpdateError:
                    await uow.rollback()
                    if attempt >= MAX_UPDATE_ATTEMPTS:
                        raise
                    logger.info(
                        "concurrent_update_retry",
                        profile_id=str(profile.id),
                        attempt=attempt,
                    )
                except IntegrityError as e:
                    raise HandleTakenError(profile.handle) from e
                else:
                    await uow.commit()
                    return saved  # type: ignore[no-any-return]

            await backoff(attempt)
