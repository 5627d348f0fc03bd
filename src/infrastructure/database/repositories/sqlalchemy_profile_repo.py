"""SQLAlchemy implementation of Profile repository."""

from dataclasses import asdict, replace
from datetime import date
from typing import Any
from uuid import UUID

from sqlalchemy import Select, delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import ConcurrentUpdateError
from domain.entities.profile import Education, Experience, Profile, SocialLinks
from domain.entities.user import UserSummary
from infrastructure.database.models import ProfileModel, UserModel


def _date_or_none(value: str | None) -> date | None:
    return date.fromisoformat(value) if value else None


def experience_to_document(entry: Experience) -> dict[str, Any]:
    return {
        "id": str(entry.id),
        "title": entry.title,
        "company": entry.company,
        "location": entry.location,
        "from": entry.from_date.isoformat(),
        "to": entry.to_date.isoformat() if entry.to_date else None,
        "current": entry.current,
        "description": entry.description,
    }


def experience_from_document(doc: dict[str, Any]) -> Experience:
    return Experience(
        id=UUID(doc["id"]),
        title=doc["title"],
        company=doc["company"],
        location=doc.get("location"),
        from_date=date.fromisoformat(doc["from"]),
        to_date=_date_or_none(doc.get("to")),
        current=bool(doc.get("current", False)),
        description=doc.get("description"),
    )


def education_to_document(entry: Education) -> dict[str, Any]:
    return {
        "id": str(entry.id),
        "school": entry.school,
        "degree": entry.degree,
        "fieldofstudy": entry.fieldofstudy,
        "from": entry.from_date.isoformat(),
        "to": entry.to_date.isoformat() if entry.to_date else None,
        "current": entry.current,
        "description": entry.description,
    }


def education_from_document(doc: dict[str, Any]) -> Education:
    return Education(
        id=UUID(doc["id"]),
        school=doc["school"],
        degree=doc["degree"],
        fieldofstudy=doc["fieldofstudy"],
        from_date=date.fromisoformat(doc["from"]),
        to_date=_date_or_none(doc.get("to")),
        current=bool(doc.get("current", False)),
        description=doc.get("description"),
    )


class SQLAlchemyProfileRepository:
    """SQLAlchemy implementation of IProfileRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    def _joined(self) -> Select[tuple[ProfileModel, UserModel]]:
        """Profiles with their owner's row, like a populate of name/avatar."""
        return (
            select(ProfileModel, UserModel)
            .outerjoin(UserModel, UserModel.id == ProfileModel.user_id)
            .execution_options(populate_existing=True)
        )

    async def _first(self, stmt: Select[tuple[ProfileModel, UserModel]]) -> Profile | None:
        result = await self._session.execute(stmt)
        row = result.first()
        return self._to_entity(row[0], row[1]) if row else None

    async def get_by_user(self, user_id: UUID) -> Profile | None:
        """Get the profile owned by a user."""
        return await self._first(self._joined().where(ProfileModel.user_id == user_id))

    async def get_by_handle(self, handle: str) -> Profile | None:
        """Get a profile by its public handle."""
        return await self._first(self._joined().where(ProfileModel.handle == handle))

    async def get_all(self) -> list[Profile]:
        """Get every profile, oldest first."""
        stmt = self._joined().order_by(ProfileModel.created_at)
        result = await self._session.execute(stmt)
        return [self._to_entity(profile, user) for profile, user in result.all()]

    async def create(self, profile: Profile) -> Profile:
        """Create a new profile."""
        model = self._to_model(profile)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        owner = await self._session.get(UserModel, model.user_id)
        return self._to_entity(model, owner)

    async def update(self, profile: Profile) -> Profile:
        """Conditional whole-document write keyed on the version read earlier."""
        stmt = (
            update(ProfileModel)
            .where(
                ProfileModel.id == profile.id,
                ProfileModel.version == profile.version,
            )
            .values(
                handle=profile.handle,
                status=profile.status,
                company=profile.company,
                website=profile.website,
                location=profile.location,
                bio=profile.bio,
                githubusername=profile.githubusername,
                skills=list(profile.skills),
                social=asdict(profile.social),
                experience=[experience_to_document(e) for e in profile.experience],
                education=[education_to_document(e) for e in profile.education],
                version=profile.version + 1,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        if result.rowcount == 0:
            raise ConcurrentUpdateError(str(profile.id))
        return replace(profile, version=profile.version + 1)

    async def delete_by_user(self, user_id: UUID) -> bool:
        """Delete the profile owned by a user."""
        stmt = delete(ProfileModel).where(ProfileModel.user_id == user_id)
        result = await self._session.execute(stmt)
        return bool(result.rowcount)

    def _to_entity(self, model: ProfileModel, owner: UserModel | None = None) -> Profile:
        """Convert ORM model (plus joined owner) to domain entity."""
        return Profile(
            id=model.id,
            user_id=model.user_id,
            handle=model.handle,
            status=model.status,
            company=model.company,
            website=model.website,
            location=model.location,
            bio=model.bio,
            githubusername=model.githubusername,
            skills=list(model.skills or []),
            social=SocialLinks(**(model.social or {})),
            experience=[experience_from_document(d) for d in model.experience or []],
            education=[education_from_document(d) for d in model.education or []],
            created_at=model.created_at,
            version=model.version,
            owner=(
                UserSummary(id=owner.id, name=owner.name, avatar=owner.avatar)
                if owner
                else None
            ),
        )

    def _to_model(self, entity: Profile) -> ProfileModel:
        """Convert domain entity to ORM model."""
        return ProfileModel(
            id=entity.id,
            user_id=entity.user_id,
            handle=entity.handle,
            status=entity.status,
            company=entity.company,
            website=entity.website,
            location=entity.location,
            bio=entity.bio,
            githubusername=entity.githubusername,
            skills=list(entity.skills),
            social=asdict(entity.social),
            experience=[experience_to_document(e) for e in entity.experience],
            education=[education_to_document(e) for e in entity.education],
            created_at=entity.created_at,
            version=entity.version,
        )
