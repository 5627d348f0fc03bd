"""Pydantic schemas for the Profile API."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ProfileUpsert(BaseModel):
    """Schema for creating or updating a profile (only sent fields change).

    ``skills`` is a comma-separated string, a list is accepted too.
    """

    handle: str | None = None
    company: str | None = None
    website: str | None = None
    location: str | None = None
    bio: str | None = None
    status: str | None = None
    githubusername: str | None = None
    skills: str | list[str] | None = None
    youtube: str | None = None
    twitter: str | None = None
    facebook: str | None = None
    linkedin: str | None = None
    instagram: str | None = None


class ExperienceCreate(BaseModel):
    """Schema for adding an experience entry."""

    model_config = ConfigDict(populate_by_name=True)

    title: str | None = None
    company: str | None = None
    location: str | None = None
    from_: str | None = Field(None, alias="from")
    to: str | None = None
    current: bool = False
    description: str | None = None


class EducationCreate(BaseModel):
    """Schema for adding an education entry."""

    model_config = ConfigDict(populate_by_name=True)

    school: str | None = None
    degree: str | None = None
    fieldofstudy: str | None = None
    from_: str | None = Field(None, alias="from")
    to: str | None = None
    current: bool = False
    description: str | None = None


class ProfileOwner(BaseModel):
    """Owner fields joined into a profile."""

    id: UUID
    name: str
    avatar: str


class SocialLinksResponse(BaseModel):
    youtube: str | None = None
    twitter: str | None = None
    facebook: str | None = None
    linkedin: str | None = None
    instagram: str | None = None


class ExperienceResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: UUID
    title: str
    company: str
    location: str | None = None
    from_: date = Field(..., alias="from")
    to: date | None = None
    current: bool = False
    description: str | None = None


class EducationResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: UUID
    school: str
    degree: str
    fieldofstudy: str
    from_: date = Field(..., alias="from")
    to: date | None = None
    current: bool = False
    description: str | None = None


class ProfileResponse(BaseModel):
    """Schema for a profile document."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "456e4567-e89b-12d3-a456-426614174000",
                "user": {
                    "id": "123e4567-e89b-12d3-a456-426614174000",
                    "name": "Jane Doe",
                    "avatar": "https://www.gravatar.com/avatar/abc?s=200&r=pg&d=mm",
                },
                "handle": "jane",
                "status": "Developer",
                "skills": ["python", "sql"],
                "experience": [],
                "education": [],
            }
        },
    )

    id: UUID
    user: ProfileOwner | UUID
    handle: str
    status: str
    company: str | None = None
    website: str | None = None
    location: str | None = None
    bio: str | None = None
    githubusername: str | None = None
    skills: list[str]
    social: SocialLinksResponse
    experience: list[ExperienceResponse]
    education: list[EducationResponse]
    date: datetime
