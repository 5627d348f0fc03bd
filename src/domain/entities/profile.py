"""Profile domain entities.

A profile is a document: experience and education entries live inside it
and are ordered most-recent-first.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Protocol, TypeVar
from uuid import UUID, uuid4

from domain.entities.user import UserSummary

SOCIAL_NETWORKS = ("youtube", "twitter", "facebook", "linkedin", "instagram")


@dataclass
class SocialLinks:
    """Named optional social network URLs."""

    youtube: str | None = None
    twitter: str | None = None
    facebook: str | None = None
    linkedin: str | None = None
    instagram: str | None = None


@dataclass
class Experience:
    """A job entry on a profile."""

    title: str
    company: str
    from_date: date
    id: UUID = field(default_factory=uuid4)
    location: str | None = None
    to_date: date | None = None
    current: bool = False
    description: str | None = None


@dataclass
class Education:
    """A school entry on a profile."""

    school: str
    degree: str
    fieldofstudy: str
    from_date: date
    id: UUID = field(default_factory=uuid4)
    to_date: date | None = None
    current: bool = False
    description: str | None = None


class _HasId(Protocol):
    id: UUID


_E = TypeVar("_E", bound=_HasId)


def index_of(entries: list[_E], entry_id: UUID) -> int:
    """Position of the entry with ``entry_id``, or -1 when absent."""
    for index, entry in enumerate(entries):
        if entry.id == entry_id:
            return index
    return -1


@dataclass
class Profile:
    """Domain entity for a user's professional profile."""

    user_id: UUID
    handle: str
    status: str
    id: UUID = field(default_factory=uuid4)
    company: str | None = None
    website: str | None = None
    location: str | None = None
    bio: str | None = None
    githubusername: str | None = None
    skills: list[str] = field(default_factory=list)
    social: SocialLinks = field(default_factory=SocialLinks)
    experience: list[Experience] = field(default_factory=list)
    education: list[Education] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.utcnow)
    version: int = 1
    owner: UserSummary | None = None

    def add_experience(self, entry: Experience) -> None:
        self.experience.insert(0, entry)

    def add_education(self, entry: Education) -> None:
        self.education.insert(0, entry)

    def remove_experience(self, entry_id: UUID) -> bool:
        """Remove the experience entry by id. Unknown ids leave the list as is."""
        index = index_of(self.experience, entry_id)
        if index < 0:
            return False
        del self.experience[index]
        return True

    def remove_education(self, entry_id: UUID) -> bool:
        """Remove the education entry by id. Unknown ids leave the list as is."""
        index = index_of(self.education, entry_id)
        if index < 0:
            return False
        del self.education[index]
        return True
