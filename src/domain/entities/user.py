"""User domain entity."""

import hashlib
from dataclasses import dataclass, field
from datetime import datetime
from urllib.parse import urlencode
from uuid import UUID, uuid4

GRAVATAR_BASE_URL = "https://www.gravatar.com/avatar/"


def gravatar_url(email: str, size: int = 200, rating: str = "pg", default: str = "mm") -> str:
    """Deterministic Gravatar URL for an email address."""
    digest = hashlib.md5(email.strip().lower().encode("utf-8")).hexdigest()
    query = urlencode({"s": size, "r": rating, "d": default})
    return f"{GRAVATAR_BASE_URL}{digest}?{query}"


@dataclass
class User:
    """Domain entity for a registered user.

    ``password`` always holds the bcrypt hash, never the plain text.
    """

    name: str
    email: str
    password: str
    avatar: str = ""
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        if not self.avatar:
            self.avatar = gravatar_url(self.email)


@dataclass(frozen=True, slots=True)
class UserSummary:
    """Read-only value object: the owner's public identity."""

    id: UUID
    name: str
    avatar: str
