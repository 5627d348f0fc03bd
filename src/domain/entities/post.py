"""Post domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

from domain.entities.profile import index_of


@dataclass
class Like:
    """A user's like on a post."""

    user_id: UUID


@dataclass
class Comment:
    """A comment embedded in a post."""

    user_id: UUID
    text: str
    name: str | None = None
    avatar: str | None = None
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class Post:
    """Domain entity for a feed post."""

    user_id: UUID
    text: str
    name: str | None = None
    avatar: str | None = None
    id: UUID = field(default_factory=uuid4)
    likes: list[Like] = field(default_factory=list)
    comments: list[Comment] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.utcnow)
    version: int = 1

    def is_liked_by(self, user_id: UUID) -> bool:
        return any(like.user_id == user_id for like in self.likes)

    def add_like(self, user_id: UUID) -> None:
        self.likes.insert(0, Like(user_id=user_id))

    def remove_like(self, user_id: UUID) -> bool:
        """Remove the user's like. Returns False when there was none."""
        for index, like in enumerate(self.likes):
            if like.user_id == user_id:
                del self.likes[index]
                return True
        return False

    def add_comment(self, comment: Comment) -> None:
        self.comments.insert(0, comment)

    def remove_comment(self, comment_id: UUID) -> bool:
        """Remove the comment by id. Returns False when it does not exist."""
        index = index_of(self.comments, comment_id)
        if index < 0:
            return False
        del self.comments[index]
        return True
