"""Profile repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.profile import Profile


class IProfileRepository(Protocol):
    """Repository interface for Profile documents.

    Read methods join the owner's name and avatar into ``Profile.owner``.
    """

    async def get_by_user(self, user_id: UUID) -> Profile | None:
        """Get the profile owned by a user."""
        ...

    async def get_by_handle(self, handle: str) -> Profile | None:
        """Get a profile by its public handle."""
        ...

    async def get_all(self) -> list[Profile]:
        """Get every profile."""
        ...

    async def create(self, profile: Profile) -> Profile:
        """Create a new profile."""
        ...

    async def update(self, profile: Profile) -> Profile:
        """Save the whole document if nobody changed it since it was read.

        Raises:
            ConcurrentUpdateError: if the stored version differs from
                ``profile.version``
        """
        ...

    async def delete_by_user(self, user_id: UUID) -> bool:
        """Delete the profile owned by a user."""
        ...
