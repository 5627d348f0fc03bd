"""Password hashing with passlib."""

from typing import Any

from passlib.context import CryptContext


class BcryptPasswordHasher:
    """Salted one-way hashing backed by bcrypt."""

    def __init__(self, rounds: int | None = None) -> None:
        options: dict[str, Any] = {}
        if rounds is not None:
            options["bcrypt__rounds"] = rounds
        self._context = CryptContext(schemes=["bcrypt"], deprecated="auto", **options)

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        return self._context.verify(plain_password, hashed_password)
