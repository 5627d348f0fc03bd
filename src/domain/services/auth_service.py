"""Registration, login and current-user lookups."""

from collections.abc import Callable, Mapping
from typing import Any
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError

from core.exceptions import (
    AuthenticationError,
    DuplicateEmailError,
    FieldValidationError,
    InvalidCredentialsError,
    UserNotFoundError,
)
from domain.entities.user import User
from domain.repositories.unit_of_work import IUnitOfWork
from domain.validators import validate_login_input, validate_register_input
from infrastructure.auth.provider import IAuthProvider, IPasswordHasher, TokenUser

logger = structlog.get_logger()


async def require_account(uow: IUnitOfWork, user_id: UUID) -> User:
    """Load the account behind a verified token.

    A valid token can outlive its account (it is not revoked on delete), so a
    missing user is an authentication failure rather than a 404.
    """
    user = await uow.users.get(user_id)
    if not user:
        raise AuthenticationError(message="User no longer exists")
    return user  # type: ignore[no-any-return]


class AuthService:
    """Service layer for user accounts and credentials."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        auth_provider: IAuthProvider,
        password_hasher: IPasswordHasher,
    ) -> None:
        self._uow_factory = uow_factory
        self._auth_provider = auth_provider
        self._hasher = password_hasher

    async def register(self, data: Mapping[str, Any]) -> User:
        """Create a user from a registration form.

        Raises:
            FieldValidationError: if the form is invalid
            DuplicateEmailError: if the email is already registered
        """
        result = validate_register_input(data)
        if not result.is_valid:
            raise FieldValidationError(result.errors)

        email = str(data["email"]).strip()
        async with self._uow_factory() as uow:
            if await uow.users.get_by_email(email):
                raise DuplicateEmailError(email)

            user = User(
                name=str(data["name"]).strip(),
                email=email,
                password=self._hasher.hash(str(data["password"])),
            )
            try:
                created = await uow.users.create(user)
                await uow.commit()
            except IntegrityError as e:
                # Lost a race against a concurrent registration
                raise DuplicateEmailError(email) from e

        logger.info("user_registered", user_id=str(created.id))
        return created

    async def login(self, data: Mapping[str, Any]) -> str:
        """Check credentials and return a signed token.

        Raises:
            FieldValidationError: if the form is invalid
            UserNotFoundError: if no user has that email
            InvalidCredentialsError: if the password does not match
        """
        result = validate_login_input(data)
        if not result.is_valid:
            raise FieldValidationError(result.errors)

        async with self._uow_factory() as uow:
            user = await uow.users.get_by_email(str(data["email"]))

        if not user:
            raise UserNotFoundError()
        if not self._hasher.verify(str(data["password"]), user.password):
            logger.info("login_rejected", user_id=str(user.id))
            raise InvalidCredentialsError()

        return self._auth_provider.create_token(
            TokenUser(id=user.id, name=user.name, avatar=user.avatar)
        )

    async def get_user(self, user_id: UUID) -> User:
        """Get the account behind a verified token."""
        async with self._uow_factory() as uow:
            return await require_account(uow, user_id)
