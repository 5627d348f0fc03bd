"""Dependency injection factories for the resource services."""

from functools import lru_cache
from typing import Callable

from fastapi import Depends

from api.dependencies.auth import get_auth_provider
from core.config import settings
from domain.services.auth_service import AuthService
from domain.services.post_service import PostService
from domain.services.profile_service import ProfileService
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.password import BcryptPasswordHasher
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_password_hasher() -> BcryptPasswordHasher:
    """Get the password hasher instance."""
    return BcryptPasswordHasher(rounds=settings.bcrypt_rounds)


def get_auth_service(
    auth_provider: JWTAuthProvider = Depends(get_auth_provider),
) -> AuthService:
    """Get Auth service bound to the current token provider."""
    return AuthService(get_uow_factory(), auth_provider, get_password_hasher())


@lru_cache
def get_profile_service() -> ProfileService:
    """Get Profile service instance."""
    return ProfileService(get_uow_factory())


@lru_cache
def get_post_service() -> PostService:
    """Get Post service instance."""
    return PostService(get_uow_factory())
