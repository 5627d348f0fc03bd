"""Custom exceptions and error codes.

Domain errors carry the keyed message map clients already rely on
(``{"noprofile": "..."}``, ``{"alreadyliked": "..."}``) in ``details``.
"""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"

    # Ownership errors (401)
    NOT_AUTHORIZED = "NOT_AUTHORIZED"

    # Not found errors (404)
    USER_NOT_FOUND = "USER_NOT_FOUND"
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"
    POST_NOT_FOUND = "POST_NOT_FOUND"
    COMMENT_NOT_FOUND = "COMMENT_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    ALREADY_LIKED = "ALREADY_LIKED"
    NOT_LIKED = "NOT_LIKED"

    # Conflict errors (400)
    DUPLICATE_EMAIL = "DUPLICATE_EMAIL"
    HANDLE_TAKEN = "HANDLE_TAKEN"

    # Concurrency errors (409)
    CONCURRENT_UPDATE = "CONCURRENT_UPDATE"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class FieldValidationError(AppException):
    """Input failed one or more field checks."""

    def __init__(self, errors: dict[str, str]) -> None:
        super().__init__(
            error_code=ErrorCode.VALIDATION_ERROR,
            message="Input validation failed",
            status_code=400,
            details=errors,
        )


class DuplicateEmailError(AppException):
    """Email is already registered."""

    def __init__(self, email: str) -> None:
        super().__init__(
            error_code=ErrorCode.DUPLICATE_EMAIL,
            message=f"Email already registered: {email}",
            status_code=400,
            details={"email": "Email already exists"},
        )


class UserNotFoundError(AppException):
    """No user with the given email."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.USER_NOT_FOUND,
            message="User not found",
            status_code=404,
            details={"email": "User not found"},
        )


class InvalidCredentialsError(AppException):
    """Password does not match the stored hash."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_CREDENTIALS,
            message="Password incorrect",
            status_code=400,
            details={"password": "Password incorrect"},
        )


class ProfileNotFoundError(AppException):
    """Profile not found."""

    def __init__(self, message: str = "There is no profile for this user") -> None:
        super().__init__(
            error_code=ErrorCode.PROFILE_NOT_FOUND,
            message=message,
            status_code=404,
            details={"noprofile": message},
        )


class HandleTakenError(AppException):
    """Profile handle already belongs to another profile."""

    def __init__(self, handle: str) -> None:
        super().__init__(
            error_code=ErrorCode.HANDLE_TAKEN,
            message=f"Handle already taken: {handle}",
            status_code=400,
            details={"handle": "That handle already exists"},
        )


class PostNotFoundError(AppException):
    """Post not found.

    ``key`` distinguishes the read path (``nopostfound``) from mutations
    on a missing post (``postnotfound``).
    """

    def __init__(self, post_id: str, key: str = "postnotfound") -> None:
        message = "No post found with that id" if key == "nopostfound" else "Post not found"
        super().__init__(
            error_code=ErrorCode.POST_NOT_FOUND,
            message=f"{message}: {post_id}",
            status_code=404,
            details={key: message},
        )


class NotPostOwnerError(AppException):
    """Authenticated user does not own the post."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.NOT_AUTHORIZED,
            message="User not authorized",
            status_code=401,
            details={"notauthorized": "User not authorized"},
        )


class AlreadyLikedError(AppException):
    """User already liked the post."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.ALREADY_LIKED,
            message="User already liked this post",
            status_code=400,
            details={"alreadyliked": "User already liked this post"},
        )


class NotLikedError(AppException):
    """User has not liked the post."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.NOT_LIKED,
            message="You have not yet liked this post",
            status_code=400,
            details={"notliked": "You have not yet liked this post"},
        )


class CommentNotFoundError(AppException):
    """Comment not found on the post."""

    def __init__(self, comment_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.COMMENT_NOT_FOUND,
            message=f"Comment does not exist: {comment_id}",
            status_code=404,
            details={"commentnotexists": "Comment does not exist"},
        )


class ConcurrentUpdateError(AppException):
    """Document changed between read and write."""

    def __init__(self, document_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.CONCURRENT_UPDATE,
            message="The document was modified concurrently, please retry",
            status_code=409,
            details={"id": document_id},
        )
