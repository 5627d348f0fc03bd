"""Input validators for registration, login, profile and post forms.

Every validator takes the raw request mapping and returns a
``ValidationResult``. Absent, ``None`` and whitespace-only fields count as
empty strings, so the length and format checks never see a missing value.
When a field is both empty and too short, the "required" message wins.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import EmailStr, HttpUrl, TypeAdapter, ValidationError

from domain.entities.profile import SOCIAL_NETWORKS

_email_adapter: TypeAdapter[str] = TypeAdapter(EmailStr)
_url_adapter: TypeAdapter[HttpUrl] = TypeAdapter(HttpUrl)


@dataclass
class ValidationResult:
    """Field -> message map plus a validity flag."""

    errors: dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def _text(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        value = ",".join(str(item) for item in value)
    value = str(value)
    return value if value.strip() else ""


def parse_id(value: UUID | str) -> UUID | None:
    """Document id from a path segment, or None when it is not a UUID."""
    if isinstance(value, UUID):
        return value
    try:
        return UUID(value)
    except ValueError:
        return None


def is_length(value: str, min_length: int, max_length: int) -> bool:
    return min_length <= len(value) <= max_length


def is_email(value: str) -> bool:
    try:
        _email_adapter.validate_python(value)
    except ValidationError:
        return False
    return True


def is_url(value: str) -> bool:
    """Accept absolute http(s) URLs; a bare host like ``example.com`` counts too."""
    candidate = value if "://" in value else f"http://{value}"
    try:
        url = _url_adapter.validate_python(candidate)
    except ValidationError:
        return False
    return url.host is not None and "." in url.host


def is_date(value: str) -> bool:
    try:
        datetime.fromisoformat(value)
    except ValueError:
        return False
    return True


def validate_register_input(data: Mapping[str, Any]) -> ValidationResult:
    result = ValidationResult()
    errors = result.errors

    name = _text(data, "name")
    email = _text(data, "email")
    password = _text(data, "password")
    password2 = _text(data, "password2")

    if not is_length(name, 2, 30):
        errors["name"] = "Name must be between 2 and 30 characters"
    if not name:
        errors["name"] = "Name field is required"

    if not is_email(email):
        errors["email"] = "Email is invalid"
    if not email:
        errors["email"] = "Email field is required"

    if not is_length(password, 6, 30):
        errors["password"] = "Password must be between 6 and 30 characters"
    if not password:
        errors["password"] = "Password field is required"

    if not password2:
        errors["password2"] = "Confirm password field is required"
    if password2 != password:
        errors["password2"] = "Passwords must match"

    return result


def validate_login_input(data: Mapping[str, Any]) -> ValidationResult:
    result = ValidationResult()
    errors = result.errors

    email = _text(data, "email")
    password = _text(data, "password")

    if not is_email(email):
        errors["email"] = "Email is invalid"
    if not email:
        errors["email"] = "Email field is required"
    if not password:
        errors["password"] = "Password field is required"

    return result


def validate_profile_input(data: Mapping[str, Any]) -> ValidationResult:
    result = ValidationResult()
    errors = result.errors

    handle = _text(data, "handle")
    status = _text(data, "status")
    skills = _text(data, "skills")

    if not is_length(handle, 2, 40):
        errors["handle"] = "Handle needs to be between 2 and 40 characters"
    if not handle:
        errors["handle"] = "Profile handle is required"
    if not status:
        errors["status"] = "Status field is required"
    if not skills:
        errors["skills"] = "Skills field is required"

    for key in ("website", *SOCIAL_NETWORKS):
        value = _text(data, key).strip()
        if value and not is_url(value):
            errors[key] = "Not a valid URL"

    return result


def _validate_period(data: Mapping[str, Any], errors: dict[str, str]) -> None:
    from_date = _text(data, "from")
    to_date = _text(data, "to")

    if not from_date:
        errors["from"] = "From date field is required"
    elif not is_date(from_date):
        errors["from"] = "From date is not a valid date"

    if to_date and not is_date(to_date):
        errors["to"] = "To date is not a valid date"


def validate_experience_input(data: Mapping[str, Any]) -> ValidationResult:
    result = ValidationResult()
    errors = result.errors

    if not _text(data, "title"):
        errors["title"] = "Job title field is required"
    if not _text(data, "company"):
        errors["company"] = "Company field is required"
    _validate_period(data, errors)

    return result


def validate_education_input(data: Mapping[str, Any]) -> ValidationResult:
    result = ValidationResult()
    errors = result.errors

    if not _text(data, "school"):
        errors["school"] = "School field is required"
    if not _text(data, "degree"):
        errors["degree"] = "Degree field is required"
    if not _text(data, "fieldofstudy"):
        errors["fieldofstudy"] = "Field of study field is required"
    _validate_period(data, errors)

    return result


def validate_post_input(data: Mapping[str, Any]) -> ValidationResult:
    """Shared by posts and comments."""
    result = ValidationResult()
    errors = result.errors

    text = _text(data, "text")

    if not is_length(text, 10, 300):
        errors["text"] = "Post must be between 10 and 300 characters"
    if not text:
        errors["text"] = "Text field is required"

    return result
