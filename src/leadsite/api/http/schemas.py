"""Request and response bodies of the public JSON API.

Field names are camelCase on the wire and snake_case in Python.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from src.leadsite.entities.core.user import User, UserCreate


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


def _filled(value: str | None) -> bool:
    return value is not None and bool(value.strip())


class RegistrationRequest(ApiModel):
    """Body of ``POST /api/register``.

    Every field is optional here so that missing values are reported with the
    endpoint's own 400 message instead of a schema error.
    """

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    company: str | None = None
    phone: str | None = None
    message: str | None = None

    def to_user_create(self) -> UserCreate | None:
        """Return the validated creation data, or ``None`` if a required field is blank."""
        required = (self.first_name, self.last_name, self.email, self.company, self.phone)
        if not all(_filled(value) for value in required):
            return None
        return UserCreate(
            first_name=self.first_name,
            last_name=self.last_name,
            email=self.email,
            company=self.company,
            phone=self.phone,
            message=self.message,
        )


class ContactRequest(ApiModel):
    """Body of ``POST /api/contact``."""

    name: str | None = None
    email: str | None = None
    company: str | None = None
    phone: str | None = None
    service: str | None = None
    message: str | None = None

    def is_complete(self) -> bool:
        return all(_filled(value) for value in (self.name, self.email, self.message))


class AdminActionRequest(ApiModel):
    """Body of ``POST /api/admin/database``; arguments depend on ``action``."""

    action: str | None = None
    days: Any = None
    search_term: str | None = None
    user_id: Any = None


class UserSummary(ApiModel):
    id: int
    first_name: str
    last_name: str
    email: str
    company: str
    created_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserSummary":
        return cls.model_validate(user, from_attributes=True)


class UserDetail(UserSummary):
    phone: str
    message: str
    updated_at: datetime
