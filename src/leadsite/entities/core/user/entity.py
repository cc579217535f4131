"""User (lead) domain entity and input models."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from src.leadsite.entities.core._base import Entity


def normalize_email(email: str) -> str:
    """Lower-case and trim an email address before storage or comparison."""
    return email.strip().lower()


class User(Entity):
    """A lead captured through the registration form.

    This is the domain model handed out by the repository; the persistence model
    lives in ``table.py``.
    """

    first_name: str = Field(description="Lead's first name")
    last_name: str = Field(description="Lead's last name")
    email: str = Field(description="Normalized email address")
    company: str = Field(description="Company name")
    phone: str = Field(description="Phone number")
    message: str = Field(default="", description="Free-text message from the form")

    # Reserved for the notification integration.
    email_sent: bool = False
    email_sent_at: datetime | None = None
    email_message_id: str | None = None
    admin_notification_sent: bool = False
    admin_notification_sent_at: datetime | None = None
    admin_notification_message_id: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __eq__(self, other: Any) -> bool:
        """Compare users by identity and business attributes, ignoring timestamps."""
        if not isinstance(other, User):
            return False

        return (
            self.id == other.id
            and self.first_name == other.first_name
            and self.last_name == other.last_name
            and self.email == other.email
            and self.company == other.company
            and self.phone == other.phone
            and self.message == other.message
        )

    def __hash__(self) -> int:
        return hash((self.id, self.email))


class UserCreate(BaseModel):
    """Data required to register a new lead."""

    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: str = Field(min_length=1)
    company: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    message: str | None = None

    def normalized(self) -> dict[str, str]:
        """Column values ready for insertion."""
        return {
            "first_name": self.first_name.strip(),
            "last_name": self.last_name.strip(),
            "email": normalize_email(self.email),
            "company": self.company.strip(),
            "phone": self.phone.strip(),
            "message": (self.message or "").strip(),
        }


class UserPatch(BaseModel):
    """Partial update of a lead.

    Only fields explicitly set on the patch are written; everything else is left
    untouched.
    """

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    company: str | None = None
    phone: str | None = None
    message: str | None = None

    def to_values(self) -> dict[str, str]:
        """Column assignments for the fields present in this patch.

        Required columns ignore ``None`` and blank values; ``message`` accepts an
        empty string so it can be cleared.
        """
        values: dict[str, str] = {}
        for field_name, value in self.model_dump(exclude_unset=True).items():
            if value is None:
                continue
            if field_name != "message" and not value.strip():
                continue
            if field_name == "email":
                value = normalize_email(value)
            elif field_name != "message":
                value = value.strip()
            values[field_name] = value
        return values


class CompanyCount(BaseModel):
    """Number of leads registered for one company."""

    name: str
    count: int
