"""User database table model."""

from datetime import datetime

import sqlalchemy as sa
from sqlmodel import Field

from src.leadsite.entities.core._base import EntityTable


class UserTable(EntityTable, table=True):
    """Persistence model for the ``users`` table.

    Emails are stored normalized, so the unique constraint makes uniqueness
    case-insensitive at the storage layer. The check constraint rejects any
    writer that skips normalization.
    """

    __tablename__ = "users"  # type: ignore[assignment]
    __table_args__ = (
        sa.UniqueConstraint("email", name="users_email_key"),
        sa.CheckConstraint("email = lower(email)", name="ck_users_email_lowercase"),
        sa.Index("idx_users_email", "email"),
        sa.Index("idx_users_created_at", "created_at"),
        {"sqlite_autoincrement": True},
    )

    first_name: str = Field(max_length=255)
    last_name: str = Field(max_length=255)
    email: str = Field(max_length=255)
    company: str = Field(max_length=255)
    phone: str = Field(max_length=50)
    message: str = Field(
        default="", sa_type=sa.Text, sa_column_kwargs={"server_default": ""}
    )

    email_sent: bool = Field(
        default=False, sa_column_kwargs={"server_default": sa.false()}
    )
    email_sent_at: datetime | None = Field(
        default=None, sa_type=sa.DateTime(timezone=True)
    )
    email_message_id: str | None = Field(default=None, max_length=255)
    admin_notification_sent: bool = Field(
        default=False, sa_column_kwargs={"server_default": sa.false()}
    )
    admin_notification_sent_at: datetime | None = Field(
        default=None, sa_type=sa.DateTime(timezone=True)
    )
    admin_notification_message_id: str | None = Field(default=None, max_length=255)
