"""Data-access layer for leads stored in the ``users`` table."""

from datetime import timedelta

from loguru import logger
from sqlalchemy import delete, func, or_, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, select

from src.leadsite.entities.core._base import utcnow

from .entity import CompanyCount, User, UserCreate, UserPatch, normalize_email
from .table import UserTable


class DuplicateEmailError(Exception):
    """Raised when a write would store an email that is already registered."""

    def __init__(self, email: str) -> None:
        super().__init__(f"An account with email {email!r} already exists")
        self.email = email


def _require_int(name: str, value: object, minimum: int) -> int:
    # bool is an int subclass but never a valid window or page size
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise ValueError(f"{name} must be an integer >= {minimum}, got {value!r}")
    return value


class UserRepository:
    """CRUD and query operations over leads.

    Every mutating method is a single statement committed on its own.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    @staticmethod
    def _to_entity(row: UserTable) -> User:
        return User.model_validate(row, from_attributes=True)

    def _ordered(self, statement):
        return statement.order_by(
            col(UserTable.created_at).desc(), col(UserTable.id).desc()
        )

    def _all(self, statement) -> list[User]:
        rows = self._session.exec(self._ordered(statement)).all()
        return [self._to_entity(row) for row in rows]

    def create(self, data: UserCreate) -> User:
        """Insert a new lead and return it with its generated id and timestamps."""
        values = data.normalized()
        row = UserTable(**values)
        self._session.add(row)
        try:
            self._session.commit()
        except IntegrityError as exc:
            self._session.rollback()
            logger.warning("Rejected duplicate email", email=values["email"])
            raise DuplicateEmailError(values["email"]) from exc

        self._session.refresh(row)
        return self._to_entity(row)

    def get_by_id(self, user_id: int) -> User | None:
        row = self._session.get(UserTable, user_id)
        if row is None:
            return None
        return self._to_entity(row)

    def get_by_email(self, email: str) -> User | None:
        statement = select(UserTable).where(UserTable.email == normalize_email(email))
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return self._to_entity(row)

    def list_all(self, limit: int | None = None, offset: int | None = None) -> list[User]:
        """List leads newest first, optionally paged."""
        statement = select(UserTable)
        if limit is not None:
            statement = statement.limit(_require_int("limit", limit, 1))
        if offset is not None:
            statement = statement.offset(_require_int("offset", offset, 0))
        return self._all(statement)

    def update(self, user_id: int, patch: UserPatch) -> User | None:
        """Apply ``patch`` to a lead.

        Returns the updated lead, ``None`` if it does not exist, or the current
        lead unchanged when the patch carries no fields.
        """
        values = patch.to_values()
        if not values:
            return self.get_by_id(user_id)

        values["updated_at"] = utcnow()
        statement = (
            update(UserTable).where(col(UserTable.id) == user_id).values(**values)
        )
        try:
            result = self._session.exec(statement)  # type: ignore[call-overload]
            self._session.commit()
        except IntegrityError as exc:
            self._session.rollback()
            raise DuplicateEmailError(values.get("email", "")) from exc

        if result.rowcount == 0:
            return None
        row = self._session.get(UserTable, user_id, populate_existing=True)
        return None if row is None else self._to_entity(row)

    def delete(self, user_id: int) -> bool:
        """Hard-delete a lead. Returns ``False`` when nothing was removed."""
        statement = delete(UserTable).where(col(UserTable.id) == user_id)
        result = self._session.exec(statement)  # type: ignore[call-overload]
        self._session.commit()
        return result.rowcount > 0

    def count(self) -> int:
        statement = select(func.count()).select_from(UserTable)
        return self._session.exec(statement).one()

    def search(self, term: str) -> list[User]:
        """Leads whose name, email or company contains ``term``, ignoring case."""
        statement = select(UserTable).where(
            or_(
                col(UserTable.first_name).icontains(term, autoescape=True),
                col(UserTable.last_name).icontains(term, autoescape=True),
                col(UserTable.email).icontains(term, autoescape=True),
                col(UserTable.company).icontains(term, autoescape=True),
            )
        )
        return self._all(statement)

    def list_by_company(self, company: str) -> list[User]:
        """Leads whose company matches exactly (case-sensitive)."""
        statement = select(UserTable).where(UserTable.company == company)
        return self._all(statement)

    def list_recent(self, days: int = 30) -> list[User]:
        """Leads created within the trailing ``days`` window."""
        cutoff = utcnow() - timedelta(days=_require_int("days", days, 1))
        statement = select(UserTable).where(col(UserTable.created_at) >= cutoff)
        return self._all(statement)

    def company_counts(self) -> list[CompanyCount]:
        """Number of leads per company, largest first."""
        total = func.count().label("total")
        statement = (
            select(UserTable.company, total)
            .group_by(UserTable.company)
            .order_by(total.desc(), col(UserTable.company))
        )
        return [
            CompanyCount(name=company, count=count)
            for company, count in self._session.exec(statement).all()
        ]
