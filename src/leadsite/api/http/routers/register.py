"""Lead registration endpoints: create, list and delete registrations."""

import re
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from src.leadsite.api.http.deps import get_user_repository
from src.leadsite.api.http.schemas import RegistrationRequest, UserDetail, UserSummary
from src.leadsite.entities.core.user import DuplicateEmailError, UserRepository

router = APIRouter(prefix="/api/register", tags=["register"])

DUPLICATE_EMAIL = "An account with this email already exists"
GENERIC_ERROR = "Internal server error. Please try again later."

_INTEGER = re.compile(r"-?[0-9]+")


def _query_int(value: str | None, minimum: int) -> int | None:
    """Parse an optional integer query value; blank means absent."""
    if value is None or not value.strip():
        return None
    if not value.isascii() or not value.isdigit() or int(value) < minimum:
        raise HTTPException(status_code=400, detail="Invalid request parameters")
    return int(value)


@router.post("")
def register_user(
    payload: RegistrationRequest,
    repository: UserRepository = Depends(get_user_repository),
) -> dict[str, Any]:
    """Register a new lead."""
    logger.info("User registration request received")

    data = payload.to_user_create()
    if data is None:
        logger.warning(
            "Registration validation failed - missing required fields",
            body=payload.model_dump(exclude={"message"}),
        )
        raise HTTPException(status_code=400, detail="All required fields must be provided")

    try:
        if repository.get_by_email(data.email) is not None:
            logger.warning("Registration failed - email already exists", email=data.email)
            raise HTTPException(status_code=409, detail=DUPLICATE_EMAIL)

        user = repository.create(data)
    except DuplicateEmailError as exc:
        # Lost a race with a concurrent registration of the same email.
        raise HTTPException(status_code=409, detail=DUPLICATE_EMAIL) from exc
    except SQLAlchemyError as exc:
        logger.exception("Registration request failed")
        raise HTTPException(status_code=500, detail=GENERIC_ERROR) from exc

    logger.info(
        "User registration successful",
        user_id=user.id,
        email=user.email,
        company=user.company,
    )

    return {
        "success": True,
        "message": "Registration successful! We will contact you within 24 hours.",
        "user": UserSummary.from_user(user).to_json(),
    }


@router.get("")
def list_registrations(
    limit: str | None = None,
    offset: str | None = None,
    search: str | None = None,
    company: str | None = None,
    repository: UserRepository = Depends(get_user_repository),
) -> dict[str, Any]:
    """List registrations; ``search`` takes precedence over ``company``."""
    limit = _query_int(limit, minimum=1)
    offset = _query_int(offset, minimum=0)
    logger.info(
        "Registration list requested",
        limit=limit,
        offset=offset,
        search=search,
        company=company,
    )

    try:
        if search:
            users = repository.search(search)
        elif company:
            users = repository.list_by_company(company)
        else:
            users = repository.list_all(limit=limit, offset=offset)
        total = repository.count()
    except SQLAlchemyError as exc:
        logger.exception("Failed to retrieve registrations")
        raise HTTPException(status_code=500, detail="Failed to retrieve registrations") from exc

    return {
        "users": [UserDetail.from_user(user).to_json() for user in users],
        "total": total,
        "returned": len(users),
    }


@router.delete("")
def delete_registration(
    user_id: str | None = Query(default=None, alias="id"),
    repository: UserRepository = Depends(get_user_repository),
) -> dict[str, Any]:
    """Hard-delete a registration by id."""
    if not user_id:
        raise HTTPException(status_code=400, detail="User ID is required")

    if not _INTEGER.fullmatch(user_id):
        raise HTTPException(status_code=400, detail="Invalid user ID")
    user_id_num = int(user_id)

    logger.info("User deletion requested", user_id=user_id_num)

    try:
        deleted = repository.delete(user_id_num)
    except SQLAlchemyError as exc:
        logger.exception("User deletion failed", user_id=user_id_num)
        raise HTTPException(status_code=500, detail=GENERIC_ERROR) from exc

    if not deleted:
        logger.warning("User deletion failed - user not found", user_id=user_id_num)
        raise HTTPException(status_code=404, detail="User not found")

    logger.info("User deleted successfully", user_id=user_id_num)
    return {
        "success": True,
        "message": "User deleted successfully",
        "userId": user_id_num,
    }
