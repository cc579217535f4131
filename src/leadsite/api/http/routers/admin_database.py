"""Admin endpoints over the lead database: health check and action dispatch."""

from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from starlette.responses import JSONResponse

from src.leadsite.api.http.deps import get_user_repository
from src.leadsite.api.http.schemas import AdminActionRequest, UserSummary
from src.leadsite.core.services import check_database_health
from src.leadsite.entities.core.user import UserRepository

router = APIRouter(prefix="/api/admin/database", tags=["admin"])

STATS_WINDOW_DAYS = 30


def _positive_int(value: Any) -> int | None:
    """Coerce a JSON number or digit string to a positive int, else ``None``."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str) and value.strip().isascii() and value.strip().isdigit():
        value = int(value)
    if isinstance(value, int) and value > 0:
        return value
    return None


def _stats(payload: AdminActionRequest, repository: UserRepository) -> dict[str, Any]:
    total_users = repository.count()
    recent = len(repository.list_recent(STATS_WINDOW_DAYS))
    return {
        "totalUsers": total_users,
        "recentUsers": recent,
        "stats": {
            "total": total_users,
            "last30Days": recent,
            "averagePerDay": round(recent / STATS_WINDOW_DAYS, 2),
        },
    }


def _recent(payload: AdminActionRequest, repository: UserRepository) -> dict[str, Any]:
    days = STATS_WINDOW_DAYS if payload.days in (None, "") else _positive_int(payload.days)
    if days is None:
        raise HTTPException(status_code=400, detail="Days must be a positive integer")

    users = repository.list_recent(days)
    return {
        "users": [UserSummary.from_user(user).to_json() for user in users],
        "count": len(users),
        "days": days,
    }


def _search(payload: AdminActionRequest, repository: UserRepository) -> dict[str, Any]:
    if not payload.search_term:
        raise HTTPException(status_code=400, detail="Search term is required")

    users = repository.search(payload.search_term)
    return {
        "users": [UserSummary.from_user(user).to_json() for user in users],
        "count": len(users),
        "searchTerm": payload.search_term,
    }


def _companies(payload: AdminActionRequest, repository: UserRepository) -> dict[str, Any]:
    companies = repository.company_counts()
    return {
        "companies": [company.model_dump() for company in companies],
        "totalCompanies": len(companies),
    }


def _delete(payload: AdminActionRequest, repository: UserRepository) -> dict[str, Any]:
    if payload.user_id in (None, ""):
        raise HTTPException(status_code=400, detail="User ID is required")

    user_id = _positive_int(payload.user_id)
    if user_id is None:
        raise HTTPException(status_code=400, detail="Invalid user ID")

    if not repository.delete(user_id):
        raise HTTPException(status_code=404, detail="User not found")

    logger.info("User deleted successfully", user_id=user_id)
    return {
        "success": True,
        "message": "User deleted successfully",
        "userId": user_id,
    }


ACTIONS: dict[str, Callable[[AdminActionRequest, UserRepository], dict[str, Any]]] = {
    "stats": _stats,
    "recent": _recent,
    "search": _search,
    "companies": _companies,
    "delete": _delete,
}


@router.get("", response_model=None)
def database_health(
    repository: UserRepository = Depends(get_user_repository),
) -> dict[str, Any] | JSONResponse:
    """Store connectivity and current user count. Reports errors in the body."""
    logger.info("Database health check requested")
    try:
        health = check_database_health(repository)
    except Exception as exc:
        logger.exception("Database health check failed")
        return JSONResponse(
            status_code=500,
            content={
                "status": "error",
                "message": "Database health check failed",
                "error": str(exc),
            },
        )

    return {
        **health.model_dump(by_alias=True),
        "timestamp": datetime.now(UTC).isoformat(),
    }


@router.post("")
def database_action(
    payload: AdminActionRequest,
    repository: UserRepository = Depends(get_user_repository),
) -> dict[str, Any]:
    """Dispatch an admin action named by ``payload.action``."""
    logger.info("Database admin action requested", action=payload.action)

    handler = ACTIONS.get(payload.action or "")
    if handler is None:
        raise HTTPException(status_code=400, detail="Invalid action")

    try:
        return handler(payload, repository)
    except SQLAlchemyError as exc:
        logger.exception("Database admin action failed", action=payload.action)
        raise HTTPException(status_code=500, detail="Database admin action failed") from exc
