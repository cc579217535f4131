"""Store connectivity report used by the admin health endpoint and startup."""

from typing import Literal

from loguru import logger
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from src.leadsite.entities.core.user import UserRepository


class DatabaseHealth(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    status: Literal["healthy", "error"]
    message: str
    user_count: int = 0


def check_database_health(repository: UserRepository) -> DatabaseHealth:
    """Count users to prove the store is reachable. Never raises."""
    try:
        count = repository.count()
    except Exception as exc:
        logger.warning("Database health check failed: {}", exc)
        return DatabaseHealth(status="error", message=str(exc) or "Unknown error")

    return DatabaseHealth(
        status="healthy",
        message="Database connection successful",
        user_count=count,
    )
