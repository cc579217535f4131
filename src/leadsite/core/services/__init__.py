"""Core services exports."""

from .database.db_health import DatabaseHealth, check_database_health
from .database.db_manage import DbManageService
from .database.db_session import DbSessionService

__all__ = [
    "DatabaseHealth",
    "DbManageService",
    "DbSessionService",
    "check_database_health",
]
