"""FastAPI dependency implementations."""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Depends, Request
from sqlmodel import Session

from src.leadsite.api.http.app_data import ApplicationDependencies
from src.leadsite.core.services import DbSessionService
from src.leadsite.core.storage.log_buffer import LogBuffer
from src.leadsite.entities.core.user import UserRepository


def get_app_dependencies(request: Request) -> ApplicationDependencies:
    return request.app.state.app_dependencies


def get_database_service(request: Request) -> DbSessionService:
    """Get the database service instance."""
    return get_app_dependencies(request).database_service


def get_log_buffer(request: Request) -> LogBuffer:
    """Get the in-process log buffer."""
    return get_app_dependencies(request).log_buffer


def get_db_session(
    database_service: DbSessionService = Depends(get_database_service),
) -> Iterator[Session]:
    """Yield a session for the duration of one request."""
    session = database_service.get_session()
    try:
        yield session
    finally:
        session.close()


def get_user_repository(session: Session = Depends(get_db_session)) -> UserRepository:
    return UserRepository(session)
