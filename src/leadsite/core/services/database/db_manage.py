"""Schema management for the lead database."""

from loguru import logger
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel


class DbManageService:
    def __init__(self, engine: Engine):
        self._engine = engine

    def create_all(self) -> None:
        """Create the ``users`` table and its indexes if they do not exist yet."""
        from src.leadsite.entities.core.user import UserTable  # noqa: F401

        try:
            SQLModel.metadata.create_all(self._engine, checkfirst=True)
        except Exception:
            logger.exception("Error initializing database")
            raise
        logger.info("Database initialized successfully")
