"""Database engine and session factory used across the application."""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from loguru import logger
from sqlalchemy import event, text
from sqlalchemy.engine import Engine
from sqlalchemy.pool import QueuePool, StaticPool
from sqlmodel import Session, create_engine

from src.leadsite.core.services.database.db_manage import DbManageService
from src.leadsite.runtime.config.config_data import ConfigData


class DbSessionService:
    """Owns the connection pool and hands out sessions bound to it.

    One instance is created by the application lifespan and closed on shutdown.
    """

    def __init__(self, config: ConfigData, engine: Engine | None = None):
        """Create the engine for ``config.database`` unless one is supplied."""
        self._config = config
        self._schema_attempted = False
        self._schema_ready = False

        if engine is None:
            engine = self._create_engine(config)
        self._engine: Engine | None = engine

        event.listen(self._engine, "handle_error", self._on_engine_error)

    def _create_engine(self, config: ConfigData) -> Engine:
        db_config = config.database
        logger.info(
            "Configuring database engine for environment: {}", config.app.environment
        )

        engine_kwargs: dict[str, Any] = {
            "echo": False,
            "connect_args": self._get_connect_args(config),
        }

        if db_config.is_sqlite:
            if ":memory:" in db_config.url or db_config.url.rstrip("/") == "sqlite:":
                engine_kwargs["poolclass"] = StaticPool
        else:
            # Connections are opened on demand, so nothing is held open while idle.
            engine_kwargs.update(
                {
                    "poolclass": QueuePool,
                    "pool_size": db_config.max_connections,
                    "max_overflow": 0,
                    "pool_timeout": db_config.connect_timeout,
                    "pool_recycle": db_config.idle_timeout,
                    "pool_pre_ping": True,
                }
            )

        logger.info(
            "Initializing database engine for {} (max connections: {}, ssl: {})",
            db_config.masked_url,
            db_config.max_connections,
            db_config.requires_ssl,
        )
        return create_engine(db_config.connection_string, **engine_kwargs)

    def _get_connect_args(self, config: ConfigData) -> dict:
        """Get database-specific connection arguments."""
        db_config = config.database
        connect_args: dict[str, Any] = {}

        if db_config.is_sqlite:
            connect_args.update(
                {
                    "check_same_thread": False,
                    "timeout": 20,
                }
            )
            if config.app.environment == "production":
                logger.warning(
                    "SQLite is not recommended for production use. "
                    "Consider PostgreSQL for better performance and reliability."
                )
            return connect_args

        connect_args.update(
            {
                "application_name": f"{config.app.environment}_leadsite",
                "connect_timeout": db_config.connect_timeout,
            }
        )
        # Managed hosts use certificates we do not verify.
        connect_args["sslmode"] = "require" if db_config.requires_ssl else "prefer"
        return connect_args

    @staticmethod
    def _on_engine_error(context) -> None:
        # Dropped connections are invalidated by the pool; the statement error
        # itself still propagates to the caller.
        if context.is_disconnect:
            logger.error(
                "Database connection lost: {}",
                context.original_exception,
            )

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("Database connection pool has been closed")
        return self._engine

    @property
    def schema_ready(self) -> bool:
        return self._schema_ready

    def initialize_schema(self) -> bool:
        """Create the schema once per engine lifetime.

        Failures are logged and deferred: the service stays usable and the first
        query against a missing table reports the store error to its caller.
        """
        if self._schema_attempted:
            return self._schema_ready
        self._schema_attempted = True

        try:
            DbManageService(self.engine).create_all()
        except Exception as exc:
            logger.warning("Database initialization deferred: {}", exc)
            return False

        self._schema_ready = True
        return True

    def get_session(self) -> Session:
        """Return a new SQLModel session bound to the shared engine."""
        return Session(
            self.engine,
            expire_on_commit=False,
            autoflush=True,
        )

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Context manager style helper for repositories and tests."""
        db = self.get_session()
        try:
            yield db
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(
                "Database transaction failed",
                error_type=type(e).__name__,
                error_message=str(e),
            )
            raise
        finally:
            db.close()

    def health_check(self) -> bool:
        """Perform a health check on the database connection."""
        try:
            with self.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
                return True
        except Exception as e:
            logger.error(
                "Database health check failed",
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return False

    def get_pool_status(self) -> dict:
        """Get current connection pool status for monitoring."""
        pool = self.engine.pool
        return {
            "size": getattr(pool, "size", lambda: 0)(),
            "checked_in": getattr(pool, "checkedin", lambda: 0)(),
            "checked_out": getattr(pool, "checkedout", lambda: 0)(),
            "overflow": getattr(pool, "overflow", lambda: 0)(),
        }

    def close(self) -> None:
        """Dispose of the pool. Safe to call more than once."""
        if self._engine is None:
            return
        self._engine.dispose()
        self._engine = None
        logger.info("Database connection pool closed")
