"""Core database functionality and configuration.

This module provides the database handle used by the event store: engine
configuration, schema creation and transactional sessions. There is no global
instance; the application constructs one at startup and disposes it on shutdown.
"""

from contextlib import contextmanager
import logging
from typing import Optional, Dict, Any, Generator

from sqlalchemy import create_engine, Engine, inspect, text
from sqlalchemy.exc import InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from ..config.environment import DATABASE_URL, IS_PRODUCTION_ENVIRONMENT, PROJECT_ROOT
from ..errors import StorageError, StorageUnavailableError
from ..models import Base

logger = logging.getLogger(__name__)

class DatabaseConfig:
    """Database configuration settings."""

    def __init__(
        self,
        url: Optional[str] = None,
        echo: bool = False,
        pool_size: int = 3,
        max_overflow: int = 4,
        pool_timeout: int = 30,
        pool_recycle: int = 3600,
        pool_pre_ping: bool = True,
        connect_timeout: int = 5
    ):
        """
        Initialize database configuration.

        In production environment, DATABASE_URL must be set in environment variables
        or provided explicitly via the url parameter. In development the default is a
        SQLite file under data/.

        Args:
            url: SQLAlchemy connection URL (defaults to the DATABASE_URL env variable)
            echo: Whether to echo SQL statements
            pool_size: Size of the connection pool (permanent connections)
            max_overflow: Maximum number of extra connections to allow temporarily
            pool_timeout: Seconds to wait for an available connection
            pool_recycle: Seconds before connections are recycled (prevent stale)
            pool_pre_ping: Whether to ping connections before using them
            connect_timeout: Seconds to wait when opening a server connection

        Raises:
            ValueError: If in production environment and no database URL is provided
        """
        url = url or DATABASE_URL
        if not url:
            if IS_PRODUCTION_ENVIRONMENT:
                raise ValueError(
                    "Database URL must be provided either via the url parameter "
                    "or DATABASE_URL environment variable when in production environment"
                )
            data_dir = PROJECT_ROOT / 'data'
            data_dir.mkdir(parents=True, exist_ok=True)
            url = f"sqlite:///{data_dir / 'events.db'}"

        self.url = url
        self.echo = echo
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.pool_timeout = pool_timeout
        self.pool_recycle = pool_recycle
        self.pool_pre_ping = pool_pre_ping
        self.connect_timeout = connect_timeout

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith('sqlite')

    def get_engine_args(self) -> Dict[str, Any]:
        """Get SQLAlchemy engine arguments based on configuration."""
        args = {"echo": self.echo}

        # SQLite-specific configuration
        if self.is_sqlite:
            args["connect_args"] = {"check_same_thread": False}
            # In-memory databases must share one connection to keep their tables
            if self.url in ('sqlite://', 'sqlite:///:memory:'):
                args["poolclass"] = StaticPool

        # Server database configuration
        else:
            args.update({
                "pool_size": self.pool_size,
                "max_overflow": self.max_overflow,
                "pool_timeout": self.pool_timeout,
                "pool_recycle": self.pool_recycle,
                "pool_pre_ping": self.pool_pre_ping
            })
            if self.url.startswith('postgresql'):
                args["connect_args"] = {"connect_timeout": self.connect_timeout}

        return args

class Database:
    """Database handle owning the engine and session factory."""

    def __init__(self, config: Optional[DatabaseConfig] = None):
        self.config = config or DatabaseConfig()
        self.engine: Optional[Engine] = None
        self._session_factory = sessionmaker(expire_on_commit=False)
        self._tables_checked = False
        self._setup_engine()

    def _setup_engine(self) -> None:
        """Set up the SQLAlchemy engine."""
        try:
            self.engine = create_engine(
                self.config.url,
                **self.config.get_engine_args()
            )
            self._session_factory.configure(bind=self.engine)
        except Exception as e:
            raise StorageUnavailableError(f"Failed to create database engine: {e}") from e

    @property
    def dialect(self) -> str:
        """Name of the SQL dialect, e.g. 'sqlite' or 'postgresql'."""
        if not self.engine:
            raise StorageUnavailableError("Database engine not initialized")
        return self.engine.dialect.name

    def ensure_tables_exist(self) -> None:
        """Ensure all required tables (and the search index) exist."""
        if self._tables_checked:
            return
        if not self.engine:
            raise StorageUnavailableError("Database engine not initialized")

        try:
            inspector = inspect(self.engine)
            existing_tables = set(inspector.get_table_names())
            required_tables = set(Base.metadata.tables)

            if not required_tables.issubset(existing_tables):
                logger.info("Some tables missing, initializing database schema")
                Base.metadata.create_all(self.engine)
                logger.info("Database schema initialized successfully")

            self._tables_checked = True

        except OperationalError as e:
            raise StorageUnavailableError(f"Failed to verify/create database schema: {e}") from e
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to verify/create database schema: {e}") from e

    def ping(self) -> None:
        """Lightweight connectivity check. Raises StorageUnavailableError on failure."""
        with self.session() as session:
            session.execute(text("SELECT 1"))

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """
        Provide a transactional scope around a series of operations.

        Commits on success, rolls back on error and always closes the session.

        Example:
            with database.session() as session:
                record = session.get(EventRecord, event_id)

        Raises:
            StorageUnavailableError: If the database cannot be reached
            StorageError: For any other database failure
        """
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except (OperationalError, InterfaceError) as e:
            session.rollback()
            raise StorageUnavailableError(f"Database unavailable: {e}") from e
        except SQLAlchemyError as e:
            session.rollback()
            raise StorageError(f"Database session error: {e}") from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def dispose(self) -> None:
        """Release all pooled connections."""
        if self.engine:
            self.engine.dispose()
            logger.info("Database connections closed")
