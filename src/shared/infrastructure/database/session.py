"""
Database Session Factory
Creates async SQLAlchemy sessions with proper configuration
"""
from __future__ import annotations

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from shared.config import Settings
from shared.infrastructure.database.base_model import Base
from shared.infrastructure.observability.logger import get_logger

logger = get_logger(__name__)


class DatabaseSessionFactory:
    """
    Factory for the async engine and session maker used by SQLAlchemy units of work.
    """

    def __init__(self, database_url: str, echo: bool = False, pool_size: int = 5, max_overflow: int = 10) -> None:
        """
        Initialize session factory with database connection.

        Args:
            database_url: PostgreSQL connection string (asyncpg)
            echo: Whether to log SQL statements (debug mode)
            pool_size: Connection pool size
            max_overflow: Max overflow connections beyond pool_size
        """
        self.database_url = database_url

        self.engine: AsyncEngine = create_async_engine(
            database_url,
            echo=echo,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_pre_ping=True,
            pool_recycle=3600,
        )

        self.session_factory: async_sessionmaker[AsyncSession] = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

        logger.info(
            "Database session factory initialized",
            extra={"pool_size": pool_size, "max_overflow": max_overflow},
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> DatabaseSessionFactory:
        return cls(settings.database_url, echo=settings.is_local and settings.log_level.upper() == "DEBUG")

    async def create_schema(self) -> None:
        """Create every mapped table that does not exist yet."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        """Close all connections and dispose of the engine."""
        await self.engine.dispose()
        logger.info("Database engine disposed")
