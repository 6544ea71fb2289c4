# lms_chat/core/database.py
"""Database connection and session management using SQLAlchemy."""
import contextlib
from typing import AsyncGenerator, AsyncIterator
from fastapi.requests import HTTPConnection
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
import logging

from .config import Settings

logger = logging.getLogger(__name__)


class Database:
    """Owns the engine and session factory shared by handlers and the relay."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self.session_factory = async_sessionmaker(
            engine,
            expire_on_commit=False,
            class_=AsyncSession,
            autoflush=False,
        )

    @contextlib.asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        async with self.session_factory() as session:
            try:
                yield session
            except SQLAlchemyError as e:
                logger.error(f"Database session error: {e}")
                await session.rollback()
                raise
            except Exception:
                await session.rollback()
                raise

    async def health_check(self) -> bool:
        """Fast health check"""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return False

    async def dispose(self):
        await self.engine.dispose()
        logger.info("Database connections closed")


def create_database(settings: Settings) -> Database:
    """Build the pooled engine from settings"""
    engine_kwargs = {
        "pool_pre_ping": True,
        "echo": False,
    }
    if settings.database_url.startswith("postgresql"):
        engine_kwargs.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_timeout=settings.db_pool_timeout,
            pool_recycle=settings.db_pool_recycle,
            connect_args={
                "server_settings": {
                    "application_name": "lms_chat",
                    "idle_in_transaction_session_timeout": "60s",
                }
            },
        )
    engine = create_async_engine(settings.database_url, **engine_kwargs)
    return Database(engine)


async def get_db(connection: HTTPConnection) -> AsyncGenerator[AsyncSession, None]:
    """Get database session for API requests"""
    database: Database = connection.app.state.database
    async with database.session() as session:
        yield session
