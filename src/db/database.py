from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool
from typing import AsyncGenerator

from fastapi import Request

from src.core.config import Settings


# Create async engine
def create_engine(settings: Settings) -> AsyncEngine:
    return create_async_engine(
        settings.DATABASE_URL,
        echo=settings.DEBUG,
        future=True,
        poolclass=NullPool,
    )


# Create session factory
def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )


# Dependency for FastAPI
async def get_async_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    session_factory = request.app.state.session_factory
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def ping_db(engine: AsyncEngine) -> None:
    """Liveness probe, raises if the database cannot be reached."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


# Initialize database
async def init_db(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        # Import here to avoid circular imports
        from src.db.base import Base
        import src.models  # noqa: F401
        # Create tables if they don't exist
        await conn.run_sync(Base.metadata.create_all)
