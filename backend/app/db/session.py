from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlalchemy import text
from app.core.config import settings


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    Create the async engine for the configured database.

    SQLite (local runs and tests) shares a single connection so in-memory
    databases survive across sessions; every other backend gets a pool:
    - pool_size / max_overflow: persistent and burst connections
    - pool_pre_ping: verify connections are alive before use
    - pool_recycle: recycle connections after 1 hour to prevent DB-side timeouts
    """
    if database_url.startswith("sqlite"):
        return create_async_engine(
            database_url,
            echo=echo,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    return create_async_engine(
        database_url,
        echo=echo,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_pre_ping=True,
        pool_recycle=3600,
        pool_timeout=30,
    )


engine = build_engine(settings.DATABASE_URL, echo=settings.SQLALCHEMY_ECHO)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)


async def init_models(bind: AsyncEngine | None = None) -> None:
    """Create any missing tables for the registered models."""
    from app.db.base import Base

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def check_db_connection() -> bool:
    """
    Verify database connectivity. Used by health checks.
    Returns True if connection is successful, False otherwise.
    """
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
