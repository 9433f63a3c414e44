"""Database connection and session management."""
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from lending.config import settings

# Accept plain postgres URLs and run them on asyncpg
DATABASE_URL = settings.database_url.replace(
    "postgresql://", "postgresql+asyncpg://"
)


def _begin_immediate(bind: AsyncEngine) -> None:
    """Take SQLite's write lock as each transaction begins.

    SQLite has no row locks and ignores FOR UPDATE. Left to the driver, two
    transactions that read the same row both try to upgrade to a write lock
    and one of them fails with "database is locked".
    """

    @event.listens_for(bind.sync_engine, "connect")
    def _disable_driver_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(bind.sync_engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def build_engine(url: str = DATABASE_URL, echo: bool = settings.debug) -> AsyncEngine:
    """Create an async engine; pool sizing only applies to server databases."""
    if url.startswith("sqlite"):
        sqlite_engine = create_async_engine(url, echo=echo, connect_args={"timeout": 30})
        _begin_immediate(sqlite_engine)
        return sqlite_engine
    return create_async_engine(
        url,
        echo=echo,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
    )


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


engine = build_engine()

AsyncSessionLocal = build_session_factory(engine)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


async def init_db(bind: AsyncEngine = engine) -> None:
    """Initialize database tables."""
    # Models must be imported so their tables are registered on Base.metadata
    import lending.models  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db(bind: AsyncEngine = engine) -> None:
    """Close database connections."""
    await bind.dispose()
