from sqlalchemy.engine import URL, make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from luckydraw.create_postgres_engine import create_postgres_engine
from luckydraw.create_sqlite_engine import create_sqlite_engine
from luckydraw.load_secrets import database_url, host, max_overflow, pool_size

# Driverless URLs are run on the async drivers this service installs.
ASYNC_DRIVERS = {
    "postgres": "postgresql+asyncpg",
    "postgresql": "postgresql+asyncpg",
    "sqlite": "sqlite+aiosqlite",
}


def async_database_url(url: str) -> URL:
    parsed = make_url(url)
    if parsed.drivername in ASYNC_DRIVERS:
        parsed = parsed.set(drivername=ASYNC_DRIVERS[parsed.drivername])
    return parsed


def create_engine_from_env() -> AsyncEngine:
    """DATABASE_URL wins, then the DB_* parts (PostgreSQL), then a local SQLite file."""
    if database_url:
        url = async_database_url(database_url)
        if url.get_backend_name() == "sqlite":
            return create_sqlite_engine(url.database)
        return create_async_engine(
            url, pool_size=pool_size, max_overflow=max_overflow, pool_pre_ping=True
        )
    if host:
        return create_postgres_engine()
    return create_sqlite_engine()


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        autocommit=False,
        class_=AsyncSession,
        autoflush=True,
        expire_on_commit=False,
        bind=engine,
    )


engine = create_engine_from_env()

# Centralized session factory to avoid creating it in router modules.
Session = create_session_factory(engine)
