from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from luckydraw.load_secrets import user, password, host, port, db_name, pool_size, max_overflow


def postgres_database_url() -> str:
    return f"postgresql+asyncpg://{user}:{password}@{host}:{port}/{db_name}"


def create_postgres_engine(url: str | None = None) -> AsyncEngine:
    """Engine for the production store. Row locks come from PostgreSQL itself."""
    return create_async_engine(
        url or postgres_database_url(),
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_pre_ping=True,
    )
