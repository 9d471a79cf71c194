import pathlib

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from luckydraw.load_secrets import sqlite_path

# Seconds a writer waits for the database lock held by another transaction.
SQLITE_BUSY_TIMEOUT = 30


def create_sqlite_engine(path: str | pathlib.Path | None = None) -> AsyncEngine:
    """Create an aiosqlite engine whose transactions start with BEGIN IMMEDIATE.

    SQLite has no row locks, so every transaction takes the write lock up front.
    Concurrent draws then run one after another, which gives the same
    guarantees the draw engine gets from SELECT ... FOR UPDATE on PostgreSQL.
    """
    file_path = pathlib.Path(path or sqlite_path)
    sqlite_url = f"sqlite+aiosqlite:///{file_path}"
    engine = create_async_engine(
        url=sqlite_url,
        echo=False,
        connect_args={"timeout": SQLITE_BUSY_TIMEOUT},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        # let the "begin" listener below emit BEGIN itself
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine
