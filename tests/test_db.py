import pytest

from luckydraw.db import async_database_url


@pytest.mark.parametrize(
    "url, drivername",
    [
        ("postgresql://draw:secret@db:5432/luckydraw", "postgresql+asyncpg"),
        ("postgres://draw:secret@db/luckydraw", "postgresql+asyncpg"),
        ("postgresql+asyncpg://draw@db/luckydraw", "postgresql+asyncpg"),
        ("sqlite:///draws.sqlite3", "sqlite+aiosqlite"),
    ],
)
def test_database_url_gets_an_async_driver(url, drivername):
    assert async_database_url(url).drivername == drivername


def test_database_url_keeps_connection_parts():
    url = async_database_url("postgresql://draw:secret@db:6543/luckydraw")
    assert (url.username, url.password, url.host, url.port, url.database) == (
        "draw",
        "secret",
        "db",
        6543,
        "luckydraw",
    )
