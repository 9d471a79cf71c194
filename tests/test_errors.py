import socket

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from luckydraw.services.errors import is_connectivity_error


class FakeDriverError(Exception):
    def __init__(self, sqlstate):
        super().__init__(f"sqlstate {sqlstate}")
        self.sqlstate = sqlstate


@pytest.mark.parametrize(
    "error",
    [
        ConnectionRefusedError(111, "Connection refused"),
        ConnectionResetError(104, "Connection reset by peer"),
        TimeoutError("timed out"),
        socket.gaierror(-2, "Name or service not known"),
        PoolTimeoutError("QueuePool limit reached"),
        FakeDriverError("28P01"),  # access denied
        FakeDriverError("3D000"),  # unknown database
        FakeDriverError("53300"),  # too many connections
        FakeDriverError("08006"),
    ],
)
def test_connectivity_errors(error):
    assert is_connectivity_error(error)


def test_wrapped_driver_error_is_found():
    wrapped = OperationalError("SELECT 1", {}, FakeDriverError("3D000"))
    assert is_connectivity_error(wrapped)


def test_error_raised_from_connection_failure_is_found():
    try:
        try:
            raise ConnectionRefusedError(111, "Connection refused")
        except ConnectionRefusedError as e:
            raise RuntimeError("draw failed") from e
    except RuntimeError as e:
        assert is_connectivity_error(e)


@pytest.mark.parametrize(
    "error",
    [
        RuntimeError("boom"),
        ValueError("bad"),
        IntegrityError("INSERT", {}, FakeDriverError("23505")),
        FakeDriverError("42P01"),
    ],
)
def test_other_errors_are_not_connectivity_errors(error):
    assert not is_connectivity_error(error)
