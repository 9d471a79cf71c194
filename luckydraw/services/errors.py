"""Error taxonomy of the draw engine and the connectivity classifier.

Routers map these to HTTP statuses:

- GuestIdValidationError -> 400
- RoundStateConflictError -> 409
- connectivity failures (is_connectivity_error) -> 503
- anything else -> 500
"""

import socket

from sqlalchemy.exc import DBAPIError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

# connection refused, timeout, host not found, reset
CONNECTION_ERROR_TYPES = (
    ConnectionRefusedError,
    ConnectionResetError,
    ConnectionAbortedError,
    TimeoutError,
    socket.gaierror,
    PoolTimeoutError,
)

# 08xxx connection exceptions, access denied, unknown database, too many connections
CONNECTION_ERROR_SQLSTATES = {
    "08000",
    "08001",
    "08003",
    "08004",
    "08006",
    "28000",
    "28P01",
    "3D000",
    "53300",
}


class GuestIdValidationError(ValueError):
    """Raised before any store access when the participant id is missing, blank or too long."""

    def __init__(self, message: str = "guest_id is required"):
        super().__init__(message)


class RoundStateConflictError(RuntimeError):
    """Raised when concurrent draws of one guest kept conflicting on every attempt."""

    def __init__(self, guest_id: str, attempts: int):
        super().__init__(f"round state of guest {guest_id} changed during {attempts} draw attempts")
        self.guest_id = guest_id
        self.attempts = attempts


def _exception_chain(exc: BaseException):
    seen = set()
    pending = [exc]
    while pending:
        current = pending.pop()
        if current is None or id(current) in seen:
            continue
        seen.add(id(current))
        yield current
        pending.append(getattr(current, "orig", None))
        pending.append(current.__cause__)
        pending.append(current.__context__)


def is_connectivity_error(exc: BaseException) -> bool:
    """True when exc (or anything it wraps) is a transient store-connection failure."""
    for error in _exception_chain(exc):
        if isinstance(error, CONNECTION_ERROR_TYPES):
            return True
        if isinstance(error, DBAPIError) and error.connection_invalidated:
            return True
        sqlstate = getattr(error, "sqlstate", None) or getattr(error, "pgcode", None)
        if isinstance(sqlstate, str) and sqlstate in CONNECTION_ERROR_SQLSTATES:
            return True
    return False
