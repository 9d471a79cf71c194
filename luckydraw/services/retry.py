"""Bounded retry around one transactional attempt."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Generic, Optional, TypeVar

from luckydraw.load_secrets import draw_max_attempts

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 2


class AttemptStatus(str, Enum):
    success = "success"
    conflict = "conflict"  # lost a race, the attempt was rolled back and may be retried
    exhausted = "exhausted"  # nothing left to hand out, retrying cannot help


@dataclass(frozen=True)
class AttemptOutcome(Generic[T]):
    status: AttemptStatus
    value: Optional[T] = None

    @classmethod
    def success(cls, value: T) -> "AttemptOutcome[T]":
        return cls(AttemptStatus.success, value)

    @classmethod
    def conflict(cls) -> "AttemptOutcome[T]":
        return cls(AttemptStatus.conflict)

    @classmethod
    def exhausted(cls) -> "AttemptOutcome[T]":
        return cls(AttemptStatus.exhausted)


def configured_max_attempts() -> int:
    return draw_max_attempts if draw_max_attempts >= 1 else DEFAULT_MAX_ATTEMPTS


async def run_with_bounded_retry(
    attempt: Callable[[], Awaitable[AttemptOutcome[T]]],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    *,
    label: str = "attempt",
) -> AttemptOutcome[T]:
    """Run attempt until it stops conflicting, at most max_attempts times.

    Args:
        attempt: Runs one whole transaction and reports its outcome
        max_attempts (int): Upper bound on the number of attempts
        label (str): Used in log messages

    Returns:
        AttemptOutcome[T]: The first success or exhausted outcome, or conflict
        when every attempt conflicted. Callers decide what a final conflict means.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be >= 1")

    outcome: AttemptOutcome[T] = AttemptOutcome.conflict()
    for attempt_number in range(1, max_attempts + 1):
        outcome = await attempt()
        if outcome.status != AttemptStatus.conflict:
            return outcome
        logging.warning(f"{label}: conflict on attempt {attempt_number}/{max_attempts}")
    return outcome
