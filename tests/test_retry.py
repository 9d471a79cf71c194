import pytest

from luckydraw.services.retry import AttemptOutcome, AttemptStatus, run_with_bounded_retry


def scripted_attempt(outcomes):
    calls = []

    async def attempt():
        calls.append(len(calls) + 1)
        return outcomes[len(calls) - 1]

    return attempt, calls


async def test_success_is_returned_without_retry():
    attempt, calls = scripted_attempt([AttemptOutcome.success("S01")])
    outcome = await run_with_bounded_retry(attempt, 2)
    assert outcome == AttemptOutcome.success("S01")
    assert calls == [1]


async def test_exhausted_is_returned_without_retry():
    attempt, calls = scripted_attempt([AttemptOutcome.exhausted(), AttemptOutcome.success("S01")])
    outcome = await run_with_bounded_retry(attempt, 2)
    assert outcome.status == AttemptStatus.exhausted
    assert calls == [1]


async def test_conflict_is_retried_once():
    attempt, calls = scripted_attempt([AttemptOutcome.conflict(), AttemptOutcome.success("S02")])
    outcome = await run_with_bounded_retry(attempt, 2)
    assert outcome.value == "S02"
    assert calls == [1, 2]


async def test_conflicts_stop_at_max_attempts():
    attempt, calls = scripted_attempt([AttemptOutcome.conflict()] * 5)
    outcome = await run_with_bounded_retry(attempt, 3)
    assert outcome.status == AttemptStatus.conflict
    assert calls == [1, 2, 3]


async def test_max_attempts_must_be_positive():
    attempt, _ = scripted_attempt([AttemptOutcome.success(1)])
    with pytest.raises(ValueError):
        await run_with_bounded_retry(attempt, 0)
