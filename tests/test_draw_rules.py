import random
from collections import Counter

import pytest

from conftest import ScriptedRandom
from luckydraw.domain.draw_rules import (
    LOSE_MESSAGE,
    ROUND1_WIN_PERCENT,
    WIN_MESSAGE,
    PriorDraw,
    RoundDecision,
    RoundState,
    Tier,
    pick_tier,
    prize_image_url,
    resolve_round,
    roll_outcome,
    round_state,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        (0.0, Tier.sunshine),
        (0.6499, Tier.sunshine),
        (0.65, Tier.top),
        (0.8499, Tier.top),
        (0.85, Tier.top_top),
        (0.9499, Tier.top_top),
        (0.95, Tier.special),
        (0.9999, Tier.special),
    ],
)
def test_pick_tier_thresholds(value, expected):
    assert pick_tier(ScriptedRandom(randoms=[value])) == expected


def test_pick_tier_falls_back_to_last_tier_at_upper_boundary():
    assert pick_tier(ScriptedRandom(randoms=[1.0])) == Tier.special


def test_pick_tier_frequencies_converge():
    rng = random.Random(20260101)
    samples = 200_000
    counts = Counter(pick_tier(rng) for _ in range(samples))
    expected = {Tier.sunshine: 0.65, Tier.top: 0.20, Tier.top_top: 0.10, Tier.special: 0.05}
    for tier, share in expected.items():
        assert counts[tier] / samples == pytest.approx(share, abs=0.01)


def test_new_guest_starts_round_one():
    assert round_state(None) == RoundState.fresh
    assert resolve_round(None) == RoundDecision(draw_round=1, round_index=1, win_percent=ROUND1_WIN_PERCENT)


def test_lost_round_one_forces_round_two_in_same_round_index():
    prior = PriorDraw(draw_round=1, won=False, round_index=3)
    assert round_state(prior) == RoundState.awaiting_second
    assert resolve_round(prior) == RoundDecision(draw_round=2, round_index=3, win_percent=100)


def test_won_round_one_stays_in_round_index():
    prior = PriorDraw(draw_round=1, won=True, round_index=2)
    assert round_state(prior) == RoundState.fresh
    assert resolve_round(prior) == RoundDecision(draw_round=1, round_index=2, win_percent=ROUND1_WIN_PERCENT)


def test_round_one_after_round_two_increments_round_index():
    prior = PriorDraw(draw_round=2, won=True, round_index=2)
    assert resolve_round(prior).round_index == 3
    assert resolve_round(prior).draw_round == 1


def test_missing_round_index_counts_as_one():
    assert resolve_round(PriorDraw(draw_round=1, won=False, round_index=None)).round_index == 1
    assert resolve_round(PriorDraw(draw_round=2, won=True, round_index=None)).round_index == 2


def test_round_two_always_wins_with_a_tier():
    decision = RoundDecision(draw_round=2, round_index=1, win_percent=100)
    rng = ScriptedRandom(randoms=[0.9])
    outcome = roll_outcome(decision, rng)
    assert outcome.won is True
    assert outcome.tier == Tier.top_top
    assert outcome.message == WIN_MESSAGE
    assert rng.randoms == []


def test_round_one_win_picks_a_tier():
    decision = resolve_round(None)
    outcome = roll_outcome(decision, ScriptedRandom(randoms=[0.1999, 0.0]))
    assert outcome.won is True
    assert outcome.tier == Tier.sunshine


def test_round_one_loss_has_no_tier_and_does_not_roll_one():
    decision = resolve_round(None)
    rng = ScriptedRandom(randoms=[0.2, 0.99])
    outcome = roll_outcome(decision, rng)
    assert outcome.won is False
    assert outcome.tier is None
    assert outcome.message == LOSE_MESSAGE
    assert rng.randoms == [0.99]


def test_round_one_win_rate_is_twenty_percent():
    rng = random.Random(7)
    samples = 50_000
    wins = sum(roll_outcome(resolve_round(None), rng).won for _ in range(samples))
    assert wins / samples == pytest.approx(0.20, abs=0.01)


def test_prize_image_url():
    assert prize_image_url(Tier.top_top, None) is None
    assert prize_image_url(None, "https://cdn.example.com/prizes") is None
    assert prize_image_url(Tier.top_top, "https://cdn.example.com/prizes/") == "https://cdn.example.com/prizes/top-top.png"
