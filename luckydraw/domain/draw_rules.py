"""Round and tier rules for the guaranteed-eventual-win draw (v2).

A participant draws in rounds of at most two:

- round 1 wins with ROUND1_WIN_PERCENT probability;
- a lost round 1 is followed by round 2, which always wins.

The state is derived from the participant's previous draw only. Nothing here
touches the database; callers pass the prior draw and a RandomSource in.
"""

from dataclasses import dataclass
from enum import Enum

from luckydraw.domain.randomness import RandomSource

ROUND1_WIN_PERCENT = 20

WIN_MESSAGE = "恭喜中奖！"
LOSE_MESSAGE = "未中奖，再试一次吧"


class Tier(str, Enum):
    sunshine = "阳光普照"
    top = "上签"
    top_top = "上上签"
    special = "特签"


# Cumulative percentages, same order as TIERS: 65 / 20 / 10 / 5.
TIERS = [Tier.sunshine, Tier.top, Tier.top_top, Tier.special]
TIER_CUMULATIVE = [65, 85, 95, 100]

TIER_IMAGE_SLUGS = {
    Tier.sunshine: "sunshine",
    Tier.top: "top",
    Tier.top_top: "top-top",
    Tier.special: "special",
}


class RoundState(str, Enum):
    fresh = "FRESH"
    awaiting_second = "AWAITING_SECOND"


@dataclass(frozen=True)
class PriorDraw:
    draw_round: int
    won: bool
    round_index: int | None = None


@dataclass(frozen=True)
class RoundDecision:
    draw_round: int
    round_index: int
    win_percent: int


@dataclass(frozen=True)
class DrawOutcome:
    draw_round: int
    round_index: int
    won: bool
    tier: Tier | None

    @property
    def message(self) -> str:
        return WIN_MESSAGE if self.won else LOSE_MESSAGE


def pick_tier(rng: RandomSource) -> Tier:
    """Pick a tier with 65/20/10/5 odds."""
    r = rng.random() * 100
    for tier, threshold in zip(TIERS, TIER_CUMULATIVE):
        if r < threshold:
            return tier
    return TIERS[-1]


def round_state(prior: PriorDraw | None) -> RoundState:
    if prior is not None and prior.draw_round == 1 and not prior.won:
        return RoundState.awaiting_second
    return RoundState.fresh


def resolve_round(prior: PriorDraw | None) -> RoundDecision:
    """Decide which round the next draw is and which round_index it belongs to.

    Args:
        prior (PriorDraw | None): The participant's latest draw, None for a new participant

    Returns:
        RoundDecision: Round number, round index and win probability in percent
    """
    if round_state(prior) == RoundState.awaiting_second:
        return RoundDecision(draw_round=2, round_index=prior.round_index or 1, win_percent=100)

    if prior is None:
        round_index = 1
    elif prior.draw_round == 2:
        round_index = (prior.round_index or 1) + 1
    else:
        round_index = prior.round_index or 1
    return RoundDecision(draw_round=1, round_index=round_index, win_percent=ROUND1_WIN_PERCENT)


def roll_outcome(decision: RoundDecision, rng: RandomSource) -> DrawOutcome:
    if decision.draw_round == 2:
        won = True
    else:
        won = rng.random() * 100 < decision.win_percent
    tier = pick_tier(rng) if won else None
    return DrawOutcome(
        draw_round=decision.draw_round,
        round_index=decision.round_index,
        won=won,
        tier=tier,
    )


def prize_image_url(tier: Tier | None, base_url: str | None) -> str | None:
    """Image for a won tier, None while no asset base is configured."""
    if tier is None or not base_url:
        return None
    return f"{base_url.rstrip('/')}/{TIER_IMAGE_SLUGS[tier]}.png"
